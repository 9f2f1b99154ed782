"""
Core Models for Aureum Backend

The credential store: one row per customer, keyed by email.
"""
import uuid

from django.db import models

from .constants import OnboardingStatus


class User(models.Model):
    """
    A customer account.
    Maps to: public.users

    Holds the hashed password, the onboarding status consulted when sessions
    are issued, and the Paxos identity/account/profile ids once linked.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    email = models.CharField(max_length=255, unique=True)
    name = models.CharField(max_length=255, blank=True, default='')
    password = models.CharField(max_length=255)
    identity_id = models.CharField(max_length=64, null=True, blank=True)
    account_id = models.CharField(max_length=64, null=True, blank=True)
    profile_id = models.CharField(max_length=64, null=True, blank=True)
    onboarding_status = models.CharField(
        max_length=32,
        choices=OnboardingStatus.choices,
        default=OnboardingStatus.NOT_STARTED,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'users'
        ordering = ['created_at']

    def __str__(self):
        return f"{self.email} ({self.onboarding_status})"
