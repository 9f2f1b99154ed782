import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, primary_key=True, serialize=False)),
                ('email', models.CharField(max_length=255, unique=True)),
                ('name', models.CharField(blank=True, default='', max_length=255)),
                ('password', models.CharField(max_length=255)),
                ('identity_id', models.CharField(blank=True, max_length=64, null=True)),
                ('account_id', models.CharField(blank=True, max_length=64, null=True)),
                ('profile_id', models.CharField(blank=True, max_length=64, null=True)),
                ('onboarding_status', models.CharField(
                    choices=[
                        ('NOT_STARTED', 'Not Started'),
                        ('IDENTITY_CREATED', 'Identity Created'),
                        ('ACCOUNT_CREATED', 'Account Created'),
                        ('PROFILE_CREATED', 'Profile Created'),
                        ('APPROVED', 'Approved'),
                    ],
                    default='NOT_STARTED',
                    max_length=32,
                )),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'users',
                'ordering': ['created_at'],
            },
        ),
    ]
