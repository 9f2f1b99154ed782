"""
Paxos Proxy URL Configuration
"""
from django.urls import path

from . import views

urlpatterns = [
    path('identities', views.IdentitiesView.as_view(), name='paxos_identities'),
    path('identities/<str:identity_id>', views.IdentityDetailView.as_view(), name='paxos_identity_detail'),
    path('accounts', views.AccountsView.as_view(), name='paxos_accounts'),
    path('account-members', views.AccountMembersView.as_view(), name='paxos_account_members'),
    path('balances', views.BalancesView.as_view(), name='paxos_balances'),
    path(
        'crypto-destination-addresses',
        views.CryptoDestinationAddressesView.as_view(),
        name='paxos_crypto_destination_addresses',
    ),
    path('market-data', views.MarketDataView.as_view(), name='paxos_market_data'),
    path('orchestration-rules', views.OrchestrationRulesView.as_view(), name='paxos_orchestration_rules'),
    path('paxos-transfers', views.PaxosTransfersView.as_view(), name='paxos_paxos_transfers'),
    path('pricing', views.PricingView.as_view(), name='paxos_pricing'),
    path('quotes', views.QuotesView.as_view(), name='paxos_quotes'),
    path('transfers', views.TransfersView.as_view(), name='paxos_transfers'),
    path('sandbox-deposit', views.SandboxDepositView.as_view(), name='paxos_sandbox_deposit'),
    path('sandbox-identity', views.SandboxIdentityView.as_view(), name='paxos_sandbox_identity'),
]
