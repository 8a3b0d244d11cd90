"""
Dépendances FastAPI: réglages chargés une fois, services construits à partir d'eux.
Les tests remplacent get_settings via app.dependency_overrides.
"""
from functools import lru_cache

from fastapi import Depends

from billing_backend.catalog import Catalog
from billing_backend.checkout.service import CheckoutSessionBuilder
from billing_backend.config import BillingSettings, load_settings
from billing_backend.errors import ConfigurationError
from billing_backend.infra import stripe_client
from billing_backend.notifications.service import NotificationDispatcher
from billing_backend.quotes.service import QuoteLifecycleManager, QuoteService
from billing_backend.subscriptions.service import SubscriptionService
from billing_backend.webhooks.service import WebhookDispatcher, WebhookVerifier


@lru_cache(maxsize=1)
def get_settings() -> BillingSettings:
    return load_settings()


def stripe_ready(settings: BillingSettings = Depends(get_settings)) -> BillingSettings:
    """Configure le SDK Stripe; 500 explicite si STRIPE_SECRET_KEY manque."""
    try:
        stripe_client.require_stripe(settings)
    except stripe_client.StripeNotConfigured:
        raise ConfigurationError("STRIPE_SECRET_KEY")
    return settings


def get_catalog(settings: BillingSettings = Depends(get_settings)) -> Catalog:
    return Catalog(settings)


def get_notifier(settings: BillingSettings = Depends(get_settings)) -> NotificationDispatcher:
    return NotificationDispatcher(settings)


def get_quote_service(
    settings: BillingSettings = Depends(stripe_ready),
    catalog: Catalog = Depends(get_catalog),
    notifier: NotificationDispatcher = Depends(get_notifier),
) -> QuoteService:
    return QuoteService(settings, catalog, QuoteLifecycleManager(settings), notifier)


def get_checkout_builder(settings: BillingSettings = Depends(stripe_ready)) -> CheckoutSessionBuilder:
    return CheckoutSessionBuilder(settings)


def get_subscription_service(
    settings: BillingSettings = Depends(stripe_ready),
    catalog: Catalog = Depends(get_catalog),
) -> SubscriptionService:
    return SubscriptionService(catalog)


def get_webhook_verifier(settings: BillingSettings = Depends(get_settings)) -> WebhookVerifier:
    if not settings.stripe_webhook_secret:
        raise ConfigurationError("STRIPE_WEBHOOK_SECRET")
    return WebhookVerifier(settings.stripe_webhook_secret, tolerance=settings.webhook_tolerance)


def get_webhook_dispatcher(
    settings: BillingSettings = Depends(stripe_ready),
    notifier: NotificationDispatcher = Depends(get_notifier),
) -> WebhookDispatcher:
    return WebhookDispatcher(settings, notifier)
