"""
Webhooks Stripe: vérification d'authenticité puis routage des événements.

États: reçu -> signature vérifiée -> {accepté, rejeté}.
- La signature est recalculée sur les octets bruts, jamais sur un JSON re-sérialisé.
- Un événement rejeté n'est jamais interprété.
- Seul checkout.session.completed a des effets; les autres types sont acceptés et ignorés.
"""
import json
import logging
from typing import Any, Dict, Optional

import stripe

from billing_backend.config import BillingSettings
from billing_backend.customers import service as customers_service
from billing_backend.customers.models import Selection
from billing_backend.notifications.service import NotificationDispatcher
from .models import (
    CHECKOUT_SESSION_COMPLETED,
    ONBOARDING_MARKER_KEY,
    WebhookOutcome,
    session_from_event,
)

logger = logging.getLogger(__name__)


class WebhookSignatureError(Exception):
    pass


class WebhookVerifier:
    """Vérifie l'en-tête Stripe-Signature (HMAC-SHA256, horodatage avec tolérance)."""

    def __init__(self, secret: str, tolerance: int = 300):
        self.secret = secret
        self.tolerance = tolerance

    def verify(self, raw_bytes: bytes, signature_header: Optional[str]) -> Dict[str, Any]:
        """
        Retourne l'événement (dict) si la signature est valide.
        Lève WebhookSignatureError: en-tête absent, signature/horodatage invalides, corps non UTF-8,
        JSON illisible.
        """
        if not signature_header:
            raise WebhookSignatureError("No signatures found matching the expected signature for payload")
        try:
            payload = raw_bytes.decode("utf-8")
        except UnicodeDecodeError:
            raise WebhookSignatureError("Payload is not valid UTF-8")
        try:
            stripe.WebhookSignature.verify_header(payload, signature_header, self.secret, self.tolerance)
        except stripe.SignatureVerificationError as e:
            raise WebhookSignatureError(str(e.user_message or e))
        try:
            event = json.loads(payload)
        except ValueError:
            raise WebhookSignatureError("Invalid payload")
        if not isinstance(event, dict):
            raise WebhookSignatureError("Invalid payload")
        return event


class WebhookDispatcher:
    def __init__(self, settings: BillingSettings, notifier: NotificationDispatcher):
        self.settings = settings
        self.notifier = notifier

    def dispatch(self, event: Dict[str, Any]) -> WebhookOutcome:
        event_type = str(event.get("type") or "")
        event_id = event.get("id")
        if event_type == CHECKOUT_SESSION_COMPLETED:
            return self.handle_checkout_completed(event)
        logger.info("webhooks.ignored event_id=%s type=%s", event_id, event_type)
        return WebhookOutcome(event_id=event_id, event_type=event_type, handled=False)

    def handle_checkout_completed(self, event: Dict[str, Any]) -> WebhookOutcome:
        """
        Rapproche la sélection stockée dans la session du client Stripe, puis envoie
        l'e-mail d'onboarding (si Resend + lien de prise de RDV configurés).
        Rejouable: la mise à jour des métadonnées est idempotente, et l'e-mail n'est pas
        renvoyé si le client porte déjà le marqueur de cette session.
        """
        session = session_from_event(event)
        session_id = session.get("id")
        meta = session.get("metadata") or {}
        customer_id = session.get("customer")
        if isinstance(customer_id, dict):
            customer_id = customer_id.get("id")
        outcome = WebhookOutcome(
            event_id=event.get("id"),
            event_type=CHECKOUT_SESSION_COMPLETED,
            handled=True,
            customer_id=customer_id,
        )

        selection = Selection(
            pack=str(meta.get("pack") or ""),
            team_size=str(meta.get("team_size") or ""),
            promo_code=str(meta.get("promo_code") or ""),
            docs_per_month=str(meta["docs_per_month"]) if meta.get("docs_per_month") else None,
        )
        identity = None
        if customer_id:
            identity = customers_service.update(customer_id, selection, source="checkout")
            outcome.details["metadata"] = selection.to_metadata()

        if not (self.notifier.enabled and self.settings.calendly_link):
            return outcome

        email = ((session.get("customer_details") or {}).get("email")) or None
        if not email and customer_id:
            if identity is None or not identity.email:
                identity = customers_service.retrieve(customer_id)
            email = identity.email
        if not email:
            logger.info("webhooks.checkout no email session_id=%s customer_id=%s", session_id, customer_id)
            return outcome

        if identity is not None and session_id and identity.metadata.get(ONBOARDING_MARKER_KEY) == session_id:
            logger.info("webhooks.checkout onboarding already sent session_id=%s", session_id)
            outcome.details["duplicate"] = True
            return outcome

        outcome.email_sent = self.notifier.send(
            "onboarding",
            [email],
            {"calendly_link": self.settings.calendly_link},
        )
        if outcome.email_sent and customer_id and session_id:
            customers_service.mark_metadata(customer_id, **{ONBOARDING_MARKER_KEY: session_id})
        return outcome
