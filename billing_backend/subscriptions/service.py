"""
Création d'abonnements d'essai (sièges + consommation de documents), fin d'essai à J+14.
"""
import logging
from typing import Any, Dict

import stripe
from fastapi import HTTPException

from billing_backend.catalog import Catalog
from billing_backend.utils.validators import lenient_int
from . import repository
from .models import SubscriptionRequest, parse_trial_start, trial_end_timestamp

logger = logging.getLogger(__name__)


class SubscriptionService:
    def __init__(self, catalog: Catalog):
        self.catalog = catalog

    def create_trial_subscription(self, req: SubscriptionRequest) -> Dict[str, Any]:
        """
        - 400 si customerId / trial_start_iso manquent ou si la date est illisible
        - moyen de paiement par défaut: première carte enregistrée (si présente)
        - 500 "Failed to create subscription" si Stripe échoue
        """
        customer_id = (req.customer_id or "").strip()
        trial_start_iso = (req.trial_start_iso or "").strip()
        if not customer_id or not trial_start_iso:
            raise HTTPException(status_code=400, detail="customerId and trial_start_iso are required")

        team = lenient_int(req.team_size, 1, 1)
        docs = lenient_int(req.docs_per_month, 0, 0)
        try:
            trial_start = parse_trial_start(trial_start_iso)
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid trial_start_iso")
        trial_end = trial_end_timestamp(trial_start)

        items = [li.to_stripe() for li in self.catalog.subscription_items(team, docs)]
        try:
            default_pm = repository.first_card_payment_method(customer_id)
            subscription = repository.create_subscription(
                customer_id=customer_id,
                items=items,
                trial_end=trial_end,
                default_payment_method=default_pm,
                metadata={
                    "team_size": str(team),
                    "docs_per_month": str(docs),
                    "trial_start_iso": trial_start_iso,
                },
            )
        except stripe.StripeError:
            logger.exception("subscriptions.create failed customer_id=%s", customer_id)
            raise HTTPException(status_code=500, detail="Failed to create subscription")

        logger.info(
            "subscriptions.create ok subscription_id=%s customer_id=%s trial_end=%s has_pm=%s",
            subscription.get("id"), customer_id, trial_end, bool(default_pm),
        )
        return {"ok": True, "subscriptionId": subscription.get("id"), "trial_end": trial_end}
