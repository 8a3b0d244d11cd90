"""
Construction des sessions Checkout (capture du moyen de paiement, sans débit).
Remplace les variantes redirection/JSON historiques par un seul builder.
"""
import logging
from typing import Dict, Optional

import stripe
from fastapi import HTTPException

from billing_backend.config import BillingSettings
from . import repository

logger = logging.getLogger(__name__)


class CheckoutSessionBuilder:
    def __init__(self, settings: BillingSettings):
        self.settings = settings

    def metadata_for(self, pack: str, team_size: int, docs_per_month: int, promo_code: Optional[str]) -> Dict[str, str]:
        meta = {
            "pack": pack or "",
            "team_size": str(team_size),
            "docs_per_month": str(docs_per_month),
        }
        if promo_code:
            meta["promo_code"] = promo_code
        return meta

    def build(
        self,
        email: Optional[str],
        pack_key: str,
        team_size: int,
        promo_code: Optional[str] = None,
        docs_per_month: int = 0,
    ) -> str:
        """
        Crée la session et retourne l'URL Stripe de redirection.
        - Erreur Stripe ou URL absente: HTTPException(500), aucune redirection.
        """
        metadata = self.metadata_for(pack_key, team_size, docs_per_month, promo_code)
        try:
            session = repository.create_setup_session(
                customer_email=email,
                success_url=self.settings.success_url,
                cancel_url=self.settings.cancel_url,
                metadata=metadata,
            )
        except stripe.StripeError:
            logger.exception("checkout.build failed pack=%s team_size=%s", pack_key, team_size)
            raise HTTPException(status_code=500, detail="Failed to create checkout session")
        url = (session or {}).get("url")
        if not url:
            logger.error("checkout.build no url session_id=%s", (session or {}).get("id"))
            raise HTTPException(status_code=500, detail="Failed to create checkout session")
        logger.info(
            "checkout.session created session_id=%s pack=%s team_size=%s docs=%s",
            session.get("id"), pack_key or "-", team_size, docs_per_month,
        )
        return url
