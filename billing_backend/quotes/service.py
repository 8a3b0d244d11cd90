"""
Cas d'usage 'quotes': orchestre catalogue, promotions, identité, cycle de vie Stripe et notification.

Cycle de vie d'un devis (appels strictement séquentiels):
  1) create   -> brouillon Stripe
  2) finalize -> devis finalisé
  3) resolve_public_url -> lien public lu dans la réponse de finalize,
     sinon UNE relecture du devis; toujours absent => erreur fatale (jamais un succès avec url nulle)
"""
import logging
import time
from typing import Any, Dict, List, Optional

import stripe

from billing_backend.catalog import Catalog, LineItem, require_pack
from billing_backend.config import BillingSettings
from billing_backend.customers import service as customers_service
from billing_backend.customers.models import BillingIdentity, Selection
from billing_backend.errors import QuoteLifecycleError
from billing_backend.notifications.service import NotificationDispatcher
from billing_backend.promotions import service as promotions_service
from billing_backend.promotions.models import Discount
from . import repository
from .models import QUOTE_STATUS_FINALIZED, Quote, QuoteRequest

logger = logging.getLogger(__name__)

DASHBOARD_BASE_URL = "https://dashboard.stripe.com"


def dashboard_url(quote_id: str, live_mode: bool) -> str:
    """URL du devis dans le dashboard Stripe (préfixe /test en mode test)."""
    prefix = "" if live_mode else "/test"
    return f"{DASHBOARD_BASE_URL}{prefix}/quotes/{quote_id}"


class QuoteLifecycleManager:
    """
    Pilote create -> finalize -> resolve_public_url pour un devis Stripe.
    Les réglages (taxe, expiration, mode live/test) sont injectés à la construction.
    """

    def __init__(self, settings: BillingSettings):
        self.settings = settings

    def _dashboard_url(self, quote_id: str) -> str:
        return dashboard_url(quote_id, self.settings.live_mode)

    def _expires_at(self) -> Optional[int]:
        days = self.settings.quote_expires_days
        if days <= 0:
            return None
        return int(time.time()) + days * 24 * 60 * 60

    def create_quote(
        self,
        identity: BillingIdentity,
        line_items: List[LineItem],
        discount: Optional[Discount] = None,
        tax_rate_ref: Optional[str] = None,
        metadata: Optional[Dict[str, str]] = None,
    ) -> Quote:
        """Crée le brouillon. Un échec ici signifie qu'aucun devis n'existe."""
        try:
            raw = repository.create_quote(
                customer_id=identity.id,
                line_items=[li.to_stripe() for li in line_items],
                metadata=metadata or {},
                discounts=[discount.to_stripe()] if discount else None,
                default_tax_rates=[tax_rate_ref] if tax_rate_ref else None,
                expires_at=self._expires_at(),
            )
        except stripe.StripeError as e:
            logger.exception("quotes.create failed customer_id=%s", identity.id)
            raise QuoteLifecycleError("create", f"Création du devis impossible: {e.user_message or e}")
        quote = Quote.from_stripe(raw, self._dashboard_url(str(raw.get("id") or "")))
        logger.info("quotes.create ok quote_id=%s customer_id=%s items=%s", quote.id, identity.id, len(line_items))
        return quote

    def finalize(self, quote: Quote) -> Quote:
        """Finalise le devis; en cas d'échec le brouillon existe toujours côté Stripe."""
        try:
            raw = repository.finalize_quote(quote.id)
        except stripe.StripeError as e:
            logger.exception("quotes.finalize failed quote_id=%s", quote.id)
            raise QuoteLifecycleError(
                "finalize",
                f"Finalisation du devis impossible: {e.user_message or e}",
                quote_id=quote.id,
                dashboard_url=quote.dashboard_url,
            )
        finalized = Quote.from_stripe(raw, quote.dashboard_url)
        finalized.status = QUOTE_STATUS_FINALIZED
        if not finalized.customer_id:
            finalized.customer_id = quote.customer_id
        return finalized

    def resolve_public_url(self, quote: Quote) -> str:
        """
        Lien public du devis finalisé.
        - Lu depuis la réponse de finalize; sinon exactement une relecture (cohérence à terme).
        - Toujours absent: QuoteLifecycleError("resolve_url") avec l'id du devis existant.
        """
        if quote.hosted_url:
            return quote.hosted_url
        logger.info("quotes.resolve_url refetch quote_id=%s", quote.id)
        try:
            raw = repository.retrieve_quote(quote.id)
        except stripe.StripeError as e:
            logger.exception("quotes.resolve_url refetch failed quote_id=%s", quote.id)
            raise QuoteLifecycleError(
                "resolve_url",
                f"Relecture du devis impossible: {e.user_message or e}",
                quote_id=quote.id,
                dashboard_url=quote.dashboard_url,
            )
        url = (raw or {}).get("url")
        if not url:
            logger.error("quotes.resolve_url missing quote_id=%s", quote.id)
            raise QuoteLifecycleError(
                "resolve_url",
                "Devis finalisé mais lien public indisponible",
                quote_id=quote.id,
                dashboard_url=quote.dashboard_url,
            )
        quote.hosted_url = url
        return url


class QuoteService:
    """
    Traitement complet d'une demande de devis:
      validation -> catalogue -> promo -> identité -> create/finalize/url -> e-mail best-effort.
    La validation (pack, prix configurés) a lieu avant tout appel Stripe mutant.
    """

    def __init__(
        self,
        settings: BillingSettings,
        catalog: Catalog,
        manager: QuoteLifecycleManager,
        notifier: NotificationDispatcher,
    ):
        self.settings = settings
        self.catalog = catalog
        self.manager = manager
        self.notifier = notifier

    def create_for_request(self, req: QuoteRequest) -> Dict[str, Any]:
        pack = require_pack(req.pack)
        team_size = int(req.team_size or 1)
        docs = int(req.docs_per_month or 0)
        line_items = self.catalog.line_items_for(pack.value, team_size, docs)

        discount = promotions_service.resolve(req.promo_code)

        identity = customers_service.resolve(req.email)
        selection = Selection(
            pack=pack.value,
            team_size=str(team_size),
            promo_code=req.promo_code or "",
            docs_per_month=str(docs) if docs else None,
        )
        customers_service.update(identity.id, selection, source="devis")

        metadata = {"pack": pack.value, "team_size": str(team_size), "promo_code": req.promo_code or ""}
        if docs:
            metadata["docs_per_month"] = str(docs)

        quote = self.manager.create_quote(
            identity,
            line_items,
            discount=discount,
            tax_rate_ref=self.settings.tax_rate_id or None,
            metadata=metadata,
        )
        quote = self.manager.finalize(quote)
        url = self.manager.resolve_public_url(quote)
        logger.info(
            "quotes.ready quote_id=%s customer_id=%s pack=%s team_size=%s discount=%s",
            quote.id, identity.id, pack.value, team_size, bool(discount),
        )

        self.notifier.send(
            "quote_created",
            [req.email],
            {"quote_id": quote.id, "quote_url": url, "pack": pack.value, "team_size": str(team_size)},
            cc=[self.settings.support_email] if self.settings.quote_notify_support else None,
        )
        return {"url": url, "id": quote.id, "dashboard_url": quote.dashboard_url}
