"""
Module 'quotes' (feature-first): cycle de vie des devis Stripe.
"""

from .models import Quote, QuoteRequest, QUOTE_STATUS_DRAFT, QUOTE_STATUS_FINALIZED
from .service import QuoteLifecycleManager, QuoteService, dashboard_url

__all__ = [
    "Quote",
    "QuoteRequest",
    "QUOTE_STATUS_DRAFT",
    "QUOTE_STATUS_FINALIZED",
    "QuoteLifecycleManager",
    "QuoteService",
    "dashboard_url",
]
