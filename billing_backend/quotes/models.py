from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, field_validator

from billing_backend.utils.validators import parse_int, validate_email

QUOTE_STATUS_DRAFT = "draft"
QUOTE_STATUS_FINALIZED = "finalized"
# Statuts Stripe d'un devis finalisé
_FINALIZED_STRIPE_STATUSES = {"open", "accepted"}


@dataclass
class Quote:
    id: str
    customer_id: str
    status: str
    hosted_url: Optional[str]
    dashboard_url: str

    @property
    def is_finalized(self) -> bool:
        return self.status == QUOTE_STATUS_FINALIZED

    @classmethod
    def from_stripe(cls, quote: Dict[str, Any], dashboard_url: str) -> "Quote":
        raw_status = quote.get("status") or QUOTE_STATUS_DRAFT
        status = QUOTE_STATUS_FINALIZED if raw_status in _FINALIZED_STRIPE_STATUSES else QUOTE_STATUS_DRAFT
        customer = quote.get("customer")
        if isinstance(customer, dict):
            customer = customer.get("id")
        return cls(
            id=str(quote.get("id") or ""),
            customer_id=str(customer or ""),
            status=status,
            hosted_url=quote.get("url") or None,
            dashboard_url=dashboard_url,
        )


class QuoteRequest(BaseModel):
    """
    Corps JSON de POST /api/v1/quotes.
    team_size / docs_per_month acceptent des chaînes ("3") comme le formulaire du site.
    """

    email: str
    team_size: Union[int, str, None] = None
    pack: Optional[str] = None
    promo_code: Optional[str] = None
    docs_per_month: Union[int, str, None] = None

    @field_validator("email")
    @classmethod
    def _email_format(cls, v: str) -> str:
        return validate_email(v)

    @field_validator("team_size")
    @classmethod
    def _team_size(cls, v):
        try:
            return max(1, parse_int(v, 1))
        except ValueError:
            raise ValueError("team_size invalide")

    @field_validator("docs_per_month")
    @classmethod
    def _docs(cls, v):
        try:
            return max(0, parse_int(v, 0))
        except ValueError:
            raise ValueError("docs_per_month invalide")

    @field_validator("promo_code")
    @classmethod
    def _promo(cls, v: Optional[str]) -> Optional[str]:
        v = (v or "").strip()
        return v or None
