"""
Adaptateur Stripe: centralise la configuration du SDK.
Les repositories de chaque feature passent par get_stripe() (point unique remplacé en tests).
"""
from typing import Any, Dict, Optional

import stripe

from billing_backend.config import BillingSettings


class StripeNotConfigured(RuntimeError):
    pass


# module billing_backend.infra.stripe_client
def require_stripe(settings: BillingSettings):
    """
    Prépare et retourne le module stripe prêt à l'emploi.
    - Configure stripe.api_key et stripe.api_version depuis BillingSettings.
    - Lève StripeNotConfigured si STRIPE_SECRET_KEY est absent.
    """
    if not settings.stripe_secret_key:
        raise StripeNotConfigured("STRIPE_SECRET_KEY manquant")
    stripe.api_key = settings.stripe_secret_key
    stripe.api_version = settings.stripe_api_version
    return stripe


def get_stripe():
    """Module stripe configuré (clé posée par require_stripe au démarrage)."""
    return stripe


def to_dict(obj: Any) -> Optional[Dict[str, Any]]:
    """
    Convertit un objet Stripe en dict (les objets du SDK sont dict-compatibles).
    Retourne None si obj est None.
    """
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj
    as_dict = getattr(obj, "to_dict", None)
    if callable(as_dict):
        return as_dict()
    return dict(obj)


def first(list_obj: Any) -> Optional[Dict[str, Any]]:
    """Premier élément d'une liste Stripe ({"data": [...]}) ou None."""
    data = (to_dict(list_obj) or {}).get("data") or []
    return to_dict(data[0]) if data else None
