"""
Résolution des codes promo.
- resolve(): best-effort, utilisé pendant la création d'un devis (jamais bloquant)
- lookup(): consultation explicite (endpoint), les erreurs Stripe remontent
"""
import logging
from typing import Any, Dict, Optional

import stripe
from fastapi import HTTPException

from . import repository
from .models import Discount, discount_from_promotion

logger = logging.getLogger(__name__)


# module billing_backend.promotions.service
def resolve(code: Optional[str]) -> Optional[Discount]:
    """
    Retourne la remise associée à un code actif, sinon None.
    Code vide, introuvable, inactif ou erreur Stripe: None (on continue sans remise).
    """
    code = (code or "").strip()
    if not code:
        return None
    try:
        promo = repository.find_active_promotion(code)
    except stripe.StripeError:
        logger.exception("promotions.resolve failed code=%s", code)
        return None
    if not promo:
        logger.info("promotions.resolve miss code=%s", code)
        return None
    return discount_from_promotion(promo)


def lookup(code: Optional[str]) -> Dict[str, Any]:
    """
    Réponse de l'endpoint de consultation:
    {ok, found: False} ou {ok, found: True, coupon: {id, percent_off, amount_off, currency, duration}}.
    """
    code = (code or "").strip()
    if not code:
        raise HTTPException(status_code=400, detail="Missing code")
    promo = repository.find_active_promotion(code)
    if not promo:
        return {"ok": True, "found": False}
    return {"ok": True, "found": True, "coupon": discount_from_promotion(promo).coupon_payload()}
