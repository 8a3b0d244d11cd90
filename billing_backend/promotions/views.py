import logging
from typing import Optional

from fastapi import APIRouter, Depends

from billing_backend.deps import stripe_ready
from . import service as promotions_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/promotions", tags=["Promotions API"])


# module billing_backend.promotions.views
@router.get("/lookup", dependencies=[Depends(stripe_ready)])
def promo_lookup(code: Optional[str] = None):
    """
    Consulte un code promo actif.
    - 400 si code absent
    - {"ok": true, "found": false} si introuvable (ce n'est pas une erreur)
    """
    return promotions_service.lookup(code)
