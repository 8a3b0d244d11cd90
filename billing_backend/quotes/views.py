import logging

from fastapi import APIRouter, Depends

from billing_backend.deps import get_quote_service
from billing_backend.utils.rate_limit import optional_rate_limit
from .models import QuoteRequest
from .service import QuoteService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/quotes", tags=["Quotes API"])


# module billing_backend.quotes.views
@router.post("", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
def create_quote(payload: QuoteRequest, service: QuoteService = Depends(get_quote_service)):
    """
    Crée, finalise et partage un devis Stripe.
    - Entrée JSON: {email, team_size, pack, promo_code?, docs_per_month?}
    - Réponse: {"url": <lien public>, "id": <quote_id>, "dashboard_url": ...}
    - Erreurs: 400 (email/pack/team_size invalides), 500 (configuration),
      502 (Stripe; detail.stage indique si le devis existe déjà)
    """
    return service.create_for_request(payload)
