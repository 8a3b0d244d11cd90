from fastapi import APIRouter, Depends

from billing_backend.deps import get_subscription_service
from .models import SubscriptionRequest
from .service import SubscriptionService

router = APIRouter(prefix="/api/v1/subscriptions", tags=["Subscriptions API"])


# module billing_backend.subscriptions.views
@router.post("")
def create_subscription(payload: SubscriptionRequest, service: SubscriptionService = Depends(get_subscription_service)):
    """
    Démarre un abonnement avec essai de 14 jours à partir de trial_start_iso.
    Réponse: {"ok": true, "subscriptionId": ..., "trial_end": <epoch secondes>}
    """
    return service.create_trial_subscription(payload)
