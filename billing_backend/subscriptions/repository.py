"""
Accès Stripe pour la feature 'subscriptions'.
"""
from typing import Any, Dict, List, Optional

import billing_backend.infra.stripe_client as stripe_client


# module billing_backend.subscriptions.repository
def first_card_payment_method(customer_id: str) -> Optional[str]:
    """Identifiant du premier moyen de paiement carte du client, sinon None."""
    res = stripe_client.get_stripe().PaymentMethod.list(customer=customer_id, type="card")
    pm = stripe_client.first(res)
    return pm.get("id") if pm else None


def create_subscription(
    *,
    customer_id: str,
    items: List[Dict[str, Any]],
    trial_end: int,
    metadata: Dict[str, str],
    default_payment_method: Optional[str] = None,
) -> Dict[str, Any]:
    params: Dict[str, Any] = {
        "customer": customer_id,
        "items": items,
        "trial_end": trial_end,
        "proration_behavior": "create_prorations",
        "metadata": metadata,
    }
    if default_payment_method:
        params["default_payment_method"] = default_payment_method
    return stripe_client.to_dict(stripe_client.get_stripe().Subscription.create(**params))
