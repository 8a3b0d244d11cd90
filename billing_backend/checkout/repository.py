"""
Accès Stripe pour la feature 'checkout'.
"""
from typing import Any, Dict, Optional

import billing_backend.infra.stripe_client as stripe_client


# module billing_backend.checkout.repository
def create_setup_session(
    *,
    customer_email: Optional[str],
    success_url: str,
    cancel_url: str,
    metadata: Dict[str, str],
) -> Dict[str, Any]:
    """
    Session Checkout en mode "setup": enregistre la carte, aucun débit.
    customer_creation="always": Stripe crée systématiquement un nouveau client,
    rapproché ensuite via le webhook checkout.session.completed.
    """
    params: Dict[str, Any] = {
        "mode": "setup",
        "customer_creation": "always",
        "success_url": success_url,
        "cancel_url": cancel_url,
        "payment_method_types": ["card"],
        "metadata": metadata,
    }
    if customer_email:
        params["customer_email"] = customer_email
    session = stripe_client.get_stripe().checkout.Session.create(**params)
    return stripe_client.to_dict(session)
