"""
Accès Stripe pour la feature 'customers' (le fournisseur est la seule source de vérité).
"""
from typing import Any, Dict, Optional

import billing_backend.infra.stripe_client as stripe_client


# module billing_backend.customers.repository
def find_by_email(email: str) -> Optional[Dict[str, Any]]:
    """Premier client Stripe dont l'e-mail correspond exactement, sinon None."""
    res = stripe_client.get_stripe().Customer.list(email=email, limit=1)
    return stripe_client.first(res)


def create_customer(email: str) -> Dict[str, Any]:
    return stripe_client.to_dict(stripe_client.get_stripe().Customer.create(email=email))


def retrieve_customer(customer_id: str) -> Dict[str, Any]:
    return stripe_client.to_dict(stripe_client.get_stripe().Customer.retrieve(customer_id))


def update_customer(customer_id: str, *, metadata: Dict[str, str], description: Optional[str] = None) -> Dict[str, Any]:
    """
    Met à jour les métadonnées (fusion clé par clé côté Stripe) et la description.
    """
    params: Dict[str, Any] = {"metadata": metadata}
    if description is not None:
        params["description"] = description
    return stripe_client.to_dict(stripe_client.get_stripe().Customer.modify(customer_id, **params))
