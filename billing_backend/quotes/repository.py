"""
Accès Stripe pour la feature 'quotes' (create / finalize / retrieve).
"""
from typing import Any, Dict, List, Optional

import billing_backend.infra.stripe_client as stripe_client


# module billing_backend.quotes.repository
def create_quote(
    *,
    customer_id: str,
    line_items: List[Dict[str, Any]],
    metadata: Dict[str, str],
    discounts: Optional[List[Dict[str, Any]]] = None,
    default_tax_rates: Optional[List[str]] = None,
    expires_at: Optional[int] = None,
) -> Dict[str, Any]:
    params: Dict[str, Any] = {
        "customer": customer_id,
        "line_items": line_items,
        "metadata": metadata,
    }
    if discounts:
        params["discounts"] = discounts
    if default_tax_rates:
        params["default_tax_rates"] = default_tax_rates
    if expires_at:
        params["expires_at"] = expires_at
    return stripe_client.to_dict(stripe_client.get_stripe().Quote.create(**params))


def finalize_quote(quote_id: str) -> Dict[str, Any]:
    return stripe_client.to_dict(stripe_client.get_stripe().Quote.finalize_quote(quote_id))


def retrieve_quote(quote_id: str) -> Dict[str, Any]:
    return stripe_client.to_dict(stripe_client.get_stripe().Quote.retrieve(quote_id))
