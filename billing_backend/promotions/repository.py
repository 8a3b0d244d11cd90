"""
Accès Stripe pour la feature 'promotions'.
"""
from typing import Any, Dict, Optional

import billing_backend.infra.stripe_client as stripe_client


# module billing_backend.promotions.repository
def find_active_promotion(code: str) -> Optional[Dict[str, Any]]:
    """
    Cherche un code promo actif par correspondance exacte.
    - Retourne None si aucun code actif ne correspond.
    - Les erreurs Stripe sont propagées (l'appelant décide si elles sont bloquantes).
    """
    res = stripe_client.get_stripe().PromotionCode.list(code=code, active=True, limit=1)
    return stripe_client.first(res)
