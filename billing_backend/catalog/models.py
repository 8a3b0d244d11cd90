"""
Types du catalogue: packs (paliers produit) et lignes tarifaires.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class PackKey(str, Enum):
    ENTRY = "entry"
    PRO = "pro"
    ENTERPRISE = "enterprise"


# Libellés historiques du site vitrine
PACK_ALIASES = {
    "essentiel": PackKey.ENTRY,
    "entreprise": PackKey.ENTERPRISE,
}

# Taille d'un lot de documents facturé (consommation mensuelle)
DOCS_BATCH_SIZE = 100


@dataclass(frozen=True)
class LineItem:
    price_ref: str
    quantity: int

    def to_stripe(self) -> Dict[str, Any]:
        return {"price": self.price_ref, "quantity": self.quantity}
