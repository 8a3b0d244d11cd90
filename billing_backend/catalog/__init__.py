"""
Module 'catalog': packs, lignes tarifaires et conversion de la consommation.
"""

from .models import PackKey, LineItem, PACK_ALIASES, DOCS_BATCH_SIZE
from .service import Catalog, normalize_pack, require_pack, consumption_quantity

__all__ = [
    "PackKey",
    "LineItem",
    "PACK_ALIASES",
    "DOCS_BATCH_SIZE",
    "Catalog",
    "normalize_pack",
    "require_pack",
    "consumption_quantity",
]
