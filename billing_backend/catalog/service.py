"""
Logique catalogue pure (pas de Stripe, pas de réseau).
Traduit un pack + une taille d'équipe (+ un volume de documents) en lignes tarifaires.
"""
import math
from typing import List, Optional

from fastapi import HTTPException

from billing_backend.config import BillingSettings
from billing_backend.errors import ConfigurationError
from .models import DOCS_BATCH_SIZE, PACK_ALIASES, LineItem, PackKey


# module billing_backend.catalog.service
def normalize_pack(raw: Optional[str]) -> Optional[PackKey]:
    """
    Normalise un sélecteur de pack ("Pro", " essentiel ", ...) en PackKey.
    Retourne None si le pack est absent ou inconnu.
    """
    key = (raw or "").strip().lower()
    if not key:
        return None
    if key in PACK_ALIASES:
        return PACK_ALIASES[key]
    try:
        return PackKey(key)
    except ValueError:
        return None


def require_pack(raw: Optional[str]) -> PackKey:
    """Comme normalize_pack, mais soulève HTTPException(400) si le pack est invalide."""
    pack = normalize_pack(raw)
    if pack is None:
        raise HTTPException(status_code=400, detail="Pack manquant ou invalide")
    return pack


def consumption_quantity(usage: int) -> int:
    """Nombre de lots facturés pour un volume mensuel: ceil(usage / 100), jamais négatif."""
    if usage <= 0:
        return 0
    return math.ceil(usage / DOCS_BATCH_SIZE)


class Catalog:
    """
    Catalogue de prix construit à partir de BillingSettings.
    - Une ligne "sièges" (quantity = team_size) est toujours présente.
    - Le pack ajoute zéro ou une ligne (même quantité que les sièges).
    - Le volume de documents ajoute une ligne si ceil(docs / 100) > 0.
    """

    def __init__(self, settings: BillingSettings):
        self.settings = settings

    def _price(self, value: str, env_key: str) -> str:
        if not value:
            raise ConfigurationError(env_key)
        return value

    def seat_item(self, team_size: int) -> LineItem:
        if team_size < 1:
            raise HTTPException(status_code=400, detail="team_size doit être >= 1")
        return LineItem(self._price(self.settings.price_id_users, "PRICE_ID_USERS"), team_size)

    def pack_item(self, pack: PackKey, team_size: int) -> Optional[LineItem]:
        if pack is PackKey.PRO:
            return LineItem(self._price(self.settings.price_id_pack_pro, "PRICE_ID_PACK_PRO"), team_size)
        if pack is PackKey.ENTERPRISE:
            return LineItem(
                self._price(self.settings.price_id_pack_enterprise, "PRICE_ID_PACK_ENTERPRISE"), team_size
            )
        # Le pack d'entrée n'a pas toujours de prix dédié
        if self.settings.price_id_pack_entry:
            return LineItem(self.settings.price_id_pack_entry, team_size)
        return None

    def docs_item(self, docs_per_month: int) -> Optional[LineItem]:
        qty = consumption_quantity(docs_per_month)
        if qty == 0:
            return None
        return LineItem(self._price(self.settings.price_id_docs, "PRICE_ID_DOCS"), qty)

    def line_items_for(self, pack_key: Optional[str], team_size: int, docs_per_month: int = 0) -> List[LineItem]:
        """
        Lignes d'un devis: sièges, pack éventuel, documents éventuels (dans cet ordre).
        - pack_key inconnu ou absent: HTTPException(400), avant toute autre vérification.
        - prix requis non configuré: ConfigurationError (500) nommant la variable.
        """
        pack = require_pack(pack_key)
        items = [self.seat_item(team_size)]
        pack_line = self.pack_item(pack, team_size)
        if pack_line:
            items.append(pack_line)
        docs_line = self.docs_item(docs_per_month)
        if docs_line:
            items.append(docs_line)
        return items

    def subscription_items(self, team_size: int, docs_per_month: int) -> List[LineItem]:
        """Lignes d'un abonnement d'essai: sièges + documents (sans pack)."""
        items = [self.seat_item(team_size)]
        docs_line = self.docs_item(docs_per_month)
        if docs_line:
            items.append(docs_line)
        return items
