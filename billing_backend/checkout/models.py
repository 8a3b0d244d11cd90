from dataclasses import dataclass
from typing import Any, Mapping, Optional

from billing_backend.catalog import normalize_pack
from billing_backend.utils.validators import lenient_int


@dataclass(frozen=True)
class CheckoutRequest:
    """
    Paramètres d'un checkout, valeurs par défaut appliquées (jamais d'erreur de validation):
    team_size >= 1 (défaut 1), docs_per_month >= 0 (défaut 0), pack inconnu => "".
    """

    email: Optional[str]
    team_size: int
    pack: str
    docs_per_month: int
    promo_code: Optional[str] = None

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "CheckoutRequest":
        pack = normalize_pack(params.get("pack"))
        email = str(params.get("email") or "").strip() or None
        promo = str(params.get("promo_code") or "").strip() or None
        return cls(
            email=email,
            team_size=lenient_int(params.get("team_size"), 1, 1),
            pack=pack.value if pack else "",
            docs_per_month=lenient_int(params.get("docs_per_month"), 0, 0),
            promo_code=promo,
        )
