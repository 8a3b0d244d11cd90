from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class BillingIdentity:
    """Client Stripe représentant la contrepartie de facturation (clé: e-mail)."""

    id: str
    email: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)
    description: Optional[str] = None

    @classmethod
    def from_stripe(cls, customer: Dict[str, Any]) -> "BillingIdentity":
        return cls(
            id=str(customer.get("id") or ""),
            email=customer.get("email"),
            metadata={str(k): str(v) for k, v in (customer.get("metadata") or {}).items()},
            description=customer.get("description"),
        )


@dataclass(frozen=True)
class Selection:
    """Dernier choix connu d'un client (pack, taille d'équipe, code promo, volume)."""

    pack: str = ""
    team_size: str = ""
    promo_code: Optional[str] = None
    docs_per_month: Optional[str] = None

    def to_metadata(self) -> Dict[str, str]:
        """
        Métadonnées Stripe: uniquement des chaînes.
        Toutes les clés sont émises; "" efface côté Stripe la valeur d'un choix précédent.
        """
        return {
            "pack": self.pack or "",
            "team_size": str(self.team_size or ""),
            "promo_code": self.promo_code or "",
            "docs_per_month": str(self.docs_per_month or ""),
        }

    def describe(self, source: str) -> str:
        return f"Choix {source}: pack={self.pack or '-'}, users={self.team_size or '-'}"
