from dataclasses import dataclass, field
from typing import Any, Dict, Optional

CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"

# Clé de métadonnées client marquant l'e-mail d'onboarding déjà envoyé pour une session
ONBOARDING_MARKER_KEY = "onboarding_session"


@dataclass
class WebhookOutcome:
    """Résultat du traitement d'un événement vérifié (journalisation et tests)."""

    event_id: Optional[str]
    event_type: str
    handled: bool
    customer_id: Optional[str] = None
    email_sent: bool = False
    details: Dict[str, Any] = field(default_factory=dict)


def session_from_event(event: Dict[str, Any]) -> Dict[str, Any]:
    """data.object d'un événement Stripe (dict vide si absent)."""
    data = (event or {}).get("data") or {}
    obj = data.get("object") if isinstance(data, dict) else None
    return obj if isinstance(obj, dict) else {}
