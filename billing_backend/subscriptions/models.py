from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

TRIAL_DAYS = 14


class SubscriptionRequest(BaseModel):
    """Corps de POST /api/v1/subscriptions (noms de champs du front historique)."""

    model_config = ConfigDict(populate_by_name=True)

    customer_id: Optional[str] = Field(default=None, alias="customerId")
    team_size: Union[int, str, None] = None
    docs_per_month: Union[int, str, None] = None
    trial_start_iso: Optional[str] = None


def parse_trial_start(value: str) -> datetime:
    """
    Parse une date ISO 8601 ("2025-03-01", "2025-03-01T09:00:00Z", "...+02:00").
    Une date sans fuseau est interprétée en UTC. Lève ValueError si illisible.
    """
    raw = (value or "").strip()
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    dt = datetime.fromisoformat(raw)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def trial_end_timestamp(trial_start: datetime, days: int = TRIAL_DAYS) -> int:
    """Fin d'essai en secondes epoch: début + `days` jours, arrondi à la seconde inférieure."""
    return int((trial_start + timedelta(days=days)).timestamp())
