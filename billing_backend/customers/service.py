"""
Résolution d'identité de facturation: retrouver ou créer le client Stripe d'un e-mail,
puis mémoriser sa dernière sélection (dernier écrit gagnant).
"""
import logging

from . import repository
from .models import BillingIdentity, Selection

logger = logging.getLogger(__name__)


# module billing_backend.customers.service
def resolve(email: str) -> BillingIdentity:
    """
    Retrouve le client par e-mail exact, sinon le crée.
    Deux requêtes concurrentes peuvent créer un doublon: toléré, jamais bloquant.
    Les erreurs Stripe remontent telles quelles (pas de retry).
    """
    existing = repository.find_by_email(email)
    if existing:
        identity = BillingIdentity.from_stripe(existing)
        logger.info("customers.resolve reused customer_id=%s", identity.id)
        return identity
    identity = BillingIdentity.from_stripe(repository.create_customer(email))
    logger.info("customers.resolve created customer_id=%s", identity.id)
    return identity


def update(identity_id: str, selection: Selection, source: str) -> BillingIdentity:
    """
    Écrase metadata (pack, team_size, ...) et description avec la dernière sélection.
    - source: origine du choix ("devis", "checkout"), reprise dans la description.
    """
    updated = repository.update_customer(
        identity_id,
        metadata=selection.to_metadata(),
        description=selection.describe(source),
    )
    logger.info(
        "customers.update customer_id=%s pack=%s team_size=%s source=%s",
        identity_id, selection.pack, selection.team_size, source,
    )
    return BillingIdentity.from_stripe(updated or {"id": identity_id})


def retrieve(identity_id: str) -> BillingIdentity:
    return BillingIdentity.from_stripe(repository.retrieve_customer(identity_id))


def mark_metadata(identity_id: str, **values: str) -> None:
    """Pose des clés de métadonnées isolées (ex: marqueur d'e-mail d'onboarding envoyé)."""
    repository.update_customer(identity_id, metadata={k: str(v) for k, v in values.items()})
