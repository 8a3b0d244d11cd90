"""
Envoi best-effort des notifications transactionnelles.
Un e-mail est un canal annexe: absence de clé ou échec d'envoi ne fait jamais échouer
l'opération de facturation appelante (journalisé puis ignoré).
"""
import logging
from typing import Dict, Iterable, Optional

import requests

from billing_backend.config import BillingSettings
from billing_backend.infra import resend_client
from .templates import TEMPLATES

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    def __init__(self, settings: BillingSettings):
        self.settings = settings

    @property
    def enabled(self) -> bool:
        return bool(self.settings.resend_api_key)

    def send(
        self,
        template: str,
        recipients: Iterable[str],
        variables: Dict[str, str],
        *,
        cc: Optional[Iterable[str]] = None,
    ) -> bool:
        """
        Rend le gabarit `template` et l'envoie via Resend.
        Retourne True si l'e-mail est parti, False sinon (jamais d'exception).
        """
        to = [r for r in recipients if r]
        if not to:
            logger.info("notifications.skip template=%s reason=no_recipient", template)
            return False
        if not self.enabled:
            logger.info("notifications.skip template=%s reason=no_api_key", template)
            return False
        tpl = TEMPLATES.get(template)
        if tpl is None:
            logger.error("notifications.unknown_template template=%s", template)
            return False
        values = {"support_email": self.settings.support_email, **variables}
        try:
            subject, html = tpl.render(values)
        except KeyError as e:
            logger.warning("notifications.skip template=%s reason=%s", template, e)
            return False
        try:
            res = resend_client.send_email(
                api_key=self.settings.resend_api_key,
                sender=self.settings.sender_email,
                to=to,
                subject=subject,
                html=html,
                cc=[c for c in (cc or []) if c] or None,
            )
        except (resend_client.ResendError, requests.RequestException, ValueError):
            logger.exception("notifications.send failed template=%s recipients=%s", template, len(to))
            return False
        logger.info("notifications.sent template=%s email_id=%s", template, (res or {}).get("id"))
        return True
