"""
Client HTTP minimal pour l'API Resend (envoi d'e-mails transactionnels).
"""
from typing import Any, Dict, List, Optional

import requests

RESEND_API_URL = "https://api.resend.com/emails"


class ResendError(RuntimeError):
    pass


# module billing_backend.infra.resend_client
def send_email(
    *,
    api_key: str,
    sender: str,
    to: List[str],
    subject: str,
    html: str,
    cc: Optional[List[str]] = None,
    timeout: int = 10,
) -> Dict[str, Any]:
    """
    POST /emails. Retourne la réponse JSON ({"id": ...}).
    Lève ResendError si la clé est absente ou si l'API répond une erreur.
    """
    if not api_key:
        raise ResendError("RESEND_API_KEY manquant")
    payload: Dict[str, Any] = {"from": sender, "to": to, "subject": subject, "html": html}
    if cc:
        payload["cc"] = cc
    headers = {"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"}
    resp = requests.post(RESEND_API_URL, json=payload, headers=headers, timeout=timeout)
    if resp.status_code >= 400:
        raise ResendError(f"Resend HTTP {resp.status_code}: {resp.text[:200]}")
    return resp.json() if resp.content else {}
