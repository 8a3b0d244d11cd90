"""
Erreurs métier exposées en HTTP.
- ConfigurationError: clé de configuration manquante (500, nomme la variable d'environnement)
- QuoteLifecycleError: échec d'une étape du cycle de vie d'un devis (502)
"""
from typing import Optional
from fastapi import HTTPException


class ConfigurationError(HTTPException):
    def __init__(self, env_key: str):
        super().__init__(status_code=500, detail=f"Configuration manquante: {env_key}")
        self.env_key = env_key


class QuoteLifecycleError(HTTPException):
    """
    Étapes: "create" (rien n'a été créé), "finalize" (brouillon existant),
    "resolve_url" (devis finalisé mais lien public indisponible).
    """

    def __init__(
        self,
        stage: str,
        message: str,
        *,
        quote_id: Optional[str] = None,
        dashboard_url: Optional[str] = None,
    ):
        detail = {
            "error": message,
            "stage": stage,
            "quote_created": quote_id is not None,
            "quote_id": quote_id,
            "dashboard_url": dashboard_url,
        }
        super().__init__(status_code=502, detail=detail)
        self.stage = stage
        self.quote_id = quote_id
