from fastapi import APIRouter, Depends, Request

from billing_backend.config import BillingSettings
from billing_backend.deps import get_settings
from billing_backend.utils.rate_limit import rate_limit_health_info

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
def health_root():
    return {"ok": True}


@router.get("/config")
def health_config(request: Request, settings: BillingSettings = Depends(get_settings)):
    """État de la configuration (noms des clés manquantes uniquement, jamais de valeurs)."""
    missing = settings.missing_required()
    return {
        "ok": not missing,
        "missing": missing,
        "live_mode": settings.live_mode,
        "email_enabled": bool(settings.resend_api_key),
        "tax_rate": bool(settings.tax_rate_id),
        "rate_limit": rate_limit_health_info(request),
    }
