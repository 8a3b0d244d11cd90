"""
Gestionnaires d'exceptions de l'API de facturation.
- HTTPException: corps JSON FastAPI standard {"detail": ...}
- Erreurs de validation de requête: 400 (et non 422) avec un message lisible
- Erreurs Stripe non traitées par un service: 502 avec le message du fournisseur
"""
import logging
import stripe
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    messages = []
    for err in exc.errors():
        msg = str(err.get("msg") or "")
        # pydantic préfixe les ValueError des validateurs
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        loc = [str(p) for p in err.get("loc", ()) if p != "body"]
        if err.get("type") == "missing" and loc:
            msg = f"{loc[-1]} manquant"
        messages.append(msg)
    return "; ".join(m for m in messages if m) or "Requête invalide"


def register_exception_handlers(app: FastAPI) -> None:
    """
    Enregistre les handlers HTTPException, RequestValidationError et StripeError.
    """
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"detail": _validation_message(exc)})

    @app.exception_handler(stripe.StripeError)
    async def stripe_exception_handler(request: Request, exc: stripe.StripeError):
        logger.error("stripe.error path=%s type=%s message=%s", request.url.path, type(exc).__name__, exc.user_message or exc)
        return JSONResponse(status_code=502, content={"detail": str(exc.user_message or exc) or "Erreur Stripe"})
