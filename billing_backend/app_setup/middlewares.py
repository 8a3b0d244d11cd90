"""
Middlewares transverses de l'API de facturation.

Ordre d'exécution (le dernier ajouté s'exécute en premier):
  force_https -> security_headers -> proxy headers -> TrustedHost -> CORS -> routes
Pas de session ni de CSRF: l'API est sans cookie; le webhook Stripe est authentifié par signature.
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from starlette.middleware.trustedhost import TrustedHostMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from billing_backend.config import ALLOWED_HOSTS, COOKIE_SECURE, CORS_ORIGINS

# Réponses JSON uniquement: pas de CSP de page, pas de cache (URLs de devis/checkout à usage unique)
SECURITY_HEADERS = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "no-referrer",
    "Cache-Control": "no-store",
}
HSTS_VALUE = "max-age=63072000; includeSubDomains; preload"


def register_basic_middlewares(app: FastAPI) -> None:
    """
    - CORS: le site vitrine poste les formulaires devis/checkout (CORS_ORIGINS, "*" par défaut,
      sans credentials dans ce cas).
    - TrustedHost: ALLOWED_HOSTS (ouvert si CORS est ouvert).
    - Proxy headers: X-Forwarded-For / X-Forwarded-Proto du reverse proxy.
    """
    open_cors = "*" in CORS_ORIGINS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=not open_cors,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=["*"] if open_cors else ALLOWED_HOSTS)
    app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=["*"])


def register_security_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        if COOKIE_SECURE:
            response.headers.setdefault("Strict-Transport-Security", HSTS_VALUE)
        return response


def register_force_https_middleware(app: FastAPI) -> None:
    """Redirige en 301 vers HTTPS quand le proxy signale x-forwarded-proto=http."""
    @app.middleware("http")
    async def force_https(request: Request, call_next):
        if request.headers.get("x-forwarded-proto") == "http":
            return RedirectResponse(str(request.url.replace(scheme="https")), status_code=301)
        return await call_next(request)
