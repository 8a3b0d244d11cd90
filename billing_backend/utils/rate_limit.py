"""
Limitation de débit des endpoints publics (devis, checkout) postés depuis le site vitrine.

- Backend principal: fastapi-limiter (Redis), initialisé dans le lifespan.
- LOCAL_RATE_LIMIT_FALLBACK=1: fenêtre glissante en mémoire (dev, Redis absent).
- Pas de session: la clé est l'IP du client (X-Forwarded-For prioritaire) + le chemin.
"""
from typing import Any, Dict, List
from urllib.parse import urlparse
import os
import time

from fastapi import HTTPException, Request, Response
from fastapi_limiter import FastAPILimiter
from fastapi_limiter.depends import RateLimiter


def client_key(req: Request) -> str:
    forwarded = (req.headers.get("x-forwarded-for") or "").split(",")[0].strip()
    ip = forwarded or (req.client.host if req.client else "local")
    return f"ip:{ip}:{req.url.path}"


async def _identifier(req: Request) -> str:
    return client_key(req)


def _hit_local_window(request: Request, times: int, seconds: int) -> None:
    """Enregistre un appel dans app.state._rl_store; 429 si la fenêtre est pleine."""
    store: Dict[str, List[float]] = getattr(request.app.state, "_rl_store", None) or {}
    now = time.time()
    key = client_key(request)
    recent = [t for t in store.get(key, []) if now - t < seconds]
    if len(recent) >= times:
        raise HTTPException(status_code=429, detail="Too Many Requests")
    store[key] = recent + [now]
    request.app.state._rl_store = store


def optional_rate_limit(times: int, seconds: int):
    """
    Dépendance FastAPI: `times` appels par fenêtre de `seconds` secondes.
    Sans limiter actif (tests, Redis en panne), la requête passe toujours.
    """
    limiter = RateLimiter(times=times, seconds=seconds, identifier=_identifier)

    async def _dep(request: Request, response: Response):
        if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
            _hit_local_window(request, times, seconds)
            return
        if getattr(request.app.state, "rate_limit_enabled", None) is not True:
            return
        try:
            await limiter(request, response)
        except HTTPException:
            raise
        except Exception:
            # Redis indisponible en cours de route: on laisse passer plutôt que de bloquer un devis
            return
    return _dep


def rate_limit_health_info(request: Request) -> Dict[str, Any]:
    """État du rate limiting pour /health/config (sans secret: hôte/port Redis uniquement)."""
    enabled = getattr(request.app.state, "rate_limit_enabled", None)
    ready = getattr(FastAPILimiter, "redis", None) is not None
    info: Dict[str, Any] = {
        "enabled": None if enabled is None else bool(enabled),
        "ready": ready,
        "backend": "redis" if ready else None,
        "local_fallback": os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1",
    }
    redis_url = os.getenv("RATE_LIMIT_REDIS_URL")
    if ready and redis_url:
        p = urlparse(redis_url)
        info["redis"] = {"scheme": p.scheme, "host": p.hostname, "port": p.port}
    return info
