"""
Lifespan FastAPI de l'API de facturation.

Démarrage:
  1) contrôle unique de la configuration (clés Stripe, prix obligatoires) et configuration du SDK
  2) initialisation de FastAPILimiter (Redis, ou fakeredis en tests)
Arrêt: fermeture de la connexion Redis du limiter.

Variables d'environnement:
  - BILLING_STRICT_CONFIG=1: refuse de démarrer si une clé obligatoire manque
  - DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS=1: pas de rate limiting (tests)
  - USE_FAKE_REDIS_FOR_TESTS=1: fakeredis au lieu de Redis
  - RATE_LIMIT_REDIS_URL: URL Redis (redis://127.0.0.1:6379/0 par défaut)
  - LOCAL_RATE_LIMIT_FALLBACK=1: fenêtre en mémoire si Redis est injoignable
"""
import logging
import os
from contextlib import asynccontextmanager

import redis.asyncio as redis
from fastapi import FastAPI
from fastapi_limiter import FastAPILimiter

from billing_backend.deps import get_settings
from billing_backend.infra import stripe_client

try:
    from fakeredis.aioredis import FakeRedis  # tests only
except ImportError:
    FakeRedis = None

logger = logging.getLogger("uvicorn.error")


def check_billing_config(app: FastAPI) -> None:
    """
    Les réglages passent par get_settings (éventuellement surchargé en tests).
    - Strict: RuntimeError listant les clés manquantes.
    - Sinon: log d'erreur; /health/config expose les noms des clés manquantes.
    """
    settings = app.dependency_overrides.get(get_settings, get_settings)()
    missing = settings.missing_required()
    app.state.config_missing = missing
    if missing:
        if os.getenv("BILLING_STRICT_CONFIG") == "1":
            raise RuntimeError(f"Configuration de facturation incomplète: {', '.join(missing)}")
        logger.error("billing.config incomplete missing=%s", ",".join(missing))
    if settings.stripe_secret_key:
        stripe_client.require_stripe(settings)
        logger.info("billing.config stripe live_mode=%s api_version=%s", settings.live_mode, settings.stripe_api_version)


def _redis_client():
    if os.getenv("USE_FAKE_REDIS_FOR_TESTS") == "1":
        if FakeRedis is None:
            raise RuntimeError("USE_FAKE_REDIS_FOR_TESTS=1 mais fakeredis n'est pas installé.")
        return FakeRedis(decode_responses=True)
    redis_url = os.getenv("RATE_LIMIT_REDIS_URL", "redis://127.0.0.1:6379/0")
    return redis.from_url(redis_url, encoding="utf-8", decode_responses=True)


async def init_rate_limiter(app: FastAPI) -> bool:
    """
    Initialise FastAPILimiter et pose app.state.rate_limit_enabled.
    Retourne True si Redis (ou fakeredis) est effectivement branché.
    """
    if os.getenv("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS") == "1":
        app.state.rate_limit_enabled = False
        logger.info("rate_limit disabled by DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS")
        return False
    try:
        await FastAPILimiter.init(_redis_client())
    except Exception as e:
        # Fallback mémoire si demandé, sinon API sans limitation plutôt qu'indisponible
        fallback = os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1"
        app.state.rate_limit_enabled = fallback
        logger.warning("rate_limit init failed fallback=%s error=%s", fallback, e)
        return False
    app.state.rate_limit_enabled = True
    logger.info("rate_limit enabled backend=redis")
    return True


@asynccontextmanager
async def lifespan(app: FastAPI):
    check_billing_config(app)
    redis_ready = await init_rate_limiter(app)
    yield
    if redis_ready:
        await FastAPILimiter.close()
