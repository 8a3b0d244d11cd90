import logging
import urllib.parse
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.concurrency import run_in_threadpool
from starlette.status import HTTP_303_SEE_OTHER

from billing_backend.deps import get_checkout_builder
from billing_backend.utils.rate_limit import optional_rate_limit
from .models import CheckoutRequest
from .service import CheckoutSessionBuilder

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/checkout", tags=["Checkout API"])


async def _read_params(request: Request) -> Dict[str, Any]:
    """
    Paramètres selon la méthode / content-type:
    - GET: query string
    - POST JSON ou application/x-www-form-urlencoded (formulaire HTML du site)
    Un corps illisible donne {} (les valeurs par défaut s'appliquent).
    """
    if request.method == "GET":
        return dict(request.query_params)
    body = await request.body()
    if not body:
        return dict(request.query_params)
    ctype = (request.headers.get("content-type") or "").lower()
    if ctype.startswith("application/x-www-form-urlencoded"):
        parsed = urllib.parse.parse_qs(body.decode("utf-8", errors="replace"))
        return {k: v[0] for k, v in parsed.items() if v}
    try:
        data = await request.json()
    except ValueError:
        logger.warning("checkout.params unreadable body content_type=%s", ctype or "-")
        return {}
    return data if isinstance(data, dict) else {}


# module billing_backend.checkout.views
@router.api_route(
    "",
    methods=["GET", "POST"],
    dependencies=[Depends(optional_rate_limit(times=20, seconds=60))],
)
async def checkout_redirect(request: Request, builder: CheckoutSessionBuilder = Depends(get_checkout_builder)):
    """
    Crée une session Checkout (mode setup) et redirige le navigateur vers Stripe (303).
    - Entrées: email?, team_size, pack, docs_per_month? (query, JSON ou formulaire)
    - Erreur: 500 sans redirection si Stripe échoue
    """
    req = CheckoutRequest.from_params(await _read_params(request))
    url = await run_in_threadpool(builder.build, req.email, req.pack, req.team_size, req.promo_code, req.docs_per_month)
    return RedirectResponse(url=url, status_code=HTTP_303_SEE_OTHER)


@router.post("/session", dependencies=[Depends(optional_rate_limit(times=20, seconds=60))])
async def checkout_session_json(request: Request, builder: CheckoutSessionBuilder = Depends(get_checkout_builder)):
    """
    Variante JSON pour les front-ends en fetch(): renvoie {"url": ...} au lieu d'une redirection.
    """
    req = CheckoutRequest.from_params(await _read_params(request))
    url = await run_in_threadpool(builder.build, req.email, req.pack, req.team_size, req.promo_code, req.docs_per_month)
    return JSONResponse({"url": url})
