import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from billing_backend.deps import get_webhook_dispatcher, get_webhook_verifier
from .service import WebhookDispatcher, WebhookSignatureError, WebhookVerifier

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/webhooks", tags=["Webhooks"])


# module billing_backend.webhooks.views
@router.post("/stripe", include_in_schema=False)
async def stripe_webhook(
    request: Request,
    verifier: WebhookVerifier = Depends(get_webhook_verifier),
    dispatcher: WebhookDispatcher = Depends(get_webhook_dispatcher),
):
    """
    Webhook Stripe.
    - Corps brut lu avant tout parsing (la signature porte sur les octets exacts)
    - 400 "Webhook Error: ..." si la signature est absente/invalide: rien n'est interprété
    - 500 si un effet de bord échoue, pour que Stripe rejoue la livraison
    - {"received": true} sinon (types non gérés compris)
    """
    raw_bytes = await request.body()
    sig_header = request.headers.get("stripe-signature")
    try:
        event = verifier.verify(raw_bytes, sig_header)
    except WebhookSignatureError as e:
        logger.warning("webhooks.rejected has_sig_header=%s reason=%s", bool(sig_header), e)
        raise HTTPException(status_code=400, detail=f"Webhook Error: {e}")

    try:
        outcome = await run_in_threadpool(dispatcher.dispatch, event)
    except HTTPException:
        raise
    except Exception:
        logger.exception("webhooks.handler_error event_id=%s type=%s", event.get("id"), event.get("type"))
        return JSONResponse(status_code=500, content={"detail": "Webhook handler error"})
    logger.info(
        "webhooks.accepted event_id=%s type=%s handled=%s email_sent=%s",
        outcome.event_id, outcome.event_type, outcome.handled, outcome.email_sent,
    )
    return {"received": True}
