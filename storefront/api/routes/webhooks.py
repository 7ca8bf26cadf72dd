import logging

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from storefront.api.deps import get_dispatcher
from storefront.products.models import RevalidationEvent
from storefront.services.revalidation_service import (
    RevalidationDispatcher,
    WebhookNotConfigured,
    WebhookUnauthorized,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/revalidate-products")
async def revalidate_products(
    request: Request,
    authorization: str | None = Header(default=None),
    dispatcher: RevalidationDispatcher = Depends(get_dispatcher),
):
    """
    Invalidate cached product pages after an INSERT/UPDATE/DELETE.

    Called by the database trigger and by the admin forwarder with
    ``Authorization: Bearer <secret>``.
    """
    try:
        dispatcher.authorize(authorization)
    except WebhookNotConfigured:
        return JSONResponse({"error": "Webhook not configured"}, status_code=500)
    except WebhookUnauthorized:
        return JSONResponse({"error": "Unauthorized"}, status_code=401)

    try:
        payload = await request.json()
        event = RevalidationEvent.model_validate(payload)
        result = dispatcher.dispatch(event)
    except ValidationError as e:
        logger.error("Revalidation error: invalid payload: %s", e)
        return JSONResponse({"error": "Revalidation failed", "message": "Invalid event payload"}, status_code=500)
    except Exception as e:
        logger.exception("Revalidation error: %s", e)
        return JSONResponse({"error": "Revalidation failed", "message": str(e)}, status_code=500)

    return JSONResponse(result)
