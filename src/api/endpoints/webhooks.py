"""
Webhook API endpoints

Receives call events from the voice provider.
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Header, HTTPException, Request

from src.api.dependencies import (
    get_lifecycle_manager,
    get_webhook_handler,
    to_http_exception,
)
from src.core.errors import InterviewEngineError, WebhookSignatureError
from src.core.session_lifecycle import SessionLifecycleManager
from src.core.webhooks import VoiceWebhookHandler

logger = logging.getLogger(__name__)

router = APIRouter()


async def complete_in_background(lifecycle: SessionLifecycleManager, session_id: str) -> None:
    """Complete an interview after its call ended; failures are logged."""
    try:
        await lifecycle.complete_interview(session_id)
    except InterviewEngineError as e:
        logger.error(f"Error completing interview {session_id} from webhook: {e}")


@router.post("/vapi")
async def vapi_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    x_vapi_signature: str | None = Header(None),
    handler: VoiceWebhookHandler = Depends(get_webhook_handler),
    lifecycle: SessionLifecycleManager = Depends(get_lifecycle_manager),
) -> dict[str, bool]:
    """Handle a voice provider call event."""
    body = await request.body()

    try:
        outcome = await handler.handle(body, x_vapi_signature)
    except WebhookSignatureError as e:
        raise to_http_exception(e)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid webhook payload: {e}")

    if outcome.complete_session_id:
        background_tasks.add_task(complete_in_background, lifecycle, outcome.complete_session_id)

    return {"received": outcome.received}
