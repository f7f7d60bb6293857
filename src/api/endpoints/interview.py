"""
Interview API endpoints

Handles interview session lifecycle:
- Creating sessions
- Recording payment status
- Starting interviews
- Completing interviews
- Listing history
"""

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from src.api.dependencies import (
    get_current_user_id,
    get_lifecycle_manager,
    to_http_exception,
)
from src.config.settings import get_settings
from src.core.errors import InterviewEngineError
from src.core.session_lifecycle import (
    InterviewStarted,
    SessionCreated,
    SessionLifecycleManager,
)
from src.models.interview import InterviewHistoryPage

router = APIRouter()


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class SetupRequest(BaseModel):
    """Request model for interview setup."""
    track: str = Field(..., min_length=1)
    difficulty: str = "medium"
    focus_areas: list[str] = []
    specific_requirements: str | None = None


class PaymentRequest(BaseModel):
    """Payment status reported by the payment-capture flow."""
    payment_status: str = Field(..., min_length=1)


class PaymentResponse(BaseModel):
    session_id: str
    payment_status: str


class CompleteRequest(BaseModel):
    """Request model for completing an interview."""
    end_call: bool = False


class CompleteResponse(BaseModel):
    session_id: str
    status: str
    message: str


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.post("/setup", response_model=SessionCreated)
async def setup_interview(
    request: SetupRequest,
    user_id: str = Depends(get_current_user_id),
    lifecycle: SessionLifecycleManager = Depends(get_lifecycle_manager),
) -> SessionCreated:
    """
    Create a new interview session.

    Questions are generated and the price is quoted, but the interview
    does not start until payment is captured.
    """
    return await lifecycle.create_session(
        user_id=user_id,
        track=request.track,
        difficulty=request.difficulty,
        focus_areas=request.focus_areas,
        specific_requirements=request.specific_requirements,
    )


@router.get("/history", response_model=InterviewHistoryPage)
async def get_history(
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1, le=100),
    user_id: str = Depends(get_current_user_id),
    lifecycle: SessionLifecycleManager = Depends(get_lifecycle_manager),
) -> InterviewHistoryPage:
    """Get the caller's interview history, newest first."""
    return await lifecycle.get_history(
        user_id,
        page=page,
        limit=limit or get_settings().history_page_size,
    )


@router.post("/{session_id}/payment", response_model=PaymentResponse)
async def record_payment(
    session_id: str,
    request: PaymentRequest,
    user_id: str = Depends(get_current_user_id),
    lifecycle: SessionLifecycleManager = Depends(get_lifecycle_manager),
) -> PaymentResponse:
    """Record the payment status for a session."""
    try:
        await lifecycle.get_session(session_id, user_id)
        session = await lifecycle.record_payment_status(session_id, request.payment_status)
    except InterviewEngineError as e:
        raise to_http_exception(e)

    return PaymentResponse(session_id=session.session_id, payment_status=session.payment_status)


@router.post("/{session_id}/start", response_model=InterviewStarted)
async def start_interview(
    session_id: str,
    user_id: str = Depends(get_current_user_id),
    lifecycle: SessionLifecycleManager = Depends(get_lifecycle_manager),
) -> InterviewStarted:
    """
    Start the interview.

    Places the voice call and moves the session to IN_PROGRESS.
    """
    try:
        return await lifecycle.start_interview(session_id, user_id)
    except InterviewEngineError as e:
        raise to_http_exception(e)


@router.post("/{session_id}/complete", response_model=CompleteResponse)
async def complete_interview(
    session_id: str,
    request: CompleteRequest | None = None,
    user_id: str = Depends(get_current_user_id),
    lifecycle: SessionLifecycleManager = Depends(get_lifecycle_manager),
) -> CompleteResponse:
    """
    Complete the interview.

    Fetches the transcript, generates the report and updates statistics.
    """
    end_call = request.end_call if request else False

    try:
        await lifecycle.get_session(session_id, user_id)
        await lifecycle.complete_interview(session_id, end_call=end_call)
    except InterviewEngineError as e:
        raise to_http_exception(e)

    return CompleteResponse(
        session_id=session_id,
        status="COMPLETED",
        message="Interview completed. Report is ready.",
    )
