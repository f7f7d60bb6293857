"""
Report API endpoints

Handles:
- Report retrieval
"""

from fastapi import APIRouter, Depends

from src.api.dependencies import (
    get_current_user_id,
    get_lifecycle_manager,
    to_http_exception,
)
from src.core.errors import InterviewEngineError
from src.core.session_lifecycle import SessionLifecycleManager
from src.models.report import InterviewReport

router = APIRouter()


@router.get("/{session_id}", response_model=InterviewReport)
async def get_report(
    session_id: str,
    user_id: str = Depends(get_current_user_id),
    lifecycle: SessionLifecycleManager = Depends(get_lifecycle_manager),
) -> InterviewReport:
    """
    Get the full interview report.

    Report is generated when the interview is completed.
    """
    try:
        return await lifecycle.get_report(session_id, user_id)
    except InterviewEngineError as e:
        raise to_http_exception(e)
