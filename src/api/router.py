"""
Main API router for PrepKit interviews

Aggregates all API routes and provides the main application router.
"""

from fastapi import APIRouter

from src.api.endpoints import interview, metadata, report, webhooks

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(
    interview.router,
    prefix="/interviews",
    tags=["Interviews"]
)

api_router.include_router(
    report.router,
    prefix="/reports",
    tags=["Reports"]
)

api_router.include_router(
    webhooks.router,
    prefix="/webhooks",
    tags=["Webhooks"]
)

api_router.include_router(
    metadata.router,
    prefix="/metadata",
    tags=["Metadata"]
)
