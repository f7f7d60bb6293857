"""
API layer for PrepKit interviews

Contains FastAPI routers for:
- Interview lifecycle
- Reports
- Voice provider webhooks
- Reference metadata
"""

from src.api.router import api_router

__all__ = ["api_router"]
