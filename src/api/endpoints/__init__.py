"""
API endpoint modules for PrepKit interviews
"""

from src.api.endpoints import interview, metadata, report, webhooks

__all__ = ["interview", "metadata", "report", "webhooks"]
