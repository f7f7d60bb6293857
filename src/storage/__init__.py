"""
Persistence layer for the interview engine.
"""

from src.storage.repository import InterviewRepository
from src.storage.memory import InMemoryInterviewRepository

__all__ = [
    "InterviewRepository",
    "InMemoryInterviewRepository",
]
