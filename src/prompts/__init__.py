"""
Prompt templates for the AI interviewer and report scoring.
"""

from src.prompts.interviewer import InterviewerPrompts
from src.prompts.report import ReportPrompts

__all__ = [
    "InterviewerPrompts",
    "ReportPrompts",
]
