"""
PrepKit Interviews - AI mock interview session engine

Prices an interview, generates its questions, runs it as a voice call,
and scores the transcript into a structured report with per-user statistics.
"""

__version__ = "0.1.0"
__author__ = "PrepKit Team"
