"""Diary analytics: emotion classification, search, charts and risk detection."""

__version__ = "0.1.0"
