"""Exam room allocation and roster management."""

__version__ = "0.1.0"
