"""Rebuild begin/end event timelines from CSV log exports."""

__version__ = "0.3.0"
