"""Sliding-tile puzzle engine with resumable sessions."""

__version__ = "0.1.0"
