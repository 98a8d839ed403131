"""Structural code intelligence for the Liva language."""

__version__ = "0.1.0"
