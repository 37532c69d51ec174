"""Detect music links in chat text and convert them across streaming services."""

__version__ = "0.1.0"
