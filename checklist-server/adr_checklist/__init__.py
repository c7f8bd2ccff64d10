"""ADR checklist artifact service."""

__version__ = "1.0.0"
