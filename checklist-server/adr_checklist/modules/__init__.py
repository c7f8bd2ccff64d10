"""Feature modules of the checklist service."""
