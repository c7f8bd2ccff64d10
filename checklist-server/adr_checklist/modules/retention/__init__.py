"""Retention sweeper for expired checklist archives."""
