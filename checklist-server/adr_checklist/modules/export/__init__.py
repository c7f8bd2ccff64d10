"""Export pipeline for checklist forms."""
