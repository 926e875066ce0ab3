"""Domain models for workpulse."""
