"""RevPilot: revenue recognition and occupancy reconciliation for short-term rentals."""

__version__ = "0.1.0"
