"""PlacementDesk: campus placement eligibility and application workflow."""

__version__ = "0.1.0"
