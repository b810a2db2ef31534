"""Validated Rocket Pool node deposits."""

__version__ = "0.1.0"
