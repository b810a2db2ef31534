"""
Initialization Module.

Module structure:
- logging.py  - loguru sinks
- services.py - Deposit pipeline wiring
"""

from .logging import setup_logging
from .services import DepositServices, build_deposit_services

__all__ = [
    "DepositServices",
    "build_deposit_services",
    "setup_logging",
]
