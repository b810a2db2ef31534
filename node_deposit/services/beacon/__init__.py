"""Beacon chain access."""

from .client import BeaconAPIError, BeaconClient
from .status import BeaconConsensusStatus

__all__ = [
    "BeaconAPIError",
    "BeaconClient",
    "BeaconConsensusStatus",
]
