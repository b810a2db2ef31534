"""
Consensus status adapter.

Combines the beacon node view with the oracle DAO price consensus flag.
"""

from node_deposit.models.deposit import DepositContractInfo, NetworkConfig, ValidatorStatus
from node_deposit.services.blockchain.protocol_state import Web3ProtocolState

from .client import BeaconClient


class BeaconConsensusStatus:
    """Consensus-layer status for the deposit pipeline."""

    def __init__(self, beacon: BeaconClient, protocol: Web3ProtocolState) -> None:
        self.beacon = beacon
        self.protocol = protocol

    async def network_config(self) -> NetworkConfig:
        return await self.beacon.get_network_config()

    async def in_consensus(self) -> bool:
        return await self.protocol.prices_in_consensus()

    async def validator_status(self, public_key: bytes) -> ValidatorStatus:
        return await self.beacon.get_validator_status(public_key)

    async def network_identity(self) -> DepositContractInfo:
        return await self.beacon.get_deposit_contract()
