"""
Beacon node API client.

Minimal client for the standard beacon node HTTP API.
"""

from typing import Any

import aiohttp
from loguru import logger

from node_deposit.config.constants import BEACON_TIMEOUT, DOMAIN_DEPOSIT, ZERO_ROOT
from node_deposit.models.deposit import DepositContractInfo, NetworkConfig, ValidatorStatus
from node_deposit.utils.security import mask_hex, to_hex


class BeaconAPIError(Exception):
    """Raised when the beacon node returns an unexpected response."""

    def __init__(self, path: str, status: int, body: str = "") -> None:
        self.path = path
        self.status = status
        super().__init__(f"Beacon API {path} returned HTTP {status}: {body[:200]}")


class BeaconClient:
    """HTTP client for a beacon node."""

    def __init__(self, base_url: str, timeout: float = BEACON_TIMEOUT) -> None:
        """
        Initialize beacon client.

        Args:
            base_url: Beacon node API URL
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session: aiohttp.ClientSession | None = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers={"Accept": "application/json"},
            )
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()

    async def _get(self, path: str, allow_not_found: bool = False) -> dict[str, Any] | None:
        """
        GET a beacon API path and return its "data" field.

        Raises:
            BeaconAPIError: On non-200 responses (404 too, unless allowed)
            aiohttp.ClientError: On connection errors
        """
        session = await self._get_session()
        async with session.get(f"{self.base_url}{path}") as response:
            if response.status == 404 and allow_not_found:
                return None
            if response.status != 200:
                body = await response.text()
                logger.warning(f"Beacon API error: {path} HTTP {response.status}")
                raise BeaconAPIError(path, response.status, body)
            payload = await response.json()
        return payload["data"]

    async def get_network_config(self) -> NetworkConfig:
        """
        Deposit signing parameters of the connected network.

        Deposits are valid across forks, so the validators root is zero.
        """
        chain_config = await self._get("/eth/v1/config/spec")
        domain_type = chain_config.get("DOMAIN_DEPOSIT", to_hex(DOMAIN_DEPOSIT))
        return NetworkConfig(
            genesis_fork_version=bytes.fromhex(chain_config["GENESIS_FORK_VERSION"][2:]),
            genesis_validators_root=ZERO_ROOT,
            domain_type=bytes.fromhex(domain_type[2:]),
        )

    async def get_deposit_contract(self) -> DepositContractInfo:
        data = await self._get("/eth/v1/config/deposit_contract")
        return DepositContractInfo(network_id=int(data["chain_id"]), address=data["address"])

    async def get_validator_status(self, public_key: bytes) -> ValidatorStatus:
        pubkey_hex = to_hex(public_key)
        data = await self._get(f"/eth/v1/beacon/states/head/validators/{pubkey_hex}", allow_not_found=True)
        if data is None:
            return ValidatorStatus(exists=False)
        logger.warning(f"Validator {mask_hex(pubkey_hex)} exists with index {data['index']}")
        return ValidatorStatus(exists=True, index=int(data["index"]))
