"""
Initialization - Services Module.

Builds the deposit pipeline from settings.
"""

from dataclasses import dataclass

import aiohttp
from loguru import logger
from web3 import AsyncHTTPProvider, AsyncWeb3

from node_deposit.config.settings import Settings
from node_deposit.config.settings import settings as default_settings
from node_deposit.services.beacon import BeaconClient, BeaconConsensusStatus
from node_deposit.services.blockchain import Web3AccountLedger, Web3ProtocolState, Web3TransactionSubmitter
from node_deposit.services.deposit import PreflightAggregator, SubmissionController
from node_deposit.services.wallet import LocalKeyVault
from node_deposit.utils.encryption import EncryptionService
from node_deposit.utils.exceptions import SecurityError


@dataclass
class DepositServices:
    """Wired deposit pipeline."""

    preflight: PreflightAggregator
    submission: SubmissionController
    beacon: BeaconClient

    async def close(self) -> None:
        await self.beacon.close()


def build_deposit_services(settings: Settings | None = None) -> DepositServices:
    """
    Wire adapters and pipeline components.

    Args:
        settings: Application settings (default: global settings)

    Returns:
        DepositServices bundle sharing one set of collaborators

    Raises:
        SecurityError: If no node private key is configured or the wallet
            encryption key is unusable
    """
    settings = settings or default_settings
    if not settings.node_private_key:
        raise SecurityError("NODE_PRIVATE_KEY is not configured")

    web3 = AsyncWeb3(AsyncHTTPProvider(
        settings.rpc_url,
        request_kwargs={"timeout": aiohttp.ClientTimeout(total=settings.rpc_timeout)},
    ))
    encryption = EncryptionService(settings.wallet_encryption_key, environment=settings.environment)
    vault = LocalKeyVault(settings.node_private_key, settings.wallet_path, encryption)

    ledger = Web3AccountLedger(web3, timeout=settings.rpc_timeout)
    protocol = Web3ProtocolState(web3, settings.rocket_storage_address, timeout=settings.rpc_timeout)
    beacon = BeaconClient(settings.beacon_api_url, timeout=settings.rpc_timeout)
    consensus = BeaconConsensusStatus(beacon, protocol)
    submitter = Web3TransactionSubmitter(
        web3,
        protocol,
        vault,
        gas_limit_buffer=settings.gas_limit_buffer,
        max_fee_gwei=settings.max_fee_gwei,
        max_priority_fee_gwei=settings.max_priority_fee_gwei,
        timeout=settings.rpc_timeout,
    )

    collaborators = (ledger, protocol, consensus, vault, submitter)
    services = DepositServices(
        preflight=PreflightAggregator(*collaborators, deposit_amount_gwei=settings.validator_deposit_amount_gwei),
        submission=SubmissionController(*collaborators, deposit_amount_gwei=settings.validator_deposit_amount_gwei),
        beacon=beacon,
    )
    logger.info(f"Deposit services initialized (environment: {settings.environment})")
    return services
