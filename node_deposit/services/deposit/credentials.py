"""
Withdrawal credential resolution.

Binds a derived minipool address to the withdrawal credentials the
protocol reports for it.
"""

from loguru import logger

from node_deposit.config.constants import WITHDRAWAL_CREDENTIALS_LENGTH
from node_deposit.models.deposit import DerivationTemplate, DerivedTarget, ResolvedSalt
from node_deposit.services.deposit.address_derivation import derive_minipool_address
from node_deposit.services.deposit.interfaces import ProtocolState
from node_deposit.utils.security import mask_address


class WithdrawalCredentialResolver:
    """
    Resolves withdrawal credentials for minipool addresses.

    Errors from the protocol state are propagated unchanged and never
    retried: a stale or unavailable view must abort the pipeline.
    """

    def __init__(self, protocol: ProtocolState) -> None:
        self.protocol = protocol

    async def resolve(self, minipool_address: str) -> bytes:
        """
        Get withdrawal credentials for a minipool address.

        Raises:
            ValueError: If the protocol returns malformed credentials
        """
        credentials = bytes(await self.protocol.withdrawal_credentials_of(minipool_address))
        if len(credentials) != WITHDRAWAL_CREDENTIALS_LENGTH:
            raise ValueError(
                f"Malformed withdrawal credentials for {minipool_address}: "
                f"expected {WITHDRAWAL_CREDENTIALS_LENGTH} bytes, got {len(credentials)}"
            )
        return credentials

    async def resolve_target(
        self,
        template: DerivationTemplate,
        owner: str,
        deposit_type: int,
        salt: ResolvedSalt,
    ) -> DerivedTarget:
        """
        Derive the minipool address and fetch its withdrawal credentials.

        Args:
            template: CREATE2 derivation inputs from the chain
            owner: Node account address
            deposit_type: Deposit size class
            salt: Resolved salt

        Returns:
            DerivedTarget
        """
        address = derive_minipool_address(template, owner, deposit_type, salt.value)
        credentials = await self.resolve(address)

        logger.debug(
            f"Derived minipool {address} for node {mask_address(owner)}",
            extra={"deposit_type": deposit_type, "salt": salt.value},
        )
        return DerivedTarget(address=address, withdrawal_credentials=credentials)
