"""
Protocol state.

Read-only Rocket Pool contract queries. Contract addresses are looked up
in RocketStorage once and cached; contract state is never cached.
"""

from datetime import timedelta
from typing import Any

from loguru import logger
from web3 import AsyncWeb3
from web3.contract import AsyncContract

from node_deposit.config.constants import (
    BLOCKCHAIN_TIMEOUT,
    CONTRACT_CASPER_DEPOSIT,
    CONTRACT_DAO_NODE_TRUSTED,
    CONTRACT_DAO_PROTOCOL_SETTINGS_NODE,
    CONTRACT_DAO_TRUSTED_SETTINGS_MEMBERS,
    CONTRACT_DAO_TRUSTED_SETTINGS_MINIPOOL,
    CONTRACT_MINIPOOL_FACTORY,
    CONTRACT_MINIPOOL_MANAGER,
    CONTRACT_NETWORK_PRICES,
    CONTRACT_NODE_DEPOSIT,
    CONTRACT_NODE_MANAGER,
    CONTRACT_NODE_STAKING,
)
from node_deposit.models.deposit import DepositContractInfo, DerivationTemplate
from node_deposit.utils.security import mask_address

from .contract_abis import (
    ROCKET_DAO_NODE_TRUSTED_ABI,
    ROCKET_DAO_PROTOCOL_SETTINGS_NODE_ABI,
    ROCKET_DAO_TRUSTED_SETTINGS_MEMBERS_ABI,
    ROCKET_DAO_TRUSTED_SETTINGS_MINIPOOL_ABI,
    ROCKET_MINIPOOL_FACTORY_ABI,
    ROCKET_MINIPOOL_MANAGER_ABI,
    ROCKET_NETWORK_PRICES_ABI,
    ROCKET_NODE_DEPOSIT_ABI,
    ROCKET_NODE_MANAGER_ABI,
    ROCKET_NODE_STAKING_ABI,
    ROCKET_STORAGE_ABI,
)
from .rpc_wrapper import with_timeout

CONTRACT_ABIS: dict[str, list[dict]] = {
    CONTRACT_NODE_DEPOSIT: ROCKET_NODE_DEPOSIT_ABI,
    CONTRACT_NODE_MANAGER: ROCKET_NODE_MANAGER_ABI,
    CONTRACT_NODE_STAKING: ROCKET_NODE_STAKING_ABI,
    CONTRACT_MINIPOOL_MANAGER: ROCKET_MINIPOOL_MANAGER_ABI,
    CONTRACT_MINIPOOL_FACTORY: ROCKET_MINIPOOL_FACTORY_ABI,
    CONTRACT_DAO_NODE_TRUSTED: ROCKET_DAO_NODE_TRUSTED_ABI,
    CONTRACT_DAO_PROTOCOL_SETTINGS_NODE: ROCKET_DAO_PROTOCOL_SETTINGS_NODE_ABI,
    CONTRACT_DAO_TRUSTED_SETTINGS_MEMBERS: ROCKET_DAO_TRUSTED_SETTINGS_MEMBERS_ABI,
    CONTRACT_DAO_TRUSTED_SETTINGS_MINIPOOL: ROCKET_DAO_TRUSTED_SETTINGS_MINIPOOL_ABI,
    CONTRACT_NETWORK_PRICES: ROCKET_NETWORK_PRICES_ABI,
}


class Web3ProtocolState:
    """
    Rocket Pool protocol state backed by an execution client.

    Features:
    - Contract address resolution through RocketStorage
    - Node registration, trusted membership and staking limits
    - Minipool withdrawal credentials and CREATE2 template
    """

    def __init__(
        self,
        web3: AsyncWeb3,
        storage_address: str,
        timeout: float = BLOCKCHAIN_TIMEOUT,
    ) -> None:
        """
        Initialize protocol state.

        Args:
            web3: AsyncWeb3 instance
            storage_address: RocketStorage contract address
            timeout: Per-call timeout in seconds
        """
        self.web3 = web3
        self.timeout = timeout
        self.storage_address = web3.to_checksum_address(storage_address)
        self.storage = web3.eth.contract(address=self.storage_address, abi=ROCKET_STORAGE_ABI)
        self._addresses: dict[str, str] = {}

    async def get_contract_address(self, name: str) -> str:
        """
        Look up a network contract address in RocketStorage.

        Raises:
            ValueError: If the contract is not registered
        """
        if name in self._addresses:
            return self._addresses[name]

        key = self.web3.solidity_keccak(["string", "string"], ["contract.address", name])
        address = await self._call(self.storage.functions.getAddress(key), f"getAddress({name})")
        if int(address, 16) == 0:
            raise ValueError(f"Contract {name} is not registered in RocketStorage")

        self._addresses[name] = address
        logger.debug(f"Resolved {name} at {address}")
        return address

    async def get_contract(self, name: str) -> AsyncContract:
        address = await self.get_contract_address(name)
        return self.web3.eth.contract(address=address, abi=CONTRACT_ABIS[name])

    async def _call(self, function: Any, operation_name: str) -> Any:
        return await with_timeout(function.call(), timeout=self.timeout, operation_name=operation_name)

    async def _read(self, contract_name: str, function_name: str, *args: Any) -> Any:
        contract = await self.get_contract(contract_name)
        function = contract.get_function_by_name(function_name)(*args)
        return await self._call(function, f"{contract_name}.{function_name}")

    def _checksum(self, address: str) -> str:
        return self.web3.to_checksum_address(address)

    # ------------------------------------------------------------------
    # Node
    # ------------------------------------------------------------------

    async def is_node_registered(self, node: str) -> bool:
        exists = await self._read(CONTRACT_NODE_MANAGER, "getNodeExists", self._checksum(node))
        if not exists:
            logger.warning(f"Node {mask_address(node)} is not registered")
        return bool(exists)

    async def is_trusted_member(self, node: str) -> bool:
        return bool(await self._read(CONTRACT_DAO_NODE_TRUSTED, "getMemberIsValid", self._checksum(node)))

    async def stake_count_of(self, node: str) -> int:
        return int(await self._read(CONTRACT_MINIPOOL_MANAGER, "getNodeMinipoolCount", self._checksum(node)))

    async def stake_limit_of(self, node: str) -> int:
        return int(await self._read(CONTRACT_NODE_STAKING, "getNodeMinipoolLimit", self._checksum(node)))

    async def unbonded_count_of(self, node: str) -> int:
        return int(await self._read(
            CONTRACT_DAO_NODE_TRUSTED, "getMemberUnbondedValidatorCount", self._checksum(node)
        ))

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    async def deposits_enabled(self) -> bool:
        return bool(await self._read(CONTRACT_DAO_PROTOCOL_SETTINGS_NODE, "getDepositEnabled"))

    async def unbonded_max_count(self) -> int:
        return int(await self._read(CONTRACT_DAO_TRUSTED_SETTINGS_MEMBERS, "getMinipoolUnbondedMax"))

    async def prices_in_consensus(self) -> bool:
        """Whether the oracle DAO has reached consensus on network prices."""
        return bool(await self._read(CONTRACT_NETWORK_PRICES, "inConsensus"))

    async def scrub_period(self) -> timedelta:
        seconds = await self._read(CONTRACT_DAO_TRUSTED_SETTINGS_MINIPOOL, "getScrubPeriod")
        return timedelta(seconds=int(seconds))

    # ------------------------------------------------------------------
    # Minipools
    # ------------------------------------------------------------------

    async def deposit_type_of(self, amount_wei: int) -> int:
        return int(await self._read(CONTRACT_NODE_DEPOSIT, "getDepositType", amount_wei))

    async def withdrawal_credentials_of(self, minipool_address: str) -> bytes:
        credentials = await self._read(
            CONTRACT_MINIPOOL_MANAGER,
            "getMinipoolWithdrawalCredentials",
            self._checksum(minipool_address),
        )
        return bytes(credentials)

    async def derivation_template(self) -> DerivationTemplate:
        deployer = await self.get_contract_address(CONTRACT_MINIPOOL_FACTORY)
        bytecode = await self._read(CONTRACT_MINIPOOL_FACTORY, "getMinipoolBytecode")
        return DerivationTemplate(
            deployer=deployer,
            storage=self.storage_address,
            bytecode=bytes(bytecode),
        )

    async def deposit_contract_info(self) -> DepositContractInfo:
        """Chain id and beacon deposit contract as registered in Rocket Pool."""
        chain_id = await with_timeout(self.web3.eth.chain_id, timeout=self.timeout, operation_name="chain_id")
        address = await self.get_contract_address(CONTRACT_CASPER_DEPOSIT)
        return DepositContractInfo(network_id=int(chain_id), address=address)

    async def node_deposit_address(self) -> str:
        return await self.get_contract_address(CONTRACT_NODE_DEPOSIT)
