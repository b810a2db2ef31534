"""Pytest configuration and shared fixtures for all tests."""

import os
import sys
from datetime import timedelta
from decimal import Decimal
from pathlib import Path

# Minimal environment for Settings
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("RPC_URL", "http://localhost:8545")
os.environ.setdefault("BEACON_API_URL", "http://localhost:5052")
os.environ.setdefault("ROCKET_STORAGE_ADDRESS", "0x1d8f8f00cfa6758d7bE78336684788Fb0ee0Fa46")
os.environ.setdefault("NODE_PRIVATE_KEY", "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318")
os.environ.setdefault("WALLET_ENCRYPTION_KEY", "q0lJnPD0CB_zRPdcUWiVTYp2Tr0pyQG0Lq1sx2sbClE=")

# Add project root to PYTHONPATH
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from unittest.mock import AsyncMock, MagicMock

import pytest
from py_ecc.bls import G2ProofOfPossession as bls

from node_deposit.models.deposit import (
    DepositContractInfo,
    DepositRequest,
    DerivationTemplate,
    GasInfo,
    NetworkConfig,
    SubmissionResult,
    TransactionParams,
    ValidatorKey,
    ValidatorStatus,
)
from node_deposit.services.deposit.deposit_data import build_deposit_data

NODE_ADDRESS = "0x1111111111111111111111111111111111111111"
DEPOSIT_CONTRACT = "0x00000000219ab540356cBB839Cbe05303d7705Fa"
BALANCE_WEI = 32 * 10**18
ACCOUNT_NONCE = 7
HALF_DEPOSIT_WEI = 16 * 10**18

TEMPLATE = DerivationTemplate(
    deployer="0x2222222222222222222222222222222222222222",
    storage="0x3333333333333333333333333333333333333333",
    bytecode=bytes.fromhex("6080604052348015600f57600080fd5b50"),
)

_SECRET = bls.KeyGen(b"\x42" * 32)
VALIDATOR_KEY = ValidatorKey(secret=_SECRET, public_key=bytes(bls.SkToPk(_SECRET)))

MAINNET_CONFIG = NetworkConfig(genesis_fork_version=bytes.fromhex("00000000"))


def credentials_for(address: str) -> bytes:
    """Minipool withdrawal credentials: 0x01 prefix, 11 zero bytes, address."""
    return b"\x01" + bytes(11) + bytes.fromhex(address[2:])


@pytest.fixture(scope="session")
def signed_deposit():
    """
    Deposit data signed once per session.

    Returns:
        DepositData: Real BLS-signed deposit for VALIDATOR_KEY
    """
    return build_deposit_data(VALIDATOR_KEY, credentials_for(NODE_ADDRESS), MAINNET_CONFIG)


@pytest.fixture
def mock_ledger():
    """Mock AccountLedger."""
    ledger = AsyncMock()
    ledger.balance_of = AsyncMock(return_value=BALANCE_WEI)
    ledger.sequence_number_of = AsyncMock(return_value=ACCOUNT_NONCE)
    return ledger


@pytest.fixture
def mock_protocol():
    """Mock ProtocolState for a registered, untrusted node with headroom."""
    protocol = AsyncMock()
    protocol.is_node_registered = AsyncMock(return_value=True)
    protocol.deposits_enabled = AsyncMock(return_value=True)
    protocol.is_trusted_member = AsyncMock(return_value=False)
    protocol.stake_count_of = AsyncMock(return_value=2)
    protocol.stake_limit_of = AsyncMock(return_value=10)
    protocol.unbonded_count_of = AsyncMock(return_value=0)
    protocol.unbonded_max_count = AsyncMock(return_value=5)
    protocol.deposit_type_of = AsyncMock(return_value=2)
    protocol.withdrawal_credentials_of = AsyncMock(side_effect=credentials_for)
    protocol.derivation_template = AsyncMock(return_value=TEMPLATE)
    protocol.deposit_contract_info = AsyncMock(
        return_value=DepositContractInfo(network_id=1, address=DEPOSIT_CONTRACT)
    )
    protocol.scrub_period = AsyncMock(return_value=timedelta(hours=12))
    return protocol


@pytest.fixture
def mock_consensus():
    """Mock ConsensusStatus for mainnet with no existing validator."""
    consensus = AsyncMock()
    consensus.network_config = AsyncMock(return_value=MAINNET_CONFIG)
    consensus.in_consensus = AsyncMock(return_value=True)
    consensus.validator_status = AsyncMock(return_value=ValidatorStatus(exists=False))
    consensus.network_identity = AsyncMock(
        return_value=DepositContractInfo(network_id=1, address=DEPOSIT_CONTRACT.lower())
    )
    return consensus


@pytest.fixture
def mock_vault():
    """Mock KeyVault returning a fixed validator key."""
    vault = MagicMock()
    vault.account_address = MagicMock(return_value=NODE_ADDRESS)
    vault.next_validator_key = MagicMock(return_value=VALIDATOR_KEY)
    vault.create_validator_key = MagicMock(return_value=VALIDATOR_KEY)
    vault.persist = MagicMock()
    vault.build_transaction_params = MagicMock(
        side_effect=lambda amount: TransactionParams(from_address=NODE_ADDRESS, value=amount)
    )
    return vault


@pytest.fixture
def mock_submitter():
    """Mock TransactionSubmitter that honours params.no_send."""
    submitter = AsyncMock()
    submitter.estimate_gas = AsyncMock(
        return_value=GasInfo(estimated_gas=200_000, safe_gas_limit=240_000, gas_price_wei=10**9)
    )
    submitter.submit_or_serialize = AsyncMock(
        side_effect=lambda params, call: SubmissionResult(
            tx_hash="0x" + "ab" * 32,
            raw_transaction=b"\x02\xf8raw",
            broadcast=not params.no_send,
        )
    )
    return submitter


@pytest.fixture
def collaborators(mock_ledger, mock_protocol, mock_consensus, mock_vault, mock_submitter):
    """Collaborators in constructor order."""
    return mock_ledger, mock_protocol, mock_consensus, mock_vault, mock_submitter


@pytest.fixture
def half_deposit_request():
    """16 ETH dry-run deposit request with automatic salt."""
    return DepositRequest(amount_wei=HALF_DEPOSIT_WEI, min_node_fee=Decimal("0.05"))


@pytest.fixture
def node_address():
    return NODE_ADDRESS


@pytest.fixture
def deposit_contract():
    return DEPOSIT_CONTRACT


@pytest.fixture
def template():
    """Minipool CREATE2 derivation template."""
    return TEMPLATE


@pytest.fixture
def validator_key():
    return VALIDATOR_KEY


@pytest.fixture
def network_config():
    """Mainnet deposit signing parameters."""
    return MAINNET_CONFIG


@pytest.fixture
def withdrawal_credentials():
    return credentials_for(NODE_ADDRESS)
