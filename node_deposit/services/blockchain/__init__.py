"""
Blockchain Module.

Module structure:
- rpc_wrapper.py           - Timeout wrapper for RPC calls
- contract_abis.py         - Rocket Pool contract ABIs
- account_ledger.py        - Balance and nonce queries
- protocol_state.py        - Rocket Pool protocol state
- transaction_submitter.py - Gas estimation, signing and broadcast
"""

from .account_ledger import Web3AccountLedger
from .protocol_state import Web3ProtocolState
from .rpc_wrapper import BlockchainTimeoutError, with_timeout
from .transaction_submitter import Web3TransactionSubmitter

__all__ = [
    "BlockchainTimeoutError",
    "Web3AccountLedger",
    "Web3ProtocolState",
    "Web3TransactionSubmitter",
    "with_timeout",
]
