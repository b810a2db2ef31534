"""
Deposit Module.

Module structure:
- address_derivation.py - CREATE2 minipool address derivation (pure)
- credentials.py        - Withdrawal credential resolution
- signing.py            - SSZ containers, domain and signing root helpers
- deposit_data.py       - Deposit data builder
- verifier.py           - Independent deposit signature verification
- check_group.py        - Concurrent checks with first-error semantics
- salt.py               - Salt resolution
- preflight.py          - PreflightAggregator ("can deposit")
- submission.py         - SubmissionController ("deposit")
- interfaces.py         - Collaborator protocols
"""

from .address_derivation import derive_minipool_address
from .credentials import WithdrawalCredentialResolver
from .deposit_data import build_deposit_data
from .preflight import PreflightAggregator
from .submission import SubmissionController
from .verifier import verify_deposit_data

__all__ = [
    "PreflightAggregator",
    "SubmissionController",
    "WithdrawalCredentialResolver",
    "build_deposit_data",
    "derive_minipool_address",
    "verify_deposit_data",
]
