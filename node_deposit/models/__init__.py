"""
Data models.

Exports all pipeline models for easy imports.
"""

from node_deposit.models.deposit import (
    DepositCall,
    DepositContractInfo,
    DepositData,
    DepositRequest,
    DerivationTemplate,
    DerivedTarget,
    GasInfo,
    NetworkConfig,
    RequestedSalt,
    ResolvedSalt,
    SubmissionOutcome,
    SubmissionResult,
    SubmissionStage,
    TransactionParams,
    ValidatorKey,
    ValidatorStatus,
)
from node_deposit.models.preflight import PreflightResult

__all__ = [
    "DepositCall",
    "DepositContractInfo",
    "DepositData",
    "DepositRequest",
    "DerivationTemplate",
    "DerivedTarget",
    "GasInfo",
    "NetworkConfig",
    "PreflightResult",
    "RequestedSalt",
    "ResolvedSalt",
    "SubmissionOutcome",
    "SubmissionResult",
    "SubmissionStage",
    "TransactionParams",
    "ValidatorKey",
    "ValidatorStatus",
]
