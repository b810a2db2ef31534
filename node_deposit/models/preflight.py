"""Pre-flight report model."""

from dataclasses import dataclass
from typing import Any

from node_deposit.models.deposit import DerivedTarget, GasInfo, ResolvedSalt


@dataclass
class PreflightResult:
    """
    Itemized answer to "can this node deposit right now".

    can_proceed is derived on every access and never stored, since it
    depends on live chain state.
    """

    insufficient_balance: bool = False
    deposits_disabled: bool = False
    insufficient_stake_headroom: bool = False
    invalid_amount: bool = False
    unbonded_limit_reached: bool = False
    not_in_consensus: bool = False
    target: DerivedTarget | None = None
    gas_info: GasInfo | None = None
    salt: ResolvedSalt | None = None

    @property
    def can_proceed(self) -> bool:
        return not (
            self.insufficient_balance
            or self.deposits_disabled
            or self.insufficient_stake_headroom
            or self.invalid_amount
            or self.unbonded_limit_reached
            or self.not_in_consensus
        )

    def failed_checks(self) -> list[str]:
        """Names of the checks that block the deposit."""
        flags = {
            "insufficient_balance": self.insufficient_balance,
            "deposits_disabled": self.deposits_disabled,
            "insufficient_stake_headroom": self.insufficient_stake_headroom,
            "invalid_amount": self.invalid_amount,
            "unbonded_limit_reached": self.unbonded_limit_reached,
            "not_in_consensus": self.not_in_consensus,
        }
        return [name for name, failed in flags.items() if failed]

    def as_dict(self) -> dict[str, Any]:
        return {
            "can_proceed": self.can_proceed,
            "failed_checks": self.failed_checks(),
            "minipool_address": self.target.address if self.target else None,
            "salt": self.salt.value if self.salt else None,
            "gas_limit": self.gas_info.safe_gas_limit if self.gas_info else None,
            "gas_price_wei": self.gas_info.gas_price_wei if self.gas_info else None,
        }
