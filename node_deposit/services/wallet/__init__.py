"""Node wallet."""

from .key_vault import LocalKeyVault, generate_validator_key

__all__ = [
    "LocalKeyVault",
    "generate_validator_key",
]
