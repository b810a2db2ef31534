"""Unit tests for application settings."""

import pytest
from pydantic import ValidationError

from node_deposit.config.settings import Settings

BASE = {
    "rpc_url": "http://localhost:8545/",
    "beacon_api_url": "https://beacon.example.org",
    "rocket_storage_address": "0x1d8f8f00cfa6758d7bE78336684788Fb0ee0Fa46",
    "environment": "development",
}


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **{**BASE, **overrides})


class TestSettings:
    """Tests for Settings validation."""

    def test_normalization(self):
        """URLs lose the trailing slash, addresses are lowercased."""
        settings = make_settings()

        assert settings.rpc_url == "http://localhost:8545"
        assert settings.rocket_storage_address == "0x1d8f8f00cfa6758d7be78336684788fb0ee0fa46"
        assert settings.validator_deposit_amount_gwei == 16_000_000_000

    def test_invalid_storage_address(self):
        with pytest.raises(ValidationError):
            make_settings(rocket_storage_address="0x1234")

    def test_invalid_url(self):
        with pytest.raises(ValidationError):
            make_settings(rpc_url="ws://localhost:8546")

    def test_private_key_normalized(self):
        settings = make_settings(node_private_key="AB" * 32)

        assert settings.node_private_key == "0x" + "ab" * 32

    def test_invalid_private_key(self):
        with pytest.raises(ValidationError):
            make_settings(node_private_key="0x1234")

    def test_production_requires_encryption_key(self):
        with pytest.raises(ValidationError, match="WALLET_ENCRYPTION_KEY"):
            make_settings(environment="production", wallet_encryption_key=None)

    def test_production_rejects_debug(self):
        with pytest.raises(ValidationError, match="DEBUG"):
            make_settings(environment="production", debug=True, wallet_encryption_key="key")

    def test_priority_fee_cap(self):
        with pytest.raises(ValidationError, match="MAX_PRIORITY_FEE_GWEI"):
            make_settings(max_fee_gwei=10, max_priority_fee_gwei=20)

    def test_gas_buffer_bounds(self):
        with pytest.raises(ValidationError):
            make_settings(gas_limit_buffer=0.5)
