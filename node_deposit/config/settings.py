"""
Application settings.

Loads configuration from environment variables using pydantic-settings.
"""

from loguru import logger
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from node_deposit.config.constants import (
    BLOCKCHAIN_TIMEOUT,
    GAS_LIMIT_BUFFER,
    MAX_FEE_GWEI,
    MAX_PRIORITY_FEE_GWEI,
    VALIDATOR_DEPOSIT_AMOUNT_GWEI,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    environment: str = "production"
    debug: bool = False
    log_level: str = "INFO"
    log_file: str | None = "logs/node_deposit.log"

    # Execution client
    rpc_url: str
    rpc_timeout: float = Field(
        default=BLOCKCHAIN_TIMEOUT, gt=0, description="Execution client call timeout in seconds"
    )

    # Beacon node
    beacon_api_url: str

    # Rocket Pool
    rocket_storage_address: str

    # Wallet
    node_private_key: str | None = None
    wallet_path: str = "data/wallet.json"
    wallet_encryption_key: str | None = None

    # Deposit
    validator_deposit_amount_gwei: int = Field(
        default=VALIDATOR_DEPOSIT_AMOUNT_GWEI,
        gt=0,
        description="Amount signed into the validator deposit data (gwei)"
    )

    # Gas
    gas_limit_buffer: float = Field(
        default=GAS_LIMIT_BUFFER, ge=1.0, le=3.0, description="Gas estimate multiplier"
    )
    max_fee_gwei: int = Field(default=MAX_FEE_GWEI, gt=0)
    max_priority_fee_gwei: int = Field(default=MAX_PRIORITY_FEE_GWEI, gt=0)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode='after')
    def validate_production(self) -> 'Settings':
        """Validate production-specific requirements."""
        if self.environment == 'production':
            if self.debug:
                raise ValueError(
                    'DEBUG must be False in production environment. '
                    'Set DEBUG=false in your .env file.'
                )

            # Validator keys must never be written to disk unencrypted
            if not self.wallet_encryption_key:
                raise ValueError(
                    'WALLET_ENCRYPTION_KEY is required in production. '
                    "Generate one with: python -c 'from cryptography.fernet import Fernet; "
                    "print(Fernet.generate_key().decode())'"
                )

            if not self.node_private_key:
                logger.warning(
                    'NODE_PRIVATE_KEY is not set. '
                    'Pre-flight checks will work, deposits cannot be signed.'
                )

        if self.max_priority_fee_gwei > self.max_fee_gwei:
            raise ValueError('MAX_PRIORITY_FEE_GWEI cannot exceed MAX_FEE_GWEI')

        return self

    @field_validator('rocket_storage_address')
    @classmethod
    def validate_eth_address(cls, v: str) -> str:
        """Validate Ethereum address format."""
        if not v.startswith('0x') or len(v) != 42:
            raise ValueError(
                f'Invalid Ethereum address: {v}. '
                'Must start with 0x and be 42 characters long.'
            )
        try:
            int(v[2:], 16)
        except ValueError as exc:
            raise ValueError(f'Invalid Ethereum address format: {v}') from exc
        return v.lower()

    @field_validator('rpc_url', 'beacon_api_url')
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate HTTP endpoint URL."""
        if not v.startswith(('http://', 'https://')):
            raise ValueError(f'Endpoint must start with http:// or https://: {v}')
        return v.rstrip('/')

    @field_validator('node_private_key')
    @classmethod
    def validate_private_key(cls, v: str | None) -> str | None:
        """Validate node account private key format."""
        if v is None or v == '':
            return None
        key = v[2:] if v.startswith('0x') else v
        if len(key) != 64:
            raise ValueError('NODE_PRIVATE_KEY must be 32 bytes of hex')
        try:
            int(key, 16)
        except ValueError as exc:
            raise ValueError('NODE_PRIVATE_KEY must be hex encoded') from exc
        return '0x' + key.lower()


# Global settings instance
settings = Settings()
