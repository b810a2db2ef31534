"""Encryption utilities for wallet key material."""

from cryptography.fernet import Fernet, InvalidToken
from loguru import logger

from node_deposit.utils.exceptions import SecurityError


class EncryptionService:
    """
    Encryption service for validator key material at rest.

    Uses Fernet (symmetric encryption). Without a key the service only
    works outside production, and warns on every use.
    """

    def __init__(self, encryption_key: str | None = None, environment: str = "development") -> None:
        """
        Initialize encryption service.

        Args:
            encryption_key: Base64-encoded Fernet key
            environment: Application environment name

        Raises:
            SecurityError: If the key is missing or invalid in production
        """
        self.environment = environment
        self.fernet: Fernet | None = None

        if encryption_key:
            try:
                self.fernet = Fernet(encryption_key.encode())
            except ValueError as e:
                logger.error(f"Invalid encryption key: {e}")
                if self.environment == "production":
                    raise SecurityError(
                        "Invalid wallet encryption key in production environment."
                    ) from e
        elif self.environment == "production":
            raise SecurityError(
                "Wallet encryption key not configured in production environment. "
                "Set WALLET_ENCRYPTION_KEY in .env file."
            )

    @property
    def enabled(self) -> bool:
        return self.fernet is not None

    def encrypt(self, plaintext: str) -> str:
        """
        Encrypt plaintext.

        Args:
            plaintext: Text to encrypt

        Returns:
            Fernet token, or the plaintext itself when encryption is disabled
        """
        if not self.fernet:
            logger.warning("Encryption disabled - writing plaintext (DEV ONLY)")
            return plaintext
        return self.fernet.encrypt(plaintext.encode()).decode()

    def decrypt(self, ciphertext: str) -> str:
        """
        Decrypt ciphertext.

        Raises:
            SecurityError: If the token cannot be decrypted with this key
        """
        if not self.fernet:
            logger.warning("Encryption disabled - reading plaintext (DEV ONLY)")
            return ciphertext
        try:
            return self.fernet.decrypt(ciphertext.encode()).decode()
        except InvalidToken as e:
            raise SecurityError("Decryption failed: wrong key or corrupted wallet file") from e

    @staticmethod
    def generate_key() -> str:
        """
        Generate new Fernet key.

        Returns:
            Base64-encoded key
        """
        return Fernet.generate_key().decode()
