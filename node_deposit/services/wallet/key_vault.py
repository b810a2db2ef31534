"""
Local key vault.

Holds the node account and validator BLS keys. New validator keys stay
pending in memory until persist() writes them to the encrypted wallet file.
"""

import json
import secrets
from pathlib import Path
from typing import Any

from eth_account import Account
from loguru import logger
from py_ecc.bls import G2ProofOfPossession as bls

from node_deposit.models.deposit import TransactionParams, ValidatorKey
from node_deposit.utils.encryption import EncryptionService
from node_deposit.utils.exceptions import SecurityError
from node_deposit.utils.security import mask_address, mask_hex, to_hex


def generate_validator_key() -> ValidatorKey:
    """Generate a random BLS validator key."""
    secret = bls.KeyGen(secrets.token_bytes(32))
    return ValidatorKey(secret=secret, public_key=bytes(bls.SkToPk(secret)))


class LocalKeyVault:
    """
    Node wallet stored in a local encrypted file.

    Features:
    - Node account signing via eth_account
    - Random BLS validator keys via py_ecc KeyGen
    - Fernet-encrypted JSON wallet file
    """

    def __init__(self, private_key: str, wallet_path: str | Path, encryption: EncryptionService) -> None:
        """
        Initialize key vault and load stored validator keys.

        Args:
            private_key: Node account private key (hex)
            wallet_path: Path to the encrypted wallet file
            encryption: Encryption service for the wallet file

        Raises:
            SecurityError: If the private key is invalid or the wallet file
                cannot be decrypted
        """
        try:
            self.account = Account.from_key(private_key)
        except (ValueError, TypeError) as e:
            raise SecurityError(f"Invalid node private key: {type(e).__name__}") from e

        self.wallet_path = Path(wallet_path)
        self.encryption = encryption
        self._stored: list[ValidatorKey] = self._load()
        self._pending: ValidatorKey | None = None
        self._unsaved: list[ValidatorKey] = []
        self._preview: ValidatorKey | None = None

        logger.info(
            f"Key vault loaded for {mask_address(self.account.address)} "
            f"({len(self._stored)} validator keys)"
        )

    def _load(self) -> list[ValidatorKey]:
        if not self.wallet_path.exists():
            return []
        data = json.loads(self.encryption.decrypt(self.wallet_path.read_text()))
        return [
            ValidatorKey(secret=int(item["secret"], 16), public_key=bytes.fromhex(item["public_key"][2:]))
            for item in data.get("validator_keys", [])
        ]

    @property
    def validator_keys(self) -> list[ValidatorKey]:
        return list(self._stored)

    @property
    def pending_key(self) -> ValidatorKey | None:
        return self._pending

    @property
    def unsaved_keys(self) -> list[ValidatorKey]:
        """Keys of broadcast deposits that are not yet in the wallet file."""
        return list(self._unsaved)

    def account_address(self) -> str:
        return self.account.address

    def next_validator_key(self) -> ValidatorKey:
        """
        Key the next create_validator_key() call will return.

        The same key is returned until it is created, so pre-flight checks
        sign and estimate with the key that is actually deposited.
        """
        if self._preview is None:
            self._preview = generate_validator_key()
        return self._preview

    def create_validator_key(self) -> ValidatorKey:
        """
        Create a new validator key and hold it as pending.

        A previous pending key that was never persisted is discarded. Keys of
        broadcast deposits that failed to save are kept in unsaved_keys.
        """
        if self._pending is not None:
            logger.warning(f"Discarding unpersisted validator key {mask_hex(to_hex(self._pending.public_key))}")
        self._pending = self.next_validator_key()
        self._preview = None
        logger.info(f"Created validator key {mask_hex(to_hex(self._pending.public_key))}")
        return self._pending

    def persist(self) -> None:
        """
        Write stored, unsaved and pending keys to the wallet file.

        The pending key moves to unsaved_keys before writing, so a failed
        write keeps it for the next persist() call.

        Raises:
            OSError: If the wallet file cannot be written
        """
        if self._pending is not None:
            self._unsaved.append(self._pending)
            self._pending = None

        keys = self._stored + self._unsaved
        payload = json.dumps({
            "account": self.account.address,
            "validator_keys": [
                {"public_key": to_hex(key.public_key), "secret": hex(key.secret)}
                for key in keys
            ],
        })

        self.wallet_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.wallet_path.with_suffix(self.wallet_path.suffix + ".tmp")
        tmp_path.write_text(self.encryption.encrypt(payload))
        tmp_path.replace(self.wallet_path)

        self._stored = keys
        self._unsaved = []
        logger.info(f"Wallet saved to {self.wallet_path} ({len(keys)} validator keys)")

    def build_transaction_params(self, amount_wei: int) -> TransactionParams:
        return TransactionParams(from_address=self.account.address, value=amount_wei)

    def sign_transaction(self, transaction: dict[str, Any]) -> Any:
        return self.account.sign_transaction(transaction)
