"""Integration tests for the deposit pipeline with real signing."""

from dataclasses import replace
from unittest.mock import AsyncMock

import pytest

from node_deposit.config.settings import Settings
from node_deposit.initialization import DepositServices, build_deposit_services
from node_deposit.models.deposit import SubmissionStage, ValidatorStatus
from node_deposit.services.deposit import PreflightAggregator, SubmissionController
from node_deposit.services.deposit.signing import compute_deposit_data_root
from node_deposit.services.wallet import LocalKeyVault
from node_deposit.utils.encryption import EncryptionService
from node_deposit.utils.exceptions import DuplicateValidatorError, KeyPersistenceError, SecurityError
from node_deposit.utils.security import to_hex

pytestmark = pytest.mark.slow

PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"


@pytest.fixture
def encryption():
    return EncryptionService(EncryptionService.generate_key())


@pytest.fixture
def wallet_path(tmp_path):
    return tmp_path / "wallet.json"


@pytest.fixture
def vault(wallet_path, encryption):
    return LocalKeyVault(PRIVATE_KEY, wallet_path, encryption)


@pytest.fixture
def pipeline(mock_ledger, mock_protocol, mock_consensus, vault, mock_submitter):
    collaborators = (mock_ledger, mock_protocol, mock_consensus, vault, mock_submitter)
    return PreflightAggregator(*collaborators), SubmissionController(*collaborators)


class TestDepositPipeline:
    """Pre-flight followed by submission on shared collaborators."""

    @pytest.mark.asyncio
    async def test_preflight_then_broadcast(
        self, pipeline, half_deposit_request, vault, wallet_path, encryption, mock_submitter
    ):
        """A healthy node deposits and the new key is saved after broadcast."""
        preflight, submission = pipeline

        previewed = vault.next_validator_key()
        result = await preflight.check(half_deposit_request)
        assert result.can_proceed is True

        outcome = await submission.submit(replace(half_deposit_request, submit=True))

        assert outcome.broadcast is True
        assert outcome.stages[-1] == SubmissionStage.KEY_PERSISTED
        assert outcome.target == result.target
        assert outcome.public_key == previewed.public_key
        assert [key.public_key for key in vault.validator_keys] == [outcome.public_key]
        assert LocalKeyVault(PRIVATE_KEY, wallet_path, encryption).validator_keys == vault.validator_keys

        _, call = mock_submitter.submit_or_serialize.await_args.args
        assert call.validator_pubkey == outcome.public_key
        assert call.deposit_data_root == compute_deposit_data_root(
            call.validator_pubkey,
            outcome.target.withdrawal_credentials,
            16_000_000_000,
            call.validator_signature,
        )

    @pytest.mark.asyncio
    async def test_dry_run_leaves_wallet_untouched(self, pipeline, half_deposit_request, wallet_path):
        """A dry run never writes keys."""
        _, submission = pipeline

        outcome = await submission.submit(half_deposit_request)

        assert outcome.broadcast is False
        assert outcome.raw_transaction is not None
        assert not wallet_path.exists()

    @pytest.mark.asyncio
    async def test_duplicate_key_aborts(
        self, pipeline, half_deposit_request, mock_consensus, mock_submitter, wallet_path
    ):
        """A pubkey already on the beacon chain stops the deposit."""
        _, submission = pipeline
        mock_consensus.validator_status = AsyncMock(return_value=ValidatorStatus(exists=True, index=7))

        with pytest.raises(DuplicateValidatorError):
            await submission.submit(replace(half_deposit_request, submit=True))

        mock_submitter.submit_or_serialize.assert_not_called()
        assert not wallet_path.exists()

    @pytest.mark.asyncio
    async def test_failed_save_kept_for_next_deposit(
        self, pipeline, half_deposit_request, vault, tmp_path, encryption
    ):
        """A broadcast key that could not be saved is written with the next deposit."""
        _, submission = pipeline
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        vault.wallet_path = blocker / "wallet.json"
        broadcast_request = replace(half_deposit_request, submit=True)

        with pytest.raises(KeyPersistenceError) as exc_info:
            await submission.submit(broadcast_request)

        funded = exc_info.value.public_key
        assert [to_hex(key.public_key) for key in vault.unsaved_keys] == [funded]

        vault.wallet_path = tmp_path / "wallet.json"
        outcome = await submission.submit(broadcast_request)

        saved = LocalKeyVault(PRIVATE_KEY, tmp_path / "wallet.json", encryption).validator_keys
        assert [to_hex(key.public_key) for key in saved] == [funded, to_hex(outcome.public_key)]
        assert vault.unsaved_keys == []


class TestBuildDepositServices:
    """Wiring from settings."""

    def _settings(self, tmp_path, **overrides) -> Settings:
        values = {
            "environment": "development",
            "rpc_url": "http://localhost:8545",
            "beacon_api_url": "http://localhost:5052",
            "rocket_storage_address": "0x1d8f8f00cfa6758d7bE78336684788Fb0ee0Fa46",
            "node_private_key": PRIVATE_KEY,
            "wallet_path": str(tmp_path / "wallet.json"),
            "wallet_encryption_key": EncryptionService.generate_key(),
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    @pytest.mark.asyncio
    async def test_services_share_collaborators(self, tmp_path):
        services = build_deposit_services(self._settings(tmp_path))

        assert isinstance(services, DepositServices)
        assert services.preflight.vault is services.submission.vault
        assert services.preflight.protocol is services.submission.protocol
        assert services.submission.deposit_amount_gwei == 16_000_000_000
        await services.close()

    def test_missing_private_key(self, tmp_path):
        with pytest.raises(SecurityError, match="NODE_PRIVATE_KEY"):
            build_deposit_services(self._settings(tmp_path, node_private_key=None))

    def test_defaults_to_global_settings(self):
        """Without arguments the environment-loaded settings are used."""
        services = build_deposit_services()

        assert services.beacon.base_url == "http://localhost:5052"
        assert services.preflight.vault.account_address() == services.submission.vault.account_address()
