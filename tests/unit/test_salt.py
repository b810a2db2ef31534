"""Unit tests for salt resolution."""

import pytest

from node_deposit.models.deposit import RequestedSalt
from node_deposit.services.deposit.salt import resolve_salt


class TestResolveSalt:
    """Tests for resolve_salt."""

    @pytest.mark.asyncio
    async def test_explicit_salt_used_as_is(self, mock_ledger, node_address):
        """Explicit salt does not query the ledger."""
        salt = await resolve_salt(RequestedSalt.explicit(42), mock_ledger, node_address)

        assert salt.value == 42
        assert salt.source == "explicit"
        mock_ledger.sequence_number_of.assert_not_called()

    @pytest.mark.asyncio
    async def test_auto_salt_uses_account_nonce(self, mock_ledger, node_address):
        """Zero salt resolves to the account's transaction count."""
        salt = await resolve_salt(RequestedSalt.auto(), mock_ledger, node_address)

        assert salt.value == 7
        assert salt.source == "account_nonce"
        mock_ledger.sequence_number_of.assert_awaited_once_with(node_address)

    @pytest.mark.asyncio
    async def test_auto_salt_stable_without_new_transactions(self, mock_ledger, node_address):
        """Two resolutions with no transaction in between agree."""
        first = await resolve_salt(RequestedSalt.auto(), mock_ledger, node_address)
        second = await resolve_salt(RequestedSalt.auto(), mock_ledger, node_address)

        assert first == second

    @pytest.mark.asyncio
    async def test_ledger_error_propagates(self, mock_ledger, node_address):
        """A failed nonce query is not replaced by a default salt."""
        mock_ledger.sequence_number_of.side_effect = ConnectionError("rpc down")

        with pytest.raises(ConnectionError):
            await resolve_salt(RequestedSalt.auto(), mock_ledger, node_address)
