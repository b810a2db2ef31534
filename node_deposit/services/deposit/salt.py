"""Salt resolution."""

from loguru import logger

from node_deposit.models.deposit import RequestedSalt, ResolvedSalt
from node_deposit.services.deposit.interfaces import AccountLedger
from node_deposit.utils.security import mask_address


async def resolve_salt(requested: RequestedSalt, ledger: AccountLedger, account: str) -> ResolvedSalt:
    """
    Resolve a requested salt once.

    An automatic salt is the account's current transaction count, so two
    resolutions with no transaction in between give the same salt.
    """
    if not requested.is_auto:
        return ResolvedSalt(value=requested.value, source="explicit")

    nonce = await ledger.sequence_number_of(account)
    logger.debug(f"Using account nonce {nonce} of {mask_address(account)} as salt")
    return ResolvedSalt(value=nonce, source="account_nonce")
