"""Utility for resolving account codes to IDs."""

from ledgerkit.domain.account import AccountService
from ledgerkit.domain.errors import NotFoundError


def resolve_account(account_service: AccountService, account: str | int) -> int:
    """Resolve an account code or ID to an account ID.

    Account codes are usually numeric ("1010"), so a string is looked up as a
    code first and only treated as an ID when no account has that code.

    Args:
        account_service: AccountService instance
        account: Account code (str) or ID (int or string representation of int)

    Returns:
        Account ID

    Raises:
        NotFoundError: If no account matches
    """
    if isinstance(account, int):
        return account_service.get_account(account).id

    account = account.strip()
    try:
        return account_service.get_account_by_code(account).id
    except NotFoundError:
        if not account.isdigit():
            raise

    try:
        return account_service.get_account(int(account)).id
    except NotFoundError:
        raise NotFoundError(f"Account '{account}' not found")
