"""Account domain service (chart of accounts)."""

import logging
from typing import Any, Optional

from ledgerkit.database.base import Database
from ledgerkit.domain.entities import (
    Account as AccountEntity,
    AccountDetail,
    AccountFilter,
    AccountType,
)
from ledgerkit.domain.errors import (
    DuplicateCodeError,
    HasChildrenError,
    HasTransactionsError,
    ImmutableFieldError,
    NotFoundError,
    ValidationError,
    account_code_not_found,
    account_has_children,
    account_has_transactions,
    account_not_found,
    duplicate_account_code,
    immutable_account_field,
    parent_account_not_found,
)

logger = logging.getLogger(__name__)

IMMUTABLE_FIELDS = ("code", "type")


class AccountService:
    """Service for managing the chart of accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        code: str,
        name: str,
        type: AccountType | str,
        description: Optional[str] = None,
        parent_id: Optional[int] = None,
    ) -> AccountEntity:
        """Create a new account with a zero balance.

        Args:
            code: Unique account code (e.g., "1010")
            name: Account name
            type: Account type
            description: Optional description
            parent_id: Optional parent account ID

        Returns:
            The created account

        Raises:
            ValidationError: If code, name or type is invalid
            DuplicateCodeError: If the code is already in use
            NotFoundError: If parent_id does not resolve to an account
        """
        code = (code or "").strip()
        name = (name or "").strip()
        if not code:
            raise ValidationError("Account code is required")
        if not name:
            raise ValidationError("Account name is required")
        account_type = parse_account_type(type)

        if self.db.get_account_by_code(code) is not None:
            raise DuplicateCodeError(duplicate_account_code(code))

        if parent_id is not None and self.db.get_account(parent_id) is None:
            raise NotFoundError(parent_account_not_found(parent_id))

        account_id = self.db.create_account(
            code=code,
            name=name,
            type=account_type,
            description=description,
            parent_id=parent_id,
        )
        logger.info("Created account %s '%s' (%s)", code, name, account_type.value)
        return self.get_account(account_id)

    def get_account(self, account_id: int) -> AccountEntity:
        """Get account by ID.

        Raises:
            NotFoundError: If the account does not exist
        """
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def get_account_by_code(self, code: str) -> AccountEntity:
        """Get account by code.

        Raises:
            NotFoundError: If no account has this code
        """
        account = self.db.get_account_by_code(code)
        if account is None:
            raise NotFoundError(account_code_not_found(code))
        return account

    def list_accounts(self, filter: Optional[AccountFilter] = None) -> list[AccountEntity]:
        """List accounts sorted by code.

        Args:
            filter: Optional type, search and parent filters

        Returns:
            List of account entities
        """
        filter = filter or AccountFilter()
        search = filter.search.strip() if filter.search else None
        return self.db.list_accounts(
            type=parse_account_type(filter.type) if filter.type else None,
            search=search or None,
            parent_id=filter.parent_id,
        )

    def update_account(
        self,
        account_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
        **changes: Any,
    ) -> AccountEntity:
        """Update an account's name and description.

        Code and type are fixed at creation. Passing them with their current
        value is accepted and ignored; passing a different value is rejected.

        Raises:
            NotFoundError: If the account does not exist
            ImmutableFieldError: If code or type would change
            ValidationError: If an unknown field is supplied or name is blank
        """
        account = self.get_account(account_id)

        for field, value in changes.items():
            if field not in IMMUTABLE_FIELDS:
                raise ValidationError(f"Unknown account field '{field}'")
            if value is None:
                continue
            current = getattr(account, field)
            if field == "type":
                value = parse_account_type(value)
            if value != current:
                raise ImmutableFieldError(immutable_account_field(field))

        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("Account name is required")

        self.db.update_account(account_id=account_id, name=name, description=description)
        return self.get_account(account_id)

    def delete_account(self, account_id: int) -> None:
        """Delete an account.

        Raises:
            NotFoundError: If the account does not exist
            HasChildrenError: If the account has sub-accounts
            HasTransactionsError: If journal entries reference the account
        """
        account = self.get_account(account_id)

        child_count = self.db.get_child_account_count(account_id)
        if child_count > 0:
            raise HasChildrenError(account_has_children(account_id, child_count))

        entry_count = self.db.get_account_entry_count(account_id)
        if entry_count > 0:
            raise HasTransactionsError(account_has_transactions(account_id, entry_count))

        self.db.delete_account(account_id)
        logger.info("Deleted account %s '%s'", account.code, account.name)

    def get_account_detail(self, account_id: int, recent: int = 10) -> AccountDetail:
        """Get an account with its parent, sub-accounts and latest transactions.

        Args:
            account_id: Account ID
            recent: Maximum number of transactions to include

        Raises:
            NotFoundError: If the account does not exist
        """
        account = self.get_account(account_id)
        parent = self.db.get_account(account.parent_id) if account.parent_id is not None else None
        return AccountDetail(
            account=account,
            parent=parent,
            sub_accounts=tuple(self.db.list_accounts(parent_id=account_id)),
            recent_transactions=tuple(
                self.db.list_transactions(account_id=account_id, limit=recent)
            ),
        )


def parse_account_type(value: AccountType | str) -> AccountType:
    """Coerce a string such as "asset" to an AccountType.

    Raises:
        ValidationError: If the value is not a known account type
    """
    if isinstance(value, AccountType):
        return value
    try:
        return AccountType(str(value).strip().upper())
    except ValueError:
        valid = ", ".join(t.value for t in AccountType)
        raise ValidationError(f"Unknown account type '{value}'. Valid types: {valid}")
