"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence
from datetime import date

# Import entities directly to avoid circular import through domain/__init__.py
from ledgerkit.domain.entities import (
    Account,
    AccountType,
    EntryInput,
    LedgerLine,
    Transaction,
    TransactionType,
)


class Database(ABC):
    """Abstract database interface for ledgerkit.

    Write operations that touch balances (``post_transaction`` and
    ``delete_transaction``) are single units of work: either every row and
    balance adjustment persists or none does.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        code: str,
        name: str,
        type: AccountType,
        description: Optional[str] = None,
        parent_id: Optional[int] = None,
    ) -> int:
        """Create a new account with a zero balance. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def get_account_by_code(self, code: str) -> Optional[Account]:
        """Get account by its unique code."""
        pass

    @abstractmethod
    def list_accounts(
        self,
        type: Optional[AccountType] = None,
        search: Optional[str] = None,
        parent_id: Optional[int] = None,
    ) -> list[Account]:
        """List accounts ordered by code.

        Args:
            type: Optional account type filter
            search: Optional case-insensitive substring of code or name
            parent_id: Optional parent account filter
        """
        pass

    @abstractmethod
    def update_account(
        self,
        account_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> None:
        """Update the mutable fields of an account."""
        pass

    @abstractmethod
    def delete_account(self, account_id: int) -> None:
        """Delete an account."""
        pass

    @abstractmethod
    def get_child_account_count(self, account_id: int) -> int:
        """Get count of accounts whose parent is the given account."""
        pass

    @abstractmethod
    def get_account_entry_count(self, account_id: int) -> int:
        """Get count of journal entries referencing an account."""
        pass

    # Transaction operations
    @abstractmethod
    def post_transaction(
        self,
        date: date,
        type: TransactionType,
        description: str,
        entries: Sequence[EntryInput],
        reference: Optional[str] = None,
        invoice_id: Optional[int] = None,
        purchase_id: Optional[int] = None,
        created_by: Optional[str] = None,
    ) -> int:
        """Persist a transaction, its entries and the balance adjustments.

        Each entry adjusts its account balance by ``debit - credit``.
        Returns transaction ID.
        """
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID, entries included."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        type: Optional[TransactionType] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[int] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[Transaction]:
        """List transactions, newest first.

        Args:
            type: Optional transaction type filter
            start_date: Optional start date filter (inclusive)
            end_date: Optional end date filter (inclusive)
            account_id: Only transactions with an entry on this account
            search: Optional case-insensitive substring of description or reference
            limit: Optional maximum number of transactions
        """
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> None:
        """Reverse a transaction's balance adjustments and delete it with its entries."""
        pass

    @abstractmethod
    def list_ledger_lines(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[int] = None,
    ) -> list[LedgerLine]:
        """List journal entries joined with their transaction, oldest first.

        Lines are ordered by transaction date, transaction ID and entry order.
        """
        pass
