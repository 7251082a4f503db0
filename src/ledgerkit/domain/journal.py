"""Transaction journal domain service.

Validates and commits balanced multi-entry transactions and reverses them on
deletion. Every entry moves its account's cached balance by
``debit - credit``; nothing is written unless the whole transaction passes
validation, and the storage layer commits rows and balance adjustments as a
single unit.
"""

import logging
from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional, Sequence

from ledgerkit.database.base import Database
from ledgerkit.domain.entities import (
    BALANCE_TOLERANCE,
    EntryInput,
    Transaction as TransactionEntity,
    TransactionFilter,
    TransactionType,
    ZERO,
)
from ledgerkit.domain.errors import (
    EmptyEntriesError,
    NotFoundError,
    UnbalancedTransactionError,
    ValidationError,
    account_not_found,
    transaction_not_found,
)
from ledgerkit.domain.events import (
    CommitAction,
    CommitListener,
    CommitNotice,
    CommitNotifier,
)

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


class JournalService:
    """Service for posting, reading and deleting ledger transactions."""

    def __init__(self, db: Database, listeners: Optional[list[CommitListener]] = None):
        """Initialize journal service.

        Args:
            db: Database instance
            listeners: Optional commit listeners notified after each commit
        """
        self.db = db
        self.notifier = CommitNotifier(listeners)

    def subscribe(self, listener: CommitListener) -> None:
        """Register a listener called with a CommitNotice after every commit."""
        self.notifier.subscribe(listener)

    def unsubscribe(self, listener: CommitListener) -> None:
        self.notifier.unsubscribe(listener)

    def post_transaction(
        self,
        date: date,
        type: TransactionType | str,
        description: str,
        entries: Sequence[EntryInput | Mapping[str, Any]],
        reference: Optional[str] = None,
        invoice_id: Optional[int] = None,
        purchase_id: Optional[int] = None,
        created_by: Optional[str] = None,
    ) -> TransactionEntity:
        """Validate and commit a balanced transaction.

        Args:
            date: Transaction date
            type: Transaction type
            description: Transaction description
            entries: Debit/credit lines, as EntryInput or mappings with
                account_id, debit, credit and optional description
            reference: Optional external reference
            invoice_id: Optional originating invoice
            purchase_id: Optional originating purchase
            created_by: Optional name of the posting actor

        Returns:
            The committed transaction with its entries

        Raises:
            EmptyEntriesError: If no entries are given
            ValidationError: If an entry amount or a header field is invalid, or
                either side of the transaction totals zero
            NotFoundError: If an entry references an unknown account
            UnbalancedTransactionError: If debits and credits differ by more than 0.01
            StorageError: If persisting fails (nothing is written)
            CommitHookError: If a commit listener fails (the transaction stays committed)
        """
        if not entries:
            raise EmptyEntriesError("A transaction needs at least one journal entry")

        lines = [_coerce_entry(entry, index) for index, entry in enumerate(entries)]
        txn_date = _coerce_date(date)
        txn_type = parse_transaction_type(type)
        description = (description or "").strip()
        if not description:
            raise ValidationError("Transaction description is required")

        for line in lines:
            if self.db.get_account(line.account_id) is None:
                raise NotFoundError(account_not_found(line.account_id))

        total_debits = sum((line.debit for line in lines), ZERO)
        total_credits = sum((line.credit for line in lines), ZERO)
        if abs(total_debits - total_credits) > BALANCE_TOLERANCE:
            logger.info(
                "Rejected unbalanced transaction '%s': debits %s, credits %s",
                description,
                total_debits,
                total_credits,
            )
            raise UnbalancedTransactionError(total_debits, total_credits)
        if total_debits == ZERO or total_credits == ZERO:
            raise ValidationError("A transaction must carry a non-zero debit and credit total")

        transaction_id = self.db.post_transaction(
            date=txn_date,
            type=txn_type,
            description=description,
            entries=lines,
            reference=reference or None,
            invoice_id=invoice_id,
            purchase_id=purchase_id,
            created_by=created_by,
        )
        transaction = self.get_transaction(transaction_id)
        logger.info(
            "Posted transaction %s (%s) dated %s for %s",
            transaction.id,
            transaction.type.value,
            transaction.date,
            transaction.amount,
        )

        self.notifier.notify(CommitNotice.for_transaction(CommitAction.POSTED, transaction))
        return transaction

    def get_transaction(self, transaction_id: int) -> TransactionEntity:
        """Get transaction by ID.

        Raises:
            NotFoundError: If the transaction does not exist
        """
        transaction = self.db.get_transaction(transaction_id)
        if transaction is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return transaction

    def list_transactions(
        self, filter: Optional[TransactionFilter] = None
    ) -> list[TransactionEntity]:
        """List transactions, newest first.

        Args:
            filter: Optional type, date range, account and search filters

        Returns:
            List of transaction entities
        """
        filter = filter or TransactionFilter()
        if (
            filter.start_date is not None
            and filter.end_date is not None
            and filter.start_date > filter.end_date
        ):
            raise ValidationError("Start date must not be after end date")

        search = filter.search.strip() if filter.search else None
        return self.db.list_transactions(
            type=parse_transaction_type(filter.type) if filter.type else None,
            start_date=filter.start_date,
            end_date=filter.end_date,
            account_id=filter.account_id,
            search=search or None,
        )

    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction and reverse its balance effects.

        Raises:
            NotFoundError: If the transaction does not exist
            StorageError: If persisting fails (nothing is changed)
            CommitHookError: If a commit listener fails (the deletion stays committed)
        """
        transaction = self.get_transaction(transaction_id)
        self.db.delete_transaction(transaction_id)
        logger.info("Deleted transaction %s and reversed %d entries", transaction_id, len(transaction.entries))

        self.notifier.notify(CommitNotice.for_transaction(CommitAction.DELETED, transaction))

    def post_invoice_payment(
        self,
        invoice_id: int,
        date: date,
        amount: Decimal,
        cash_account_id: int,
        receivable_account_id: int,
        reference: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> TransactionEntity:
        """Record payment of an invoice: debit cash, credit receivables."""
        return self._post_payment(
            type=TransactionType.INVOICE_PAYMENT,
            date=date,
            amount=amount,
            debit_account_id=cash_account_id,
            credit_account_id=receivable_account_id,
            description=f"Payment for invoice {invoice_id}",
            reference=reference,
            invoice_id=invoice_id,
            created_by=created_by,
        )

    def post_purchase_payment(
        self,
        purchase_id: int,
        date: date,
        amount: Decimal,
        cash_account_id: int,
        payable_account_id: int,
        reference: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> TransactionEntity:
        """Record payment of a purchase: debit payables, credit cash."""
        return self._post_payment(
            type=TransactionType.PURCHASE_PAYMENT,
            date=date,
            amount=amount,
            debit_account_id=payable_account_id,
            credit_account_id=cash_account_id,
            description=f"Payment for purchase {purchase_id}",
            reference=reference,
            purchase_id=purchase_id,
            created_by=created_by,
        )

    def _post_payment(
        self,
        type: TransactionType,
        date: date,
        amount: Decimal,
        debit_account_id: int,
        credit_account_id: int,
        description: str,
        reference: Optional[str] = None,
        invoice_id: Optional[int] = None,
        purchase_id: Optional[int] = None,
        created_by: Optional[str] = None,
    ) -> TransactionEntity:
        amount = _coerce_amount(amount, "amount")
        if amount <= ZERO:
            raise ValidationError("Payment amount must be positive")
        return self.post_transaction(
            date=date,
            type=type,
            description=description,
            entries=[
                EntryInput(account_id=debit_account_id, debit=amount),
                EntryInput(account_id=credit_account_id, credit=amount),
            ],
            reference=reference,
            invoice_id=invoice_id,
            purchase_id=purchase_id,
            created_by=created_by,
        )


def parse_transaction_type(value: TransactionType | str) -> TransactionType:
    """Coerce a string such as "journal_entry" or "journal-entry" to a TransactionType.

    Raises:
        ValidationError: If the value is not a known transaction type
    """
    if isinstance(value, TransactionType):
        return value
    try:
        return TransactionType(str(value).strip().upper().replace("-", "_"))
    except ValueError:
        valid = ", ".join(t.value for t in TransactionType)
        raise ValidationError(f"Unknown transaction type '{value}'. Valid types: {valid}")


def _coerce_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise ValidationError(f"Invalid transaction date '{value}'")


def _coerce_amount(value: Any, label: str) -> Decimal:
    """Convert an amount to a Decimal rounded to cents."""
    if value is None or value == "":
        return ZERO
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Invalid {label} amount '{value}'")
    if not amount.is_finite():
        raise ValidationError(f"Invalid {label} amount '{value}'")
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def _coerce_entry(entry: EntryInput | Mapping[str, Any], index: int) -> EntryInput:
    """Normalise a submitted entry and check its amounts are non-negative."""
    if isinstance(entry, Mapping):
        if entry.get("account_id") is None:
            raise ValidationError(f"Entry {index + 1}: account_id is required")
        entry = EntryInput(
            account_id=entry["account_id"],
            debit=entry.get("debit") or ZERO,
            credit=entry.get("credit") or ZERO,
            description=entry.get("description"),
        )

    debit = _coerce_amount(entry.debit, "debit")
    credit = _coerce_amount(entry.credit, "credit")

    if debit < ZERO or credit < ZERO:
        raise ValidationError(f"Entry {index + 1}: debit and credit must not be negative")

    return EntryInput(
        account_id=entry.account_id,
        debit=debit,
        credit=credit,
        description=entry.description or None,
    )
