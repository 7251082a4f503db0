"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, making it easy to change when
the database schema changes.
"""

from decimal import Decimal

from ledgerkit.domain import entities as domain
from ledgerkit.database.models import (
    Account as ORMAccount,
    JournalEntry as ORMJournalEntry,
    Transaction as ORMTransaction,
)


def _decimal(value) -> Decimal:
    """Normalize a numeric column value to Decimal."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        code=orm_account.code,
        name=orm_account.name,
        type=orm_account.type,
        description=orm_account.description,
        parent_id=orm_account.parent_id,
        balance=_decimal(orm_account.balance),
        created_at=orm_account.created_at,
        updated_at=orm_account.updated_at,
    )


def journal_entry_to_domain(orm_entry: ORMJournalEntry) -> domain.JournalEntry:
    """Convert SQLAlchemy JournalEntry model to domain JournalEntry entity."""
    return domain.JournalEntry(
        id=orm_entry.id,
        transaction_id=orm_entry.transaction_id,
        account_id=orm_entry.account_id,
        debit=_decimal(orm_entry.debit),
        credit=_decimal(orm_entry.credit),
        description=orm_entry.description,
        account_code=orm_entry.account.code,
        account_name=orm_entry.account.name,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        date=orm_transaction.date,
        type=orm_transaction.type,
        description=orm_transaction.description,
        reference=orm_transaction.reference,
        amount=_decimal(orm_transaction.amount),
        invoice_id=orm_transaction.invoice_id,
        purchase_id=orm_transaction.purchase_id,
        created_by=orm_transaction.created_by,
        created_at=orm_transaction.created_at,
        updated_at=orm_transaction.updated_at,
        entries=tuple(journal_entry_to_domain(entry) for entry in orm_transaction.entries),
    )


def ledger_line_to_domain(
    orm_entry: ORMJournalEntry, orm_transaction: ORMTransaction
) -> domain.LedgerLine:
    """Convert an entry and its owning transaction to a domain LedgerLine."""
    return domain.LedgerLine(
        entry_id=orm_entry.id,
        transaction_id=orm_transaction.id,
        account_id=orm_entry.account_id,
        date=orm_transaction.date,
        type=orm_transaction.type,
        description=orm_entry.description or orm_transaction.description,
        reference=orm_transaction.reference,
        debit=_decimal(orm_entry.debit),
        credit=_decimal(orm_entry.credit),
    )
