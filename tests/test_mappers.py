"""Tests for database mappers."""

from datetime import date, datetime, UTC
from decimal import Decimal

from ledgerkit.database.models import (
    Account as ORMAccount,
    JournalEntry as ORMJournalEntry,
    Transaction as ORMTransaction,
)
from ledgerkit.database.mappers import (
    account_to_domain,
    ledger_line_to_domain,
    transaction_to_domain,
)
from ledgerkit.domain.entities import Account, AccountType, Transaction, TransactionType


def _orm_account(**overrides):
    values = dict(
        id=1,
        code="1010",
        name="Cash",
        type=AccountType.ASSET,
        balance=Decimal("12.50"),
        created_at=datetime.now(UTC),
        updated_at=datetime.now(UTC),
    )
    values.update(overrides)
    return ORMAccount(**values)


class TestAccountMapper:
    def test_account_to_domain(self):
        orm_account = _orm_account()

        account = account_to_domain(orm_account)

        assert isinstance(account, Account)
        assert account.code == "1010"
        assert account.type == AccountType.ASSET
        assert account.balance == Decimal("12.50")
        assert account.parent_id is None

    def test_float_and_missing_balance_become_decimal(self):
        assert account_to_domain(_orm_account(balance=3.1)).balance == Decimal("3.1")
        assert account_to_domain(_orm_account(balance=None)).balance == Decimal("0")

    def test_natural_balance_flips_credit_normal(self):
        revenue = account_to_domain(
            _orm_account(code="4000", type=AccountType.REVENUE, balance=Decimal("-80"))
        )
        assert revenue.natural_balance == Decimal("80")


class TestTransactionMapper:
    def _transaction(self):
        cash = _orm_account()
        sales = _orm_account(id=2, code="4000", name="Sales", type=AccountType.REVENUE)
        txn = ORMTransaction(
            id=7,
            date=date(2024, 1, 15),
            type=TransactionType.INCOME,
            description="Cash sale",
            reference="R-9",
            amount=Decimal("20.00"),
            created_at=datetime.now(UTC),
            updated_at=datetime.now(UTC),
        )
        txn.entries = [
            ORMJournalEntry(id=1, transaction_id=7, account_id=1, account=cash, position=0,
                            debit=Decimal("20.00"), credit=Decimal("0")),
            ORMJournalEntry(id=2, transaction_id=7, account_id=2, account=sales, position=1,
                            debit=Decimal("0"), credit=Decimal("20.00"), description="Counter"),
        ]
        return txn

    def test_transaction_to_domain(self):
        txn = transaction_to_domain(self._transaction())

        assert isinstance(txn, Transaction)
        assert txn.type == TransactionType.INCOME
        assert txn.total_debits == Decimal("20.00")
        assert txn.total_credits == Decimal("20.00")
        assert [entry.account_code for entry in txn.entries] == ["1010", "4000"]
        assert txn.entries[1].net == Decimal("-20.00")

    def test_ledger_line_falls_back_to_transaction_description(self):
        orm_txn = self._transaction()

        first = ledger_line_to_domain(orm_txn.entries[0], orm_txn)
        second = ledger_line_to_domain(orm_txn.entries[1], orm_txn)

        assert first.description == "Cash sale"
        assert second.description == "Counter"
        assert first.reference == "R-9"
        assert first.date == date(2024, 1, 15)
