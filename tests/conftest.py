"""Shared pytest fixtures for ledgerkit tests."""

import os
import tempfile
from datetime import date
from decimal import Decimal

import pytest

from ledgerkit.database.factories import create_sqlite_database
from ledgerkit.domain.account import AccountService
from ledgerkit.domain.entities import AccountType, EntryInput
from ledgerkit.domain.journal import JournalService
from ledgerkit.domain.reports import BalanceService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for CLI tests
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def journal_service(temp_db):
    """Create a JournalService with a temporary database."""
    return JournalService(temp_db)


@pytest.fixture
def balance_service(temp_db):
    """Create a BalanceService with a temporary database."""
    return BalanceService(temp_db)


@pytest.fixture
def chart(account_service):
    """Create a small chart of accounts and return it keyed by short name.

    Cash and Bank sit under a "Current Assets" parent so grouping by
    top-level account can be checked.
    """
    current = account_service.create_account("1000", "Current Assets", AccountType.ASSET)
    accounts = {
        "current_assets": current,
        "cash": account_service.create_account(
            "1010", "Cash", AccountType.ASSET, parent_id=current.id
        ),
        "bank": account_service.create_account(
            "1020", "Bank", AccountType.ASSET, parent_id=current.id
        ),
        "receivables": account_service.create_account(
            "1200", "Accounts Receivable", AccountType.ASSET
        ),
        "payables": account_service.create_account("2000", "Accounts Payable", AccountType.LIABILITY),
        "capital": account_service.create_account("3000", "Owner's Capital", AccountType.EQUITY),
        "sales": account_service.create_account("4000", "Sales", AccountType.REVENUE),
        "rent": account_service.create_account("5000", "Rent", AccountType.EXPENSE),
    }
    return accounts


@pytest.fixture
def post(journal_service):
    """Return a helper that posts a transaction from (account, debit, credit) tuples."""

    def _post(txn_date, lines, description="Test transaction", **kwargs):
        entries = [
            EntryInput(account_id=account.id, debit=Decimal(debit), credit=Decimal(credit))
            for account, debit, credit in lines
        ]
        return journal_service.post_transaction(
            date=txn_date,
            type=kwargs.pop("type", "JOURNAL_ENTRY"),
            description=description,
            entries=entries,
            **kwargs,
        )

    return _post


@pytest.fixture
def funded_ledger(chart, post):
    """Capital injection, a sale on account and a rent payment in January 2024."""
    post(
        date(2024, 1, 1),
        [(chart["cash"], "10000", "0"), (chart["capital"], "0", "10000")],
        description="Owner investment",
    )
    post(
        date(2024, 1, 10),
        [(chart["receivables"], "1500", "0"), (chart["sales"], "0", "1500")],
        description="Invoice 1",
    )
    post(
        date(2024, 1, 15),
        [(chart["rent"], "800", "0"), (chart["cash"], "0", "800")],
        description="January rent",
    )
    return chart


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
