"""Tests for database configuration."""

from ledgerkit.database.factories import create_database, create_sqlite_database
from ledgerkit.domain.entities import AccountType


def test_sqlite_path_argument(tmp_path):
    db = create_sqlite_database(database_path=str(tmp_path / "books.db"))

    assert db.database_url == f"sqlite:///{tmp_path / 'books.db'}"
    assert (tmp_path / "books.db").exists()


def test_sqlite_path_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("LEDGERKIT_DB_PATH", str(tmp_path / "env.db"))

    db = create_sqlite_database()

    assert db.database_url.endswith("env.db")


def test_database_url_from_environment(monkeypatch):
    monkeypatch.setenv("LEDGERKIT_DATABASE_URL", "sqlite://")

    db = create_database()
    account_id = db.create_account(code="1010", name="Cash", type=AccountType.ASSET)

    assert db.database_url == "sqlite://"
    assert db.get_account(account_id).code == "1010"
    db.disconnect()
