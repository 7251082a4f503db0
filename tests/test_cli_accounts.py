"""Tests for account and init-accounts commands."""

from ledgerkit.cli.commands.init_accounts import INITIAL_ACCOUNTS
from ledgerkit.cli.main import cli
from ledgerkit.domain.account import AccountService


def _invoke(cli_runner, temp_db, *args, **kwargs):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args], **kwargs)


def test_account_create(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "account", "create", "1010", "Cash", "--type", "asset")

    assert result.exit_code == 0
    assert "Created account 1010 'Cash'" in result.output
    assert "ID:" in result.output


def test_account_create_with_parent(cli_runner, temp_db):
    _invoke(cli_runner, temp_db, "account", "create", "1000", "Assets", "--type", "ASSET")
    result = _invoke(
        cli_runner, temp_db, "account", "create", "1010", "Cash", "--type", "asset", "--parent", "1000"
    )
    assert result.exit_code == 0

    temp_db.disconnect()
    cash = AccountService(temp_db).get_account_by_code("1010")
    parent = AccountService(temp_db).get_account_by_code("1000")
    assert cash.parent_id == parent.id


def test_account_create_duplicate(cli_runner, temp_db):
    _invoke(cli_runner, temp_db, "account", "create", "A-100", "Cash", "--type", "asset")
    result = _invoke(cli_runner, temp_db, "account", "create", "A-100", "Bank", "--type", "asset")

    assert result.exit_code == 1
    assert "Error: Account code 'A-100' already exists" in result.output


def test_account_create_requires_type(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "account", "create", "1010", "Cash")

    assert result.exit_code == 2
    assert "--type" in result.output


def test_account_create_unknown_parent(cli_runner, temp_db):
    result = _invoke(
        cli_runner, temp_db, "account", "create", "1010", "Cash", "--type", "asset", "--parent", "9999"
    )

    assert result.exit_code == 1
    assert "not found" in result.output


def test_account_list_empty(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "account", "list")

    assert result.exit_code == 0
    assert "No accounts found" in result.output


def test_account_list_with_filters(cli_runner, temp_db, chart):
    result = _invoke(cli_runner, temp_db, "account", "list")
    assert result.exit_code == 0
    assert "Owner's Capital" in result.output
    assert "Rent" in result.output

    result = _invoke(cli_runner, temp_db, "account", "list", "--type", "expense")
    assert "Rent" in result.output
    assert "Sales" not in result.output

    result = _invoke(cli_runner, temp_db, "account", "list", "--parent", "1000")
    assert "Cash" in result.output
    assert "Bank" in result.output
    assert "Receivable" not in result.output


def test_account_show(cli_runner, temp_db, funded_ledger):
    result = _invoke(cli_runner, temp_db, "account", "show", "1010")

    assert result.exit_code == 0
    assert "Account 1010: Cash" in result.output
    assert "Parent: 1000 Current Assets" in result.output
    assert "9,200.00" in result.output
    assert "Owner investment" in result.output


def test_account_show_unknown(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "account", "show", "4242")

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_account_update(cli_runner, temp_db, chart):
    result = _invoke(cli_runner, temp_db, "account", "update", "1010", "--name", "Cash on Hand")

    assert result.exit_code == 0
    assert "Updated account 1010 'Cash on Hand'" in result.output


def test_account_update_nothing(cli_runner, temp_db, chart):
    result = _invoke(cli_runner, temp_db, "account", "update", "1010")

    assert result.exit_code == 1
    assert "Nothing to update" in result.output


def test_account_delete(cli_runner, temp_db, chart):
    result = _invoke(cli_runner, temp_db, "account", "delete", "1200", "--yes")

    assert result.exit_code == 0
    assert "Deleted account 1200" in result.output


def test_account_delete_cancelled(cli_runner, temp_db, chart):
    result = _invoke(cli_runner, temp_db, "account", "delete", "1200", input="n\n")

    assert result.exit_code == 0
    assert "Deletion cancelled" in result.output


def test_account_delete_with_children(cli_runner, temp_db, chart):
    result = _invoke(cli_runner, temp_db, "account", "delete", "1000", "--yes")

    assert result.exit_code == 1
    assert "sub-accounts" in result.output


def test_init_accounts(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "init-accounts")

    assert result.exit_code == 0
    assert f"Successfully created {len(INITIAL_ACCOUNTS)} accounts." in result.output

    temp_db.disconnect()
    service = AccountService(temp_db)
    cash = service.get_account_by_code("1100")
    assets = service.get_account_by_code("1000")
    assert cash.parent_id == assets.id


def test_init_accounts_existing(cli_runner, temp_db, chart):
    result = _invoke(cli_runner, temp_db, "init-accounts")

    assert result.exit_code == 0
    assert "Use --force" in result.output


def test_init_accounts_force_adds_missing(cli_runner, temp_db, chart):
    """Test that --force skips codes already in use."""
    result = _invoke(cli_runner, temp_db, "init-accounts", "--force")

    assert result.exit_code == 0
    assert "Successfully created" in result.output

    temp_db.disconnect()
    service = AccountService(temp_db)
    # "1000" and "2000"-"5000" from the test chart were kept
    assert service.get_account_by_code("1000").name == "Current Assets"
    assert service.get_account_by_code("1100").name == "Cash"
