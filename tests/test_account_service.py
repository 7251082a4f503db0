"""Tests for the account registry service."""

from datetime import date
from decimal import Decimal

import pytest

from ledgerkit.domain.entities import AccountFilter, AccountType
from ledgerkit.domain.errors import (
    DuplicateCodeError,
    HasChildrenError,
    HasTransactionsError,
    ImmutableFieldError,
    NotFoundError,
    ValidationError,
)


def test_create_account_starts_at_zero(account_service):
    """Test that a new account has a zero balance and no parent."""
    account = account_service.create_account(" 1010 ", "Cash", "asset", description="Till")

    assert account.id is not None
    assert account.code == "1010"
    assert account.name == "Cash"
    assert account.type == AccountType.ASSET
    assert account.description == "Till"
    assert account.parent_id is None
    assert account.balance == Decimal("0")


def test_create_account_duplicate_code(account_service):
    """Test that account codes are unique."""
    account_service.create_account("1010", "Cash", AccountType.ASSET)

    with pytest.raises(DuplicateCodeError, match="1010") as exc_info:
        account_service.create_account("1010", "Petty Cash", AccountType.ASSET)

    assert exc_info.value.code == "DUPLICATE_CODE"
    assert exc_info.value.status == 409
    assert len(account_service.list_accounts()) == 1


@pytest.mark.parametrize(
    "code,name,type",
    [
        ("", "Cash", "ASSET"),
        ("1010", "  ", "ASSET"),
        ("1010", "Cash", "INCOME"),
    ],
)
def test_create_account_validation(account_service, code, name, type):
    """Test that blank fields and unknown types are rejected."""
    with pytest.raises(ValidationError):
        account_service.create_account(code, name, type)


def test_create_account_unknown_parent(account_service):
    """Test that a parent must exist."""
    with pytest.raises(NotFoundError, match="Parent account 99"):
        account_service.create_account("1010", "Cash", AccountType.ASSET, parent_id=99)


def test_get_account_not_found(account_service):
    with pytest.raises(NotFoundError) as exc_info:
        account_service.get_account(42)
    assert exc_info.value.status == 404

    with pytest.raises(NotFoundError):
        account_service.get_account_by_code("9999")


def test_list_accounts_sorted_by_code(account_service):
    """Test that listing orders by code regardless of creation order."""
    account_service.create_account("4000", "Sales", AccountType.REVENUE)
    account_service.create_account("1000", "Cash", AccountType.ASSET)
    account_service.create_account("2000", "Payables", AccountType.LIABILITY)

    codes = [acc.code for acc in account_service.list_accounts()]
    assert codes == ["1000", "2000", "4000"]


def test_list_accounts_filters(chart, account_service):
    """Test type, search and parent filters."""
    assets = account_service.list_accounts(AccountFilter(type=AccountType.ASSET))
    assert {acc.code for acc in assets} == {"1000", "1010", "1020", "1200"}

    by_string_type = account_service.list_accounts(AccountFilter(type="revenue"))
    assert [acc.code for acc in by_string_type] == ["4000"]

    search_name = account_service.list_accounts(AccountFilter(search="capital"))
    assert [acc.code for acc in search_name] == ["3000"]

    search_code = account_service.list_accounts(AccountFilter(search="102"))
    assert [acc.code for acc in search_code] == ["1020"]

    children = account_service.list_accounts(
        AccountFilter(parent_id=chart["current_assets"].id)
    )
    assert [acc.code for acc in children] == ["1010", "1020"]


def test_search_treats_wildcards_literally(account_service):
    """Test that % and _ in a search term are not SQL wildcards."""
    account_service.create_account("1000", "Cash", AccountType.ASSET)
    account_service.create_account("1100", "100% Owned Subsidiary", AccountType.ASSET)

    results = account_service.list_accounts(AccountFilter(search="100%"))
    assert [acc.code for acc in results] == ["1100"]


def test_update_account_name_and_description(chart, account_service):
    updated = account_service.update_account(
        chart["cash"].id, name="Cash on Hand", description="Front desk"
    )

    assert updated.name == "Cash on Hand"
    assert updated.description == "Front desk"
    assert updated.code == "1010"


def test_update_account_rejects_code_or_type_change(chart, account_service):
    """Test that code and type are fixed at creation."""
    with pytest.raises(ImmutableFieldError):
        account_service.update_account(chart["cash"].id, code="1011")

    with pytest.raises(ImmutableFieldError):
        account_service.update_account(chart["cash"].id, type=AccountType.EXPENSE)

    # Same value is accepted and ignored
    unchanged = account_service.update_account(chart["cash"].id, code="1010", type="asset")
    assert unchanged.code == "1010"
    assert unchanged.type == AccountType.ASSET


def test_update_account_rejects_unknown_field(chart, account_service):
    with pytest.raises(ValidationError, match="balance"):
        account_service.update_account(chart["cash"].id, balance=Decimal("100"))


def test_update_missing_account(account_service):
    with pytest.raises(NotFoundError):
        account_service.update_account(123, name="Nothing")


def test_delete_account(account_service):
    account = account_service.create_account("1010", "Cash", AccountType.ASSET)

    account_service.delete_account(account.id)

    with pytest.raises(NotFoundError):
        account_service.get_account(account.id)


def test_delete_account_with_children(chart, account_service):
    """Test that a parent cannot be deleted while it has sub-accounts."""
    with pytest.raises(HasChildrenError) as exc_info:
        account_service.delete_account(chart["current_assets"].id)

    assert exc_info.value.status == 409
    assert "2 sub-accounts" in str(exc_info.value)
    assert account_service.get_account(chart["current_assets"].id) is not None


def test_delete_account_with_entries(chart, account_service, post):
    """Test that an account referenced by journal entries cannot be deleted."""
    post(date(2024, 1, 1), [(chart["rent"], "50", "0"), (chart["bank"], "0", "50")])

    with pytest.raises(HasTransactionsError, match="journal entr"):
        account_service.delete_account(chart["rent"].id)


def test_delete_missing_account(account_service):
    with pytest.raises(NotFoundError):
        account_service.delete_account(7)


def test_account_detail(funded_ledger, account_service):
    """Test detail view with parent, sub-accounts and recent transactions."""
    cash_detail = account_service.get_account_detail(funded_ledger["cash"].id)
    assert cash_detail.parent.code == "1000"
    assert cash_detail.sub_accounts == ()
    assert [txn.description for txn in cash_detail.recent_transactions] == [
        "January rent",
        "Owner investment",
    ]

    parent_detail = account_service.get_account_detail(funded_ledger["current_assets"].id)
    assert parent_detail.parent is None
    assert [acc.code for acc in parent_detail.sub_accounts] == ["1010", "1020"]

    limited = account_service.get_account_detail(funded_ledger["cash"].id, recent=1)
    assert len(limited.recent_transactions) == 1
