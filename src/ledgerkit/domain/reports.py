"""Balance engine: balances and financial reports derived from the journal.

Every figure here is recomputed from committed journal entries. The cached
``Account.balance`` column is never read, except by ``verify_ledger`` which
compares it against a full replay.

Raw balances are ``sum(debit) - sum(credit)``. Reports present natural
balances: debit-normal accounts (assets, expenses) keep the raw sign,
credit-normal accounts (liabilities, equity, revenue) flip it.
"""

import logging
from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from ledgerkit.database.base import Database
from ledgerkit.domain.entities import (
    BALANCE_TOLERANCE,
    ZERO,
    Account,
    AccountType,
    BalanceDrift,
    BalanceSheet,
    BalanceSheetGroup,
    BalanceSheetLine,
    BalanceSheetSection,
    GeneralLedger,
    GeneralLedgerAccount,
    GeneralLedgerLine,
    LedgerCheck,
    NetIncome,
    ProfitAndLoss,
    ProfitAndLossGroup,
    ProfitAndLossLine,
    ProfitAndLossSection,
    TransactionImbalance,
    TrialBalance,
    TrialBalanceLine,
)
from ledgerkit.domain.errors import NotFoundError, ValidationError, account_not_found

logger = logging.getLogger(__name__)

CURRENT_EARNINGS = "Current Earnings"


class BalanceService:
    """Service for point-in-time balances and financial statements."""

    def __init__(self, db: Database):
        """Initialize balance service.

        Args:
            db: Database instance
        """
        self.db = db

    def account_balance(
        self,
        account_id: int,
        as_of: Optional[date] = None,
        start_date: Optional[date] = None,
    ) -> Decimal:
        """Replay an account's raw balance over a date window.

        Args:
            account_id: Account ID
            as_of: Inclusive upper bound on transaction date (None = unbounded)
            start_date: Inclusive lower bound on transaction date (None = unbounded)

        Returns:
            ``sum(debit - credit)`` over the account's entries in the window

        Raises:
            NotFoundError: If the account does not exist
            ValidationError: If start_date is after as_of
        """
        if self.db.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))
        _check_range(start_date, as_of)

        lines = self.db.list_ledger_lines(
            start_date=start_date, end_date=as_of, account_id=account_id
        )
        return sum((line.debit - line.credit for line in lines), ZERO)

    def trial_balance(
        self,
        as_of: Optional[date] = None,
        account_type: Optional[AccountType] = None,
        include_zero: bool = True,
    ) -> TrialBalance:
        """Build a trial balance as of a date.

        Each account shows a positive raw balance in the debit column and a
        negative one in the credit column. An out-of-balance result is
        reported through ``warnings`` and the log, never adjusted.

        Args:
            as_of: Report date (defaults to today)
            account_type: Optional account type filter
            include_zero: If False, omit accounts with a zero balance
        """
        as_of = as_of or date.today()
        raw = self._raw_balances(end_date=as_of)

        lines = []
        total_debit = ZERO
        total_credit = ZERO
        for account in self.db.list_accounts(type=account_type):
            balance = raw.get(account.id, ZERO)
            if balance == ZERO and not include_zero:
                continue
            debit = balance if balance > ZERO else ZERO
            credit = -balance if balance < ZERO else ZERO
            total_debit += debit
            total_credit += credit
            lines.append(
                TrialBalanceLine(
                    id=account.id,
                    code=account.code,
                    name=account.name,
                    type=account.type,
                    debit=debit,
                    credit=credit,
                )
            )

        warnings = []
        # A filtered report covers only part of the ledger and need not balance.
        if account_type is None and abs(total_debit - total_credit) > BALANCE_TOLERANCE:
            message = (
                f"Trial balance is not balanced as of {as_of}: debits {total_debit:.2f}, "
                f"credits {total_credit:.2f}, difference {total_debit - total_credit:.2f}"
            )
            logger.warning(message)
            warnings.append(message)

        return TrialBalance(
            as_of=as_of,
            accounts=tuple(lines),
            total_debit=total_debit,
            total_credit=total_credit,
            warnings=tuple(warnings),
        )

    def balance_sheet(
        self, as_of: Optional[date] = None, include_zero: bool = True
    ) -> BalanceSheet:
        """Build a balance sheet as of a date.

        Accounts are grouped under their top-level ancestor. Revenue less
        expenses to date is carried in equity as a Current Earnings line.

        Args:
            as_of: Report date (defaults to today)
            include_zero: If False, omit accounts with a zero balance
        """
        as_of = as_of or date.today()
        raw = self._raw_balances(end_date=as_of)
        accounts = self.db.list_accounts()
        index = {account.id: account for account in accounts}

        sections = {}
        for account_type, title in (
            (AccountType.ASSET, "Assets"),
            (AccountType.LIABILITY, "Liabilities"),
            (AccountType.EQUITY, "Equity"),
        ):
            grouped: dict[int, list[BalanceSheetLine]] = defaultdict(list)
            for account in accounts:
                if account.type != account_type:
                    continue
                balance = account.type.natural_balance(raw.get(account.id, ZERO))
                if balance == ZERO and not include_zero:
                    continue
                grouped[_root_of(account, index).id].append(
                    BalanceSheetLine(
                        id=account.id, code=account.code, name=account.name, balance=balance
                    )
                )

            groups = [
                BalanceSheetGroup(
                    name=index[root_id].name,
                    accounts=tuple(lines),
                    total=sum((line.balance for line in lines), ZERO),
                )
                for root_id, lines in sorted(grouped.items(), key=lambda item: index[item[0]].code)
            ]

            if account_type == AccountType.EQUITY:
                earnings = -sum(
                    (
                        raw.get(account.id, ZERO)
                        for account in accounts
                        if account.type in (AccountType.REVENUE, AccountType.EXPENSE)
                    ),
                    ZERO,
                )
                if earnings != ZERO or include_zero:
                    line = BalanceSheetLine(
                        id=None, code="", name=CURRENT_EARNINGS, balance=earnings
                    )
                    groups.append(
                        BalanceSheetGroup(name=CURRENT_EARNINGS, accounts=(line,), total=earnings)
                    )

            sections[account_type] = BalanceSheetSection(
                name=title,
                groups=tuple(groups),
                total=sum((group.total for group in groups), ZERO),
            )

        total_assets = sections[AccountType.ASSET].total
        total_liabilities_and_equity = (
            sections[AccountType.LIABILITY].total + sections[AccountType.EQUITY].total
        )

        warnings = []
        if abs(total_assets - total_liabilities_and_equity) > BALANCE_TOLERANCE:
            message = (
                f"Balance sheet is not balanced as of {as_of}: assets {total_assets:.2f}, "
                f"liabilities and equity {total_liabilities_and_equity:.2f}"
            )
            logger.warning(message)
            warnings.append(message)

        return BalanceSheet(
            as_of=as_of,
            assets=sections[AccountType.ASSET],
            liabilities=sections[AccountType.LIABILITY],
            equity=sections[AccountType.EQUITY],
            total_assets=total_assets,
            total_liabilities_and_equity=total_liabilities_and_equity,
            warnings=tuple(warnings),
        )

    def profit_and_loss(
        self,
        start_date: date,
        end_date: date,
        previous_start_date: Optional[date] = None,
        previous_end_date: Optional[date] = None,
        include_zero: bool = True,
    ) -> ProfitAndLoss:
        """Build a profit and loss statement with a comparison period.

        Uses revenue and expense activity inside each window, not cumulative
        balances. When no comparison window is given, the window of the same
        length ending the day before ``start_date`` is used.

        Raises:
            ValidationError: If a window is inverted or only one comparison
                bound is given
        """
        _check_range(start_date, end_date)
        if (previous_start_date is None) != (previous_end_date is None):
            raise ValidationError("Both previous start and end dates are required")
        if previous_start_date is None:
            previous_start_date, previous_end_date = previous_period(start_date, end_date)
        _check_range(previous_start_date, previous_end_date)

        current = self._raw_balances(start_date=start_date, end_date=end_date)
        previous = self._raw_balances(start_date=previous_start_date, end_date=previous_end_date)
        accounts = self.db.list_accounts()
        index = {account.id: account for account in accounts}

        revenue = self._profit_and_loss_section(
            "Revenue", AccountType.REVENUE, accounts, index, current, previous, include_zero
        )
        expenses = self._profit_and_loss_section(
            "Expenses", AccountType.EXPENSE, accounts, index, current, previous, include_zero
        )

        net_current = revenue.current_total - expenses.current_total
        net_previous = revenue.previous_total - expenses.previous_total
        return ProfitAndLoss(
            start_date=start_date,
            end_date=end_date,
            previous_start_date=previous_start_date,
            previous_end_date=previous_end_date,
            revenue=revenue,
            expenses=expenses,
            net_income=NetIncome(
                current=net_current,
                previous=net_previous,
                change=net_current - net_previous,
                change_percentage=change_percentage(net_current, net_previous),
            ),
        )

    def _profit_and_loss_section(
        self,
        name: str,
        account_type: AccountType,
        accounts: list[Account],
        index: dict[int, Account],
        current: dict[int, Decimal],
        previous: dict[int, Decimal],
        include_zero: bool,
    ) -> ProfitAndLossSection:
        grouped: dict[int, list[ProfitAndLossLine]] = defaultdict(list)
        for account in accounts:
            if account.type != account_type:
                continue
            now = account_type.natural_balance(current.get(account.id, ZERO))
            before = account_type.natural_balance(previous.get(account.id, ZERO))
            if now == ZERO and before == ZERO and not include_zero:
                continue
            grouped[_root_of(account, index).id].append(
                ProfitAndLossLine(
                    id=account.id,
                    code=account.code,
                    name=account.name,
                    current=now,
                    previous=before,
                    change=now - before,
                    change_percentage=change_percentage(now, before),
                )
            )

        groups = []
        for root_id, lines in sorted(grouped.items(), key=lambda item: index[item[0]].code):
            current_total = sum((line.current for line in lines), ZERO)
            previous_total = sum((line.previous for line in lines), ZERO)
            groups.append(
                ProfitAndLossGroup(
                    name=index[root_id].name,
                    accounts=tuple(lines),
                    current_total=current_total,
                    previous_total=previous_total,
                    change=current_total - previous_total,
                    change_percentage=change_percentage(current_total, previous_total),
                )
            )

        current_total = sum((group.current_total for group in groups), ZERO)
        previous_total = sum((group.previous_total for group in groups), ZERO)
        return ProfitAndLossSection(
            name=name,
            groups=tuple(groups),
            current_total=current_total,
            previous_total=previous_total,
            change=current_total - previous_total,
            change_percentage=change_percentage(current_total, previous_total),
        )

    def general_ledger(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_type: Optional[AccountType] = None,
        account_id: Optional[int] = None,
    ) -> GeneralLedger:
        """List each account's entries with a running natural balance.

        Accounts without an opening balance or activity in the window are
        left out unless requested by ``account_id``.

        Raises:
            NotFoundError: If account_id does not exist
            ValidationError: If start_date is after end_date
        """
        _check_range(start_date, end_date)
        if account_id is not None:
            account = self.db.get_account(account_id)
            if account is None:
                raise NotFoundError(account_not_found(account_id))
            accounts = [account]
        else:
            accounts = self.db.list_accounts(type=account_type)

        opening_raw: dict[int, Decimal] = {}
        if start_date is not None:
            opening_raw = self._raw_balances(end_date=start_date - timedelta(days=1))

        lines_by_account = defaultdict(list)
        for line in self.db.list_ledger_lines(
            start_date=start_date, end_date=end_date, account_id=account_id
        ):
            lines_by_account[line.account_id].append(line)

        ledger_accounts = []
        for account in accounts:
            opening = account.type.natural_balance(opening_raw.get(account.id, ZERO))
            activity = lines_by_account.get(account.id, [])
            if not activity and opening == ZERO and account_id is None:
                continue

            running = opening
            lines = []
            for line in activity:
                running += account.type.natural_balance(line.debit - line.credit)
                lines.append(
                    GeneralLedgerLine(
                        transaction_id=line.transaction_id,
                        date=line.date,
                        type=line.type,
                        description=line.description,
                        reference=line.reference,
                        debit=line.debit,
                        credit=line.credit,
                        balance=running,
                    )
                )
            ledger_accounts.append(
                GeneralLedgerAccount(
                    id=account.id,
                    code=account.code,
                    name=account.name,
                    type=account.type,
                    opening_balance=opening,
                    lines=tuple(lines),
                    closing_balance=running,
                )
            )

        return GeneralLedger(
            start_date=start_date, end_date=end_date, accounts=tuple(ledger_accounts)
        )

    def verify_ledger(self) -> LedgerCheck:
        """Compare cached balances with a replay and re-check every transaction."""
        replayed = self._raw_balances()

        drifts = []
        for account in self.db.list_accounts():
            expected = replayed.get(account.id, ZERO)
            if account.balance != expected:
                logger.warning(
                    "Balance drift on account %s: cached %s, replayed %s",
                    account.code,
                    account.balance,
                    expected,
                )
                drifts.append(
                    BalanceDrift(
                        account_id=account.id,
                        code=account.code,
                        cached=account.balance,
                        replayed=expected,
                    )
                )

        imbalances = []
        for transaction in self.db.list_transactions():
            debits = transaction.total_debits
            credits = transaction.total_credits
            if abs(debits - credits) > BALANCE_TOLERANCE:
                logger.warning(
                    "Transaction %s is unbalanced: debits %s, credits %s",
                    transaction.id,
                    debits,
                    credits,
                )
                imbalances.append(
                    TransactionImbalance(
                        transaction_id=transaction.id,
                        total_debits=debits,
                        total_credits=credits,
                    )
                )

        return LedgerCheck(drifts=tuple(drifts), imbalances=tuple(imbalances))

    def _raw_balances(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> dict[int, Decimal]:
        """Sum ``debit - credit`` per account over a date window."""
        totals: dict[int, Decimal] = defaultdict(lambda: ZERO)
        for line in self.db.list_ledger_lines(start_date=start_date, end_date=end_date):
            totals[line.account_id] += line.debit - line.credit
        return dict(totals)


def previous_period(start_date: date, end_date: date) -> tuple[date, date]:
    """Return the window of equal length ending the day before start_date."""
    length = end_date - start_date
    previous_end = start_date - timedelta(days=1)
    return previous_end - length, previous_end


def change_percentage(current: Decimal, previous: Decimal) -> Optional[Decimal]:
    """Percentage change from previous to current, None when previous is zero."""
    if previous == ZERO:
        return None
    return ((current - previous) / previous * 100).quantize(Decimal("0.01"))


def _check_range(start: Optional[date], end: Optional[date]) -> None:
    if start is not None and end is not None and start > end:
        raise ValidationError(f"Start date {start} is after end date {end}")


def _root_of(account: Account, index: dict[int, Account]) -> Account:
    """Walk parent links up to the top-level account."""
    seen = {account.id}
    current = account
    while current.parent_id is not None and current.parent_id in index:
        parent = index[current.parent_id]
        if parent.id in seen:
            break
        seen.add(parent.id)
        current = parent
    return current
