"""Domain model entities for ledgerkit.

These are pure data classes representing business concepts, independent of
database schema. Services return these instead of ORM rows so the ledger
rules stay stable when the storage layer changes.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional

# Debits and credits are considered equal when they differ by no more than this.
BALANCE_TOLERANCE = Decimal("0.01")

ZERO = Decimal("0")


class AccountType(str, Enum):
    """Account classification in the chart of accounts."""

    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    REVENUE = "REVENUE"
    EXPENSE = "EXPENSE"

    @property
    def is_debit_normal(self) -> bool:
        """True for types whose balance grows with debits."""
        return self in (AccountType.ASSET, AccountType.EXPENSE)

    def natural_balance(self, raw: Decimal) -> Decimal:
        """Convert a raw ``debit - credit`` amount to this type's natural sign."""
        return raw if self.is_debit_normal else -raw


class TransactionType(str, Enum):
    """Origin of a ledger transaction."""

    JOURNAL_ENTRY = "JOURNAL_ENTRY"
    INVOICE_PAYMENT = "INVOICE_PAYMENT"
    PURCHASE_PAYMENT = "PURCHASE_PAYMENT"
    EXPENSE = "EXPENSE"
    INCOME = "INCOME"
    BANK_TRANSFER = "BANK_TRANSFER"


@dataclass(frozen=True)
class Account:
    """Chart of accounts entry.

    ``balance`` is the cached raw ``sum(debit) - sum(credit)`` over every
    journal entry on the account, regardless of type.
    """

    id: int
    code: str
    name: str
    type: AccountType
    description: Optional[str]
    parent_id: Optional[int]
    balance: Decimal
    created_at: datetime
    updated_at: datetime

    @property
    def natural_balance(self) -> Decimal:
        return self.type.natural_balance(self.balance)


@dataclass(frozen=True)
class JournalEntry:
    """One debit or credit line of a transaction."""

    id: int
    transaction_id: int
    account_id: int
    debit: Decimal
    credit: Decimal
    description: Optional[str]
    account_code: str
    account_name: str

    @property
    def net(self) -> Decimal:
        return self.debit - self.credit


@dataclass(frozen=True)
class Transaction:
    """Committed transaction with its ordered journal entries."""

    id: int
    date: date
    type: TransactionType
    description: str
    reference: Optional[str]
    amount: Decimal
    invoice_id: Optional[int]
    purchase_id: Optional[int]
    created_by: Optional[str]
    created_at: datetime
    updated_at: datetime
    entries: tuple[JournalEntry, ...] = ()

    @property
    def total_debits(self) -> Decimal:
        return sum((entry.debit for entry in self.entries), ZERO)

    @property
    def total_credits(self) -> Decimal:
        return sum((entry.credit for entry in self.entries), ZERO)


@dataclass(frozen=True)
class EntryInput:
    """Journal entry as submitted by a caller, before it is committed."""

    account_id: int
    debit: Decimal = ZERO
    credit: Decimal = ZERO
    description: Optional[str] = None


@dataclass(frozen=True)
class AccountFilter:
    """Recognised options for listing accounts."""

    type: Optional[AccountType] = None
    search: Optional[str] = None
    parent_id: Optional[int] = None


@dataclass(frozen=True)
class TransactionFilter:
    """Recognised options for listing transactions."""

    type: Optional[TransactionType] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    account_id: Optional[int] = None
    search: Optional[str] = None


@dataclass(frozen=True)
class AccountDetail:
    """Account with its neighbours in the tree and its latest activity."""

    account: Account
    parent: Optional[Account]
    sub_accounts: tuple[Account, ...]
    recent_transactions: tuple[Transaction, ...]


@dataclass(frozen=True)
class LedgerLine:
    """A journal entry joined with the header fields of its transaction."""

    entry_id: int
    transaction_id: int
    account_id: int
    date: date
    type: TransactionType
    description: Optional[str]
    reference: Optional[str]
    debit: Decimal
    credit: Decimal


# Reports


@dataclass(frozen=True)
class TrialBalanceLine:
    id: int
    code: str
    name: str
    type: AccountType
    debit: Decimal
    credit: Decimal


@dataclass(frozen=True)
class TrialBalance:
    """Net debit or credit balance of every account as of a date."""

    as_of: date
    accounts: tuple[TrialBalanceLine, ...]
    total_debit: Decimal
    total_credit: Decimal
    warnings: tuple[str, ...] = ()

    @property
    def difference(self) -> Decimal:
        return self.total_debit - self.total_credit

    @property
    def is_balanced(self) -> bool:
        return abs(self.difference) <= BALANCE_TOLERANCE


@dataclass(frozen=True)
class BalanceSheetLine:
    id: Optional[int]
    code: str
    name: str
    balance: Decimal


@dataclass(frozen=True)
class BalanceSheetGroup:
    name: str
    accounts: tuple[BalanceSheetLine, ...]
    total: Decimal


@dataclass(frozen=True)
class BalanceSheetSection:
    name: str
    groups: tuple[BalanceSheetGroup, ...]
    total: Decimal


@dataclass(frozen=True)
class BalanceSheet:
    """Assets, liabilities and equity as of a date."""

    as_of: date
    assets: BalanceSheetSection
    liabilities: BalanceSheetSection
    equity: BalanceSheetSection
    total_assets: Decimal
    total_liabilities_and_equity: Decimal
    warnings: tuple[str, ...] = ()

    @property
    def difference(self) -> Decimal:
        return self.total_assets - self.total_liabilities_and_equity

    @property
    def is_balanced(self) -> bool:
        return abs(self.difference) <= BALANCE_TOLERANCE


@dataclass(frozen=True)
class ProfitAndLossLine:
    id: int
    code: str
    name: str
    current: Decimal
    previous: Decimal
    change: Decimal
    change_percentage: Optional[Decimal]


@dataclass(frozen=True)
class ProfitAndLossGroup:
    name: str
    accounts: tuple[ProfitAndLossLine, ...]
    current_total: Decimal
    previous_total: Decimal
    change: Decimal
    change_percentage: Optional[Decimal]


@dataclass(frozen=True)
class ProfitAndLossSection:
    name: str
    groups: tuple[ProfitAndLossGroup, ...]
    current_total: Decimal
    previous_total: Decimal
    change: Decimal
    change_percentage: Optional[Decimal]


@dataclass(frozen=True)
class NetIncome:
    current: Decimal
    previous: Decimal
    change: Decimal
    change_percentage: Optional[Decimal]


@dataclass(frozen=True)
class ProfitAndLoss:
    """Revenue and expense activity for a period compared with a prior period."""

    start_date: date
    end_date: date
    previous_start_date: date
    previous_end_date: date
    revenue: ProfitAndLossSection
    expenses: ProfitAndLossSection
    net_income: NetIncome


@dataclass(frozen=True)
class GeneralLedgerLine:
    transaction_id: int
    date: date
    type: TransactionType
    description: Optional[str]
    reference: Optional[str]
    debit: Decimal
    credit: Decimal
    balance: Decimal


@dataclass(frozen=True)
class GeneralLedgerAccount:
    id: int
    code: str
    name: str
    type: AccountType
    opening_balance: Decimal
    lines: tuple[GeneralLedgerLine, ...]
    closing_balance: Decimal


@dataclass(frozen=True)
class GeneralLedger:
    start_date: Optional[date]
    end_date: Optional[date]
    accounts: tuple[GeneralLedgerAccount, ...]


@dataclass(frozen=True)
class BalanceDrift:
    """Account whose cached balance disagrees with a replay of its entries."""

    account_id: int
    code: str
    cached: Decimal
    replayed: Decimal


@dataclass(frozen=True)
class TransactionImbalance:
    """Persisted transaction whose entries no longer sum to zero."""

    transaction_id: int
    total_debits: Decimal
    total_credits: Decimal


@dataclass(frozen=True)
class LedgerCheck:
    drifts: tuple[BalanceDrift, ...] = field(default_factory=tuple)
    imbalances: tuple[TransactionImbalance, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return not self.drifts and not self.imbalances
