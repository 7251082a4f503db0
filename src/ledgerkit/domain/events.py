"""Post-commit notifications emitted by the journal.

Collaborators such as inventory or invoicing subscribe to these notices
instead of being called by the journal directly.
"""

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Callable, Optional

from ledgerkit.domain.entities import JournalEntry, Transaction, TransactionType
from ledgerkit.domain.errors import CommitHookError

logger = logging.getLogger(__name__)


class CommitAction(str, Enum):
    POSTED = "posted"
    DELETED = "deleted"


@dataclass(frozen=True)
class CommitNotice:
    """Summary of a committed ledger change."""

    action: CommitAction
    transaction_id: int
    type: TransactionType
    date: date
    entries: tuple[JournalEntry, ...]
    invoice_id: Optional[int] = None
    purchase_id: Optional[int] = None

    @classmethod
    def for_transaction(cls, action: CommitAction, transaction: Transaction) -> "CommitNotice":
        return cls(
            action=action,
            transaction_id=transaction.id,
            type=transaction.type,
            date=transaction.date,
            entries=transaction.entries,
            invoice_id=transaction.invoice_id,
            purchase_id=transaction.purchase_id,
        )


CommitListener = Callable[[CommitNotice], None]


class CommitNotifier:
    """Ordered registry of commit listeners."""

    def __init__(self, listeners: Optional[list[CommitListener]] = None):
        self._listeners: list[CommitListener] = list(listeners or [])

    def subscribe(self, listener: CommitListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: CommitListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def notify(self, notice: CommitNotice) -> None:
        """Deliver a notice to every listener.

        Every listener runs even if an earlier one fails. Failures are
        collected and raised together as CommitHookError.

        Raises:
            CommitHookError: If any listener raised
        """
        failures: list[Exception] = []
        for listener in list(self._listeners):
            try:
                listener(notice)
            except Exception as exc:
                logger.exception(
                    "Commit listener %r failed for transaction %s",
                    listener,
                    notice.transaction_id,
                )
                failures.append(exc)

        if failures:
            raise CommitHookError(notice.transaction_id, failures)
