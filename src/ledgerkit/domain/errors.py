"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling. ``code`` is a stable
    identifier and ``status`` the HTTP-equivalent status for callers that
    render errors over a request/response boundary.
    """

    code = "DOMAIN_ERROR"
    status = 400


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""

    code = "VALIDATION_FAILED"


class EmptyEntriesError(ValidationError):
    """Transaction submitted without journal entries."""

    code = "EMPTY_ENTRIES"


class UnbalancedTransactionError(ValidationError):
    """Total debits and total credits differ beyond the tolerance."""

    code = "UNBALANCED_TRANSACTION"

    def __init__(self, total_debits: Decimal, total_credits: Decimal):
        self.total_debits = total_debits
        self.total_credits = total_credits
        super().__init__(unbalanced_transaction(total_debits, total_credits))


class ImmutableFieldError(ValidationError):
    """Attempt to change a field that is fixed at creation."""

    code = "IMMUTABLE_FIELD"


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""

    code = "NOT_FOUND"
    status = 404


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""

    code = "CONFLICT"
    status = 409


class DuplicateCodeError(ConflictError):
    """Account code already in use."""

    code = "DUPLICATE_CODE"


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""

    code = "DEPENDENCY"
    status = 409


class HasChildrenError(DependencyError):
    """Account still has sub-accounts."""

    code = "HAS_CHILDREN"


class HasTransactionsError(DependencyError):
    """Account is still referenced by journal entries."""

    code = "HAS_TRANSACTIONS"


class StorageError(Exception):
    """Underlying persistence failure. The unit of work was rolled back."""

    code = "STORAGE_FAILURE"
    status = 500


class CommitHookError(Exception):
    """One or more commit listeners failed after the ledger change committed."""

    code = "COMMIT_HOOK_FAILED"
    status = 500

    def __init__(self, transaction_id: int, failures: list[Exception]):
        self.transaction_id = transaction_id
        self.failures = failures
        details = "; ".join(f"{type(exc).__name__}: {exc}" for exc in failures)
        super().__init__(
            f"Transaction {transaction_id} committed but {len(failures)} "
            f"commit listener{'s' if len(failures) != 1 else ''} failed: {details}"
        )


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def account_code_not_found(code: str) -> str:
    """Return message for missing account by code."""
    return f"Account with code '{code}' not found"


def parent_account_not_found(parent_id: int) -> str:
    """Return message for missing parent account."""
    return f"Parent account {parent_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def duplicate_account_code(code: str) -> str:
    """Return message for duplicate account code."""
    return f"Account code '{code}' already exists"


def immutable_account_field(field: str) -> str:
    """Return message for an attempted change of a fixed account field."""
    return f"Account {field} cannot be changed after creation"


def unbalanced_transaction(total_debits: Decimal, total_credits: Decimal) -> str:
    """Return message for debits and credits that do not match."""
    return (
        f"Total debits ({total_debits:.2f}) must equal total credits "
        f"({total_credits:.2f})"
    )


def account_has_children(account_id: int, child_count: int) -> str:
    """Return message when account has sub-accounts."""
    return (
        f"Cannot delete account {account_id}: it has {child_count} "
        f"sub-account{'s' if child_count != 1 else ''}."
    )


def account_has_transactions(account_id: int, entry_count: int) -> str:
    """Return message when account is referenced by journal entries."""
    return (
        f"Cannot delete account {account_id}: it is used by {entry_count} "
        f"journal entr{'ies' if entry_count != 1 else 'y'}."
    )
