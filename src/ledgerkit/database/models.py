"""SQLAlchemy models for ledgerkit database."""

from datetime import datetime, UTC
from sqlalchemy import (
    CheckConstraint,
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Enum,
    Numeric,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

from ledgerkit.domain.entities import AccountType, TransactionType

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Account(Base):
    """Chart of accounts model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    code = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)
    type = Column(Enum(AccountType, name="account_type"), nullable=False)
    description = Column(String, nullable=True)
    parent_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    balance = Column(Numeric(14, 2), default=0, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    # Relationships
    parent = relationship("Account", remote_side=[id], backref="sub_accounts")
    journal_entries = relationship("JournalEntry", back_populates="account")


class Transaction(Base):
    """Ledger transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    date = Column(Date, nullable=False, index=True)
    type = Column(Enum(TransactionType, name="transaction_type"), nullable=False)
    description = Column(String, nullable=False)
    reference = Column(String, nullable=True)
    amount = Column(Numeric(14, 2), nullable=False)
    invoice_id = Column(Integer, nullable=True)
    purchase_id = Column(Integer, nullable=True)
    created_by = Column(String, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    # Relationships
    entries = relationship(
        "JournalEntry",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="JournalEntry.position",
    )


class JournalEntry(Base):
    """Journal entry model. Owned by exactly one transaction."""

    __tablename__ = "journal_entries"

    id = Column(Integer, primary_key=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=False, index=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    debit = Column(Numeric(14, 2), default=0, nullable=False)
    credit = Column(Numeric(14, 2), default=0, nullable=False)
    description = Column(String, nullable=True)

    __table_args__ = (
        CheckConstraint("debit >= 0", name="ck_entry_debit_non_negative"),
        CheckConstraint("credit >= 0", name="ck_entry_credit_non_negative"),
    )

    # Relationships
    transaction = relationship("Transaction", back_populates="entries")
    account = relationship("Account", back_populates="journal_entries")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
