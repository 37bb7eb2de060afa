"""SQLAlchemy models for pocketledger database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    UniqueConstraint,
    CheckConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()

MONEY = Numeric(12, 2)


class User(Base):
    """Owner of all other rows."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Account(Base):
    """Account model. Soft-deleted through ``active``."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    kind = Column(String, nullable=False)
    opening_balance = Column(MONEY, nullable=False, default=0)
    color = Column(String, nullable=False)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    transactions = relationship("Transaction", back_populates="account")
    payments = relationship("Payment", back_populates="account")


class Category(Base):
    """Category model with a single level of nesting."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    kind = Column(String, nullable=False)
    color = Column(String, nullable=False)
    icon = Column(String, nullable=False)
    parent_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    parent = relationship("Category", remote_side=[id], backref="children")
    transactions = relationship("Transaction", back_populates="category")


class Transaction(Base):
    """Transaction model.

    ``payment_id`` links the expense generated by a payment; it is nulled if
    the payment disappears with its bill.
    """

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    payment_id = Column(Integer, ForeignKey("payments.id", ondelete="SET NULL"), nullable=True)
    kind = Column(String, nullable=False)
    amount = Column(MONEY, nullable=False)
    description = Column(String, nullable=False)
    date = Column(DateTime, nullable=False, index=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (CheckConstraint("amount > 0", name="ck_transaction_amount_positive"),)

    # Relationships
    account = relationship("Account", back_populates="transactions")
    category = relationship("Category", back_populates="transactions")
    payment = relationship("Payment", back_populates="transactions")


class PayableBill(Base):
    """Payable bill model; deleting it removes installments and payments."""

    __tablename__ = "payable_bills"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    description = Column(String, nullable=False)
    total_amount = Column(MONEY, nullable=False)
    kind = Column(String, nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    installment_count = Column(Integer, nullable=True)
    note = Column(String, nullable=True)
    do_not_count = Column(Boolean, default=False, nullable=False)
    status = Column(String, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    installments = relationship(
        "Installment",
        back_populates="bill",
        cascade="all, delete-orphan",
        order_by="Installment.number",
    )


class Installment(Base):
    """Installment model with an optimistic version counter."""

    __tablename__ = "installments"

    id = Column(Integer, primary_key=True)
    bill_id = Column(Integer, ForeignKey("payable_bills.id", ondelete="CASCADE"), nullable=False)
    number = Column(Integer, nullable=False)
    amount = Column(MONEY, nullable=False)
    paid_amount = Column(MONEY, nullable=False, default=0)
    due_date = Column(Date, nullable=True, index=True)
    status = Column(String, nullable=False)
    version = Column(Integer, nullable=False)

    __table_args__ = (UniqueConstraint("bill_id", "number", name="uq_bill_installment_number"),)
    __mapper_args__ = {"version_id_col": version}

    # Relationships
    bill = relationship("PayableBill", back_populates="installments")
    payments = relationship("Payment", back_populates="installment", cascade="all, delete-orphan")


class Payment(Base):
    """Payment model."""

    __tablename__ = "payments"

    id = Column(Integer, primary_key=True)
    installment_id = Column(Integer, ForeignKey("installments.id", ondelete="CASCADE"), nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    amount = Column(MONEY, nullable=False)
    paid_at = Column(DateTime, nullable=False)
    note = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    installment = relationship("Installment", back_populates="payments")
    account = relationship("Account", back_populates="payments")
    transactions = relationship("Transaction", back_populates="payment")


class Budget(Base):
    """Monthly category budget model."""

    __tablename__ = "budgets"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    fixed_amount = Column(MONEY, nullable=True)
    percentage = Column(Numeric(5, 2), nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (
        UniqueConstraint("category_id", "month", "year", name="uq_budget_category_period"),
    )

    # Relationships
    category = relationship("Category")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
