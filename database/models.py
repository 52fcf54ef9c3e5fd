"""
Database models for the budget system.
Quotes own line items and payments; money columns are fixed-point decimals.
"""

from decimal import Decimal

from sqlalchemy import Column, Integer, String, Numeric, DateTime, Text, Index, ForeignKey
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.types import TypeDecorator

from utils.date_utils import now
from utils.money_utils import round_money

Base = declarative_base()


class Money(TypeDecorator):
    """金额类型：SQLite 以整数分存储，其他数据库使用 Numeric(10, 2)"""
    impl = Numeric(10, 2)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'sqlite':
            return dialect.type_descriptor(Integer())
        return dialect.type_descriptor(Numeric(10, 2))

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        value = round_money(value)
        if dialect.name == 'sqlite':
            return int(value.scaleb(2))
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if dialect.name == 'sqlite':
            return Decimal(int(value)).scaleb(-2)
        return round_money(value)


class QuoteDB(Base):
    """database model for customer quotes"""
    __tablename__ = 'budget_quotes'

    id = Column(Integer, primary_key=True, autoincrement=True)
    customer_name = Column(String(255), nullable=False)
    customer_contact = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    quote_date = Column(DateTime, nullable=True)

    # Metadata
    created_at = Column(DateTime, default=now, nullable=False)
    updated_at = Column(DateTime, default=now, onupdate=now, nullable=False)

    # Relationships
    line_items = relationship(
        "LineItemDB",
        back_populates="quote",
        order_by="LineItemDB.id",
        passive_deletes=True,
    )
    payments = relationship(
        "PaymentDB",
        back_populates="quote",
        order_by=lambda: [PaymentDB.payment_date, PaymentDB.id],
        passive_deletes=True,
    )

    __table_args__ = (
        Index('idx_budget_quotes_customer_name', 'customer_name'),
        Index('idx_budget_quotes_created_at', 'created_at'),
    )


class LineItemDB(Base):
    """database model for quote line items"""
    __tablename__ = 'budget_line_items'

    id = Column(Integer, primary_key=True, autoincrement=True)
    quote_id = Column(Integer, ForeignKey('budget_quotes.id'), nullable=False)
    description = Column(String(255), nullable=False)
    price = Column(Money, nullable=False, default=0)
    category = Column(String(32), nullable=True, default='other')
    quantity = Column(Integer, nullable=False, default=1)

    # Metadata
    created_at = Column(DateTime, default=now, nullable=False)
    updated_at = Column(DateTime, default=now, onupdate=now, nullable=False)

    quote = relationship("QuoteDB", back_populates="line_items")

    __table_args__ = (
        Index('idx_budget_line_items_quote_id', 'quote_id'),
        Index('idx_budget_line_items_category', 'category'),
    )


class PaymentDB(Base):
    """database model for payments applied to a quote"""
    __tablename__ = 'budget_payments'

    id = Column(Integer, primary_key=True, autoincrement=True)
    quote_id = Column(Integer, ForeignKey('budget_quotes.id'), nullable=False)
    amount = Column(Money, nullable=False, default=0)
    payment_date = Column(DateTime, nullable=False)
    payment_method = Column(String(32), nullable=True, default='efectivo')
    notes = Column(Text, nullable=True)

    # Metadata
    created_at = Column(DateTime, default=now, nullable=False)
    updated_at = Column(DateTime, default=now, onupdate=now, nullable=False)

    quote = relationship("QuoteDB", back_populates="payments")

    __table_args__ = (
        Index('idx_budget_payments_quote_id', 'quote_id'),
        Index('idx_budget_payments_payment_date', 'payment_date'),
        Index('idx_budget_payments_payment_method', 'payment_method'),
    )
