"""
Database operations for the budget system.
SQLAlchemy implementation of the quote storage interface.
"""

from typing import Callable, List, Optional, TypeVar

from sqlalchemy import select, desc, asc, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from budget import Quote, LineItem, Payment
from utils import db_logger
from utils.exceptions import DatabaseError, NotFoundError, ErrorCodes
from .connection import DatabaseManager
from .interfaces import QuoteStorage
from .models import QuoteDB, LineItemDB, PaymentDB

T = TypeVar('T')


def _line_item_from_row(row: LineItemDB) -> LineItem:
    return LineItem(
        id=row.id,
        quote_id=row.quote_id,
        description=row.description,
        price=row.price,
        quantity=row.quantity,
        category=row.category,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _payment_from_row(row: PaymentDB) -> Payment:
    return Payment(
        id=row.id,
        quote_id=row.quote_id,
        amount=row.amount,
        payment_date=row.payment_date,
        payment_method=row.payment_method,
        notes=row.notes,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _quote_from_row(row: QuoteDB) -> Quote:
    return Quote(
        id=row.id,
        customer_name=row.customer_name,
        customer_contact=row.customer_contact,
        notes=row.notes,
        quote_date=row.quote_date,
        line_items=[_line_item_from_row(item) for item in row.line_items],
        payments=[_payment_from_row(payment) for payment in row.payments],
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _quote_query():
    return select(QuoteDB).options(
        selectinload(QuoteDB.line_items),
        selectinload(QuoteDB.payments),
    )


class DatabaseOperations(QuoteStorage):
    """database operations for quotes, line items and payments"""

    def __init__(self, db_manager: Optional[DatabaseManager] = None, create_tables: bool = True):
        self.db = db_manager or DatabaseManager()
        self.db_logger = db_logger

        if self.db.SessionLocal is None:
            self.db.initialize()
        if create_tables:
            self.db.create_tables()

    def _run(self, operation: str, func: Callable[[Session], T]) -> T:
        """在单个事务中执行操作，数据库异常转换为 DatabaseError"""
        try:
            with self.db.session_scope() as session:
                return func(session)
        except SQLAlchemyError as e:
            self.db_logger.error(f"[Database] {operation} failed: {e}")
            raise DatabaseError(
                f"{operation} failed: {e}",
                ErrorCodes.DB_TRANSACTION_FAILED,
                {'operation': operation}
            ) from e

    # === Quote Operations ===

    def get_quote(self, quote_id: int) -> Optional[Quote]:
        """获取报价单及其明细和付款"""
        def query(session: Session) -> Optional[Quote]:
            row = session.execute(_quote_query().where(QuoteDB.id == quote_id)).scalar_one_or_none()
            return _quote_from_row(row) if row else None

        return self._run("get_quote", query)

    def list_quotes(self, customer: Optional[str] = None) -> List[Quote]:
        """获取报价单列表，按创建时间倒序"""
        def query(session: Session) -> List[Quote]:
            stmt = _quote_query()
            if customer:
                stmt = stmt.where(QuoteDB.customer_name.icontains(customer, autoescape=True))
            stmt = stmt.order_by(desc(QuoteDB.created_at), desc(QuoteDB.id))
            return [_quote_from_row(row) for row in session.execute(stmt).scalars().all()]

        return self._run("list_quotes", query)

    def quote_exists(self, quote_id: int) -> bool:
        def query(session: Session) -> bool:
            return session.get(QuoteDB, quote_id) is not None

        return self._run("quote_exists", query)

    def create_quote(self, quote: Quote) -> Quote:
        """保存新报价单，已有的明细和付款一并写入"""
        def write(session: Session) -> Quote:
            row = QuoteDB(
                customer_name=quote.customer_name,
                customer_contact=quote.customer_contact,
                notes=quote.notes,
                quote_date=quote.quote_date,
            )
            row.line_items = [self._new_line_item_row(item) for item in quote.line_items]
            row.payments = [self._new_payment_row(payment) for payment in quote.payments]
            session.add(row)
            session.flush()
            session.refresh(row)
            return _quote_from_row(row)

        created = self._run("create_quote", write)
        self.db_logger.info(f"[Database] Created quote {created.id} for '{created.customer_name}'")
        return created

    def update_quote(self, quote: Quote) -> Quote:
        """更新报价单主体字段"""
        def write(session: Session) -> Quote:
            row = session.execute(_quote_query().where(QuoteDB.id == quote.id)).scalar_one_or_none()
            if row is None:
                raise NotFoundError('Quote', quote.id, ErrorCodes.QUOTE_NOT_FOUND)
            row.customer_name = quote.customer_name
            row.customer_contact = quote.customer_contact
            row.notes = quote.notes
            row.quote_date = quote.quote_date
            session.flush()
            session.refresh(row)
            return _quote_from_row(row)

        return self._run("update_quote", write)

    def delete_quote(self, quote_id: int) -> bool:
        """删除报价单：先删除付款和明细，再删除报价单本身"""
        def write(session: Session) -> bool:
            if session.get(QuoteDB, quote_id) is None:
                return False
            payments = session.execute(delete(PaymentDB).where(PaymentDB.quote_id == quote_id)).rowcount
            items = session.execute(delete(LineItemDB).where(LineItemDB.quote_id == quote_id)).rowcount
            session.execute(delete(QuoteDB).where(QuoteDB.id == quote_id))
            self.db_logger.info(
                f"[Database] Deleted quote {quote_id} with {items} line items and {payments} payments"
            )
            return True

        return self._run("delete_quote", write)

    # === Line Item Operations ===

    @staticmethod
    def _new_line_item_row(item: LineItem) -> LineItemDB:
        return LineItemDB(
            description=item.description,
            price=item.price,
            quantity=item.quantity,
            category=item.category,
        )

    def list_line_items(self, quote_id: int) -> List[LineItem]:
        """按创建顺序获取明细"""
        def query(session: Session) -> List[LineItem]:
            stmt = (
                select(LineItemDB)
                .where(LineItemDB.quote_id == quote_id)
                .order_by(asc(LineItemDB.id))
            )
            return [_line_item_from_row(row) for row in session.execute(stmt).scalars().all()]

        return self._run("list_line_items", query)

    def get_line_item(self, quote_id: int, item_id: int) -> Optional[LineItem]:
        def query(session: Session) -> Optional[LineItem]:
            row = session.get(LineItemDB, item_id)
            if row is None or row.quote_id != quote_id:
                return None
            return _line_item_from_row(row)

        return self._run("get_line_item", query)

    def create_line_item(self, quote_id: int, item: LineItem) -> LineItem:
        def write(session: Session) -> LineItem:
            row = self._new_line_item_row(item)
            row.quote_id = quote_id
            session.add(row)
            session.flush()
            session.refresh(row)
            return _line_item_from_row(row)

        return self._run("create_line_item", write)

    def update_line_item(self, item: LineItem) -> LineItem:
        def write(session: Session) -> LineItem:
            row = session.get(LineItemDB, item.id)
            if row is None or row.quote_id != item.quote_id:
                raise NotFoundError('LineItem', item.id, ErrorCodes.LINE_ITEM_NOT_FOUND)
            row.description = item.description
            row.price = item.price
            row.quantity = item.quantity
            row.category = item.category
            session.flush()
            session.refresh(row)
            return _line_item_from_row(row)

        return self._run("update_line_item", write)

    def delete_line_item(self, quote_id: int, item_id: int) -> bool:
        def write(session: Session) -> bool:
            result = session.execute(
                delete(LineItemDB).where(LineItemDB.id == item_id, LineItemDB.quote_id == quote_id)
            )
            return result.rowcount > 0

        return self._run("delete_line_item", write)

    # === Payment Operations ===

    @staticmethod
    def _new_payment_row(payment: Payment) -> PaymentDB:
        return PaymentDB(
            amount=payment.amount,
            payment_date=payment.payment_date,
            payment_method=payment.payment_method,
            notes=payment.notes,
        )

    def list_payments(self, quote_id: int, method: Optional[str] = None) -> List[Payment]:
        """按付款日期升序获取付款记录"""
        def query(session: Session) -> List[Payment]:
            stmt = select(PaymentDB).where(PaymentDB.quote_id == quote_id)
            if method:
                stmt = stmt.where(PaymentDB.payment_method == method)
            stmt = stmt.order_by(asc(PaymentDB.payment_date), asc(PaymentDB.id))
            return [_payment_from_row(row) for row in session.execute(stmt).scalars().all()]

        return self._run("list_payments", query)

    def get_payment(self, quote_id: int, payment_id: int) -> Optional[Payment]:
        def query(session: Session) -> Optional[Payment]:
            row = session.get(PaymentDB, payment_id)
            if row is None or row.quote_id != quote_id:
                return None
            return _payment_from_row(row)

        return self._run("get_payment", query)

    def create_payment(self, quote_id: int, payment: Payment) -> Payment:
        def write(session: Session) -> Payment:
            row = self._new_payment_row(payment)
            row.quote_id = quote_id
            session.add(row)
            session.flush()
            session.refresh(row)
            return _payment_from_row(row)

        return self._run("create_payment", write)

    def update_payment(self, payment: Payment) -> Payment:
        def write(session: Session) -> Payment:
            row = session.get(PaymentDB, payment.id)
            if row is None or row.quote_id != payment.quote_id:
                raise NotFoundError('Payment', payment.id, ErrorCodes.PAYMENT_NOT_FOUND)
            row.amount = payment.amount
            row.payment_date = payment.payment_date
            row.payment_method = payment.payment_method
            row.notes = payment.notes
            session.flush()
            session.refresh(row)
            return _payment_from_row(row)

        return self._run("update_payment", write)

    def delete_payment(self, quote_id: int, payment_id: int) -> bool:
        def write(session: Session) -> bool:
            result = session.execute(
                delete(PaymentDB).where(PaymentDB.id == payment_id, PaymentDB.quote_id == quote_id)
            )
            return result.rowcount > 0

        return self._run("delete_payment", write)
