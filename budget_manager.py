"""
Budget Manager for the quote system.

Service layer over the quote storage. Every write loads the current
record, applies the provided fields to a copy, normalizes and validates
it, and only then hands it to the storage in a single call.
"""

from dataclasses import replace
from typing import Any, Dict, List, Mapping, Optional

from budget import Quote, LineItem, Payment
from database.interfaces import QuoteStorage
from utils import budget_logger, config_manager, log_execution
from utils.exceptions import NotFoundError, ErrorCodes
from utils.validation import DataValidator

QUOTE_FIELDS = ('customer_name', 'customer_contact', 'notes', 'quote_date')
LINE_ITEM_FIELDS = ('description', 'price', 'quantity', 'category')
PAYMENT_FIELDS = ('amount', 'payment_date', 'payment_method', 'notes')


def _pick(data: Optional[Mapping[str, Any]], fields) -> Dict[str, Any]:
    """只保留允许的字段，忽略未知字段"""
    if not data:
        return {}
    return {key: data[key] for key in fields if key in data}


def _parse_id(value: Any, resource: str, error_code: str) -> int:
    """解析记录编号，无法解析时视为不存在"""
    record_id = DataValidator.parse_integer(value)
    if record_id is None:
        raise NotFoundError(resource, value, error_code)
    return record_id


class BudgetManager:
    """预算管理器"""

    def __init__(self, storage: Optional[QuoteStorage] = None):
        self.config = config_manager
        self._storage = storage

    @property
    def storage(self) -> QuoteStorage:
        if self._storage is None:
            self.initialize()
        return self._storage

    @log_execution("Budget", "initialize")
    def initialize(self) -> None:
        """初始化存储，未注入时使用配置中的数据库"""
        if self._storage is not None:
            return

        from database.operations import DatabaseOperations
        self._storage = DatabaseOperations()
        budget_logger.info("[Budget] BudgetManager initialized with database storage")

    # === Quotes ===

    def _load_quote(self, quote_id: Any) -> Quote:
        record_id = _parse_id(quote_id, 'Quote', ErrorCodes.QUOTE_NOT_FOUND)
        quote = self.storage.get_quote(record_id)
        if quote is None:
            raise NotFoundError('Quote', quote_id, ErrorCodes.QUOTE_NOT_FOUND)
        return quote

    def _require_quote(self, quote_id: Any) -> int:
        record_id = _parse_id(quote_id, 'Quote', ErrorCodes.QUOTE_NOT_FOUND)
        if not self.storage.quote_exists(record_id):
            raise NotFoundError('Quote', quote_id, ErrorCodes.QUOTE_NOT_FOUND)
        return record_id

    def list_quotes(self, customer: Optional[str] = None) -> List[Quote]:
        """报价单列表，最新创建的在前"""
        customer = customer.strip() if customer else None
        return self.storage.list_quotes(customer=customer or None)

    def pending_quotes(self) -> List[Quote]:
        """尚未付清的报价单"""
        return [quote for quote in self.list_quotes() if not quote.fully_paid()]

    def get_quote(self, quote_id: Any) -> Quote:
        return self._load_quote(quote_id)

    @log_execution("Budget", "create_quote")
    def create_quote(self, data: Mapping[str, Any]) -> Quote:
        """创建报价单，未提供日期时使用当前时间"""
        quote = Quote(**_pick(data, QUOTE_FIELDS))
        quote.apply_create_defaults().validate()
        return self.storage.create_quote(quote)

    @log_execution("Budget", "update_quote")
    def update_quote(self, quote_id: Any, data: Mapping[str, Any]) -> Quote:
        """更新报价单，只修改提供的字段，不重新生成日期"""
        current = self._load_quote(quote_id)
        updated = replace(current, **_pick(data, QUOTE_FIELDS))
        updated.validate()
        return self.storage.update_quote(updated)

    @log_execution("Budget", "delete_quote")
    def delete_quote(self, quote_id: Any) -> None:
        """删除报价单及其明细和付款"""
        record_id = _parse_id(quote_id, 'Quote', ErrorCodes.QUOTE_NOT_FOUND)
        if not self.storage.delete_quote(record_id):
            raise NotFoundError('Quote', quote_id, ErrorCodes.QUOTE_NOT_FOUND)

    def get_summary(self, quote_id: Any) -> Dict[str, Any]:
        return self._load_quote(quote_id).summary()

    def render_quote(self, quote_id: Any) -> str:
        """生成文本报告"""
        width = self.config.get_budget_config().report_width
        return self._load_quote(quote_id).render(width=width)

    # === Line items ===

    def list_line_items(self, quote_id: Any) -> List[LineItem]:
        return self.storage.list_line_items(self._require_quote(quote_id))

    def get_line_item(self, quote_id: Any, item_id: Any) -> LineItem:
        record_id = self._require_quote(quote_id)
        item = self.storage.get_line_item(
            record_id, _parse_id(item_id, 'LineItem', ErrorCodes.LINE_ITEM_NOT_FOUND)
        )
        if item is None:
            raise NotFoundError('LineItem', item_id, ErrorCodes.LINE_ITEM_NOT_FOUND,
                                {'quote_id': quote_id})
        return item

    @log_execution("Budget", "create_line_item")
    def create_line_item(self, quote_id: Any, data: Mapping[str, Any]) -> LineItem:
        """添加明细，数量默认 1，类别默认 other"""
        record_id = self._require_quote(quote_id)
        item = LineItem(**_pick(data, LINE_ITEM_FIELDS)).clean()
        return self.storage.create_line_item(record_id, item)

    @log_execution("Budget", "update_line_item")
    def update_line_item(self, quote_id: Any, item_id: Any, data: Mapping[str, Any]) -> LineItem:
        current = self.get_line_item(quote_id, item_id)
        updated = replace(current, **_pick(data, LINE_ITEM_FIELDS)).clean()
        return self.storage.update_line_item(updated)

    @log_execution("Budget", "delete_line_item")
    def delete_line_item(self, quote_id: Any, item_id: Any) -> None:
        current = self.get_line_item(quote_id, item_id)
        self.storage.delete_line_item(current.quote_id, current.id)

    # === Payments ===

    def list_payments(self, quote_id: Any, method: Optional[str] = None) -> List[Payment]:
        """付款记录按日期升序，可按付款方式筛选"""
        record_id = self._require_quote(quote_id)
        method = method.strip().lower() if method else None
        return self.storage.list_payments(record_id, method=method or None)

    def get_payment(self, quote_id: Any, payment_id: Any) -> Payment:
        record_id = self._require_quote(quote_id)
        payment = self.storage.get_payment(
            record_id, _parse_id(payment_id, 'Payment', ErrorCodes.PAYMENT_NOT_FOUND)
        )
        if payment is None:
            raise NotFoundError('Payment', payment_id, ErrorCodes.PAYMENT_NOT_FOUND,
                                {'quote_id': quote_id})
        return payment

    @log_execution("Budget", "create_payment")
    def create_payment(self, quote_id: Any, data: Mapping[str, Any]) -> Payment:
        """登记付款，付款方式默认 efectivo，日期默认当前时间"""
        record_id = self._require_quote(quote_id)
        payment = Payment(**_pick(data, PAYMENT_FIELDS)).clean()
        return self.storage.create_payment(record_id, payment)

    @log_execution("Budget", "update_payment")
    def update_payment(self, quote_id: Any, payment_id: Any, data: Mapping[str, Any]) -> Payment:
        current = self.get_payment(quote_id, payment_id)
        updated = replace(current, **_pick(data, PAYMENT_FIELDS)).clean()
        return self.storage.update_payment(updated)

    @log_execution("Budget", "delete_payment")
    def delete_payment(self, quote_id: Any, payment_id: Any) -> None:
        current = self.get_payment(quote_id, payment_id)
        self.storage.delete_payment(current.quote_id, current.id)


# 全局预算管理器实例
budget_manager = BudgetManager()
