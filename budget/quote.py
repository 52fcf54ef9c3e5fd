"""
Quote aggregate for the budget domain.

A quote owns its line items and payments. Totals, balances and the
category breakdown are derived from the children on every call and are
never stored.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from utils.date_utils import now, format_date
from utils.exceptions import ValidationError
from utils.money_utils import ZERO, to_decimal, format_money, sum_money
from utils.validation import DataValidator
from .constants import DEFAULT_CATEGORY, DEFAULT_PAYMENT_METHOD
from .line_item import LineItem
from .payment import Payment, chronological


REPORT_WIDTH = 60


def generate_quote_id(moment: Optional[datetime] = None) -> str:
    """生成报价单编号，格式 Q + 年月日时分秒"""
    return (moment or now()).strftime("Q%Y%m%d%H%M%S")


@dataclass
class Quote:
    """报价单"""
    customer_name: Optional[str] = None
    customer_contact: Optional[str] = None
    notes: Optional[str] = None
    quote_date: Any = None
    id: Any = None
    line_items: List[LineItem] = field(default_factory=list)
    payments: List[Payment] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def new(cls, customer_name: Optional[str], customer_contact: Optional[str] = None,
            notes: Optional[str] = None, quote_date: Any = None, id: Any = None) -> 'Quote':
        """创建未持久化的报价单，自动生成编号和日期"""
        quote = cls(
            customer_name=customer_name,
            customer_contact=customer_contact,
            notes=notes,
            quote_date=quote_date,
            id=id if id is not None else generate_quote_id(),
        )
        return quote.apply_create_defaults().validate()

    def apply_create_defaults(self) -> 'Quote':
        """仅在创建时补全报价日期"""
        if DataValidator.is_blank(self.quote_date):
            self.quote_date = now()
        return self

    def validate(self) -> 'Quote':
        """校验客户名称和报价日期"""
        errors: Dict[str, List[str]] = {}

        if DataValidator.is_blank(self.customer_name):
            errors.setdefault('customer_name', []).append("can't be blank")

        quote_date = DataValidator.parse_datetime(self.quote_date)
        if DataValidator.is_blank(self.quote_date):
            errors.setdefault('quote_date', []).append("can't be blank")
        elif quote_date is None:
            errors.setdefault('quote_date', []).append("is invalid")

        if errors:
            raise ValidationError(errors, context={'resource': 'quote', 'id': self.id})

        self.quote_date = quote_date
        return self

    # ------------------------------------------------------------------
    # 派生数据
    # ------------------------------------------------------------------

    def total(self) -> Decimal:
        """所有明细小计之和"""
        return sum_money(item.subtotal() for item in self.line_items)

    def total_paid(self) -> Decimal:
        """所有付款金额之和"""
        return sum_money(to_decimal(payment.amount) for payment in self.payments)

    def remaining_balance(self) -> Decimal:
        """剩余应付金额，超额付款时为负数"""
        return self.total() - self.total_paid()

    def fully_paid(self) -> bool:
        return self.remaining_balance() <= 0

    def chronological_payments(self) -> List[Payment]:
        return chronological(self.payments)

    def initial_payment(self) -> Optional[Payment]:
        """最早的一笔付款"""
        payments = self.chronological_payments()
        return payments[0] if payments else None

    def category_breakdown(self) -> Dict[str, Decimal]:
        """按类别汇总小计，不包含没有明细的类别"""
        breakdown: Dict[str, Decimal] = {}
        for item in self.line_items:
            code = str(getattr(item.category, 'value', item.category))
            breakdown[code] = breakdown.get(code, ZERO) + item.subtotal()
        return breakdown

    def totals(self) -> Dict[str, Any]:
        total = self.total()
        total_paid = self.total_paid()
        remaining = total - total_paid
        return {
            'total': total,
            'total_paid': total_paid,
            'remaining_balance': remaining,
            'fully_paid': remaining <= 0,
        }

    def summary(self) -> Dict[str, Any]:
        """报价单摘要"""
        totals = self.totals()
        return {
            'id': self.id,
            'customer_name': self.customer_name,
            'customer_contact': self.customer_contact,
            'quote_date': self.quote_date,
            'line_items_count': len(self.line_items),
            'total': totals['total'],
            'total_paid': totals['total_paid'],
            'remaining_balance': totals['remaining_balance'],
            'fully_paid': totals['fully_paid'],
            'category_breakdown': self.category_breakdown(),
            'payments_count': len(self.payments),
        }

    def to_dict(self) -> Dict[str, Any]:
        """完整报价单数据，付款按日期排序"""
        return {
            'id': self.id,
            'customer_name': self.customer_name,
            'customer_contact': self.customer_contact,
            'notes': self.notes,
            'quote_date': self.quote_date,
            'created_at': self.created_at,
            'updated_at': self.updated_at,
            'line_items': [item.to_dict() for item in self.line_items],
            'payments': [payment.to_dict() for payment in self.chronological_payments()],
            'totals': self.totals(),
            'category_breakdown': self.category_breakdown(),
        }

    # ------------------------------------------------------------------
    # 修改操作
    # ------------------------------------------------------------------

    def add_line_item(self, description: str, price: Any, category: str = DEFAULT_CATEGORY,
                      quantity: Any = 1) -> LineItem:
        """添加明细，校验失败时列表保持不变"""
        item = LineItem(
            description=description,
            price=price,
            quantity=quantity,
            category=category,
            quote_id=self.id,
        ).clean()
        self.line_items.append(item)
        return item

    def add_payment(self, amount: Any, payment_date: Any = None,
                    payment_method: str = DEFAULT_PAYMENT_METHOD,
                    notes: Optional[str] = None) -> Payment:
        """添加付款，未指定日期时使用当前时间"""
        payment = Payment(
            amount=amount,
            payment_date=payment_date if payment_date is not None else now(),
            payment_method=payment_method,
            notes=notes,
            quote_id=self.id,
        ).clean()
        self.payments.append(payment)
        return payment

    def remove_line_item(self, index: int) -> LineItem:
        """按位置删除明细，位置无效时抛出 IndexError"""
        return self.line_items.pop(index)

    # ------------------------------------------------------------------
    # 文本报告
    # ------------------------------------------------------------------

    def render(self, width: int = REPORT_WIDTH) -> str:
        """生成文本格式的报价单"""
        heavy = "=" * width
        light = "-" * width

        lines = [heavy, f"PRESUPUESTO #{self.id}", heavy]
        lines.append(f"Cliente: {self.customer_name}")
        if not DataValidator.is_blank(self.customer_contact):
            lines.append(f"Contacto: {self.customer_contact}")
        lines.append(f"Fecha: {format_date(DataValidator.parse_datetime(self.quote_date))}")
        if not DataValidator.is_blank(self.notes):
            lines.append(f"Notas: {self.notes}")
        lines.append("")

        lines.append("DETALLE:")
        lines.append(light)
        for position, item in enumerate(self.line_items, 1):
            lines.append(f"{position}. {item.render()}")
        lines.append(light)
        lines.append(f"TOTAL: ${format_money(self.total())}")
        lines.append("")

        if self.payments:
            lines.extend(["PAGOS:", light])
            for position, payment in enumerate(self.chronological_payments(), 1):
                lines.append(f"{position}. {payment.render()}")
            lines.append(light)
            lines.append(f"Total Pagado: ${format_money(self.total_paid())}")

        lines.append("")
        lines.append(f"SALDO PENDIENTE: ${format_money(self.remaining_balance())}")
        lines.append(f"Estado: {'PAGADO COMPLETO' if self.fully_paid() else 'PENDIENTE'}")
        lines.append(heavy)
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()
