"""
Payment records for the budget domain.
A payment is one money transaction applied toward a quote's total.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from utils.date_utils import now, format_date
from utils.exceptions import ValidationError
from utils.money_utils import MAX_MONEY, round_money, format_money, has_cents_precision
from utils.validation import DataValidator
from .constants import (
    PAYMENT_METHODS, PAYMENT_METHOD_NAMES, DEFAULT_PAYMENT_METHOD,
    FALLBACK_PAYMENT_METHOD, label_for
)


@dataclass
class Payment:
    """付款记录"""
    amount: Any = None
    payment_date: Any = None
    payment_method: Any = DEFAULT_PAYMENT_METHOD
    notes: Optional[str] = None

    # 存储字段
    id: Optional[int] = None
    quote_id: Any = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def apply_defaults(self) -> 'Payment':
        """空付款方式改为 efectivo，未知方式改为 other；付款日期仅在缺失时补为当前时间"""
        self.payment_method = DataValidator.normalize_choice(
            self.payment_method, PAYMENT_METHODS, DEFAULT_PAYMENT_METHOD, FALLBACK_PAYMENT_METHOD
        )
        if DataValidator.is_blank(self.payment_date):
            self.payment_date = now()
        return self

    def validate(self) -> 'Payment':
        """校验字段，失败时抛出 ValidationError"""
        errors: Dict[str, List[str]] = {}

        amount = DataValidator.parse_decimal(self.amount)
        if DataValidator.is_blank(self.amount):
            errors.setdefault('amount', []).append("can't be blank")
        elif amount is None:
            errors.setdefault('amount', []).append("is not a number")
        elif amount <= 0:
            errors.setdefault('amount', []).append("must be greater than 0")
        elif amount > MAX_MONEY:
            errors.setdefault('amount', []).append(f"must be less than or equal to {MAX_MONEY}")
        elif not has_cents_precision(amount):
            errors.setdefault('amount', []).append("must have at most 2 decimal places")

        payment_date = DataValidator.parse_datetime(self.payment_date)
        if DataValidator.is_blank(self.payment_date):
            errors.setdefault('payment_date', []).append("can't be blank")
        elif payment_date is None:
            errors.setdefault('payment_date', []).append("is invalid")

        method = getattr(self.payment_method, 'value', self.payment_method)
        if DataValidator.is_blank(method):
            errors.setdefault('payment_method', []).append("can't be blank")
        elif method not in PAYMENT_METHODS:
            errors.setdefault('payment_method', []).append("is not included in the list")

        if errors:
            raise ValidationError(errors, context={'resource': 'payment', 'id': self.id})

        self.amount = round_money(amount)
        self.payment_date = payment_date
        self.payment_method = method
        return self

    def clean(self) -> 'Payment':
        """先填充默认值再校验"""
        return self.apply_defaults().validate()

    def payment_method_name(self) -> str:
        """付款方式的西班牙语名称"""
        return label_for(getattr(self.payment_method, 'value', self.payment_method), PAYMENT_METHOD_NAMES)

    def render(self) -> str:
        """格式化显示"""
        paid_at = format_date(DataValidator.parse_datetime(self.payment_date))
        output = f"${format_money(self.amount)} - {self.payment_method_name()} ({paid_at})"
        if not DataValidator.is_blank(self.notes):
            output += f" - {self.notes}"
        return output

    def __str__(self) -> str:
        return self.render()

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典"""
        return {
            'id': self.id,
            'quote_id': self.quote_id,
            'amount': self.amount,
            'payment_date': self.payment_date,
            'payment_method': self.payment_method,
            'notes': self.notes,
            'payment_method_name': self.payment_method_name(),
            'created_at': self.created_at,
            'updated_at': self.updated_at,
        }


def chronological(payments: Iterable[Payment]) -> List[Payment]:
    """按付款日期升序排列，日期相同时保持原有顺序"""
    return sorted(
        payments,
        key=lambda p: DataValidator.parse_datetime(p.payment_date) or datetime.min
    )


def by_method(payments: Iterable[Payment], method: str) -> List[Payment]:
    """按付款方式筛选"""
    code = str(getattr(method, 'value', method)).strip().lower()
    return [p for p in payments if getattr(p.payment_method, 'value', p.payment_method) == code]
