"""
Line item records for the budget domain.
A line item is one priced product or service inside a quote.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from utils.exceptions import ValidationError
from utils.money_utils import MAX_MONEY, to_decimal, round_money, format_money, has_cents_precision
from utils.validation import DataValidator
from .constants import CATEGORIES, CATEGORY_NAMES, DEFAULT_CATEGORY, label_for


@dataclass
class LineItem:
    """报价单明细"""
    description: Optional[str] = None
    price: Any = None
    quantity: Any = 1
    category: Any = DEFAULT_CATEGORY

    # 存储字段
    id: Optional[int] = None
    quote_id: Any = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def apply_defaults(self) -> 'LineItem':
        """空类别或未知类别统一改为 other"""
        self.category = DataValidator.normalize_choice(
            self.category, CATEGORIES, DEFAULT_CATEGORY, DEFAULT_CATEGORY
        )
        return self

    def validate(self) -> 'LineItem':
        """校验字段，失败时抛出 ValidationError；成功后将价格和数量转换为标准类型"""
        errors: Dict[str, List[str]] = {}

        if DataValidator.is_blank(self.description):
            errors.setdefault('description', []).append("can't be blank")

        price = DataValidator.parse_decimal(self.price)
        if DataValidator.is_blank(self.price):
            errors.setdefault('price', []).append("can't be blank")
        elif price is None:
            errors.setdefault('price', []).append("is not a number")
        elif price <= 0:
            errors.setdefault('price', []).append("must be greater than 0")
        elif price > MAX_MONEY:
            errors.setdefault('price', []).append(f"must be less than or equal to {MAX_MONEY}")
        elif not has_cents_precision(price):
            errors.setdefault('price', []).append("must have at most 2 decimal places")

        quantity = DataValidator.parse_integer(self.quantity)
        if DataValidator.is_blank(self.quantity):
            errors.setdefault('quantity', []).append("can't be blank")
        elif quantity is None:
            errors.setdefault('quantity', []).append("must be an integer")
        elif quantity <= 0:
            errors.setdefault('quantity', []).append("must be greater than 0")

        category = getattr(self.category, 'value', self.category)
        if DataValidator.is_blank(category):
            errors.setdefault('category', []).append("can't be blank")
        elif category not in CATEGORIES:
            errors.setdefault('category', []).append("is not included in the list")

        if errors:
            raise ValidationError(errors, context={'resource': 'line_item', 'id': self.id})

        self.price = round_money(price)
        self.quantity = quantity
        self.category = category
        return self

    def clean(self) -> 'LineItem':
        """先填充默认值再校验"""
        return self.apply_defaults().validate()

    def subtotal(self) -> Decimal:
        """小计 = 单价 × 数量"""
        return to_decimal(self.price) * int(self.quantity)

    def category_name(self) -> str:
        """类别的西班牙语名称"""
        return label_for(getattr(self.category, 'value', self.category), CATEGORY_NAMES)

    def render(self) -> str:
        """格式化显示"""
        if int(self.quantity) > 1:
            return (
                f"{self.category_name()} - {self.description} "
                f"({self.quantity} x ${format_money(self.price)}) = ${format_money(self.subtotal())}"
            )
        return f"{self.category_name()} - {self.description}: ${format_money(self.price)}"

    def __str__(self) -> str:
        return self.render()

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典"""
        return {
            'id': self.id,
            'quote_id': self.quote_id,
            'description': self.description,
            'price': self.price,
            'category': self.category,
            'quantity': self.quantity,
            'category_name': self.category_name(),
            'subtotal': self.subtotal(),
            'created_at': self.created_at,
            'updated_at': self.updated_at,
        }
