"""
预算领域模型包
提供报价单、明细和付款记录
"""

from .constants import (
    Category,
    PaymentMethod,
    CATEGORIES,
    PAYMENT_METHODS,
    CATEGORY_NAMES,
    PAYMENT_METHOD_NAMES,
    DEFAULT_CATEGORY,
    DEFAULT_PAYMENT_METHOD,
    FALLBACK_PAYMENT_METHOD,
    label_for,
    describe_choices
)
from .line_item import LineItem
from .payment import Payment, chronological, by_method
from .quote import Quote, generate_quote_id, REPORT_WIDTH

__all__ = [
    "Category",
    "PaymentMethod",
    "CATEGORIES",
    "PAYMENT_METHODS",
    "CATEGORY_NAMES",
    "PAYMENT_METHOD_NAMES",
    "DEFAULT_CATEGORY",
    "DEFAULT_PAYMENT_METHOD",
    "FALLBACK_PAYMENT_METHOD",
    "label_for",
    "describe_choices",
    "LineItem",
    "Payment",
    "chronological",
    "by_method",
    "Quote",
    "generate_quote_id",
    "REPORT_WIDTH",
]
