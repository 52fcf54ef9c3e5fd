"""
Money utilities for the budget system.
All monetary arithmetic uses decimal.Decimal; display uses two fractional digits.
"""

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Iterable, Union

CENT = Decimal("0.01")
ZERO = Decimal("0")
MAX_MONEY = Decimal("99999999.99")

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    """转换为 Decimal，浮点数先转字符串以避免二进制误差"""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise InvalidOperation(f"Boolean is not a monetary value: {value}")
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, str):
        return Decimal(value.strip())
    return Decimal(value)


def round_money(value: Number) -> Decimal:
    """四舍五入到分"""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(value: Number) -> str:
    """格式化金额，例如 150 -> '150.00'"""
    return f"{round_money(value)}"


def sum_money(values: Iterable[Number]) -> Decimal:
    """精确求和，空序列返回 0"""
    return sum((to_decimal(v) for v in values), ZERO)


def has_cents_precision(value: Number) -> bool:
    """是否最多两位小数"""
    decimal_value = to_decimal(value)
    return decimal_value == decimal_value.quantize(CENT)
