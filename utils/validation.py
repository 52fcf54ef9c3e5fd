"""
Data validation utilities for the budget system.
Provides functions to parse and normalize raw input values.
"""

from datetime import datetime, date
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Optional

from .date_utils import ensure_datetime
from .money_utils import to_decimal
from .logging_manager import validation_logger


class DataValidator:
    """数据验证器"""

    @staticmethod
    def is_blank(value: Any) -> bool:
        """None、空字符串或纯空白视为空"""
        if value is None:
            return True
        if isinstance(value, str):
            return not value.strip()
        return False

    @staticmethod
    def parse_decimal(value: Any) -> Optional[Decimal]:
        """解析金额，无法解析时返回 None"""
        if DataValidator.is_blank(value):
            return None
        try:
            result = to_decimal(value)
        except (InvalidOperation, ValueError, TypeError):
            validation_logger.debug(f"Invalid decimal value: {value!r}")
            return None
        if not result.is_finite():
            return None
        return result

    @staticmethod
    def parse_integer(value: Any) -> Optional[int]:
        """解析整数，只接受 int 和整数字符串"""
        if isinstance(value, bool) or DataValidator.is_blank(value):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            text = value.strip()
            if text.lstrip('+-').isdigit():
                return int(text)
        validation_logger.debug(f"Invalid integer value: {value!r}")
        return None

    @staticmethod
    def parse_datetime(value: Any) -> Optional[datetime]:
        """解析日期时间，支持 datetime、date 和 ISO 字符串"""
        if DataValidator.is_blank(value):
            return None
        if isinstance(value, (datetime, date)):
            return ensure_datetime(value)
        if isinstance(value, str):
            text = value.strip()
            if text[-1:] in ('Z', 'z'):
                text = text[:-1] + '+00:00'
            try:
                return ensure_datetime(datetime.fromisoformat(text))
            except ValueError:
                pass
            for fmt in ('%d/%m/%Y', '%Y/%m/%d', '%Y%m%d'):
                try:
                    return datetime.strptime(text, fmt)
                except ValueError:
                    continue
        validation_logger.debug(f"Invalid datetime value: {value!r}")
        return None

    @staticmethod
    def normalize_choice(value: Any, allowed: Iterable[str],
                         blank_default: str, fallback: str) -> str:
        """标准化枚举取值：空值使用默认值，未知值回退为 fallback"""
        if DataValidator.is_blank(value):
            return blank_default

        code = str(getattr(value, 'value', value)).strip().lower()
        if code in allowed:
            return code

        validation_logger.info(f"Unknown value {value!r}, falling back to '{fallback}'")
        return fallback
