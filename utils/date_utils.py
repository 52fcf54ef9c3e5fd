"""
Date and time utilities for the budget system.
Provides helpers for the current time and display formatting.
"""

from datetime import datetime, date, time
from typing import Optional, Union


DISPLAY_DATE_FORMAT = "%d/%m/%Y"


def now() -> datetime:
    """获取当前本地时间（不带时区，与数据库存储一致）"""
    return datetime.now()


def ensure_datetime(value: Union[date, datetime]) -> Optional[datetime]:
    """确保为 datetime 类型，date 转换为当天零点"""
    if value is None:
        return None
    if isinstance(value, datetime):
        # 带时区的时间转换为本地时间后去掉时区
        if value.tzinfo is not None:
            return value.astimezone().replace(tzinfo=None)
        return value
    return datetime.combine(value, time.min)


def format_date(value: Union[date, datetime], fmt: str = DISPLAY_DATE_FORMAT) -> str:
    """格式化显示日期，默认 DD/MM/YYYY"""
    if value is None:
        return ""
    return value.strftime(fmt)
