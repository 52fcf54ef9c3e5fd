"""
统一异常定义模块
提供预算系统的异常类和错误处理机制
"""

from typing import Optional, Dict, Any, List


class BudgetError(Exception):
    """预算系统基础异常类"""

    def __init__(self, message: str, error_code: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


class ConfigurationError(BudgetError):
    """配置相关错误"""
    pass


class DatabaseError(BudgetError):
    """数据库相关错误"""
    pass


class ValidationError(BudgetError):
    """数据验证错误，携带字段级错误信息"""

    def __init__(self, errors: Dict[str, List[str]], error_code: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None):
        self.errors = {field: list(messages) for field, messages in errors.items()}
        super().__init__(
            "; ".join(self.full_messages) or "Validation failed",
            error_code or ErrorCodes.VALIDATION_FAILED,
            context
        )

    @property
    def full_messages(self) -> List[str]:
        """生成完整的错误描述，例如 "Price must be greater than 0" """
        messages = []
        for field, field_messages in self.errors.items():
            label = field.replace('_', ' ').capitalize()
            for message in field_messages:
                messages.append(f"{label} {message}")
        return messages


class NotFoundError(BudgetError):
    """资源不存在错误"""

    def __init__(self, resource: str, resource_id: Any, error_code: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(
            f"{resource} {resource_id} not found",
            error_code or ErrorCodes.NOT_FOUND,
            context
        )


# 错误代码常量
class ErrorCodes:
    """错误代码常量"""

    # 配置错误
    CONFIG_NOT_FOUND = "CONFIG_001"
    CONFIG_INVALID_FORMAT = "CONFIG_002"
    CONFIG_LOAD_ERROR = "CONFIG_003"

    # 数据库错误
    DB_CONNECTION_FAILED = "DB_001"
    DB_QUERY_FAILED = "DB_002"
    DB_TRANSACTION_FAILED = "DB_003"

    # 验证错误
    VALIDATION_FAILED = "VAL_001"
    VALIDATION_INVALID_REQUEST = "VAL_002"

    # 资源不存在
    NOT_FOUND = "NF_001"
    QUOTE_NOT_FOUND = "NF_002"
    LINE_ITEM_NOT_FOUND = "NF_003"
    PAYMENT_NOT_FOUND = "NF_004"


def create_error_response(error: BudgetError,
                          include_traceback: bool = False) -> Dict[str, Any]:
    """创建标准化的错误响应"""
    response = {
        "error": True,
        "error_code": error.error_code,
        "message": error.message,
        "context": error.context
    }

    if isinstance(error, ValidationError):
        response["errors"] = error.full_messages

    if include_traceback:
        import traceback
        response["traceback"] = traceback.format_exc()

    return response
