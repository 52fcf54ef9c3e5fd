"""
工具模块包
提供项目所需的通用工具和功能
"""

# 导出核心工具
from .config_manager import (
    config_manager,
    UnifiedConfigManager,
    LoggingConfig,
    DatabaseConfig,
    ApiConfig,
    BudgetConfig
)
from .exceptions import (
    BudgetError,
    ConfigurationError,
    DatabaseError,
    ValidationError,
    NotFoundError,
    ErrorCodes,
    create_error_response
)
from .logging_manager import (
    LogContext,
    log_execution,
    logging_manager,
    logger,
    LogConfig,
    initialize_logging,
    ModuleLoggers,
    budget_logger,
    db_logger,
    api_logger,
    config_logger,
    validation_logger,
    cli_logger
)
from .date_utils import now, ensure_datetime, format_date
from .money_utils import to_decimal, round_money, format_money, sum_money
from .validation import DataValidator
from .path_utils import BASE_DIR, CONFIG_DIR, LOG_DIR, DATA_DIR

# 版本信息
__version__ = "1.0.0"

__all__ = [
    # 配置管理
    "config_manager",
    "UnifiedConfigManager",
    "LoggingConfig",
    "DatabaseConfig",
    "ApiConfig",
    "BudgetConfig",

    # 异常处理
    "BudgetError",
    "ConfigurationError",
    "DatabaseError",
    "ValidationError",
    "NotFoundError",
    "ErrorCodes",
    "create_error_response",

    # 日志管理
    "LogContext",
    "log_execution",
    "logging_manager",
    "logger",
    "LogConfig",
    "initialize_logging",
    "ModuleLoggers",
    "budget_logger",
    "db_logger",
    "api_logger",
    "config_logger",
    "validation_logger",
    "cli_logger",

    # 工具函数
    "now",
    "ensure_datetime",
    "format_date",
    "to_decimal",
    "round_money",
    "format_money",
    "sum_money",
    "DataValidator",

    # 路径
    "BASE_DIR",
    "CONFIG_DIR",
    "LOG_DIR",
    "DATA_DIR",
]
