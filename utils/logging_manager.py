"""
统一的日志管理模块
整合基础日志配置和高级日志功能
"""

import logging
import sys
import os
import time
import functools
import traceback
import threading
from pathlib import Path
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler
from typing import Optional, Dict, Any, Callable
from dataclasses import dataclass

from .exceptions import BudgetError, ErrorCodes
from .config_manager import config_manager
from .path_utils import BASE_DIR

# 获取 logging_manager 模块的专用日志器
logger = logging.getLogger("LoggingManager")


@dataclass
class LogConfig:
    """日志配置"""
    level: str = "INFO"
    format: str = "[%(levelname)s][%(asctime)s][%(filename)s:%(lineno)d] - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    file_max_bytes: int = 10 * 1024 * 1024  # 10MB
    file_backup_count: int = 5
    enable_console: bool = True
    enable_file: bool = True
    log_directory: Optional[str] = None
    log_filename: str = "budget.log"
    rotation_type: str = "size"  # "size" or "time"


class LoggingManager:
    """统一的日志管理器"""

    _instance = None
    _lock = threading.Lock()

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if hasattr(self, '_initialized'):
            return

        self._initialized = True
        self._loggers: Dict[str, logging.Logger] = {}
        self._config = LogConfig()

    def configure(self, config: LogConfig = None):
        """配置日志系统"""
        if config:
            self._config = config

        if self._config.log_directory is None:
            self._config.log_directory = str(BASE_DIR / "log")

        root_logger = logging.getLogger()
        root_logger.setLevel(getattr(logging, self._config.level.upper(), logging.INFO))

        self._clear_handlers(root_logger)

        if self._config.enable_console:
            self._add_console_handler(root_logger)

        if self._config.enable_file:
            Path(self._config.log_directory).mkdir(parents=True, exist_ok=True)
            self._add_file_handler(root_logger)

    def configure_from_config_file(self):
        """从配置文件加载日志配置"""
        try:
            logging_config = config_manager.get_logging_config()

            # 相对路径相对于项目根目录
            log_directory = logging_config.file_config.directory
            if not os.path.isabs(log_directory):
                log_directory = str(BASE_DIR / log_directory)

            rotation = logging_config.file_config.rotation or {}

            config = LogConfig(
                level=logging_config.level,
                format=logging_config.format,
                date_format=logging_config.date_format,
                file_max_bytes=rotation.get('max_bytes_mb', 10) * 1024 * 1024,
                file_backup_count=rotation.get('backup_count', 5),
                enable_console=logging_config.console_config.enabled,
                enable_file=logging_config.file_config.enabled,
                log_directory=log_directory,
                log_filename=logging_config.file_config.filename,
                rotation_type=rotation.get('type', 'size')
            )

            self.configure(config)
            self._configure_module_loggers(logging_config.modules)

            return logging_config

        except Exception as e:
            raise BudgetError(
                f"Failed to configure logging from config file: {str(e)}",
                ErrorCodes.CONFIG_INVALID_FORMAT
            ) from e

    def _configure_module_loggers(self, modules_config: Dict[str, Any]):
        """配置模块特定的日志器"""
        for module_name, module_config in modules_config.items():
            module_logger = self.get_logger(module_name)
            if module_config.enabled:
                module_logger.setLevel(getattr(logging, module_config.level.upper(), logging.INFO))
            else:
                # 模块被禁用时只保留 CRITICAL 级别
                module_logger.setLevel(logging.CRITICAL)

    def _clear_handlers(self, logger: logging.Logger):
        """清除现有处理器"""
        for handler in logger.handlers[:]:
            handler.close()
            logger.removeHandler(handler)

    def _add_console_handler(self, logger: logging.Logger):
        """添加控制台处理器"""
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(logging.Formatter(
            self._config.format,
            datefmt=self._config.date_format
        ))
        logger.addHandler(console_handler)

    def _add_file_handler(self, logger: logging.Logger):
        """添加文件处理器"""
        log_file_path = Path(self._config.log_directory) / self._config.log_filename

        if self._config.rotation_type == "size":
            file_handler = RotatingFileHandler(
                filename=log_file_path,
                maxBytes=self._config.file_max_bytes,
                backupCount=self._config.file_backup_count,
                encoding="utf-8"
            )
        else:  # time rotation
            file_handler = TimedRotatingFileHandler(
                filename=log_file_path,
                when="midnight",
                interval=1,
                backupCount=self._config.file_backup_count,
                encoding="utf-8"
            )

        file_handler.setFormatter(logging.Formatter(
            self._config.format,
            datefmt=self._config.date_format
        ))
        logger.addHandler(file_handler)

    def get_logger(self, name: str = None) -> logging.Logger:
        """获取日志记录器"""
        if name is None:
            name = "budget"

        if name not in self._loggers:
            self._loggers[name] = logging.getLogger(name)

        return self._loggers[name]


class LogContext:
    """日志上下文管理器"""

    def __init__(self, module: str, operation: str = None,
                 quote_id: Any = None, extra_context: Dict[str, Any] = None):
        self.module = module
        self.operation = operation
        self.quote_id = quote_id
        self.extra_context = {k: v for k, v in (extra_context or {}).items()
                              if not k.startswith('_')}
        self.start_time = None
        self.logger = logging_manager.get_logger(module)

    def __enter__(self):
        self.start_time = time.time()
        self._log_start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = time.time() - self.start_time
        if exc_type is not None:
            self._log_error(exc_val, duration, exc_tb)
        else:
            self._log_success(duration)

    def _get_context_str(self) -> str:
        """获取上下文字符串"""
        parts = [self.module]

        if self.operation:
            parts.append(self.operation)

        if self.quote_id is not None:
            parts.append(f"Quote:{self.quote_id}")

        for key, value in self.extra_context.items():
            parts.append(f"{key}:{value}")

        return ".".join(parts)

    def _log_start(self):
        """记录开始日志"""
        context = self._get_context_str()
        self.logger.debug(f"[{context}] Starting operation")

    def _log_success(self, duration: float):
        """记录成功日志"""
        context = self._get_context_str()
        self.logger.info(f"[{context}] Operation completed in {duration:.3f}s")

    def _log_error(self, error: Exception, duration: float, tb):
        """记录错误日志"""
        context = self._get_context_str()
        error_msg = f"[{context}] Operation failed in {duration:.3f}s: {str(error)}"

        # 业务异常只记录警告
        if isinstance(error, BudgetError):
            self.logger.warning(error_msg)
        else:
            self.logger.error(error_msg)
            self.logger.debug(f"[{context}] Traceback: {''.join(traceback.format_tb(tb))}")


def log_execution(module: str, operation: str = None):
    """日志装饰器"""
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            quote_id = kwargs.get('quote_id')
            if quote_id is None and len(args) > 1 and isinstance(args[1], (int, str)):
                quote_id = args[1]

            with LogContext(module, operation or func.__name__, quote_id=quote_id):
                return func(*args, **kwargs)

        return wrapper

    return decorator


# 全局日志管理器实例
logging_manager = LoggingManager()

# 兼容性：保持原有的 logger 接口
logger = logging_manager.get_logger()


class ModuleLoggers:
    """模块专用日志器集合"""

    Budget = logging_manager.get_logger("Budget")
    Database = logging_manager.get_logger("Database")
    API = logging_manager.get_logger("API")
    Config = logging_manager.get_logger("Config")
    Validation = logging_manager.get_logger("Validation")
    CLI = logging_manager.get_logger("CLI")


# 便捷的模块日志器别名
budget_logger = ModuleLoggers.Budget
db_logger = ModuleLoggers.Database
api_logger = ModuleLoggers.API
config_logger = ModuleLoggers.Config
validation_logger = ModuleLoggers.Validation
cli_logger = ModuleLoggers.CLI


def initialize_logging(use_config_file: bool = True):
    """初始化日志系统"""
    try:
        if use_config_file:
            logging_config = logging_manager.configure_from_config_file()
            logger.info(
                f"Logging system initialized from config file "
                f"(level={logging_config.level}, file={logging_config.file_config.enabled})"
            )
        else:
            logging_manager.configure()
            logger.info("Logging system initialized with default config")
        return True

    except Exception as e:
        print(f"Failed to initialize logging: {e}")
        if use_config_file:
            print("Falling back to default configuration...")
            logging_manager.configure()
            logger.info("Logging system initialized with fallback config")
            return True

        raise BudgetError(
            f"Failed to initialize logging: {str(e)}",
            ErrorCodes.CONFIG_INVALID_FORMAT
        ) from e
