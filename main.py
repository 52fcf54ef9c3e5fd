"""
Main entry point for the Budget System.
Provides command-line interface and system initialization.
"""

import argparse
import json
import sys
from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional

from utils import cli_logger, api_logger, config_manager, initialize_logging
from utils.exceptions import BudgetError, NotFoundError
from utils.money_utils import format_money
from budget_manager import BudgetManager, budget_manager


def _json_default(value: Any) -> Any:
    """JSON 序列化：金额保留两位小数，日期使用 ISO 格式"""
    if isinstance(value, Decimal):
        return format_money(value)
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class BudgetSystem:
    """预算系统主类"""

    def __init__(self, manager: Optional[BudgetManager] = None, out=None):
        self.config = config_manager
        self.manager = manager or budget_manager
        self.out = out or sys.stdout

    def _print(self, text: str = ""):
        print(text, file=self.out)

    def initialize(self):
        """初始化系统"""
        cli_logger.info("[Main] Initializing Budget System...")
        self.manager.initialize()
        cli_logger.info("[Main] Budget System initialized successfully")

    def init_db(self):
        """创建数据库表"""
        self.initialize()
        self._print("Database initialized")

    def list_quotes(self, customer: Optional[str] = None, pending: bool = False):
        """显示报价单列表"""
        quotes = self.manager.pending_quotes() if pending else self.manager.list_quotes(customer=customer)
        if pending and customer:
            needle = customer.strip().lower()
            quotes = [quote for quote in quotes if needle in (quote.customer_name or "").lower()]

        if not quotes:
            self._print("No quotes found")
            return

        for quote in quotes:
            status = "PAGADO COMPLETO" if quote.fully_paid() else "PENDIENTE"
            self._print(
                f"#{quote.id:<6} {quote.customer_name:<30} "
                f"total ${format_money(quote.total()):>10}  "
                f"saldo ${format_money(quote.remaining_balance()):>10}  {status}"
            )

    def show_quote(self, quote_id: str):
        """显示报价单文本报告"""
        self._print(self.manager.render_quote(quote_id))

    def show_summary(self, quote_id: str):
        """以 JSON 格式显示报价单摘要"""
        summary = self.manager.get_summary(quote_id)
        self._print(json.dumps(summary, default=_json_default, ensure_ascii=False, indent=2))

    def start_api_server(self, host: str = None, port: int = None):
        """启动API服务器"""
        from api.app import run_server

        api_config = self.config.get_api_config()
        final_host = host if host is not None else api_config.host
        final_port = port if port is not None else api_config.port

        api_logger.info(f"[Main] Starting API server on {final_host}:{final_port}...")
        run_server(host=final_host, port=final_port)


def create_parser():
    """创建命令行参数解析器"""
    parser = argparse.ArgumentParser(
        description="Budget System - 眼镜店报价与付款管理系统",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
使用示例:
  python main.py api --host 0.0.0.0 --port 8000  # 启动API服务器
  python main.py init-db                        # 创建数据库表
  python main.py list --customer garcia         # 按客户搜索报价单
  python main.py list --pending                 # 显示未付清的报价单
  python main.py show 1                         # 显示报价单文本报告
  python main.py summary 1                      # 以 JSON 显示报价单摘要
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='可用命令')

    # API服务器
    api_parser = subparsers.add_parser('api', help='启动API服务器')
    api_parser.add_argument('--host', default=None, help='监听地址 (默认使用配置文件)')
    api_parser.add_argument('--port', type=int, default=None, help='监听端口 (默认使用配置文件)')

    # 数据库
    subparsers.add_parser('init-db', help='创建数据库表')

    # 报价单
    list_parser = subparsers.add_parser('list', help='显示报价单列表')
    list_parser.add_argument('--customer', type=str, help='按客户名称模糊搜索')
    list_parser.add_argument('--pending', action='store_true', help='只显示未付清的报价单')

    show_parser = subparsers.add_parser('show', help='显示报价单文本报告')
    show_parser.add_argument('quote_id', help='报价单ID')

    summary_parser = subparsers.add_parser('summary', help='以 JSON 显示报价单摘要')
    summary_parser.add_argument('quote_id', help='报价单ID')

    return parser


def main(argv: Optional[List[str]] = None, system: Optional[BudgetSystem] = None) -> int:
    """主函数"""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    system = system or BudgetSystem()

    try:
        if args.command == 'api':
            system.start_api_server(host=args.host, port=args.port)

        elif args.command == 'init-db':
            system.init_db()

        elif args.command == 'list':
            system.list_quotes(customer=args.customer, pending=args.pending)

        elif args.command == 'show':
            system.show_quote(args.quote_id)

        elif args.command == 'summary':
            system.show_summary(args.quote_id)

        else:
            parser.print_help()

    except KeyboardInterrupt:
        cli_logger.info("[Main] Received keyboard interrupt")
    except NotFoundError as e:
        cli_logger.error(f"[Main] {e.message}")
        return 1
    except BudgetError as e:
        cli_logger.error(f"[Main] System error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    initialize_logging()
    sys.exit(main())
