"""
Database connection management.
Provides the SQLAlchemy engine, session factory and transactional scope.
"""

import os
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from utils import db_logger, config_manager
from utils.exceptions import DatabaseError, ErrorCodes
from utils.path_utils import BASE_DIR


class DatabaseManager:
    """数据库管理器"""

    def __init__(self, db_url: Optional[str] = None, echo: Optional[bool] = None):
        database_config = config_manager.get_database_config()
        self.db_url = db_url or database_config.db_url
        self.echo = database_config.echo if echo is None else echo
        self.engine = None
        self.SessionLocal = None

    @property
    def is_memory(self) -> bool:
        database = make_url(self.db_url).database
        return self.db_url.startswith('sqlite') and (not database or database == ':memory:')

    def _resolve_url(self) -> str:
        """相对路径的 SQLite 数据库放在项目目录下，并确保目录存在"""
        url = make_url(self.db_url)
        if not url.drivername.startswith('sqlite') or self.is_memory:
            return self.db_url

        path = url.database
        if not os.path.isabs(path):
            path = os.path.join(str(BASE_DIR), path)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        return url.set(database=path).render_as_string(hide_password=False)

    def initialize(self):
        """初始化数据库连接"""
        try:
            url = self._resolve_url()
            engine_kwargs = {'echo': self.echo}
            if url.startswith('sqlite'):
                engine_kwargs['connect_args'] = {"check_same_thread": False}
                if self.is_memory:
                    # 内存数据库需要共享同一个连接
                    engine_kwargs['poolclass'] = StaticPool

            self.engine = create_engine(url, **engine_kwargs)

            if url.startswith('sqlite'):
                event.listen(self.engine, 'connect', _enable_sqlite_foreign_keys)

            self.SessionLocal = sessionmaker(
                autocommit=False,
                autoflush=False,
                expire_on_commit=False,
                bind=self.engine
            )

            db_logger.info(f"[Database] Database connection initialized: {make_url(url).render_as_string()}")

        except Exception as e:
            db_logger.error(f"[Database] Failed to initialize database: {e}")
            raise DatabaseError(
                f"Failed to initialize database: {e}",
                ErrorCodes.DB_CONNECTION_FAILED,
                {'db_url': self.db_url}
            ) from e

    def create_tables(self):
        """创建数据库表和索引"""
        from .models import Base

        try:
            Base.metadata.create_all(bind=self.engine)
            db_logger.info("[Database] Database tables created successfully")
        except Exception as e:
            db_logger.error(f"[Database] Failed to create tables: {e}")
            raise DatabaseError(
                f"Failed to create tables: {e}",
                ErrorCodes.DB_CONNECTION_FAILED
            ) from e

    def get_session(self) -> Session:
        """获取数据库会话"""
        if not self.SessionLocal:
            raise RuntimeError("Database not initialized")
        return self.SessionLocal()

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """事务范围：成功提交，异常回滚"""
        session = self.get_session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def close(self):
        """关闭数据库连接"""
        if self.engine:
            self.engine.dispose()
            db_logger.info("[Database] Database connections closed")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """确保外键约束生效"""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.close()
