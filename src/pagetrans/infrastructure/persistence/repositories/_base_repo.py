# src/pagetrans/infrastructure/persistence/repositories/_base_repo.py
from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Iterator

import structlog
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError

from pagetrans.core.exceptions import PersistenceError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger(__name__)


class BaseRepository:
    """所有 SQLAlchemy 仓库的基类。"""

    def __init__(self, session: "AsyncSession"):
        self._session = session

    @property
    def _dialect(self) -> str:
        return self._session.bind.dialect.name

    def _insert(self, table: Any) -> Any:
        """根据当前会话的方言返回支持 ON CONFLICT 的 insert 构造。"""
        if self._dialect == "postgresql":
            return pg_insert(table)
        return sqlite_insert(table)

    @contextmanager
    def _translate_errors(self, operation: str) -> Iterator[None]:
        """把驱动层异常包装为 PersistenceError。"""
        try:
            yield
        except SQLAlchemyError as e:
            logger.error("数据库操作失败", operation=operation, error=str(e))
            raise PersistenceError(f"{operation} 失败: {e}") from e
