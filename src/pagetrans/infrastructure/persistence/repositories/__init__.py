# src/pagetrans/infrastructure/persistence/repositories/__init__.py
"""
本包包含了所有 IRepository 接口的 SQLAlchemy 实现。
"""
from ._job_repo import SqlAlchemyJobRepository
from ._translation_repo import SqlAlchemyTranslationRepository

__all__ = [
    "SqlAlchemyTranslationRepository",
    "SqlAlchemyJobRepository",
]
