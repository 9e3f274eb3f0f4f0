# src/pagetrans/application/services/__init__.py
"""
应用服务层。每个服务对应一个或一组相关的业务操作。
"""

from ._job_monitor import JobMonitorService
from ._request_translation import RequestTranslationService
from ._translation_status import TranslationStatusService

__all__ = [
    "JobMonitorService",
    "RequestTranslationService",
    "TranslationStatusService",
]
