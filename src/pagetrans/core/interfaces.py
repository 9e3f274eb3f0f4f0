# src/pagetrans/core/interfaces.py
"""
定义了 PageTrans 系统中所有基础设施和外部协作者的抽象接口协议 (Protocols)。
这些接口是系统内部解耦的关键，高层模块（如 Application 层）应依赖于这些
抽象接口，而不是具体的实现类。
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from .types import LanguageGuess, WorkItem


class CacheHandler(Protocol):
    """定义了共享键值缓存的接口（翻译缓存与去重标记都建立在其上）。"""

    async def get(self, key: str) -> Any | None:
        """从缓存中获取一个值。"""
        ...

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """向缓存中设置一个值，并可选地设置过期时间（秒）。"""
        ...

    async def delete(self, key: str) -> None:
        """从缓存中删除一个键。"""
        ...

    async def add(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """仅当键不存在时写入（原子 set-if-absent）；写入成功返回 True。"""
        ...


class TextExtractor(Protocol):
    """从 PDF 中提取单页文本。空字符串表示该页没有文本。"""

    def extract_page_text(self, document_path: Path, page: int) -> str: ...


class DocumentLocator(Protocol):
    """把文档标识解析为可读取的文件路径；文档不存在时返回 None。"""

    def locate(self, document_id: str) -> Path | None: ...


class LanguageIdentifier(Protocol):
    """给定文本，返回语言代码的最佳猜测及置信度。"""

    def detect(self, text: str) -> LanguageGuess: ...


class AiTranslator(Protocol):
    """把文本翻译为目标语言；网络或超时问题抛出 TransientTranslationError。"""

    async def translate(self, text: str, target_language: str) -> str: ...


class WorkQueue(Protocol):
    """任务队列的生产者一侧。"""

    async def enqueue(self, item: WorkItem) -> None: ...


class Delivery(Protocol):
    """一次（至少一次语义的）投递。"""

    item: WorkItem
    attempt: int


class WorkQueueConsumer(Protocol):
    """任务队列的消费者一侧。重试与死信策略归属于实现该接口的传输层。"""

    async def receive(self, timeout: float) -> Delivery | None: ...

    async def ack(self, delivery: Delivery) -> None: ...

    async def nack(self, delivery: Delivery, error: BaseException) -> None: ...
