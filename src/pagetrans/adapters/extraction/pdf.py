# src/pagetrans/adapters/extraction/pdf.py
"""
PDF 文本提取 (PyMuPDF) 与基于文件系统的文档定位。
"""

from __future__ import annotations

from pathlib import Path

import fitz
import structlog

from pagetrans.core.exceptions import ValidationError

logger = structlog.get_logger(__name__)


class PyMuPdfTextExtractor:
    """提取单页纯文本。页码从 1 开始；越界页返回空字符串。"""

    def extract_page_text(self, document_path: Path, page: int) -> str:
        try:
            with fitz.open(document_path) as doc:
                if page < 1 or page > doc.page_count:
                    logger.debug(
                        "页码超出文档范围",
                        document=str(document_path),
                        page=page,
                        page_count=doc.page_count,
                    )
                    return ""
                text = doc.load_page(page - 1).get_text("text")
        except RuntimeError as e:
            # FileDataError 等 PyMuPDF 异常均派生自 RuntimeError
            logger.warning("无法读取 PDF", document=str(document_path), error=str(e))
            raise ValidationError("Invalid PDF document") from e
        return text.strip()


class FilesystemDocumentLocator:
    """在文档根目录下按文件名查找文档；拒绝越出根目录的路径。"""

    def __init__(self, directory: Path | str):
        self._root = Path(directory).resolve()

    def locate(self, document_id: str) -> Path | None:
        if not document_id or "\x00" in document_id:
            return None
        candidate = (self._root / document_id).resolve()
        if not candidate.is_relative_to(self._root):
            logger.warning("拒绝越出文档目录的路径", document_id=document_id)
            return None
        return candidate if candidate.is_file() else None
