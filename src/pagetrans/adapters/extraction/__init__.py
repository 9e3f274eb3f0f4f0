from .pdf import FilesystemDocumentLocator, PyMuPdfTextExtractor

__all__ = ["FilesystemDocumentLocator", "PyMuPdfTextExtractor"]
