from ._translation_worker import TranslationWorker

__all__ = ["TranslationWorker"]
