from .langdetect_identifier import LangDetectIdentifier

__all__ = ["LangDetectIdentifier"]
