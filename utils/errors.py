"""
Application exceptions.
"""
from typing import Optional


class FDAChatError(Exception):
    """Base class for errors raised while answering a chat request."""


class QueryTranslationError(FDAChatError):
    """The language model did not return a usable structured search."""

    def __init__(self, message: str, raw_output: Optional[str] = None):
        super().__init__(message)
        self.raw_output = raw_output


class FDAApiError(FDAChatError):
    """The openFDA API request failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ChatStoreError(FDAChatError):
    """Reading or writing a persisted chat failed."""


class AnswerStreamError(FDAChatError):
    """The language model failed before the first answer token arrived."""
