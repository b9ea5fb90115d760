"""
Error kinds and exceptions for flashcard extraction and generation
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ExtractionErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    MALFORMED = "malformed"
    EMPTY = "empty"
    TOO_LARGE = "too_large"


@dataclass(frozen=True)
class ExtractionError:
    kind: ExtractionErrorKind
    message: str


class FlashcardError(Exception):
    """Base exception for flashcard errors."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code


class FlashcardExtractionError(FlashcardError):
    """Raised when a model response yields no usable flashcards."""

    def __init__(self, error: ExtractionError):
        super().__init__(error.message, code=error.kind.value)
        self.kind = error.kind


class FlashcardGenerationError(FlashcardError):
    """Raised when the model call itself fails or the input is unusable."""
    pass
