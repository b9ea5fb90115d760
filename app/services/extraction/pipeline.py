"""
Tolerant extraction of flashcard records from generative model output.

The pipeline runs five stages over one response:

    strip_noise -> locate_array -> (salvage_array) -> repair -> validate

It never raises for bad input. Every failure comes back as an
ExtractionError on the result; callers decide whether to ask the user to
retry. There is no state shared between calls.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional

import structlog

from app import config
from app.models import Record
from app.services.extraction.errors import (
    ExtractionError,
    ExtractionErrorKind,
    FlashcardExtractionError,
)
from app.services.extraction.preprocessor import strip_noise
from app.services.extraction.records import decode_array, validate_record
from app.services.extraction.repair import repair
from app.services.extraction.scanner import locate_array, salvage_array

logger = structlog.get_logger(__name__)


@dataclass
class ExtractionResult:
    records: List[Record] = field(default_factory=list)
    error: Optional[ExtractionError] = None
    dropped: int = 0
    salvaged: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> List[Record]:
        """Return the records or raise FlashcardExtractionError"""
        if self.error is not None:
            raise FlashcardExtractionError(self.error)
        return self.records

    @classmethod
    def failure(cls, kind: ExtractionErrorKind, message: str, **kwargs) -> "ExtractionResult":
        return cls(error=ExtractionError(kind, message), **kwargs)


def extract_records(
    raw_text: Optional[str],
    requested_count: int,
    *,
    max_input_chars: Optional[int] = None,
    diagnostics: Any = None,
) -> ExtractionResult:
    """Recover validated flashcard records from a raw model response.

    Args:
        raw_text: Untrusted model output
        requested_count: How many cards were asked for; only used in diagnostics
        max_input_chars: Size ceiling, defaults to FLASHCARD_MAX_INPUT_CHARS
        diagnostics: Optional structlog-style logger for non-fatal details

    Returns:
        ExtractionResult with records in source order, or an error
    """
    log = diagnostics if diagnostics is not None else logger
    limit = max_input_chars if max_input_chars is not None else config.FLASHCARD_MAX_INPUT_CHARS
    text = raw_text or ""
    requested = config.clamp_count(requested_count)

    if len(text) > limit:
        log.warning("extraction_failed", kind="too_large", length=len(text), limit=limit)
        return ExtractionResult.failure(
            ExtractionErrorKind.TOO_LARGE,
            f"Response is {len(text)} characters; limit is {limit}",
        )

    cleaned = strip_noise(text)
    span = locate_array(cleaned)
    if span is None:
        log.warning("extraction_failed", kind="not_found", length=len(text))
        return ExtractionResult.failure(
            ExtractionErrorKind.NOT_FOUND,
            "No JSON array found in response",
        )

    salvaged = False
    if span.truncated:
        candidate = salvage_array(cleaned, span.start)
        if candidate is None:
            log.warning("extraction_failed", kind="malformed", reason="no_complete_records")
            return ExtractionResult.failure(
                ExtractionErrorKind.MALFORMED,
                "Response was truncated before any complete record",
            )
        salvaged = True
        log.warning(
            "response_salvaged",
            kept_chars=len(candidate) - 1,
            discarded_chars=len(cleaned) - span.start - (len(candidate) - 1),
        )
    else:
        candidate = span.slice(cleaned)

    items = decode_array(repair(candidate))
    if items is None:
        log.warning("extraction_failed", kind="malformed", candidate_chars=len(candidate))
        return ExtractionResult.failure(
            ExtractionErrorKind.MALFORMED,
            "Located array is not valid JSON",
            salvaged=salvaged,
        )

    records: List[Record] = []
    dropped = 0
    for index, item in enumerate(items):
        record = validate_record(item)
        if record is None:
            dropped += 1
            log.debug("record_dropped", index=index)
            continue
        records.append(record)

    if dropped:
        log.info("records_dropped", dropped=dropped, kept=len(records))

    if not records:
        log.warning("extraction_failed", kind="empty", decoded=len(items))
        return ExtractionResult.failure(
            ExtractionErrorKind.EMPTY,
            "No valid flashcards in response",
            dropped=dropped,
            salvaged=salvaged,
        )

    if len(records) != requested:
        log.info("count_mismatch", requested=requested, extracted=len(records))

    return ExtractionResult(records=records, dropped=dropped, salvaged=salvaged)
