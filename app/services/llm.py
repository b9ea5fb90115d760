from __future__ import annotations

import os
from typing import Any, List, Optional

import structlog
from openai import APIConnectionError, APIError, APITimeoutError, OpenAI

from app import config
from app.models import Record
from app.services.extraction.errors import FlashcardGenerationError
from app.services.extraction.pipeline import extract_records
from app.services.logging import log_performance

logger = structlog.get_logger(__name__)


def get_client() -> OpenAI:
    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        raise FlashcardGenerationError("OPENAI_API_KEY not set", "NOT_CONFIGURED")
    # Use env var; set timeouts per-request via with_options()
    return OpenAI()


def truncate_content(content: str, max_chars: int) -> str:
    """Cut content to max_chars, preferring a sentence end or line break near the limit"""
    if len(content) <= max_chars:
        return content
    truncated = content[:max_chars]
    last_period = truncated.rfind(".")
    last_newline = truncated.rfind("\n")
    cutoff = max_chars
    if last_period > max_chars - 500:
        cutoff = last_period + 1
    elif last_newline > max_chars - 500:
        cutoff = last_newline
    return content[:cutoff].rstrip()


def build_flashcards_prompt(content: str, count: int) -> str:
    return (
        f"Generate exactly {count} flashcards from the study material below.\n\n"
        "OUTPUT FORMAT: Return ONLY a valid JSON array. Do not include any text, "
        "explanation, or markdown code blocks - just the raw JSON array starting "
        "with [ and ending with ].\n\n"
        "Each flashcard object must have these exact keys:\n"
        '- "question": the flashcard question (string)\n'
        '- "answer": the flashcard answer, 1-3 sentences (string)\n'
        '- "difficulty": one of "easy", "medium", or "hard" (string)\n\n'
        "Example of correct output format:\n"
        '[{"question":"What is X?","answer":"X is...","difficulty":"easy"},'
        '{"question":"How does Y work?","answer":"Y works by...","difficulty":"medium"}]\n\n'
        f"STUDY MATERIAL:\n{content}"
    )


@log_performance("generate_flashcards")
def generate_flashcards_from_text(
    note_text: str,
    count: int = config.FLASHCARD_DEFAULT_COUNT,
    client: Optional[Any] = None,
) -> List[Record]:
    """Ask the model for flashcards and extract validated records from its reply.

    Args:
        note_text: Study material to build cards from
        count: Requested number of cards, clamped to 1..FLASHCARD_MAX_COUNT
        client: OpenAI-compatible client; built from the environment when omitted

    Returns:
        Validated records in the order the model produced them

    Raises:
        FlashcardGenerationError: unusable input or a failed model call
        FlashcardExtractionError: the reply held no usable flashcards
    """
    text = (note_text or "").strip()
    if not text:
        raise FlashcardGenerationError("Cannot generate flashcards from empty content", "EMPTY_CONTENT")
    if len(text) < config.FLASHCARD_MIN_CONTENT_CHARS:
        raise FlashcardGenerationError(
            f"Content is too short; at least {config.FLASHCARD_MIN_CONTENT_CHARS} characters are needed",
            "CONTENT_TOO_SHORT",
        )

    requested = config.clamp_count(count)
    prompt = build_flashcards_prompt(truncate_content(text, config.FLASHCARD_MAX_NOTE_CHARS), requested)

    client = client or get_client()
    try:
        rsp = client.with_options(timeout=config.OPENAI_TIMEOUT_SECONDS).chat.completions.create(
            model=config.OPENAI_MODEL,
            messages=[{"role": "user", "content": prompt}],
            temperature=0.5,
        )
    except (APIConnectionError, APITimeoutError) as e:
        logger.error("flashcard_request_failed", error=str(e), network=True)
        raise FlashcardGenerationError("Network error. Please check your internet connection.", "NETWORK_ERROR") from e
    except APIError as e:
        logger.error("flashcard_request_failed", error=str(e))
        raise FlashcardGenerationError(f"Model API error: {e}", "API_ERROR") from e

    choice = rsp.choices[0] if rsp.choices else None
    content = choice.message.content if choice is not None else None
    if choice is not None and choice.finish_reason == "length":
        logger.warning("flashcard_response_truncated", requested=requested)

    result = extract_records(content, requested, diagnostics=logger.bind(requested=requested))
    records = result.unwrap()
    logger.info("flashcards_generated", requested=requested, extracted=len(records), salvaged=result.salvaged)
    return records
