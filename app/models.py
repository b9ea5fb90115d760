from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator


class Difficulty(str, Enum):
    easy = "easy"
    medium = "medium"
    hard = "hard"


class Record(BaseModel):
    """A validated flashcard: non-empty question and answer plus a difficulty."""

    model_config = ConfigDict(frozen=True)

    question: str
    answer: str
    difficulty: Difficulty = Difficulty.medium

    @field_validator("question", "answer")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class ErrorBody(BaseModel):
    kind: str
    message: str


class ExtractionResponse(BaseModel):
    records: list[Record]
    total_records: int
    dropped: int = 0
    salvaged: bool = False
