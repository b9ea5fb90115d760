from fastapi import APIRouter, Depends, Form, HTTPException, Request

from app import config
from app.middleware.rate_limit import ai_generation_limit, extraction_limit
from app.models import ExtractionResponse
from app.services import llm
from app.services.extraction.errors import (
    ExtractionErrorKind,
    FlashcardExtractionError,
    FlashcardGenerationError,
)
from app.services.extraction.pipeline import extract_records
from app.services.monitoring import AI_GENERATION_REQUESTS, record_extraction


router = APIRouter(prefix="/flashcards", tags=["flashcards"])

# Input problems the caller can fix; everything else is an upstream failure
_CLIENT_ERROR_CODES = {"EMPTY_CONTENT", "CONTENT_TOO_SHORT"}


def get_llm_client():
    try:
        return llm.get_client()
    except FlashcardGenerationError as e:
        raise HTTPException(status_code=503, detail=e.message)


def _extraction_detail(kind: str, message: str) -> dict:
    return {"kind": kind, "message": message, "retry": True}


@router.post("/extract", response_model=ExtractionResponse)
@extraction_limit()
def extract_flashcards(
    request: Request,
    raw_text: str = Form(...),
    requested_count: int = Form(config.FLASHCARD_DEFAULT_COUNT),
):
    """Extract validated flashcards from a raw model response"""
    result = extract_records(raw_text, requested_count)
    record_extraction(result)
    if not result.ok:
        status = 413 if result.error.kind == ExtractionErrorKind.TOO_LARGE else 422
        raise HTTPException(
            status_code=status,
            detail=_extraction_detail(result.error.kind.value, result.error.message),
        )
    return ExtractionResponse(
        records=result.records,
        total_records=len(result.records),
        dropped=result.dropped,
        salvaged=result.salvaged,
    )


@router.post("/generate", response_model=ExtractionResponse)
@ai_generation_limit()
def generate_flashcards(
    request: Request,
    note_text: str = Form(...),
    count: int = Form(config.FLASHCARD_DEFAULT_COUNT),
    client=Depends(get_llm_client),
):
    """Generate flashcards for a note with the model"""
    try:
        records = llm.generate_flashcards_from_text(note_text, count=count, client=client)
    except FlashcardExtractionError as e:
        AI_GENERATION_REQUESTS.labels(type="flashcards", status=e.code).inc()
        raise HTTPException(status_code=422, detail=_extraction_detail(e.code, e.message))
    except FlashcardGenerationError as e:
        AI_GENERATION_REQUESTS.labels(type="flashcards", status="error").inc()
        status = 400 if e.code in _CLIENT_ERROR_CODES else 502
        raise HTTPException(status_code=status, detail={"code": e.code, "message": e.message})

    AI_GENERATION_REQUESTS.labels(type="flashcards", status="success").inc()
    return ExtractionResponse(records=records, total_records=len(records))
