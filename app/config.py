import os

# Flashcard extraction
FLASHCARD_MAX_INPUT_CHARS = int(os.getenv("FLASHCARD_MAX_INPUT_CHARS", "100000"))
FLASHCARD_MAX_COUNT = int(os.getenv("FLASHCARD_MAX_COUNT", "50"))
FLASHCARD_DEFAULT_COUNT = int(os.getenv("FLASHCARD_DEFAULT_COUNT", "10"))
FLASHCARD_MIN_CONTENT_CHARS = int(os.getenv("FLASHCARD_MIN_CONTENT_CHARS", "100"))
FLASHCARD_MAX_NOTE_CHARS = int(os.getenv("FLASHCARD_MAX_NOTE_CHARS", "120000"))

# Model client
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
OPENAI_TIMEOUT_SECONDS = float(os.getenv("OPENAI_TIMEOUT_SECONDS", "30"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Server
APP_HOST = os.getenv("APP_HOST", "0.0.0.0")
APP_PORT = int(os.getenv("APP_PORT", "8000"))


def clamp_count(count: int) -> int:
    """Clamp a requested card count into 1..FLASHCARD_MAX_COUNT"""
    return max(1, min(int(count), FLASHCARD_MAX_COUNT))
