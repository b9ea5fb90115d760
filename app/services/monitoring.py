"""
Health checks and Prometheus metrics
"""
import os
import time

import psutil
import structlog
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

from app import config

logger = structlog.get_logger()

REQUEST_COUNT = Counter('http_requests_total', 'Total HTTP requests', ['method', 'endpoint', 'status'])
REQUEST_DURATION = Histogram('http_request_duration_seconds', 'HTTP request duration', ['method', 'endpoint'])
AI_GENERATION_REQUESTS = Counter('ai_generation_requests_total', 'Total AI generation requests', ['type', 'status'])
EXTRACTION_OUTCOMES = Counter('flashcard_extractions_total', 'Flashcard extraction outcomes', ['outcome'])
RECORDS_EXTRACTED = Counter('flashcard_records_extracted_total', 'Flashcards kept after validation')
RECORDS_DROPPED = Counter('flashcard_records_dropped_total', 'Flashcards dropped during validation')
SALVAGED_RESPONSES = Counter('flashcard_salvaged_responses_total', 'Truncated responses recovered by salvage')


def observe_request(method: str, path: str, status: int, seconds: float) -> None:
    REQUEST_COUNT.labels(method=method, endpoint=path, status=status).inc()
    REQUEST_DURATION.labels(method=method, endpoint=path).observe(seconds)


def record_extraction(result) -> None:
    """Update extraction counters from an ExtractionResult"""
    outcome = "ok" if result.ok else result.error.kind.value
    EXTRACTION_OUTCOMES.labels(outcome=outcome).inc()
    RECORDS_EXTRACTED.inc(len(result.records))
    if result.dropped:
        RECORDS_DROPPED.inc(result.dropped)
    if result.salvaged:
        SALVAGED_RESPONSES.inc()


class HealthChecker:
    def __init__(self):
        self.start_time = time.time()

    def check_llm(self) -> dict:
        # Extraction works without a key; only generation needs one
        if not os.getenv("OPENAI_API_KEY"):
            return {"status": "degraded", "message": "OPENAI_API_KEY not set; generation disabled"}
        return {"status": "healthy", "model": config.OPENAI_MODEL}

    def get_system_metrics(self) -> dict:
        try:
            memory = psutil.virtual_memory()
            return {
                "cpu_percent": psutil.cpu_percent(interval=None),
                "memory_percent": memory.percent,
                "uptime_seconds": round(time.time() - self.start_time, 1),
            }
        except psutil.Error as e:
            logger.error("system_metrics_failed", error=str(e))
            return {"error": str(e)}

    def get_health_status(self) -> dict:
        checks = {"llm": self.check_llm()}
        unhealthy = [name for name, check in checks.items() if check["status"] == "unhealthy"]
        return {
            "status": "unhealthy" if unhealthy else "healthy",
            "timestamp": time.time(),
            "checks": checks,
            "system_metrics": self.get_system_metrics(),
            "limits": {
                "max_input_chars": config.FLASHCARD_MAX_INPUT_CHARS,
                "max_flashcards": config.FLASHCARD_MAX_COUNT,
            },
            "unhealthy_components": unhealthy,
        }


health_checker = HealthChecker()


def get_metrics():
    """Render all metrics in the Prometheus text format"""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
