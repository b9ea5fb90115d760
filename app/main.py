import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from app import config
from app.middleware.rate_limit import limiter, rate_limit_exceeded_handler
from app.routers import flashcards as flashcards_router
from app.services.logging import configure_logging, log_api_request
from app.services.monitoring import get_metrics, health_checker, observe_request


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="StudyMate Flashcards",
        description="Tolerant flashcard extraction from generative model output",
        version="1.0.0",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    @app.middleware("http")
    async def log_and_measure(request: Request, call_next):
        started = time.perf_counter()
        log_api_request(request)
        try:
            response = await call_next(request)
        except Exception as e:
            log_api_request(request, error=e)
            raise
        elapsed = time.perf_counter() - started
        response.headers["X-Process-Time"] = f"{elapsed:.6f}"
        response.response_time = elapsed
        observe_request(request.method, request.url.path, response.status_code, elapsed)
        log_api_request(request, response)
        return response

    @app.get("/health")
    async def health_check():
        """Liveness plus configuration and resource snapshot"""
        return health_checker.get_health_status()

    @app.get("/metrics")
    async def metrics():
        """Prometheus metrics endpoint"""
        return get_metrics()

    app.include_router(flashcards_router.router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=config.APP_HOST, port=config.APP_PORT)
