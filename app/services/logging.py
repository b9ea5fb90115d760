"""
Structured logging configuration
"""
import structlog
import logging
import sys
import time
from functools import wraps

from app import config

_SHARED_PROCESSORS = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
]


def configure_logging(level: str = None, json_logs: bool = True):
    """Configure structlog on top of stdlib logging.

    JSON lines by default; ``json_logs=False`` switches to the console
    renderer for local runs.
    """
    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=_SHARED_PROCESSORS + [renderer],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, (level or config.LOG_LEVEL).upper(), logging.INFO),
    )

    # Client libraries are chatty at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)


def get_logger(name: str = None):
    """Get a structured logger"""
    return structlog.get_logger(name)


def log_performance(func_name: str):
    """Decorator that logs duration and outcome of a call.

    List results also log their length as ``result_size``.
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            logger = get_logger("performance")
            started = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error(
                    "function_failed",
                    function=func_name,
                    duration_seconds=round(time.perf_counter() - started, 4),
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise
            fields = {"result_size": len(result)} if isinstance(result, list) else {}
            logger.info(
                "function_completed",
                function=func_name,
                duration_seconds=round(time.perf_counter() - started, 4),
                **fields,
            )
            return result
        return wrapper
    return decorator


def log_api_request(request, response=None, error=None):
    """Log one HTTP request at start, completion or failure"""
    logger = get_logger("api")
    log_data = {
        "method": request.method,
        "path": request.url.path,
        "client_ip": request.client.host if request.client else "unknown",
    }
    if response is not None:
        logger.info(
            "api_request_completed",
            status_code=response.status_code,
            response_time=getattr(response, "response_time", None),
            **log_data,
        )
    elif error is not None:
        logger.error(
            "api_request_failed",
            error=str(error),
            status_code=getattr(error, "status_code", 500),
            **log_data,
        )
    else:
        logger.debug("api_request_started", **log_data)
