import structlog


def configure_logging():
    """Configure structlog with JSON rendering and contextvars for per-scan tracing."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,  # must stay first
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
