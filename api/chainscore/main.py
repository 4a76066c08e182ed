from contextlib import asynccontextmanager

from fastapi import FastAPI

from chainscore.config import settings
from chainscore.logging_config import configure_logging
from chainscore.metrics import metrics_endpoint
from chainscore.middleware.logging_middleware import RequestLoggingMiddleware
from chainscore.routers import addresses, reputation
from chainscore.services.narrative import AnthropicInsightNarrator


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Configure structured logging before anything else
    configure_logging()

    # Narrator skips itself (templated summaries) when no API key is set
    app.state.narrator = AnthropicInsightNarrator(
        api_key=settings.anthropic_api_key,
        model=settings.narrative_model,
        max_output_tokens=settings.narrative_max_output_tokens,
    )
    yield


app = FastAPI(
    title=f"{settings.app_name} API",
    version="0.1.0",
    debug=settings.debug,
    lifespan=lifespan,
)

# Register request logging middleware (runs on every request)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(reputation.router)
app.include_router(addresses.router)

# Prometheus metrics endpoint
app.get("/metrics")(metrics_endpoint)


@app.get("/health")
async def health_check():
    return {"status": "ok"}
