from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from research_assistant.api.exception_handlers import register_exception_handlers
from research_assistant.api.schemas import HealthOut
from research_assistant.core.logging import setup_logging
from research_assistant.core.metrics import PrometheusMetricsMiddleware, metrics_router
from research_assistant.core.middleware.http_logging import HttpLoggingMiddleware
from research_assistant.core.settings import get_settings
from research_assistant.research.router import router as research_router

setup_logging()

logger = logging.getLogger("research_assistant")


def create_app() -> FastAPI:
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # A missing key is reported but does not stop the server; each /api
        # request answers 500 until it is configured.
        if get_settings().has_api_key:
            logger.info("OpenRouter API key is loaded.")
        else:
            logger.error("OpenRouter API key is NOT loaded. Set OPENROUTER_API_KEY.")
        yield

    app = FastAPI(
        title="Research Assistant Backend",
        description=(
            "Proxies research-assistant requests from the browser to a chat-completion API.\n\n"
            "Each /api route injects a fixed prompt, makes one completion call and reshapes "
            "the model's reply into JSON. Nothing is stored between requests."
        ),
        lifespan=lifespan,
        openapi_tags=[
            {
                "name": "health",
                "description": "Liveness checks for load balancers and monitoring.",
            },
            {
                "name": "research",
                "description": "Search, outline extraction, insights, form population and chat.",
            },
            {
                "name": "monitoring",
                "description": "Prometheus-compatible metrics endpoint.",
            },
        ],
    )

    app.add_middleware(PrometheusMetricsMiddleware)
    app.add_middleware(HttpLoggingMiddleware)
    # Added last so it is outermost: preflight requests are answered before logging/metrics.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    register_exception_handlers(app)

    @app.get("/", response_class=PlainTextResponse, tags=["health"], summary="Liveness text")
    async def root() -> str:
        return "Research Assistant Backend is running!"

    @app.get(
        "/health",
        response_model=HealthOut,
        tags=["health"],
        summary="Health check",
        description=(
            "Lightweight endpoint to verify the API process is running.\n\n"
            "Does not call the completion API and does not require the API key."
        ),
    )
    async def health() -> HealthOut:
        return HealthOut(status="ok")

    app.include_router(metrics_router)
    app.include_router(research_router)
    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn on the configured port."""

    import uvicorn

    settings = get_settings()
    logger.info("Research Assistant Backend listening on port %s", settings.port)
    uvicorn.run(
        "research_assistant.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )
