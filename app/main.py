from __future__ import annotations

from fastapi import FastAPI
from fastapi.openapi.docs import get_redoc_html

from app.api.exception_handlers import register_exception_handlers
from app.api.schemas import HealthOut
from app.core.logging import setup_logging
from app.core.metrics import PrometheusMetricsMiddleware, metrics_router
from app.core.middleware.http_logging import HttpLoggingMiddleware
from app.resumes.router import router as resumes_router

setup_logging()

_REDOC_JS_URL = "https://cdn.jsdelivr.net/npm/redoc@2.1.4/bundles/redoc.standalone.js"


def create_app() -> FastAPI:
    # No lifespan hook: OpenAI settings are read on first use so the app imports and
    # starts without OPENAI_API_KEY / OPENAI_ASSISTANT_ID.
    app = FastAPI(
        title="Resume Scrubber API",
        description=(
            "Removes personally identifying information from resumes using a hosted LLM.\n\n"
            "Design principles:\n"
            "- Nothing is persisted server-side; results are returned for client-side storage.\n"
            "- All processing failures share one generic error response; causes are logged.\n"
            "- Logging and metrics never include resume text or model output."
        ),
        docs_url="/swagger",
        redoc_url=None,  # custom ReDoc page at /docs
        openapi_tags=[
            {
                "name": "health",
                "description": "Basic uptime check for load balancers and monitoring.",
            },
            {
                "name": "resumes",
                "description": (
                    "Anonymize resume text (single chat completion) or resume files "
                    "(assistant run over an uploaded file)."
                ),
            },
            {
                "name": "metrics",
                "description": "Prometheus-compatible metrics endpoint.",
            },
        ],
    )

    app.add_middleware(PrometheusMetricsMiddleware)
    app.add_middleware(HttpLoggingMiddleware)

    register_exception_handlers(app)

    @app.get("/docs", include_in_schema=False)
    async def redoc_docs():
        return get_redoc_html(
            openapi_url=app.openapi_url or "/openapi.json",
            title=f"{app.title} - ReDoc",
            redoc_js_url=_REDOC_JS_URL,
        )

    @app.get(
        "/health",
        response_model=HealthOut,
        tags=["health"],
        summary="Health check",
        description=(
            "Lightweight endpoint to verify the API process is running.\n\n"
            "Does not call the LLM provider or check that credentials are configured."
        ),
    )
    async def health() -> HealthOut:
        return HealthOut(status="ok")

    app.include_router(metrics_router)
    app.include_router(resumes_router)
    return app


app = create_app()
