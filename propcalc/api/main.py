"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from propcalc.api.middleware import RequestIDMiddleware, MetricsMiddleware
from propcalc.api.v1 import alerts, benchmarks, cgt, compliance, depreciation, entities, forecast, milestones, yields
from propcalc.infrastructure.observability.logging import setup_logging
from propcalc.config import settings

setup_logging(settings.log_level)

# (router module, OpenAPI tag), all mounted under /v1
V1_ROUTERS = (
    (cgt, "cgt"),
    (depreciation, "depreciation"),
    (yields, "yield"),
    (benchmarks, "benchmarks"),
    (forecast, "forecast"),
    (compliance, "compliance"),
    (entities, "entities"),
    (alerts, "alerts"),
    (milestones, "milestones"),
)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Property Calculation Gateway",
        description="Tax, depreciation, benchmarking and compliance calculators for property investors",
        version="0.1.0",
        docs_url="/docs" if settings.expose_docs else None,
        redoc_url="/redoc" if settings.expose_docs else None,
    )

    # Last added runs first, so every metric sees a request id
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    for module, tag in V1_ROUTERS:
        app.include_router(module.router, prefix="/v1", tags=[tag])

    return app


app = create_app()
