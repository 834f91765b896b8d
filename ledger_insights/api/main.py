"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from ledger_insights.api.middleware import RequestIDMiddleware, MetricsMiddleware
from ledger_insights.api.v1 import analysis, bills, transactions
from ledger_insights.infrastructure.observability.logging import setup_logging
from ledger_insights.config import settings

# Setup structured logging
setup_logging(settings.log_level, settings.service_name)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Ledger Insights",
        description="Bill recurrence and monthly financial analysis over a ledger API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(bills.router, prefix="/v1", tags=["bills"])
    app.include_router(analysis.router, prefix="/v1", tags=["analysis"])
    app.include_router(transactions.router, prefix="/v1", tags=["transactions"])

    return app


app = create_app()
