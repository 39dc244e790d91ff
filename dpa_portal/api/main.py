"""FastAPI application factory"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from dpa_portal.api.middleware import RequestIDMiddleware, MetricsMiddleware
from dpa_portal.api.v1 import dashboard, financial_year, loans, statement
from dpa_portal.infrastructure.database.session import init_db
from dpa_portal.infrastructure.observability.logging import setup_logging
from dpa_portal.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="DPA Financial Portal",
        description="Financial-year statements, dashboards and loan figures for the savings association",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
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
    app.include_router(financial_year.router, prefix="/v1", tags=["financial-year"])
    app.include_router(statement.router, prefix="/v1", tags=["statements"])
    app.include_router(dashboard.router, prefix="/v1", tags=["dashboards"])
    app.include_router(loans.router, prefix="/v1", tags=["loans"])

    return app


app = create_app()
