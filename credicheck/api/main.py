"""FastAPI application factory"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from credicheck.api.middleware import RequestIDMiddleware, MetricsMiddleware
from credicheck.api.v1 import accounts, pricing, purchases, reports, stats, transactions, wallets
from credicheck.infrastructure.database.session import init_db
from credicheck.infrastructure.observability.logging import setup_logging
from credicheck.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="CrediCheck Gateway",
        description="Credit report purchasing, partner wallets and report generation",
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
    app.include_router(accounts.router, prefix="/v1", tags=["accounts"])
    app.include_router(pricing.router, prefix="/v1", tags=["pricing"])
    app.include_router(purchases.router, prefix="/v1", tags=["purchases"])
    app.include_router(reports.router, prefix="/v1", tags=["reports"])
    app.include_router(wallets.router, prefix="/v1", tags=["wallets"])
    app.include_router(transactions.router, prefix="/v1", tags=["transactions"])
    app.include_router(stats.router, prefix="/v1", tags=["stats"])

    return app


app = create_app()
