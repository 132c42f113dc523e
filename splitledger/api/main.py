"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from splitledger.api.middleware import RequestIDMiddleware, MetricsMiddleware
from splitledger.api.v1 import dues, payments, settlement
from splitledger.domain.naming import InMemoryNameCache
from splitledger.infrastructure.observability.logging import setup_logging
from splitledger.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Splitledger",
        description="Debt settlement for shared group expenses",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Display names cached per application instance
    app.state.name_cache = InMemoryNameCache()

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
    app.include_router(dues.router, prefix="/v1", tags=["dues"])
    app.include_router(settlement.router, prefix="/v1", tags=["settlement"])
    app.include_router(payments.router, prefix="/v1", tags=["payments"])

    return app


app = create_app()
