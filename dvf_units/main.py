from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Routers
from .routers.units import router as units_router
from .routers.address import router as address_router
from .routers.dpe import router as dpe_router

# Core modules
from .core.config import settings
from .core.logging import configure_logging, CorrelationIdMiddleware
from .core.metrics import PromMiddleware, metrics_endpoint

def create_app() -> FastAPI:
    """
    App factory so tests and ASGI servers can instantiate cleanly.
    """
    configure_logging()

    app = FastAPI(
        title="DVF Units API",
        version="1.0.0",
        description="Past sales (DVF), address autocomplete and energy labels for French addresses.",
    )

    allow_origins = [o.strip() for o in settings.ALLOW_ORIGINS.split(",")] if settings.ALLOW_ORIGINS else ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-Id"],
    )

    # Metrics first so the correlation middleware wraps it
    if settings.PROMETHEUS_ENABLED:
        app.add_middleware(PromMiddleware)
    app.add_middleware(CorrelationIdMiddleware)

    # Meta routes
    @app.get("/v1/health", tags=["meta"])
    def health():
        return {"status": "ok"}

    if settings.PROMETHEUS_ENABLED:
        app.add_route("/v1/metrics", metrics_endpoint, methods=["GET"])

    # Business routes
    app.include_router(units_router, prefix="/v1", tags=["units"])
    app.include_router(address_router, prefix="/v1", tags=["address"])
    app.include_router(dpe_router, prefix="/v1", tags=["dpe"])

    return app

app = create_app()
