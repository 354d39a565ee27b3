from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from contract_radar.core.config import settings
from contract_radar.core.logging import setup_logging
from contract_radar.core.middleware import RequestLoggingMiddleware

# Routers
from contract_radar.routers.contracts import router as contracts_router
from contract_radar.routers.debug import router as debug_router
from contract_radar.routers.health import router as health_router

# Contracts API (singleton) + local example data
from contract_radar.infra.contracts_api import get_contracts_api
from contract_radar.repositories.contracts_api_repo import ContractsApiRepository
from contract_radar.services.contracts.fallback_provider import (
    FallbackProvider,
    get_fallback_provider,
)


def create_app(
    api: Optional[ContractsApiRepository] = None,
    fallback: Optional[FallbackProvider] = None,
) -> FastAPI:
    setup_logging()
    app = FastAPI(title="Contract Radar")

    # -------------------------------------------------
    # CORS + request logging
    # -------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    # -------------------------------------------------
    # Startup
    # -------------------------------------------------
    @app.on_event("startup")
    def startup():
        # 1) Contracts API client (fail fast on missing base url)
        app.state.api = api or get_contracts_api()

        # 2) Fallback dataset (fail fast on missing/invalid file)
        app.state.fallback = fallback or get_fallback_provider()

        app.state.api.log.info(
            "[BOOT] contracts api=%s fallback_contracts=%s",
            app.state.api.base_url,
            len(app.state.fallback.contracts),
        )

    # -------------------------------------------------
    # Routers
    # -------------------------------------------------
    app.include_router(health_router, prefix="/api/v1/health", tags=["health"])
    app.include_router(contracts_router, prefix="/api/v1", tags=["contracts"])
    app.include_router(debug_router, prefix="/api/v1/debug", tags=["debug"])

    return app


app = create_app()
