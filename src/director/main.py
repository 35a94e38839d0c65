import secrets
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.security import APIKeyHeader
from prometheus_fastapi_instrumentator import Instrumentator

from src.director.api.middlewares import setup_middlewares
from src.director.api.v1.router import api_router
from src.director.core.config import get_settings
from src.director.core.exceptions import setup_exception_handlers
from src.director.core.logging import get_logger, setup_logging
from src.director.repositories import AutomationStore
from src.director.services.automation_service import AutomationService
from src.director.services.seed import seed_demo_data

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    setup_logging(settings.debug)
    logger.info(f"Starting {settings.app_name}")

    if settings.seed_demo_data:
        demo = await seed_demo_data(AutomationService(app.state.store))
        if demo is not None:
            logger.info("Seeded demo automation", automation_id=demo.id)

    yield

    logger.info(
        f"Shutdown complete, {app.state.store.count()} automations discarded with the process"
    )


OPENAPI_TAGS = [
    {"name": "automations", "description": "Automation lifecycle and run triggering"},
    {"name": "run-logs", "description": "Telemetry of simulated runs"},
    {"name": "dashboard", "description": "Aggregate performance and health"},
]


def create_app(store: AutomationStore | None = None) -> FastAPI:
    """Build the application around a store.

    Each app owns its store; tests pass a fresh one for isolation.
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Persona-driven social video automations with simulated runs",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
        openapi_url="/openapi.json" if settings.enable_openapi else None,
    )
    app.state.store = store if store is not None else AutomationStore()

    setup_exception_handlers(app)
    setup_middlewares(app, settings)

    app.include_router(api_router)

    # Prometheus metrics instrumentation
    instrumentator = Instrumentator().instrument(app)

    # Protect /metrics endpoint if API key is configured
    if settings.metrics_api_key:
        api_key_header = APIKeyHeader(name="X-Metrics-Key", auto_error=False)

        async def verify_metrics_key(api_key: str | None = Depends(api_key_header)) -> None:
            if (
                api_key is None
                or settings.metrics_api_key is None
                or not secrets.compare_digest(api_key, settings.metrics_api_key)
            ):
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    detail="Invalid or missing metrics API key",
                )

        instrumentator.expose(app, endpoint="/metrics", dependencies=[Depends(verify_metrics_key)])
    else:
        instrumentator.expose(app, endpoint="/metrics")

    @app.get("/health")
    async def health() -> dict[str, object]:
        """Liveness check with store size."""
        return {
            "status": "healthy",
            "automations": app.state.store.count(),
        }

    return app


app = create_app()
