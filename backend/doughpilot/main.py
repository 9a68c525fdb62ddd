from fastapi import FastAPI

from doughpilot import models  # noqa: F401
from doughpilot.api.formulas import router as formula_router
from doughpilot.api.health import router as health_router
from doughpilot.api.observability import router as observability_router
from doughpilot.api.presets import router as preset_router
from doughpilot.api.state import router as state_router
from doughpilot.core.config import settings
from doughpilot.core.database import Base, engine
from doughpilot.core.observability_middleware import ObservabilityMiddleware


def create_app() -> FastAPI:
    app = FastAPI(title=settings.app_name)
    app.add_middleware(ObservabilityMiddleware)

    if settings.auto_create_tables:
        Base.metadata.create_all(bind=engine)

    app.include_router(health_router, prefix=settings.api_prefix)
    app.include_router(formula_router, prefix=settings.api_prefix)
    app.include_router(preset_router, prefix=settings.api_prefix)
    app.include_router(state_router, prefix=settings.api_prefix)
    app.include_router(observability_router, prefix=settings.api_prefix)
    return app


app = create_app()
