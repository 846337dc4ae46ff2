"""FastAPI application bootstrap."""
from __future__ import annotations

from fastapi import FastAPI

from .. import __version__
from .core.config import get_settings
from .core.logging import register_middleware, setup_logging
from .core.security import enable_cors
from .routers import assess, health

settings = get_settings()
setup_logging(settings.log_level)

app = FastAPI(title="nivpred API", version=__version__)

register_middleware(app)
enable_cors(app, settings.cors_origins)

app.include_router(health.router)
app.include_router(assess.router)
