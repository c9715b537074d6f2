"""FastAPI application entry point.

Run with ``uvicorn --factory tempdrop.main:create_app``.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from . import __version__
from .config import AppConfig
from .dependencies import include_routers
from .logging import configure_logging
from .storage.object_store import ObjectStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _reclamation_lifespan(app: FastAPI) -> AsyncIterator[None]:
    scheduler = app.state.reclamation_scheduler
    if getattr(app.state, "disable_reclamation", False):
        logger.info("Reclamation startup skipped: disabled via app state")
    else:
        scheduler.start()
    try:
        yield
    finally:
        await scheduler.stop()


def create_app(config: AppConfig | None = None, store: ObjectStore | None = None) -> FastAPI:
    """Build the FastAPI instance, recovering stored objects before serving.

    A storage directory that cannot be listed raises ``StartupError`` here.
    """
    cfg = config or AppConfig.build_default()
    configure_logging(cfg.log_level)
    object_store = store or ObjectStore.from_config(cfg)
    report = object_store.load_existing()
    logger.info(
        "Recovered %s stored objects (%s expired discarded)",
        report.restored,
        report.discarded,
    )

    app = FastAPI(title="tempdrop", version=__version__, lifespan=_reclamation_lifespan)
    include_routers(app, cfg, object_store)
    return app
