from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sysmonitor.api.routes import router
from sysmonitor.config import settings
from sysmonitor.engine import SnapshotAggregator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ── startup ───────────────────────────────────────
    app.state.aggregator = SnapshotAggregator(settings=settings)
    logger.info(
        "%s started, %d probes registered",
        settings.app_name,
        len(app.state.aggregator.probes),
    )

    yield

    # ── shutdown ──────────────────────────────────────
    logger.info("%s shut down", settings.app_name)


app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(router)
