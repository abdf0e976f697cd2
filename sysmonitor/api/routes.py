from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import PlainTextResponse

from sysmonitor import __version__
from sysmonitor.engine.aggregator import SnapshotAggregator
from sysmonitor.engine.renderer import empty_report, render, render_text
from sysmonitor.errors import AggregationAbort
from sysmonitor.models import Report, Snapshot

logger = logging.getLogger(__name__)

router = APIRouter()


def _aggregator(request: Request) -> SnapshotAggregator:
    return request.app.state.aggregator


async def _build_report(request: Request) -> Report:
    try:
        snapshot = await _aggregator(request).collect_within()
    except AggregationAbort as exc:
        logger.warning("Report request aborted: %s", exc)
        return empty_report("Report could not be assembled before the deadline.")
    return render(snapshot)


# ── REST routes ───────────────────────────────────────


@router.get("/api/report")
async def get_report(request: Request) -> Report:
    return await _build_report(request)


@router.get("/api/report/text", response_class=PlainTextResponse)
async def get_report_text(request: Request) -> str:
    return render_text(await _build_report(request))


@router.get("/api/snapshot")
async def get_snapshot(request: Request) -> Snapshot:
    try:
        return await _aggregator(request).collect_within()
    except AggregationAbort as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from None


@router.get("/api/status")
async def get_status(request: Request) -> dict:
    aggregator = _aggregator(request)
    return {
        "status": "running",
        "name": request.app.title,
        "version": __version__,
        "probes": {
            name.value: probe.timeout for name, probe in aggregator.probes.items()
        },
    }
