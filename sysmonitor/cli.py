"""Command line entry point: print a system report or serve the HTTP API.

Usage:
    python -m sysmonitor                  # text report on stdout
    python -m sysmonitor --json           # Report as JSON
    python -m sysmonitor --skip-network   # no external IP lookup
    python -m sysmonitor --serve          # run the FastAPI app with uvicorn
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from sysmonitor.config import settings
from sysmonitor.engine import SnapshotAggregator, render, render_text
from sysmonitor.errors import AggregationAbort

logger = logging.getLogger("sysmonitor")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sysmonitor", description="Host system information report")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    parser.add_argument("--skip-network", action="store_true", help="Skip the external IP lookup")
    parser.add_argument("--serve", action="store_true", help="Serve the HTTP API instead of printing")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level (default: %(default)s)")
    return parser


async def report_once(as_json: bool = False, skip_network: bool = False) -> str:
    config = settings.model_copy(update={"network_enabled": False}) if skip_network else settings
    snapshot = await SnapshotAggregator(settings=config).collect_within()
    report = render(snapshot)
    if as_json:
        return report.model_dump_json(indent=2) + "\n"
    return render_text(report)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level="DEBUG" if settings.debug else args.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        stream=sys.stderr,
    )

    if args.serve:
        import uvicorn

        uvicorn.run("sysmonitor.main:app", host=settings.host, port=settings.port)
        return 0

    try:
        output = asyncio.run(report_once(as_json=args.json, skip_network=args.skip_network))
    except AggregationAbort as exc:
        logger.error("Report aborted: %s", exc)
        return 1
    except (asyncio.CancelledError, KeyboardInterrupt):
        logger.error("Report interrupted before completion")
        return 1
    sys.stdout.write(output)
    return 0
