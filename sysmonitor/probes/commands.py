from __future__ import annotations

import asyncio
import logging
import shutil

logger = logging.getLogger(__name__)


async def run_command(
    *args: str, timeout: float = 3.0, merge_stderr: bool = False
) -> str | None:
    """Run a host command and return its stdout, or ``None`` if it could not run.

    Missing binaries, non-zero exit codes and overruns all yield ``None``;
    callers treat the fact as unknown rather than failing.
    ``merge_stderr`` folds stderr into the result for tools such as
    ``java -version`` that print their version there.
    """
    if shutil.which(args[0]) is None:
        return None
    try:
        proc = await asyncio.create_subprocess_exec(
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT if merge_stderr else asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        logger.debug("Could not spawn %s: %s", args[0], exc)
        return None

    try:
        stdout, _ = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        logger.debug("Command %s timed out after %.1fs", args[0], timeout)
        proc.kill()
        await proc.wait()
        return None
    except asyncio.CancelledError:
        proc.kill()
        raise

    if proc.returncode != 0:
        return None
    return stdout.decode("utf-8", errors="replace")
