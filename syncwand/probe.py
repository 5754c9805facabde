"""Checking whether the DevSpace sync helper runs inside a container.

DevSpace drives sync through a helper binary it copies into the dev container.
While sync is active, `/tmp/devspacehelper sync ...` shows up in that
container's process list, so its presence is the signal we look for.
"""

import asyncio
import logging

from syncwand.kubernetes import exec_in_container
from syncwand.types import ClusterContext, Container, ProbeResult

logger = logging.getLogger(__name__)

SYNC_SIGNATURE = "/tmp/devspacehelper sync"
PS_COMMAND = ["ps", "-x", "-o", "command"]


def find_sync_command(output: str) -> str | None:
    """Return the first process line that starts with the sync signature."""
    for line in output.split("\n"):
        if line.startswith(SYNC_SIGNATURE):
            return line
    return None


def _probe_sync(ctx: ClusterContext, container: Container) -> ProbeResult:
    result = exec_in_container(ctx, container, PS_COMMAND)

    # For the purpose of the check, a failed exec is as good as sync not running
    if not result.success:
        logger.debug("Probe of %s failed: %s", container, result.message)
        return ProbeResult(container=container, sync_running=False)

    if not result.stdout:
        logger.debug("No running processes reported by %s", container)
        return ProbeResult(container=container, sync_running=False)

    command = find_sync_command(result.stdout)
    if command is None:
        return ProbeResult(container=container, sync_running=False)

    logger.debug("Sync running in %s: %s", container, command)
    return ProbeResult(container=container, sync_running=True, command=command)


async def probe(ctx: ClusterContext, container: Container) -> ProbeResult:
    """Probe one container. Never raises; any failure is a negative result."""
    try:
        return await asyncio.to_thread(_probe_sync, ctx, container)
    except Exception:
        logger.debug("Unexpected error probing %s", container, exc_info=True)
        return ProbeResult(container=container, sync_running=False)
