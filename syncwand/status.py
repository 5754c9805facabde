"""Reducing the state of a workspace and its cluster to one sync status."""

import asyncio
import logging
from pathlib import Path

from syncwand.exceptions import ClusterQueryError
from syncwand.kubernetes import list_containers
from syncwand.probe import probe
from syncwand.state import load_namespaces
from syncwand.types import ClusterContext, Container, SyncStatus

logger = logging.getLogger(__name__)


async def collect_containers(
    ctx: ClusterContext, namespaces: set[str]
) -> list[Container]:
    """List candidate containers across namespaces, skipping ones that fail."""
    containers: list[Container] = []
    seen: set[Container] = set()
    for namespace in sorted(namespaces):
        try:
            found = await asyncio.to_thread(list_containers, ctx, namespace)
        except ClusterQueryError as e:
            logger.warning("Skipping namespace %s: %s", namespace, e.reason)
            continue

        for container in found:
            if container not in seen:
                seen.add(container)
                containers.append(container)
    return containers


async def refresh(ctx: ClusterContext, root: Path | None = None) -> SyncStatus:
    """Work out whether DevSpace sync is running for the workspace at `root`.

    Every candidate container is probed at once, but results are checked in
    list order: the first positive in that order wins, even if a later probe
    finishes sooner. Probes still in flight after a positive are left to
    finish on their own.

    Raises:
        StateFileUnavailable: If the state file cannot be read
        StateFileMalformed: If the state file cannot be parsed
    """
    namespaces = load_namespaces(root)
    containers = await collect_containers(ctx, namespaces)
    logger.debug("Probing %d container(s)", len(containers))

    checks = [asyncio.create_task(probe(ctx, c)) for c in containers]
    for check in checks:
        result = await check

        # Sync is assumed to target a single container at a time
        if result.sync_running:
            return SyncStatus(running=True, pod_name=result.container.pod_name)

    return SyncStatus(running=False)


def refresh_sync_status(ctx: ClusterContext, root: Path | None = None) -> SyncStatus:
    return asyncio.run(refresh(ctx, root))


class SyncStatusMonitor:
    """Single-flight wrapper around `refresh` for callers sharing one loop.

    Refreshes requested while another one is in flight wait for that one
    instead of starting a second sweep. Nothing is kept after it finishes.
    """

    def __init__(self, ctx: ClusterContext, root: Path | None = None):
        self.ctx = ctx
        self.root = root
        self._inflight: asyncio.Task[SyncStatus] | None = None

    async def refresh(self) -> SyncStatus:
        if self._inflight is None:
            self._inflight = asyncio.create_task(refresh(self.ctx, self.root))
            self._inflight.add_done_callback(self._clear)
        return await asyncio.shield(self._inflight)

    def _clear(self, task: asyncio.Task[SyncStatus]) -> None:
        if self._inflight is task:
            self._inflight = None
