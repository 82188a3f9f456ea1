"""Reload the board from the backend of record, on demand and periodically."""

import asyncio
import logging
from typing import Callable, Optional

from hiring_board import api
from hiring_board.api import BackendError
from hiring_board.bulk import SelectionSet
from hiring_board.models import JobOption
from hiring_board.notifications import Notifier
from hiring_board.store import PipelineStore

logger = logging.getLogger(__name__)


class SyncCoordinator:
    def __init__(
        self,
        store: PipelineStore,
        selection: SelectionSet,
        notifier: Notifier,
        client=api,
        interval: float = 30.0,
    ):
        self.store = store
        self.selection = selection
        self.notifier = notifier
        self.client = client
        self.interval = interval
        self.jobs: list[JobOption] = []
        self._task: Optional[asyncio.Task] = None
        self._listeners: list[Callable[[], None]] = []

    def subscribe(self, callback: Callable[[], None]) -> None:
        """Call `callback` after every successful reload."""
        self._listeners.append(callback)

    async def refresh(self) -> bool:
        """Replace the store with the backend's list. Keeps the old board on failure."""
        try:
            applications = await asyncio.to_thread(self.client.list_applications)
        except BackendError as e:
            self.notifier.error(f"Failed to load applications: {e.message}")
            return False

        self.store.replace(applications)
        stale = self.selection.prune(self.store.ids)
        if stale:
            logger.debug("Pruned %d stale selections", len(stale))

        anomalies = self.store.anomalies()
        if anomalies:
            listing = ", ".join(f"{a.id} ({a.status or 'no status'})" for a in anomalies[:5])
            self.notifier.warning(
                f"{len(anomalies)} application(s) have an unknown status and are not shown: {listing}"
            )
        logger.info("Loaded %d applications", len(applications))
        for callback in self._listeners:
            try:
                callback()
            except Exception:
                logger.exception("Reload listener failed")
        return True

    async def load_jobs(self) -> bool:
        try:
            self.jobs = await asyncio.to_thread(self.client.list_jobs)
        except BackendError as e:
            self.notifier.error(f"Failed to load jobs: {e.message}")
            return False
        return True

    # --- Periodic refresh ---

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        """Start the background refresh loop on the running event loop."""
        if not self.running:
            self._task = asyncio.create_task(self._run())
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def _run(self) -> None:
        while True:
            await self.refresh()
            if self.interval <= 0:
                return
            await asyncio.sleep(self.interval)
