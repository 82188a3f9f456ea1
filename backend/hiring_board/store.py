"""Pipeline store: the flat application list and the columns derived from it.

The list is only changed through three entry points:

- ``replace``: authoritative reload from the backend, discards any optimism
- ``move``: optimistic status change while a drag is being committed
- ``revert``: rollback of a failed optimistic move

Columns are never stored, they are recomputed from the list on every read.
"""

import logging
from datetime import datetime, timezone
from typing import Iterable, Optional

from hiring_board.filters import visible
from hiring_board.models import ALL_JOBS, Application, FilterState, PipelineColumn, PipelineStats
from hiring_board.statuses import ACTIVE, LABELS, PIPELINE, ApplicationStatus, parse_status

logger = logging.getLogger(__name__)


def find_anomalies(applications: Iterable[Application]) -> list[Application]:
    """Applications whose status is not a pipeline stage."""
    return [app for app in applications if parse_status(app.status) is None]


def to_columns(applications: Iterable[Application]) -> list[PipelineColumn]:
    """Bucket applications into one column per stage, in pipeline order.

    Every stage gets a column even when empty. Applications with an unknown
    status land in no column and are logged.
    """
    buckets: dict[ApplicationStatus, list[Application]] = {status: [] for status in PIPELINE}
    for app in applications:
        status = parse_status(app.status)
        if status is None:
            logger.warning("Application %s has unknown status %r, left off the board", app.id, app.status)
            continue
        buckets[status].append(app)
    return [
        PipelineColumn(status=status, title=LABELS[status], applications=buckets[status])
        for status in PIPELINE
    ]


def summarize(applications: Iterable[Application]) -> PipelineStats:
    """Summary counts across the whole (unfiltered) list."""
    apps = list(applications)
    by_status = {status.value: 0 for status in PIPELINE}
    anomalies = 0
    for app in apps:
        status = parse_status(app.status)
        if status is None:
            anomalies += 1
        else:
            by_status[status.value] += 1
    return PipelineStats(
        total=len(apps),
        in_pipeline=sum(by_status[s.value] for s in ACTIVE),
        hired=by_status[ApplicationStatus.HIRED.value],
        rejected=by_status[ApplicationStatus.REJECTED.value],
        by_status=by_status,
        anomalies=anomalies,
    )


class PipelineStore:
    def __init__(self, applications: Optional[Iterable[Application]] = None):
        self._applications: list[Application] = list(applications or [])
        self._pending: set[str] = set()
        self.filters = FilterState()
        self.loaded_at: Optional[str] = None

    # --- Queries ---

    @property
    def applications(self) -> tuple[Application, ...]:
        return tuple(self._applications)

    @property
    def ids(self) -> set[str]:
        return {app.id for app in self._applications}

    def get(self, application_id: str) -> Optional[Application]:
        for app in self._applications:
            if app.id == application_id:
                return app
        return None

    def visible(self) -> list[Application]:
        return visible(self._applications, self.filters)

    def columns(self) -> list[PipelineColumn]:
        return to_columns(self.visible())

    def anomalies(self) -> list[Application]:
        return find_anomalies(self._applications)

    def stats(self) -> PipelineStats:
        return summarize(self._applications)

    def set_filters(self, search: Optional[str] = None, job_id: Optional[str] = None) -> FilterState:
        """Update the filters; arguments left as None keep their current value."""
        self.filters = FilterState(
            search=self.filters.search if search is None else search,
            job_id=self.filters.job_id if job_id is None else (job_id or ALL_JOBS),
        )
        return self.filters

    # --- Mutations ---

    def replace(self, applications: Iterable[Application]) -> None:
        """Install a fresh list from the backend of record."""
        self._applications = list(applications)
        self.loaded_at = datetime.now(timezone.utc).isoformat()

    def move(self, application_id: str, status: ApplicationStatus) -> Optional[str]:
        """Optimistically set a status. Returns the previous status, None if not found."""
        for i, app in enumerate(self._applications):
            if app.id == application_id:
                self._applications[i] = app.model_copy(update={"status": status.value})
                return app.status
        return None

    def revert(self, application_id: str, expected: ApplicationStatus, previous: str) -> bool:
        """Undo a move, unless a reload already replaced the optimistic record."""
        for i, app in enumerate(self._applications):
            if app.id == application_id:
                if app.status != expected.value:
                    return False
                self._applications[i] = app.model_copy(update={"status": previous})
                return True
        return False

    # --- In-flight writes ---

    def claim(self, application_id: str) -> bool:
        """Reserve an application for a status write. False if one is already in flight."""
        if application_id in self._pending:
            return False
        self._pending.add(application_id)
        return True

    def release(self, application_id: str) -> None:
        self._pending.discard(application_id)

    def is_pending(self, application_id: str) -> bool:
        return application_id in self._pending
