"""The pipeline board: one object owning the store and its controllers."""

from typing import Optional

from hiring_board import api
from hiring_board.bulk import BulkActionController, SelectionSet
from hiring_board.config import Settings, get_settings
from hiring_board.drag import DragController
from hiring_board.export import export_applications
from hiring_board.notifications import Notifier
from hiring_board.store import PipelineStore
from hiring_board.sync import SyncCoordinator


class PipelineBoard:
    def __init__(self, client=api, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self.settings = settings
        self.store = PipelineStore()
        self.selection = SelectionSet()
        self.notifier = Notifier()
        self.sync = SyncCoordinator(
            self.store,
            self.selection,
            self.notifier,
            client=client,
            interval=settings.refresh_interval,
        )
        self.drag = DragController(
            self.store,
            self.notifier,
            client=client,
            selection=self.selection,
            note=settings.drag_note,
            lock_terminal=settings.lock_terminal_stages,
        )
        self.bulk = BulkActionController(
            self.store,
            self.selection,
            self.notifier,
            sync=self.sync,
            client=client,
            concurrency=settings.bulk_concurrency,
            company_name=settings.company_name,
        )

    def export_selection(self, fmt: str = "csv") -> str:
        return export_applications(self.bulk.selected_applications(), fmt)

    def snapshot(self) -> dict:
        """Serializable view of everything the UI draws."""
        return {
            "columns": [
                {
                    "status": column.status.value,
                    "title": column.title,
                    "count": column.count,
                    "applications": [
                        {
                            **app.model_dump(),
                            "selected": app.id in self.selection,
                            "pending": self.store.is_pending(app.id),
                        }
                        for app in column.applications
                    ],
                }
                for column in self.store.columns()
            ],
            "anomalies": [
                {"id": app.id, "status": app.status, "candidate_name": app.candidate_name}
                for app in self.store.anomalies()
            ],
            "filters": self.store.filters.model_dump(),
            "jobs": [job.model_dump() for job in self.sync.jobs],
            "selection": {"select_mode": self.selection.select_mode, "ids": self.selection.ids},
            "stats": self.store.stats().model_dump(),
            "loaded_at": self.store.loaded_at,
        }
