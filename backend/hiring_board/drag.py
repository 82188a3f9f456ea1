"""Drag-and-drop reconciliation for the pipeline board.

A gesture goes Idle -> Dragging -> Committing -> Idle, or through
RollingBack when the backend refuses the move. The drop is applied to the
store right away and reverted if the status write fails.

Any drag source can drive the controller through two calls:
``on_drag_start(application_id)`` and ``on_drop(application_id, target)``,
where ``target`` is the status of the column dropped on, or None when the card
was dropped outside every column.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from hiring_board import api
from hiring_board.api import BackendError
from hiring_board.bulk import SelectionSet
from hiring_board.notifications import Notifier
from hiring_board.statuses import TERMINAL, ApplicationStatus, label, parse_status
from hiring_board.store import PipelineStore

logger = logging.getLogger(__name__)


class DragState(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    COMMITTING = "committing"
    ROLLING_BACK = "rolling_back"


class DragOutcome(str, Enum):
    NOOP = "noop"              # dropped on its own column
    CANCELLED = "cancelled"    # dropped outside any column
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"
    REJECTED = "rejected"      # drag refused (locked, unknown card, no gesture)


@dataclass
class DragGesture:
    application_id: str
    source_status: ApplicationStatus
    state: DragState = DragState.DRAGGING
    target_status: Optional[ApplicationStatus] = None


class DragController:
    def __init__(
        self,
        store: PipelineStore,
        notifier: Notifier,
        client=api,
        selection: Optional[SelectionSet] = None,
        note: Optional[str] = None,
        lock_terminal: bool = False,
    ):
        self.store = store
        self.notifier = notifier
        self.client = client
        self.selection = selection
        self.note = note
        self.lock_terminal = lock_terminal
        self._dragging: Optional[DragGesture] = None
        self._committing: dict[str, DragGesture] = {}

    @property
    def state(self) -> DragState:
        """State of the pointer gesture; Idle once a drop has been handed off."""
        if self._dragging is not None:
            return DragState.DRAGGING
        return DragState.IDLE

    @property
    def dragging(self) -> Optional[DragGesture]:
        return self._dragging

    def in_flight(self) -> dict[str, DragGesture]:
        return dict(self._committing)

    def can_drag(self, application_id: str) -> bool:
        if self.selection is not None and self.selection.select_mode:
            return False
        if self.store.is_pending(application_id):
            return False
        app = self.store.get(application_id)
        if app is None:
            return False
        status = parse_status(app.status)
        if status is None:
            return False
        if self.lock_terminal and status in TERMINAL:
            return False
        return True

    def begin_drag(self, application_id: str) -> bool:
        """Idle -> Dragging. False when the card can't be picked up right now."""
        if not self.can_drag(application_id):
            logger.debug("Drag of %s refused", application_id)
            return False
        app = self.store.get(application_id)
        self._dragging = DragGesture(application_id=application_id, source_status=parse_status(app.status))
        return True

    def cancel_drag(self) -> DragOutcome:
        self._dragging = None
        return DragOutcome.CANCELLED

    async def commit_drag(self, application_id: str, target) -> DragOutcome:
        """Handle a drop of the dragged card onto the column for `target`."""
        gesture = self._dragging
        if gesture is None or gesture.application_id != application_id:
            return DragOutcome.REJECTED
        self._dragging = None

        target_status = parse_status(target) if target is not None else None
        if target_status is None:
            return DragOutcome.CANCELLED
        if target_status == gesture.source_status:
            return DragOutcome.NOOP
        if not self.store.claim(application_id):
            return DragOutcome.REJECTED

        gesture.target_status = target_status
        previous = self.store.move(application_id, target_status)
        if previous is None:
            # Card vanished in a reload between drag start and drop
            self.store.release(application_id)
            return DragOutcome.REJECTED

        gesture.state = DragState.COMMITTING
        self._committing[application_id] = gesture
        try:
            await asyncio.to_thread(
                self.client.update_application_status, application_id, target_status.value, self.note
            )
        except BackendError as e:
            gesture.state = DragState.ROLLING_BACK
            self.store.revert(application_id, target_status, previous)
            self.notifier.error(f"Failed to move {self._name(application_id)}: {e.message}")
            outcome = DragOutcome.ROLLED_BACK
        else:
            self.notifier.success(f"Moved {self._name(application_id)} to {label(target_status)}")
            outcome = DragOutcome.COMMITTED
        finally:
            gesture.state = DragState.IDLE
            self._committing.pop(application_id, None)
            self.store.release(application_id)
        logger.info("Drag %s %s -> %s: %s", application_id, gesture.source_status.value, target_status.value, outcome.value)
        return outcome

    on_drag_start = begin_drag
    on_drop = commit_drag

    def _name(self, application_id: str) -> str:
        app = self.store.get(application_id)
        return app.candidate_name if app else application_id
