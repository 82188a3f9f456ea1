"""Hiring pipeline board package."""

from hiring_board.api import BackendError
from hiring_board.board import PipelineBoard
from hiring_board.bulk import (
    BulkActionController,
    BulkResult,
    NotifyAction,
    RejectAction,
    SelectionSet,
    StatusChangeAction,
)
from hiring_board.drag import DragController, DragOutcome, DragState
from hiring_board.filters import visible
from hiring_board.models import ALL_JOBS, Application, FilterState, JobOption, PipelineColumn
from hiring_board.statuses import PIPELINE, ApplicationStatus, is_terminal, parse_status
from hiring_board.store import PipelineStore, to_columns
from hiring_board.sync import SyncCoordinator

__all__ = [
    # Status model
    "ApplicationStatus",
    "PIPELINE",
    "is_terminal",
    "parse_status",
    # Models
    "ALL_JOBS",
    "Application",
    "FilterState",
    "JobOption",
    "PipelineColumn",
    # Board
    "PipelineBoard",
    "PipelineStore",
    "visible",
    "to_columns",
    # Controllers
    "DragController",
    "DragOutcome",
    "DragState",
    "BulkActionController",
    "BulkResult",
    "SelectionSet",
    "StatusChangeAction",
    "RejectAction",
    "NotifyAction",
    "SyncCoordinator",
    # Errors
    "BackendError",
]
