"""API routes for the pipeline board.

The browser UI renders `GET /api/board` and reports gestures back:
drag start/drop/cancel, selection toggles and bulk actions. Every state change
is followed by a `board_snapshot` websocket push.
"""

from typing import Optional

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from hiring_board.board import PipelineBoard
from hiring_board.bulk import BulkAction, TEMPLATES
from hiring_board.export import FORMATS
from hiring_board.statuses import LABELS, PIPELINE, TERMINAL
from server.websocket import publish_board, publish_notification

router = APIRouter(prefix="/api/board")

_board: Optional[PipelineBoard] = None


def get_board() -> PipelineBoard:
    """The process-wide board, created on first use."""
    global _board
    if _board is None:
        board = PipelineBoard()
        board.notifier.subscribe(publish_notification)
        board.sync.subscribe(lambda: publish_board(board))
        _board = board
    return _board


# --- Request Models ---


class FiltersRequest(BaseModel):
    search: Optional[str] = None
    job_id: Optional[str] = None


class DragStartRequest(BaseModel):
    application_id: str


class DropRequest(BaseModel):
    application_id: str
    target_status: Optional[str] = None  # None = dropped outside every column


class ToggleRequest(BaseModel):
    application_id: str


class SelectModeRequest(BaseModel):
    enabled: bool


class BulkRequest(BaseModel):
    action: BulkAction


# --- Board ---


@router.get("")
def read_board():
    """Columns, stats, filters and selection as the UI draws them."""
    return get_board().snapshot()


@router.get("/statuses")
def read_statuses():
    """Pipeline stages in column order."""
    return {
        "statuses": [
            {"status": s.value, "title": LABELS[s], "terminal": s in TERMINAL}
            for s in PIPELINE
        ]
    }


@router.post("/refresh")
async def refresh_board():
    """Reload applications and jobs from the backend."""
    board = get_board()
    ok = await board.sync.refresh()
    await board.sync.load_jobs()
    publish_board(board)
    if not ok:
        return {"status": "error", "error": "Failed to load applications", "code": "REFRESH_FAILED"}
    return {"status": "ok", "count": len(board.store.applications)}


@router.post("/filters")
def set_filters(req: FiltersRequest):
    """Update search text and/or job filter."""
    filters = get_board().store.set_filters(search=req.search, job_id=req.job_id)
    publish_board(get_board())
    return {"status": "ok", "filters": filters.model_dump()}


@router.get("/jobs")
async def read_jobs(reload: bool = False):
    """Job filter options."""
    board = get_board()
    if reload or not board.sync.jobs:
        await board.sync.load_jobs()
    return {"jobs": [job.model_dump() for job in board.sync.jobs]}


# --- Drag & Drop ---


@router.post("/drag/start")
def drag_start(req: DragStartRequest):
    """Card picked up."""
    if not get_board().drag.begin_drag(req.application_id):
        return {"status": "error", "error": "Card can't be moved right now", "code": "DRAG_REFUSED"}
    return {"status": "ok", "application_id": req.application_id}


@router.post("/drag/drop")
async def drag_drop(req: DropRequest):
    """Card dropped on a column (or outside any)."""
    outcome = await get_board().drag.commit_drag(req.application_id, req.target_status)
    publish_board(get_board())
    return {"status": "ok", "application_id": req.application_id, "outcome": outcome.value}


@router.post("/drag/cancel")
def drag_cancel():
    outcome = get_board().drag.cancel_drag()
    return {"status": "ok", "outcome": outcome.value}


# --- Selection & Bulk ---


@router.post("/selection/toggle")
def toggle_selection(req: ToggleRequest):
    board = get_board()
    if board.store.get(req.application_id) is None:
        return {"status": "error", "error": "Application not found", "code": "APPLICATION_NOT_FOUND"}
    selected = board.bulk.toggle(req.application_id)
    publish_board(board)
    return {"status": "ok", "application_id": req.application_id, "selected": selected, "count": len(board.selection)}


@router.post("/selection/mode")
def set_select_mode(req: SelectModeRequest):
    board = get_board()
    board.selection.set_select_mode(req.enabled)
    publish_board(board)
    return {"status": "ok", "select_mode": board.selection.select_mode}


@router.post("/selection/clear")
def clear_selection():
    get_board().bulk.clear()
    publish_board(get_board())
    return {"status": "ok"}


@router.get("/templates")
def read_templates():
    """Built-in candidate message templates."""
    return {"templates": [t.model_dump() for t in TEMPLATES.values()]}


@router.post("/bulk")
async def run_bulk_action(req: BulkRequest):
    """Apply one action to every selected application."""
    result = await get_board().bulk.apply_action(req.action)
    publish_board(get_board())
    return {"status": "ok", **result.model_dump()}


@router.get("/export")
def export_selection(format: str = "csv"):
    """Download the selected applications."""
    if format not in FORMATS:
        return {"status": "error", "error": f"Invalid format. Use: {', '.join(FORMATS)}", "code": "INVALID_PARAM"}
    content = get_board().export_selection(format)
    media_type = "text/csv" if format == "csv" else "application/json"
    return PlainTextResponse(
        content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="applications_export.{format}"'},
    )


# --- Notifications ---


@router.get("/notifications")
def read_notifications():
    return {"notifications": [n.model_dump() for n in get_board().notifier.active()]}


@router.post("/notifications/{notification_id}/dismiss")
def dismiss_notification(notification_id: int):
    if not get_board().notifier.dismiss(notification_id):
        return {"status": "error", "error": "Notification not found", "code": "NOT_FOUND"}
    return {"status": "ok"}
