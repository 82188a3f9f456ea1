"""Tests for the board service routes, called directly."""

import asyncio
import json
from unittest.mock import patch

import pytest

from hiring_board.board import PipelineBoard
from hiring_board.config import Settings
from server import routes

from conftest import FakeClient


@pytest.fixture
def board(applications):
    client = FakeClient(applications)
    board = PipelineBoard(client=client, settings=Settings(company_name="Acme", refresh_interval=0))
    asyncio.run(board.sync.refresh())
    with patch("server.routes._board", board):
        yield board


class TestBoardRoutes:
    def test_read_board(self, board):
        data = routes.read_board()

        assert [c["status"] for c in data["columns"]] == [
            "pending", "reviewing", "shortlisted", "interview", "hired", "rejected",
        ]
        assert data["columns"][0]["count"] == 2
        assert data["stats"]["total"] == 4
        assert data["filters"] == {"search": "", "job_id": "all"}

    def test_filters(self, board):
        routes.set_filters(routes.FiltersRequest(search="grace"))
        data = routes.read_board()
        assert sum(c["count"] for c in data["columns"]) == 1

    def test_statuses(self, board):
        statuses = routes.read_statuses()["statuses"]
        assert statuses[-1] == {"status": "rejected", "title": "Rejected", "terminal": True}


class TestDragRoutes:
    def test_drag_and_drop(self, board):
        assert routes.drag_start(routes.DragStartRequest(application_id="a3"))["status"] == "ok"
        result = asyncio.run(routes.drag_drop(routes.DropRequest(application_id="a3", target_status="interview")))

        assert result["outcome"] == "committed"
        assert board.store.get("a3").status == "interview"

    def test_drag_refused_in_select_mode(self, board):
        routes.set_select_mode(routes.SelectModeRequest(enabled=True))
        result = routes.drag_start(routes.DragStartRequest(application_id="a3"))
        assert result["code"] == "DRAG_REFUSED"


class TestSelectionRoutes:
    def test_toggle_and_bulk(self, board):
        routes.set_select_mode(routes.SelectModeRequest(enabled=True))
        routes.toggle_selection(routes.ToggleRequest(application_id="a1"))
        routes.toggle_selection(routes.ToggleRequest(application_id="a2"))

        req = routes.BulkRequest.model_validate({"action": {"kind": "status", "status": "shortlisted"}})
        result = asyncio.run(routes.run_bulk_action(req))

        assert result["succeeded"] == ["a1", "a2"]
        assert result["failed"] == []
        assert board.selection.ids == []
        assert board.selection.select_mode is False

    def test_toggle_unknown(self, board):
        result = routes.toggle_selection(routes.ToggleRequest(application_id="ghost"))
        assert result["code"] == "APPLICATION_NOT_FOUND"

    def test_export(self, board):
        routes.toggle_selection(routes.ToggleRequest(application_id="a4"))
        response = routes.export_selection(format="json")

        assert response.media_type == "application/json"
        assert json.loads(response.body)[0]["id"] == "a4"
        assert routes.export_selection(format="pdf")["code"] == "INVALID_PARAM"


class TestNotificationRoutes:
    def test_list_and_dismiss(self, board):
        board.notifier.error("Failed to move")
        notifications = routes.read_notifications()["notifications"]
        assert notifications[-1]["message"] == "Failed to move"

        assert routes.dismiss_notification(notifications[-1]["id"]) == {"status": "ok"}
        assert routes.dismiss_notification(999)["code"] == "NOT_FOUND"
