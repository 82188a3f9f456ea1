"""Shared fixtures: application factory and an in-memory backend client."""

import threading

import pytest

from hiring_board.api import BackendError
from hiring_board.models import Application


def make_app(app_id: str, status: str = "pending", **overrides) -> Application:
    data = {
        "id": app_id,
        "candidate_name": f"Candidate {app_id}",
        "candidate_email": f"{app_id}@example.com",
        "job_id": "j1",
        "job_title": "Backend Engineer",
        "status": status,
        "applied_at": "2025-01-01T00:00:00Z",
    }
    data.update(overrides)
    return Application.model_validate(data)


class FakeClient:
    """Stands in for hiring_board.api; records calls and fails on request."""

    def __init__(self, applications=None, jobs=None):
        self.applications = list(applications or [])
        self.jobs = list(jobs or [])
        self.fail_ids: set[str] = set()
        self.fail_list = False
        self.gate: threading.Event | None = None
        self.status_calls: list[tuple] = []
        self.message_calls: list[tuple] = []
        self.list_calls = 0

    def list_applications(self):
        self.list_calls += 1
        if self.fail_list:
            raise BackendError("Server returned 503", http_status=503)
        return list(self.applications)

    def list_jobs(self):
        return list(self.jobs)

    def update_application_status(self, application_id, status, notes=None):
        if self.gate is not None:
            self.gate.wait(timeout=5)
        self.status_calls.append((application_id, status, notes))
        if application_id in self.fail_ids:
            raise BackendError("Server returned 500", http_status=500)
        # Backend of record follows successful writes
        self.applications = [
            a.model_copy(update={"status": status}) if a.id == application_id else a
            for a in self.applications
        ]
        return None

    def send_candidate_message(self, application_id, template_id, subject, message):
        self.message_calls.append((application_id, template_id, subject, message))
        if application_id in self.fail_ids:
            raise BackendError("Mailer unavailable")
        return 1


@pytest.fixture
def applications():
    return [
        make_app("a1", "pending", candidate_name="Ada Lovelace", job_id="j1", job_title="Backend Engineer"),
        make_app("a2", "pending", candidate_name="Alan Turing", job_id="j2", job_title="Data Scientist"),
        make_app("a3", "reviewing", candidate_name="Grace Hopper", job_id="j1", job_title="Backend Engineer"),
        make_app("a4", "hired", candidate_name="Edsger Dijkstra", job_id="j3", job_title="Frontend Developer"),
    ]


@pytest.fixture
def client(applications):
    return FakeClient(applications)
