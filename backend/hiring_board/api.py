"""
Recruiting backend API client.

One function per logical backend operation. The HTTP layer never raises; this
module turns its error dicts into BackendError so callers can handle every
failure (transport, non-2xx, malformed body) the same way.

Usage:
    from hiring_board import api

    apps = api.list_applications()
    api.update_application_status(apps[0].id, "interview")
"""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import ValidationError

from hiring_board import http
from hiring_board.models import Application, JobOption

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """A backend call failed: unreachable, rejected, or unreadable."""

    def __init__(self, message: str, code: Optional[str] = None, http_status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.http_status = http_status


def _check(result: dict, fallback: str) -> dict:
    """Raise BackendError for error dicts and explicit `success: false` bodies."""
    if result.get("status") == "error":
        raise BackendError(
            result.get("error") or fallback,
            code=result.get("code"),
            http_status=result.get("http_status"),
        )
    if result.get("success") is False:
        raise BackendError(result.get("error") or result.get("message") or fallback)
    return result


# --- Applications ---


def list_applications() -> list[Application]:
    """All applications visible to the employer (or team member) token."""
    result = _check(
        http.get("/employer/all-applications", error_code="LIST_FAILED"),
        "Failed to load applications",
    )
    raw = result.get("applications")
    if raw is None:
        raw = result.get("data") or []
    if not isinstance(raw, list):
        raise BackendError(f"Unexpected applications payload: {type(raw).__name__}", code="LIST_FAILED")
    applications = []
    for item in raw:
        try:
            applications.append(Application.model_validate(item))
        except ValidationError as e:
            # Unparseable records are skipped, not fatal for the board
            ref = item.get("id") if isinstance(item, dict) else item
            logger.warning("Skipping malformed application record %r: %s", ref, e)
    return applications


def update_application_status(application_id: str, status: str, notes: Optional[str] = None) -> Optional[Application]:
    """Set an application's status. Returns the updated record when the backend echoes it."""
    payload = {"status": status}
    if notes:
        payload["notes"] = notes
    result = _check(
        http.put(f"/applications/{application_id}/status", json=payload, error_code="UPDATE_FAILED"),
        "Failed to update application status",
    )
    record = result.get("application")
    if not isinstance(record, dict):
        return None
    try:
        return Application.model_validate(record)
    except ValidationError:
        return None


def send_candidate_message(application_id: str, template_id: str, subject: str, message: str) -> int:
    """Email the candidate behind one application. Returns the sent count."""
    result = _check(
        http.post(
            "/employer/bulk/send-emails",
            json={
                "application_ids": [application_id],
                "email_type": template_id,
                "subject": subject,
                "message": message,
            },
            error_code="SEND_FAILED",
        ),
        "Failed to send email",
    )
    try:
        return int(result.get("sent_count", 1))
    except (TypeError, ValueError):
        raise BackendError(f"Unexpected sent_count: {result.get('sent_count')!r}", code="SEND_FAILED")


# --- Jobs ---


def list_jobs() -> list[JobOption]:
    """Job postings for the job filter."""
    result = _check(http.get("/employer/jobs", error_code="LIST_FAILED"), "Failed to load jobs")
    raw = result.get("jobs") or []
    if not isinstance(raw, list):
        raise BackendError(f"Unexpected jobs payload: {type(raw).__name__}", code="LIST_FAILED")
    jobs = []
    for item in raw:
        try:
            jobs.append(JobOption.model_validate(item))
        except ValidationError:
            logger.warning("Skipping malformed job record %r", item)
    return jobs
