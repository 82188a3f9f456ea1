"""Board filtering: free-text search plus job selector."""

from typing import Iterable

from hiring_board.models import ALL_JOBS, Application, FilterState


def matches_search(app: Application, search: str) -> bool:
    """Case-insensitive substring match on candidate name, email or job title."""
    if not search.strip():
        return True
    term = search.lower()
    return (
        term in app.candidate_name.lower()
        or term in app.candidate_email.lower()
        or term in app.job_title.lower()
    )


def matches_job(app: Application, job_id: str) -> bool:
    return not job_id or job_id == ALL_JOBS or app.job_id == job_id


def visible(applications: Iterable[Application], filters: FilterState) -> list[Application]:
    """Applications passing the filters, in input order."""
    return [
        app for app in applications
        if matches_job(app, filters.job_id) and matches_search(app, filters.search)
    ]
