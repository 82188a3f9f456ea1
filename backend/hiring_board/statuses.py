"""Pipeline stages an application can occupy."""

from enum import Enum
from typing import Optional


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    REVIEWING = "reviewing"
    SHORTLISTED = "shortlisted"
    INTERVIEW = "interview"
    HIRED = "hired"
    REJECTED = "rejected"


# Canonical column order
PIPELINE: tuple[ApplicationStatus, ...] = tuple(ApplicationStatus)

TERMINAL = frozenset({ApplicationStatus.HIRED, ApplicationStatus.REJECTED})

# Stages counted as "in pipeline" on the summary
ACTIVE = frozenset({ApplicationStatus.REVIEWING, ApplicationStatus.SHORTLISTED, ApplicationStatus.INTERVIEW})

LABELS: dict[ApplicationStatus, str] = {
    ApplicationStatus.PENDING: "New Applications",
    ApplicationStatus.REVIEWING: "Under Review",
    ApplicationStatus.SHORTLISTED: "Shortlisted",
    ApplicationStatus.INTERVIEW: "Interview Stage",
    ApplicationStatus.HIRED: "Hired",
    ApplicationStatus.REJECTED: "Rejected",
}


def parse_status(value) -> Optional[ApplicationStatus]:
    """Map a raw status string onto the pipeline, None if it is not a known stage."""
    if isinstance(value, ApplicationStatus):
        return value
    if not isinstance(value, str):
        return None
    try:
        return ApplicationStatus(value)
    except ValueError:
        return None


def is_terminal(status) -> bool:
    return parse_status(status) in TERMINAL


def label(status) -> str:
    """Display label for a status; unknown values are shown as-is."""
    parsed = parse_status(status)
    if parsed is None:
        return str(status)
    return LABELS[parsed]
