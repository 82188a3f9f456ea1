"""CSV/JSON export of applications (e.g. the current selection)."""

import csv
import io
import json
from typing import Iterable

from hiring_board.models import Application
from hiring_board.statuses import label

EXPORT_FIELDS = [
    "id",
    "candidate_name",
    "candidate_email",
    "candidate_phone",
    "candidate_location",
    "job_id",
    "job_title",
    "status",
    "applied_at",
    "expected_salary",
    "rating",
    "employer_notes",
    "interview_scheduled_at",
]

FORMATS = ("csv", "json")


def export_applications(applications: Iterable[Application], fmt: str = "csv") -> str:
    """Serialize applications as CSV (one row each) or a JSON array."""
    if fmt not in FORMATS:
        raise ValueError(f"Unsupported export format '{fmt}'. Use: {', '.join(FORMATS)}")

    rows = []
    for app in applications:
        row = app.model_dump(include=set(EXPORT_FIELDS))
        row["stage"] = label(app.status)
        rows.append(row)

    if fmt == "json":
        return json.dumps(rows, indent=2)

    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=EXPORT_FIELDS + ["stage"], extrasaction="ignore")
    writer.writeheader()
    for row in rows:
        writer.writerow({k: "" if v is None else v for k, v in row.items()})
    return buf.getvalue()
