"""Multi-select and bulk actions over the pipeline board.

A bulk action is one call per selected application, not a transaction: some
items can fail while the rest go through, and each failure is reported with
its own message. After every bulk action the selection is cleared and the
board reloaded, since local state can't be trusted after a partial failure.
"""

import asyncio
import logging
from typing import Annotated, ClassVar, Iterable, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

from hiring_board import api
from hiring_board.api import BackendError
from hiring_board.models import Application
from hiring_board.notifications import Notifier
from hiring_board.statuses import ApplicationStatus, label
from hiring_board.store import PipelineStore

logger = logging.getLogger(__name__)


# --- Selection ---


class SelectionSet:
    """Ordered set of selected application ids, independent of columns."""

    def __init__(self):
        self._ids: dict[str, None] = {}
        self.select_mode = False

    def __contains__(self, application_id) -> bool:
        return application_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self):
        return iter(list(self._ids))

    @property
    def ids(self) -> list[str]:
        return list(self._ids)

    def toggle(self, application_id: str) -> bool:
        """Add or remove an id. Returns True if it is selected afterwards."""
        if application_id in self._ids:
            del self._ids[application_id]
            return False
        self._ids[application_id] = None
        return True

    def clear(self) -> None:
        self._ids.clear()
        self.select_mode = False

    def set_select_mode(self, enabled: bool) -> None:
        if enabled:
            self.select_mode = True
        else:
            self.clear()

    def prune(self, existing_ids: Iterable[str]) -> list[str]:
        """Drop ids that are no longer on the board. Returns the dropped ids."""
        existing = set(existing_ids)
        stale = [i for i in self._ids if i not in existing]
        for i in stale:
            del self._ids[i]
        return stale


# --- Message Templates ---


class MessageTemplate(BaseModel):
    id: str
    name: str
    subject: str
    message: str


TEMPLATES: dict[str, MessageTemplate] = {
    t.id: t for t in [
        MessageTemplate(
            id="interview_invitation",
            name="Interview Invitation",
            subject="Interview Invitation - {job_title} at {company_name}",
            message=(
                "Dear {candidate_name},\n\n"
                "We're pleased to inform you that your application for the {job_title} position at "
                "{company_name} has been reviewed, and we would like to invite you for an interview.\n\n"
                "We'll be in touch soon with more details about the interview process.\n\n"
                "Best regards,\n{company_name} Team"
            ),
        ),
        MessageTemplate(
            id="application_update",
            name="Application Status Update",
            subject="Update on your application - {job_title}",
            message=(
                "Dear {candidate_name},\n\n"
                "Thank you for your interest in the {job_title} position at {company_name}.\n\n"
                "We wanted to provide you with an update on your application status. "
                "We'll be in touch with next steps soon.\n\n"
                "Best regards,\n{company_name} Team"
            ),
        ),
        MessageTemplate(
            id="rejection_notice",
            name="Application Rejection",
            subject="Update on your application for {job_title}",
            message=(
                "Dear {candidate_name},\n\n"
                "Thank you for your interest in the {job_title} position at {company_name}.\n\n"
                "After careful consideration, we have decided to move forward with other candidates "
                "at this time. We appreciate the time you invested in the application process and "
                "encourage you to apply for future opportunities.\n\n"
                "Best regards,\n{company_name} Team"
            ),
        ),
        MessageTemplate(id="custom", name="Custom Message", subject="", message=""),
    ]
}


class _Placeholders(dict):
    def __missing__(self, key):
        return "{" + key + "}"


def render(text: str, app: Application, company_name: str) -> str:
    """Fill {candidate_name}, {job_title} and {company_name}; other braces are kept."""
    values = _Placeholders(
        candidate_name=app.candidate_name,
        job_title=app.job_title,
        company_name=company_name,
    )
    try:
        return text.format_map(values)
    except (ValueError, IndexError, AttributeError):
        # Stray braces in free text, fall back to plain replacement
        for key in ("candidate_name", "job_title", "company_name"):
            text = text.replace("{" + key + "}", values[key])
        return text


# --- Actions ---


class StatusChangeAction(BaseModel):
    kind: Literal["status"] = "status"
    status: ApplicationStatus
    notes: Optional[str] = None

    writes_status: ClassVar[bool] = True

    def describe(self) -> str:
        return f"Moved to {label(self.status)}"

    def execute(self, client, app: Application, company_name: str) -> None:
        client.update_application_status(app.id, self.status.value, self.notes)


class RejectAction(BaseModel):
    kind: Literal["reject"] = "reject"
    notes: Optional[str] = None

    writes_status: ClassVar[bool] = True

    def describe(self) -> str:
        return "Rejected"

    def execute(self, client, app: Application, company_name: str) -> None:
        client.update_application_status(app.id, ApplicationStatus.REJECTED.value, self.notes)


class NotifyAction(BaseModel):
    kind: Literal["notify"] = "notify"
    template_id: str = "application_update"
    subject: Optional[str] = None  # defaults to the template's
    message: Optional[str] = None

    writes_status: ClassVar[bool] = False

    def describe(self) -> str:
        return "Emailed"

    def resolve(self) -> tuple[str, str]:
        template = TEMPLATES.get(self.template_id, TEMPLATES["custom"])
        return self.subject or template.subject, self.message or template.message

    @model_validator(mode="after")
    def require_text(self):
        subject, message = self.resolve()
        if not subject or not message:
            raise ValueError("Subject and message are required")
        return self

    def execute(self, client, app: Application, company_name: str) -> None:
        subject, message = self.resolve()
        client.send_candidate_message(
            app.id,
            self.template_id,
            render(subject, app, company_name),
            render(message, app, company_name),
        )


BulkAction = Annotated[
    Union[StatusChangeAction, RejectAction, NotifyAction],
    Field(discriminator="kind"),
]


# --- Results ---


class BulkFailure(BaseModel):
    application_id: str
    error: str


class BulkResult(BaseModel):
    succeeded: list[str] = Field(default_factory=list)
    failed: list[BulkFailure] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed)

    def summary(self, title: str = "Bulk update") -> str:
        text = f"{title}: {len(self.succeeded)} of {self.total} applications succeeded"
        if self.failed:
            text += f" ({len(self.failed)} failed)"
        return text


# --- Controller ---


class BulkActionController:
    def __init__(
        self,
        store: PipelineStore,
        selection: SelectionSet,
        notifier: Notifier,
        sync=None,
        client=api,
        concurrency: int = 4,
        company_name: str = "",
    ):
        self.store = store
        self.selection = selection
        self.notifier = notifier
        self.sync = sync
        self.client = client
        self.concurrency = max(1, concurrency)
        self.company_name = company_name

    def toggle(self, application_id: str) -> bool:
        return self.selection.toggle(application_id)

    def clear(self) -> None:
        self.selection.clear()

    def selected_applications(self) -> list[Application]:
        """Selected applications in selection order, skipping ids no longer loaded."""
        return [app for app in (self.store.get(i) for i in self.selection) if app is not None]

    async def apply_action(self, action) -> BulkResult:
        """Run `action` once per selected application and report per-item outcomes."""
        ids = self.selection.ids
        if not ids:
            return BulkResult()

        semaphore = asyncio.Semaphore(self.concurrency)

        async def run_one(application_id: str) -> Optional[str]:
            app = self.store.get(application_id)
            if app is None:
                return "Application is no longer available"
            if action.writes_status and not self.store.claim(application_id):
                return "Another update for this application is still in progress"
            try:
                async with semaphore:
                    await asyncio.to_thread(action.execute, self.client, app, self.company_name)
            except BackendError as e:
                return e.message
            finally:
                if action.writes_status:
                    self.store.release(application_id)
            return None

        errors = await asyncio.gather(*(run_one(i) for i in ids))

        result = BulkResult()
        for application_id, error in zip(ids, errors):
            if error is None:
                result.succeeded.append(application_id)
            else:
                logger.warning("Bulk %s failed for %s: %s", action.kind, application_id, error)
                result.failed.append(BulkFailure(application_id=application_id, error=error))

        self.selection.clear()
        if self.sync is not None:
            await self.sync.refresh()

        message = result.summary(action.describe())
        if result.failed:
            self.notifier.warning(message)
        else:
            self.notifier.success(message)
        return result
