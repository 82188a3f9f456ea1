"""Pydantic models for hiring_board data structures."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from hiring_board.statuses import ApplicationStatus

ALL_JOBS = "all"


# --- Backend Records ---


class Application(BaseModel):
    """One candidate's application to one job, in the backend's flat shape."""

    model_config = ConfigDict(extra="ignore")

    id: str
    candidate_id: Optional[str] = None
    candidate_name: str = "Unknown Candidate"
    candidate_email: str = ""
    candidate_phone: Optional[str] = None
    candidate_location: Optional[str] = None
    job_id: str
    job_title: str = "Unknown Job"
    status: str = ""  # raw backend value, checked against the pipeline when bucketing
    applied_at: str = ""
    expected_salary: Optional[str] = None
    rating: Optional[int] = None  # 1-5
    employer_notes: Optional[str] = None
    interview_scheduled_at: Optional[str] = None
    resume_url: Optional[str] = None
    skills: list[str] = Field(default_factory=list)
    experience_years: Optional[float] = None

    @field_validator("id", "candidate_id", "job_id", "expected_salary", mode="before")
    @classmethod
    def coerce_to_str(cls, v):
        """Backend sends numeric ids and salaries."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("candidate_name", "job_title", mode="before")
    @classmethod
    def coerce_missing_name(cls, v, info):
        if v is None or (isinstance(v, str) and not v.strip()):
            return "Unknown Candidate" if info.field_name == "candidate_name" else "Unknown Job"
        return v

    @field_validator("candidate_email", "status", "applied_at", mode="before")
    @classmethod
    def coerce_none_to_empty(cls, v):
        return v or ""

    @field_validator("skills", mode="before")
    @classmethod
    def coerce_none_to_list(cls, v):
        return v or []

    @field_validator("rating", mode="before")
    @classmethod
    def coerce_rating(cls, v):
        """Drop ratings outside 1-5 instead of failing the whole record."""
        if v is None:
            return None
        try:
            rating = round(float(v))
        except (TypeError, ValueError):
            return None
        return rating if 1 <= rating <= 5 else None


class JobOption(BaseModel):
    """Job filter option."""

    model_config = ConfigDict(extra="ignore")

    id: str
    title: str = "Untitled Job"

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return str(v) if isinstance(v, int) else v


# --- Board State ---


class FilterState(BaseModel):
    """Free-text search plus optional job constraint. Immutable."""

    model_config = ConfigDict(frozen=True)

    search: str = ""
    job_id: str = ALL_JOBS


class PipelineColumn(BaseModel):
    status: ApplicationStatus
    title: str
    applications: list[Application] = Field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.applications)


class PipelineStats(BaseModel):
    total: int = 0
    in_pipeline: int = 0
    hired: int = 0
    rejected: int = 0
    by_status: dict[str, int] = Field(default_factory=dict)
    anomalies: int = 0
