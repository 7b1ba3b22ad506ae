"""Domain models for PlacementDesk."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone

# ---- enumerations ----

DEPARTMENTS: tuple[str, ...] = (
    "Computer Science",
    "Information Technology",
    "Electronics",
    "Mechanical",
    "Civil",
    "Electrical",
)

JOB_TYPES: tuple[str, ...] = ("Full-time", "Part-time", "Internship", "Contract")

JOB_ACTIVE = "active"
JOB_INACTIVE = "inactive"
JOB_EXPIRED = "expired"  # derived from the deadline, never stored
JOB_STATUSES: tuple[str, ...] = (JOB_ACTIVE, JOB_INACTIVE)

UNDER_REVIEW = "under_review"
SHORTLISTED = "shortlisted"
ACCEPTED = "accepted"
REJECTED = "rejected"
APPLICATION_STATUSES: tuple[str, ...] = (UNDER_REVIEW, SHORTLISTED, ACCEPTED, REJECTED)

# Types an administrator may create directly.
NOTIFICATION_TYPES: tuple[str, ...] = (
    "job_posting",
    "application_status",
    "interview_schedule",
    "deadline_reminder",
    "profile_update",
    "company_verification",
)
# Extra types only emitted by workflows.
SYSTEM_NOTIFICATION_TYPES: tuple[str, ...] = NOTIFICATION_TYPES + (
    "application_submitted",
    "profile_created",
    "company_registration",
)
RECIPIENTS: tuple[str, ...] = ("student", "employer", "all_students", "all_employers")
PRIORITIES: tuple[str, ...] = ("high", "medium", "low")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: str | date | datetime) -> datetime:
    """Coerce *value* to an aware UTC datetime.

    Date-only values map to midnight UTC of that day; naive datetimes are
    taken to be UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


# ---- entities ----


@dataclass(frozen=True)
class Student:
    """A registered student; ``is_eligible`` is derived from cgpa and year."""

    id: int = 0
    name: str = ""
    email: str = ""
    phone: str = ""
    student_number: str = ""
    department: str = ""
    year: int = 1
    cgpa: float = 0.0
    is_eligible: bool = False
    skills: frozenset[str] = frozenset()
    certifications: tuple[str, ...] = ()
    applied_jobs: tuple[int, ...] = ()
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class Employer:
    """A recruiting company. Only verified employers may post jobs."""

    id: int = 0
    company_name: str = ""
    email: str = ""
    phone: str = ""
    website: str = ""
    address: str = ""
    industry: str = ""
    contact_person: str = ""
    company_size: str = ""
    description: str = ""
    is_verified: bool = False
    jobs_posted: tuple[int, ...] = ()
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class EligibilityCriteria:
    """Optional per-job restrictions on who may apply."""

    min_cgpa: float | None = None
    departments: frozenset[str] = frozenset()
    year: int | None = None


@dataclass(frozen=True)
class Job:
    """A job opening posted by an employer."""

    id: int = 0
    company_id: int = 0
    company: str = ""
    title: str = ""
    location: str = ""
    job_type: str = ""
    experience: str = ""
    salary: str = ""
    description: str = ""
    requirements: tuple[str, ...] = ()
    skills: frozenset[str] = frozenset()
    eligibility_criteria: EligibilityCriteria | None = None
    application_deadline: datetime | None = None
    status: str = JOB_ACTIVE
    posted_date: datetime | None = None
    applications_received: int = 0

    def effective_status(self, now: datetime) -> str:
        """Stored status, or ``expired`` once the deadline has passed."""
        if self.application_deadline is not None and self.application_deadline < now:
            return JOB_EXPIRED
        return self.status

    def is_open(self, now: datetime) -> bool:
        return (
            self.status == JOB_ACTIVE
            and self.application_deadline is not None
            and self.application_deadline > now
        )


@dataclass(frozen=True)
class Application:
    """One student's application to one job."""

    id: int = 0
    student_id: int = 0
    job_id: int = 0
    student_name: str = ""  # snapshot at submission
    job_title: str = ""  # snapshot at submission
    company: str = ""  # snapshot at submission
    cover_letter: str = ""
    application_date: datetime | None = None
    status: str = UNDER_REVIEW
    feedback: str | None = None
    interview_date: datetime | None = None


@dataclass(frozen=True)
class Notification:
    """A message addressed to one user or broadcast to a role."""

    id: int = 0
    type: str = ""
    title: str = ""
    message: str = ""
    recipient: str = ""
    recipient_id: int | None = None
    priority: str = "medium"
    related_job_id: int | None = None
    related_application_id: int | None = None
    is_read: bool = False
    created_at: datetime | None = None


@dataclass(frozen=True)
class ScoredJob:
    """A recommended job with its heuristic score."""

    job: Job
    score: float = 0.0


@dataclass(frozen=True)
class JobSearchFilters:
    """Composable search parameters; empty values disable a filter."""

    location: str = ""
    company: str = ""
    job_type: str = ""
    experience: str = ""
    min_salary: int = 0
    skills: tuple[str, ...] = field(default_factory=tuple)
    department: str = ""
