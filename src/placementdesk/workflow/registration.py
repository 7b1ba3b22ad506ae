"""Student/employer registration, verification and job posting."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from placementdesk.evaluation.eligibility import check_global_eligibility
from placementdesk.exceptions import UnverifiedError, ValidationError
from placementdesk.models import (
    JOB_ACTIVE,
    JOB_STATUSES,
    EligibilityCriteria,
    Employer,
    Job,
    Student,
    parse_timestamp,
    utcnow,
)
from placementdesk.storage.base import Store
from placementdesk.validation.rules import (
    as_float,
    as_int,
    as_str_list,
    is_missing,
    validate_employer,
    validate_job,
    validate_student,
)
from placementdesk.workflow.notifications import NotificationCenter

logger = logging.getLogger(__name__)

STUDENT_EDITABLE = (
    "name",
    "email",
    "phone",
    "student_number",
    "department",
    "year",
    "cgpa",
    "skills",
    "certifications",
)
EMPLOYER_EDITABLE = (
    "company_name",
    "email",
    "phone",
    "website",
    "address",
    "industry",
    "contact_person",
    "company_size",
    "description",
)


def _text(data: Mapping[str, Any], name: str) -> str:
    value = data.get(name)
    return "" if value is None else str(value).strip()


def student_fields(data: Mapping[str, Any]) -> dict[str, Any]:
    """Typed, normalized student fields from validated input."""
    year = as_int(data["year"], "year")
    cgpa = as_float(data["cgpa"], "cgpa")
    return {
        "name": _text(data, "name"),
        "email": _text(data, "email").lower(),
        "phone": _text(data, "phone"),
        "student_number": _text(data, "student_number"),
        "department": data["department"],
        "year": year,
        "cgpa": cgpa,
        "skills": frozenset(as_str_list(data.get("skills"), "skills")),
        "certifications": tuple(as_str_list(data.get("certifications"), "certifications")),
        "is_eligible": check_global_eligibility(cgpa, year),
    }


def employer_fields(data: Mapping[str, Any]) -> dict[str, Any]:
    fields = {name: _text(data, name) for name in EMPLOYER_EDITABLE}
    fields["email"] = fields["email"].lower()
    return fields


def eligibility_criteria(raw: Mapping[str, Any] | None) -> EligibilityCriteria | None:
    if not raw:
        return None
    year = raw.get("year")
    return EligibilityCriteria(
        min_cgpa=as_float(raw["min_cgpa"], "min_cgpa"),
        departments=frozenset(as_str_list(raw.get("departments"), "departments")),
        year=None if is_missing(year) else as_int(year, "year"),
    )


class Registrar:
    """Validates and stores students, employers and job postings."""

    def __init__(
        self,
        store: Store,
        notifier: NotificationCenter,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._notifier = notifier
        self._clock = clock

    # ---- students ----

    def register_student(self, data: Mapping[str, Any]) -> Student:
        validate_student(data)
        fields = student_fields(data)
        with self._store.atomic():
            student = self._store.students.create(Student(**fields))
            self._notifier.emit(
                type="profile_created",
                title="Welcome to Placement Portal",
                message=(
                    "Your student profile has been created successfully. "
                    "Complete your profile to apply for jobs."
                ),
                recipient="student",
                recipient_id=student.id,
                priority="medium",
            )
        logger.info(
            "Registered student %d (%s), eligible=%s.",
            student.id,
            student.email,
            student.is_eligible,
        )
        return student

    def update_student_profile(self, student_id: int, changes: Mapping[str, Any]) -> Student:
        """Merge *changes* over the stored profile and recompute eligibility.

        ``applied_jobs`` and ``is_eligible`` are owned by the workflows and
        ignored if supplied.
        """
        current = self._store.students.get_by_id(student_id)
        merged = {name: getattr(current, name) for name in STUDENT_EDITABLE}
        merged.update({k: v for k, v in changes.items() if k in STUDENT_EDITABLE})
        validate_student(merged)
        updated = self._store.students.update(current.id, **student_fields(merged))
        logger.info("Updated student %d, eligible=%s.", updated.id, updated.is_eligible)
        return updated

    # ---- employers ----

    def register_employer(self, data: Mapping[str, Any]) -> Employer:
        validate_employer(data)
        with self._store.atomic():
            employer = self._store.employers.create(Employer(**employer_fields(data)))
            self._notifier.emit(
                type="company_registration",
                title="Company Registration Received",
                message=(
                    "Your company registration is under review. "
                    "You will be notified once verified."
                ),
                recipient="employer",
                recipient_id=employer.id,
                priority="medium",
            )
        logger.info("Registered employer %d (%s).", employer.id, employer.company_name)
        return employer

    def update_employer_profile(self, employer_id: int, changes: Mapping[str, Any]) -> Employer:
        """Merge *changes* into the profile; verification and jobs are not editable here."""
        current = self._store.employers.get_by_id(employer_id)
        merged = {name: getattr(current, name) for name in EMPLOYER_EDITABLE}
        merged.update({k: v for k, v in changes.items() if k in EMPLOYER_EDITABLE})
        validate_employer(merged)
        return self._store.employers.update(current.id, **employer_fields(merged))

    def verify_employer(self, employer_id: int) -> Employer:
        """Mark the employer verified. One-way; repeat calls are no-ops."""
        employer = self._store.employers.get_by_id(employer_id)
        if employer.is_verified:
            logger.info("Employer %d already verified.", employer.id)
            return employer
        with self._store.atomic():
            employer = self._store.employers.update(employer.id, is_verified=True)
            self._notifier.emit(
                type="company_verification",
                title="Company Profile Verified",
                message=(
                    "Your company profile has been successfully verified. "
                    "You can now post job openings."
                ),
                recipient="employer",
                recipient_id=employer.id,
                priority="high",
            )
        logger.info("Verified employer %d (%s).", employer.id, employer.company_name)
        return employer

    # ---- jobs ----

    def post_job(self, employer_id: int, data: Mapping[str, Any]) -> Job:
        employer = self._store.employers.get_by_id(employer_id)
        if not employer.is_verified:
            logger.info("Rejected job post from unverified employer %d.", employer.id)
            raise UnverifiedError("Company must be verified to post jobs")
        validate_job(data)

        job = Job(
            company_id=employer.id,
            company=employer.company_name,
            title=_text(data, "title"),
            location=_text(data, "location"),
            job_type=data["job_type"],
            experience=_text(data, "experience"),
            salary=_text(data, "salary"),
            description=_text(data, "description"),
            requirements=tuple(as_str_list(data["requirements"], "requirements")),
            skills=frozenset(as_str_list(data.get("skills"), "skills")),
            eligibility_criteria=eligibility_criteria(data.get("eligibility_criteria")),
            application_deadline=parse_timestamp(data["application_deadline"]),
            status=JOB_ACTIVE,
            posted_date=self._clock(),
            applications_received=0,
        )
        with self._store.atomic():
            job = self._store.jobs.create(job)
            self._store.employers.update(
                employer.id, jobs_posted=employer.jobs_posted + (job.id,)
            )
            self._notifier.emit(
                type="job_posting",
                title=f"New Job Posted: {job.title}",
                message=(
                    f"{employer.company_name} has posted a new {job.title} position. "
                    "Apply now!"
                ),
                recipient="all_students",
                priority="medium",
                related_job_id=job.id,
            )
        logger.info("Employer %d posted job %d (%s).", employer.id, job.id, job.title)
        return job

    def set_job_status(self, job_id: int, status: str) -> Job:
        """Open or close a job for applications."""
        if status not in JOB_STATUSES:
            raise ValidationError(f"Invalid job status: {status}", field="status")
        job = self._store.jobs.update(job_id, status=status)
        logger.info("Job %d is now %s.", job.id, status)
        return job
