"""Application lifecycle: submission, status transitions and their notifications.

Status machine::

    under_review -> shortlisted | accepted | rejected

By default any status may be set from any other, matching how placement
officers actually use the portal. With ``enforce_transitions`` the table in
:data:`ALLOWED_TRANSITIONS` is applied instead.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from placementdesk.evaluation.eligibility import is_eligible_for_job
from placementdesk.exceptions import (
    ClosedError,
    DuplicateError,
    IneligibleError,
    ValidationError,
)
from placementdesk.models import (
    ACCEPTED,
    APPLICATION_STATUSES,
    JOB_ACTIVE,
    REJECTED,
    SHORTLISTED,
    UNDER_REVIEW,
    Application,
    parse_timestamp,
    utcnow,
)
from placementdesk.storage.base import Store
from placementdesk.validation.rules import as_int, validate_application
from placementdesk.workflow.notifications import NotificationCenter

logger = logging.getLogger(__name__)

STATUS_MESSAGES: dict[str, str] = {
    UNDER_REVIEW: "Your application is under review.",
    SHORTLISTED: "Congratulations! You have been shortlisted for the next round.",
    ACCEPTED: "Congratulations! Your application has been accepted.",
    REJECTED: (
        "Thank you for your interest. Unfortunately, your application was not "
        "selected this time."
    ),
}

ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    UNDER_REVIEW: frozenset({SHORTLISTED, ACCEPTED, REJECTED}),
    SHORTLISTED: frozenset({ACCEPTED, REJECTED}),
    ACCEPTED: frozenset(),
    REJECTED: frozenset(),
}


def status_priority(status: str) -> str:
    return "high" if status == ACCEPTED else "medium"


class ApplicationLifecycle:
    """Creates applications and drives their status changes."""

    def __init__(
        self,
        store: Store,
        notifier: NotificationCenter,
        clock: Callable[[], datetime] = utcnow,
        enforce_transitions: bool = False,
    ) -> None:
        self._store = store
        self._notifier = notifier
        self._clock = clock
        self._enforce_transitions = enforce_transitions

    # ---- submission ----

    def submit_application(self, data: Mapping[str, Any]) -> Application:
        """Validate and record a student's application to a job.

        All preconditions are checked before anything is written; the writes
        (application, job counter, student's applied jobs, notification) and
        the duplicate check share one atomic block, so concurrent submissions
        for the same pair can not both succeed.
        """
        validate_application(data)
        student_id = as_int(data["student_id"], "student_id")
        job_id = as_int(data["job_id"], "job_id")
        cover_letter: str = data["cover_letter"]

        with self._store.atomic():
            student = self._store.students.get_by_id(student_id)
            if not student.is_eligible:
                raise IneligibleError("Student is not eligible for placements")

            job = self._store.jobs.get_by_id(job_id)
            if job.status != JOB_ACTIVE:
                raise ClosedError("Job is no longer accepting applications")
            now = self._clock()
            if job.application_deadline is None or now > job.application_deadline:
                raise ClosedError("Application deadline has passed")

            if not is_eligible_for_job(student, job.eligibility_criteria):
                raise IneligibleError("Student does not meet job eligibility criteria")

            if self._find(student.id, job.id) is not None:
                raise DuplicateError("You have already applied for this job")

            application = self._store.applications.create(
                Application(
                    student_id=student.id,
                    job_id=job.id,
                    student_name=student.name,
                    job_title=job.title,
                    company=job.company,
                    cover_letter=cover_letter,
                    application_date=now,
                    status=UNDER_REVIEW,
                )
            )
            self._store.jobs.update(
                job.id, applications_received=job.applications_received + 1
            )
            self._store.students.update(
                student.id, applied_jobs=student.applied_jobs + (job.id,)
            )
            self._notifier.emit(
                type="application_submitted",
                title="Application Submitted Successfully",
                message=(
                    f"Your application for {job.title} at {job.company} "
                    "has been submitted successfully."
                ),
                recipient="student",
                recipient_id=student.id,
                priority="medium",
                related_job_id=job.id,
                related_application_id=application.id,
            )

        logger.info(
            "Student %d applied to job %d (application %d).",
            student.id,
            job.id,
            application.id,
        )
        return application

    def _find(self, student_id: int, job_id: int) -> Application | None:
        for app in self._store.applications.get_all():
            if app.student_id == student_id and app.job_id == job_id:
                return app
        return None

    # ---- status changes ----

    def update_application_status(
        self,
        application_id: int,
        status: str,
        feedback: str | None = None,
        interview_date: str | datetime | None = None,
    ) -> Application:
        """Set a new status and notify the student.

        *feedback* replaces any earlier feedback when given. An
        *interview_date* is stored and announced in a second, high-priority
        notification.
        """
        if status not in APPLICATION_STATUSES:
            raise ValidationError(f"Invalid application status: {status}", field="status")
        if feedback is not None and not isinstance(feedback, str):
            raise ValidationError("feedback must be text", field="feedback")
        interview_at = None
        if interview_date is not None:
            try:
                interview_at = parse_timestamp(interview_date)
            except (TypeError, ValueError):
                raise ValidationError(
                    "interview_date must be an ISO date/time", field="interview_date"
                ) from None

        with self._store.atomic():
            current = self._store.applications.get_by_id(application_id)
            if self._enforce_transitions and status not in ALLOWED_TRANSITIONS[current.status]:
                raise ValidationError(
                    f"Cannot move application from {current.status} to {status}",
                    field="status",
                )

            changes: dict[str, Any] = {"status": status}
            if feedback is not None:
                changes["feedback"] = feedback
            if interview_at is not None:
                changes["interview_date"] = interview_at
            application = self._store.applications.update(current.id, **changes)

            self._notifier.emit(
                type="application_status",
                title="Application Status Update",
                message=(
                    f"{application.job_title} at {application.company} - "
                    f"{STATUS_MESSAGES[status]}"
                ),
                recipient="student",
                recipient_id=application.student_id,
                priority=status_priority(status),
                related_job_id=application.job_id,
                related_application_id=application.id,
            )
            if interview_at is not None:
                self._notifier.emit(
                    type="interview_schedule",
                    title="Interview Scheduled",
                    message=(
                        f"Your interview for {application.job_title} at "
                        f"{application.company} is scheduled for "
                        f"{interview_at:%Y-%m-%d} at {interview_at:%H:%M} UTC."
                    ),
                    recipient="student",
                    recipient_id=application.student_id,
                    priority="high",
                    related_job_id=application.job_id,
                    related_application_id=application.id,
                )

        logger.info(
            "Application %d: %s -> %s.", application.id, current.status, status
        )
        return application

    # ---- queries ----

    def all_applications(self) -> list[Application]:
        return self._store.applications.get_all()

    def applications_for_student(self, student_id: int) -> list[Application]:
        return [a for a in self._store.applications.get_all() if a.student_id == int(student_id)]

    def applications_for_job(self, job_id: int) -> list[Application]:
        return [a for a in self._store.applications.get_all() if a.job_id == int(job_id)]

    def applications_for_employer(self, employer_id: int) -> list[Application]:
        employer = self._store.employers.get_by_id(employer_id)
        job_ids = {j.id for j in self._store.jobs.get_all() if j.company_id == employer.id}
        return [a for a in self._store.applications.get_all() if a.job_id in job_ids]

    def application_details(self, application_id: int) -> dict[str, Any]:
        application = self._store.applications.get_by_id(application_id)
        return {
            "application": application,
            "student": self._store.students.get_by_id(application.student_id),
            "job": self._store.jobs.get_by_id(application.job_id),
        }
