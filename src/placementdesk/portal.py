"""Portal facade: wires the store, settings and every workflow together."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from placementdesk.matching.engine import MatchingEngine
from placementdesk.models import (
    Application,
    Employer,
    Job,
    JobSearchFilters,
    Notification,
    ScoredJob,
    Student,
    utcnow,
)
from placementdesk.reporting import statistics
from placementdesk.settings import AppSettings
from placementdesk.storage import open_store
from placementdesk.storage.base import Store
from placementdesk.workflow.applications import ApplicationLifecycle
from placementdesk.workflow.notifications import NotificationCenter
from placementdesk.workflow.registration import Registrar

logger = logging.getLogger(__name__)


class PlacementPortal:
    """Single entry point used by the CLI and the HTTP API."""

    def __init__(
        self,
        settings: AppSettings,
        store: Store | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.settings = settings
        self.clock = clock
        self.store = store if store is not None else open_store(settings, clock)
        self.notifications = NotificationCenter(self.store)
        self.registrar = Registrar(self.store, self.notifications, clock)
        self.matching = MatchingEngine(self.store, clock)
        self.applications = ApplicationLifecycle(
            self.store,
            self.notifications,
            clock,
            enforce_transitions=settings.enforce_status_transitions,
        )

    def close(self) -> None:
        self.store.close()

    # ---- students ----

    def register_student(self, data: Mapping[str, Any]) -> Student:
        return self.registrar.register_student(data)

    def update_student_profile(self, student_id: int, changes: Mapping[str, Any]) -> Student:
        return self.registrar.update_student_profile(student_id, changes)

    def get_student(self, student_id: int) -> Student:
        return self.store.students.get_by_id(student_id)

    def list_students(self) -> list[Student]:
        return self.store.students.get_all()

    # ---- employers ----

    def register_employer(self, data: Mapping[str, Any]) -> Employer:
        return self.registrar.register_employer(data)

    def update_employer_profile(self, employer_id: int, changes: Mapping[str, Any]) -> Employer:
        return self.registrar.update_employer_profile(employer_id, changes)

    def verify_employer(self, employer_id: int) -> Employer:
        return self.registrar.verify_employer(employer_id)

    def get_employer(self, employer_id: int) -> Employer:
        return self.store.employers.get_by_id(employer_id)

    def list_employers(self) -> list[Employer]:
        return self.store.employers.get_all()

    def employer_jobs(self, employer_id: int) -> list[Job]:
        employer = self.store.employers.get_by_id(employer_id)
        return [j for j in self.store.jobs.get_all() if j.company_id == employer.id]

    # ---- jobs ----

    def post_job(self, employer_id: int, data: Mapping[str, Any]) -> Job:
        return self.registrar.post_job(employer_id, data)

    def set_job_status(self, job_id: int, status: str) -> Job:
        return self.registrar.set_job_status(job_id, status)

    def get_job(self, job_id: int) -> Job:
        return self.store.jobs.get_by_id(job_id)

    def job_details(self, job_id: int) -> dict[str, Any]:
        return self.matching.job_details(job_id, self.settings.deadline_window_days)

    def active_jobs(self) -> list[Job]:
        return self.matching.active_jobs()

    def search_jobs(self, filters: JobSearchFilters | None = None) -> list[Job]:
        return self.matching.search_jobs(filters)

    def jobs_for_student(self, student_id: int) -> list[Job]:
        return self.matching.jobs_for_student(student_id)

    def recommended_jobs(self, student_id: int, limit: int | None = None) -> list[ScoredJob]:
        return self.matching.recommended_jobs(
            student_id, limit or self.settings.recommendation_limit
        )

    def eligible_students_for_job(self, job_id: int) -> list[Student]:
        return self.matching.eligible_students_for_job(job_id)

    # ---- applications ----

    def submit_application(self, data: Mapping[str, Any]) -> Application:
        return self.applications.submit_application(data)

    def update_application_status(
        self,
        application_id: int,
        status: str,
        feedback: str | None = None,
        interview_date: str | datetime | None = None,
    ) -> Application:
        return self.applications.update_application_status(
            application_id, status, feedback, interview_date
        )

    # ---- notifications ----

    def create_notification(self, data: Mapping[str, Any]) -> Notification:
        return self.notifications.create_notification(data)

    def mark_notification_read(self, notification_id: int) -> Notification:
        return self.notifications.mark_as_read(notification_id)

    # ---- statistics ----

    def dashboard(self) -> dict[str, int]:
        return statistics.dashboard_summary(
            self.store.students.get_all(),
            self.store.employers.get_all(),
            self.store.jobs.get_all(),
            self.store.applications.get_all(),
        )

    def application_statistics(self) -> dict[str, Any]:
        return statistics.application_statistics(self.store.applications.get_all())

    def job_statistics(self) -> dict[str, Any]:
        return statistics.job_statistics(
            self.store.jobs.get_all(), self.store.applications.get_all(), self.clock()
        )

    def notification_statistics(self) -> dict[str, Any]:
        return statistics.notification_statistics(self.store.notifications.get_all())

    def jobs_closing_soon(self, days: int | None = None) -> list[Job]:
        return statistics.jobs_closing_soon(
            self.store.jobs.get_all(),
            self.clock(),
            days or self.settings.deadline_window_days,
        )

    def student_report(self, student_id: int) -> dict[str, Any]:
        return statistics.student_report(
            self.store.students.get_by_id(student_id), self.store.applications.get_all()
        )

    def employer_dashboard(self, employer_id: int) -> dict[str, Any]:
        return statistics.employer_dashboard(
            self.store.employers.get_by_id(employer_id),
            self.store.jobs.get_all(),
            self.store.applications.get_all(),
        )

    # ---- seeding ----

    def seed(self, data: Mapping[str, list[dict[str, Any]]]) -> dict[str, int]:
        """Register seed students and employers; verified employers post their jobs.

        Seeding is skipped when the store already holds students or employers.
        """
        if self.store.students.get_all() or self.store.employers.get_all():
            logger.info("Store already populated; skipping seed data.")
            return {"students": 0, "employers": 0, "jobs": 0}

        counts = {"students": 0, "employers": 0, "jobs": 0}
        for entry in data.get("students", []):
            self.register_student(entry)
            counts["students"] += 1
        for entry in data.get("employers", []):
            jobs = entry.get("jobs") or []
            employer = self.register_employer(entry)
            counts["employers"] += 1
            if entry.get("verified"):
                self.verify_employer(employer.id)
                for job in jobs:
                    self.post_job(employer.id, job)
                    counts["jobs"] += 1
        logger.info(
            "Seeded %d student(s), %d employer(s), %d job(s).",
            counts["students"],
            counts["employers"],
            counts["jobs"],
        )
        return counts
