"""Job/student matching over the store."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from datetime import datetime
from typing import Any

from placementdesk.evaluation.eligibility import qualifies_for_job
from placementdesk.evaluation.filter_chain import build_filter_chain
from placementdesk.matching.scoring import rank_jobs
from placementdesk.models import Job, JobSearchFilters, ScoredJob, Student, utcnow
from placementdesk.reporting.statistics import days_until_deadline, is_deadline_approaching
from placementdesk.storage.base import Store

logger = logging.getLogger(__name__)


def newest_first(jobs: list[Job]) -> list[Job]:
    """Sort by ``posted_date`` descending; jobs without a date go last."""
    return sorted(
        jobs,
        key=lambda j: j.posted_date.timestamp() if j.posted_date else -math.inf,
        reverse=True,
    )


def open_jobs(jobs: list[Job], now: datetime) -> list[Job]:
    return newest_first([j for j in jobs if j.is_open(now)])


def jobs_open_to(student: Student, jobs: list[Job], now: datetime) -> list[Job]:
    """Open jobs the student qualifies for and has not applied to yet."""
    if not student.is_eligible:
        return []
    applied = set(student.applied_jobs)
    return [
        job
        for job in open_jobs(jobs, now)
        if job.id not in applied and qualifies_for_job(student, job.eligibility_criteria)
    ]


def filter_jobs(jobs: list[Job], filters: JobSearchFilters) -> list[Job]:
    head = build_filter_chain(filters)
    if head is None:
        return newest_first(jobs)
    kept = []
    for job in jobs:
        reason = head.evaluate(job)
        if reason is None:
            kept.append(job)
        else:
            logger.debug("Search dropped job %d: %s.", job.id, reason)
    return newest_first(kept)


class MatchingEngine:
    """Read-only queries deciding which students meet which jobs."""

    def __init__(self, store: Store, clock: Callable[[], datetime] = utcnow) -> None:
        self._store = store
        self._clock = clock

    def active_jobs(self) -> list[Job]:
        return open_jobs(self._store.jobs.get_all(), self._clock())

    def jobs_for_student(self, student_id: int) -> list[Job]:
        student = self._store.students.get_by_id(student_id)
        return jobs_open_to(student, self._store.jobs.get_all(), self._clock())

    def search_jobs(self, filters: JobSearchFilters | None = None) -> list[Job]:
        return filter_jobs(self._store.jobs.get_all(), filters or JobSearchFilters())

    def recommended_jobs(self, student_id: int, limit: int = 5) -> list[ScoredJob]:
        student = self._store.students.get_by_id(student_id)
        now = self._clock()
        candidates = jobs_open_to(student, self._store.jobs.get_all(), now)
        ranked = rank_jobs(student, candidates, now, limit)
        logger.info(
            "Recommended %d of %d open job(s) to student %d.",
            len(ranked),
            len(candidates),
            student.id,
        )
        return ranked

    def eligible_students_for_job(self, job_id: int) -> list[Student]:
        job = self._store.jobs.get_by_id(job_id)
        return [
            s
            for s in self._store.students.get_all()
            if qualifies_for_job(s, job.eligibility_criteria)
        ]

    def job_details(self, job_id: int, deadline_window_days: int = 3) -> dict[str, Any]:
        """Job with its applications and deadline outlook."""
        job = self._store.jobs.get_by_id(job_id)
        now = self._clock()
        applications = [a for a in self._store.applications.get_all() if a.job_id == job.id]
        return {
            "job": job,
            "status": job.effective_status(now),
            "application_count": len(applications),
            "eligible_student_count": len(self.eligible_students_for_job(job.id)),
            "applications": applications[:10],
            "is_deadline_approaching": is_deadline_approaching(job, now, deadline_window_days),
            "days_until_deadline": days_until_deadline(job, now),
        }
