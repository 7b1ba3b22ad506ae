"""Read-side aggregates for dashboards.

All functions are pure and accept empty collections, returning zeroed or
empty results.
"""

from __future__ import annotations

import math
from collections import Counter
from datetime import datetime, timedelta
from typing import Any

from placementdesk.models import (
    APPLICATION_STATUSES,
    JOB_ACTIVE,
    JOB_TYPES,
    NOTIFICATION_TYPES,
    PRIORITIES,
    Application,
    Employer,
    Job,
    Notification,
    Student,
)

_RECENT_LIMIT = 10


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _newest(items: list[Any], attr: str, limit: int) -> list[Any]:
    return sorted(
        (i for i in items if getattr(i, attr) is not None),
        key=lambda i: getattr(i, attr),
        reverse=True,
    )[:limit]


# ---- deadlines ----


def days_until_deadline(job: Job, now: datetime) -> int | None:
    """Whole days until the deadline, rounded up; ``None`` without a deadline."""
    if job.application_deadline is None:
        return None
    return math.ceil((job.application_deadline - now) / timedelta(days=1))


def is_deadline_approaching(job: Job, now: datetime, days: int = 3) -> bool:
    remaining = days_until_deadline(job, now)
    return remaining is not None and 0 < remaining <= days


def jobs_closing_soon(jobs: list[Job], now: datetime, days: int = 3) -> list[Job]:
    """Jobs whose deadline is still ahead but within *days* days, soonest first."""
    closing = [j for j in jobs if is_deadline_approaching(j, now, days)]
    return sorted(closing, key=lambda j: j.application_deadline)


# ---- applications ----


def count_by_status(applications: list[Application]) -> dict[str, int]:
    counts = {status: 0 for status in APPLICATION_STATUSES}
    for app in applications:
        if app.status in counts:
            counts[app.status] += 1
    return counts


def group_applications_by_month(applications: list[Application]) -> dict[str, int]:
    """Count applications per ``YYYY-MM`` of their application date."""
    groups: Counter[str] = Counter(
        f"{app.application_date.year}-{app.application_date.month:02d}"
        for app in applications
        if app.application_date is not None
    )
    return dict(sorted(groups.items()))


def application_statistics(applications: list[Application]) -> dict[str, Any]:
    return {
        "total": len(applications),
        "by_status": count_by_status(applications),
        "by_month": group_applications_by_month(applications),
        "recent_applications": _newest(applications, "application_date", _RECENT_LIMIT),
    }


# ---- jobs ----


def group_jobs_by_location(jobs: list[Job]) -> dict[str, int]:
    return dict(Counter(job.location for job in jobs))


def most_popular_jobs(
    jobs: list[Job],
    applications: list[Application],
    limit: int = 5,
) -> list[tuple[Job, int]]:
    """Jobs with the most applications first; ties keep job order."""
    counts = Counter(app.job_id for app in applications)
    ranked = [(job, counts.get(job.id, 0)) for job in jobs]
    ranked.sort(key=lambda pair: pair[1], reverse=True)
    return ranked[:limit]


def job_statistics(
    jobs: list[Job],
    applications: list[Application],
    now: datetime,
) -> dict[str, Any]:
    by_type = {job_type: 0 for job_type in JOB_TYPES}
    for job in jobs:
        if job.job_type in by_type:
            by_type[job.job_type] += 1
    return {
        "total": len(jobs),
        "active": sum(1 for j in jobs if j.status == JOB_ACTIVE),
        "expired": sum(
            1
            for j in jobs
            if j.application_deadline is not None and j.application_deadline < now
        ),
        "by_type": by_type,
        "by_location": group_jobs_by_location(jobs),
        "total_applications": len(applications),
        "average_applications_per_job": (
            _round_half_up(len(applications) / len(jobs)) if jobs else 0
        ),
        "most_popular_jobs": [
            {"job": job, "application_count": count}
            for job, count in most_popular_jobs(jobs, applications)
        ],
    }


# ---- notifications ----


def notification_statistics(notifications: list[Notification]) -> dict[str, Any]:
    by_type = {t: 0 for t in NOTIFICATION_TYPES}
    by_priority = {p: 0 for p in PRIORITIES}
    for n in notifications:
        if n.type in by_type:
            by_type[n.type] += 1
        if n.priority in by_priority:
            by_priority[n.priority] += 1
    return {
        "total": len(notifications),
        "by_type": by_type,
        "by_priority": by_priority,
        "unread_count": sum(1 for n in notifications if not n.is_read),
        "recent_notifications": _newest(notifications, "created_at", _RECENT_LIMIT),
    }


# ---- dashboards ----


def dashboard_summary(
    students: list[Student],
    employers: list[Employer],
    jobs: list[Job],
    applications: list[Application],
) -> dict[str, int]:
    return {
        "total_students": len(students),
        "total_employers": len(employers),
        "total_jobs": len(jobs),
        "total_applications": len(applications),
        "active_jobs": sum(1 for j in jobs if j.status == JOB_ACTIVE),
        "verified_employers": sum(1 for e in employers if e.is_verified),
        "eligible_students": sum(1 for s in students if s.is_eligible),
    }


def student_report(student: Student, applications: list[Application]) -> dict[str, Any]:
    own = [a for a in applications if a.student_id == student.id]
    return {
        "student": student,
        "total_applications": len(own),
        "applications_by_status": count_by_status(own),
        "recent_applications": own[-5:],
        "eligibility_status": "Eligible" if student.is_eligible else "Not Eligible",
    }


def employer_dashboard(
    employer: Employer,
    jobs: list[Job],
    applications: list[Application],
) -> dict[str, Any]:
    own_jobs = [j for j in jobs if j.company_id == employer.id]
    job_ids = {j.id for j in own_jobs}
    own_apps = [a for a in applications if a.job_id in job_ids]
    return {
        "employer": employer,
        "total_jobs": len(own_jobs),
        "active_jobs": sum(1 for j in own_jobs if j.status == JOB_ACTIVE),
        "total_applications": len(own_apps),
        "applications_by_status": count_by_status(own_apps),
        "recent_jobs": own_jobs[-5:],
        "recent_applications": own_apps[-10:],
    }
