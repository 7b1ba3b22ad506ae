"""Heuristic recommendation scoring.

The score is a best-effort ranking signal, not an optimal assignment:

* +10 for every job skill found (case-insensitively) inside at least one of
  the student's skills,
* +20 when the job lists the student's department as eligible,
* +5 per CGPA point above the job's minimum,
* +15 when the job was posted less than a week ago.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from placementdesk.models import Job, ScoredJob, Student

SKILL_POINTS = 10
DEPARTMENT_POINTS = 20
CGPA_POINTS = 5
RECENCY_POINTS = 15
RECENCY_WINDOW = timedelta(days=7)


def matching_skills(student: Student, job: Job) -> list[str]:
    """Job skills contained in any of the student's skills, case-insensitive."""
    student_skills = [s.lower() for s in student.skills]
    return sorted(
        skill
        for skill in job.skills
        if any(skill.lower() in own for own in student_skills)
    )


def score_job(student: Student, job: Job, now: datetime) -> float:
    score = float(len(matching_skills(student, job)) * SKILL_POINTS)

    criteria = job.eligibility_criteria
    if criteria is not None:
        if student.department in criteria.departments:
            score += DEPARTMENT_POINTS
        if criteria.min_cgpa is not None:
            score += max(0.0, student.cgpa - criteria.min_cgpa) * CGPA_POINTS

    if job.posted_date is not None and now - job.posted_date < RECENCY_WINDOW:
        score += RECENCY_POINTS
    return score


def rank_jobs(student: Student, jobs: list[Job], now: datetime, limit: int) -> list[ScoredJob]:
    """Score *jobs* for *student* and return the best *limit*.

    Equal scores keep their input order.
    """
    scored = [ScoredJob(job=job, score=score_job(student, job, now)) for job in jobs]
    scored.sort(key=lambda s: s.score, reverse=True)
    return scored[:limit]
