"""Pure eligibility rules for students and jobs."""

from __future__ import annotations

from placementdesk.models import EligibilityCriteria, Student

MIN_PLACEMENT_CGPA = 7.0
MIN_PLACEMENT_YEAR = 4


def check_global_eligibility(cgpa: float, year: int) -> bool:
    """Return whether a student with *cgpa* and *year* may take part in placements."""
    return cgpa >= MIN_PLACEMENT_CGPA and year >= MIN_PLACEMENT_YEAR


def is_eligible_for_job(student: Student, criteria: EligibilityCriteria | None) -> bool:
    """Check *student* against a job's criteria only.

    Global eligibility is not consulted here; see :func:`qualifies_for_job`.
    """
    if criteria is None:
        return True
    if criteria.min_cgpa is not None and student.cgpa < criteria.min_cgpa:
        return False
    if criteria.departments and student.department not in criteria.departments:
        return False
    if criteria.year is not None and student.year < criteria.year:
        return False
    return True


def qualifies_for_job(student: Student, criteria: EligibilityCriteria | None) -> bool:
    """Global eligibility first, then the job's own criteria."""
    return student.is_eligible and is_eligible_for_job(student, criteria)
