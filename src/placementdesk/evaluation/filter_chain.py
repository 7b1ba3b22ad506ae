"""Chain of Responsibility filtering for job searches."""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod

from placementdesk.models import Job, JobSearchFilters

logger = logging.getLogger(__name__)

# first currency amount, e.g. "$85,000 - $95,000" -> 85000
_SALARY_RE = re.compile(r"[$₹€£]\s?(\d[\d,]*)")


def parse_salary_floor(salary: str) -> int | None:
    """Return the first currency amount in *salary*, or ``None`` if there is none."""
    match = _SALARY_RE.search(salary or "")
    if not match:
        return None
    return int(match.group(1).replace(",", ""))


class JobFilter(ABC):
    """Abstract base for a single filter in the chain."""

    def __init__(self) -> None:
        self._next: JobFilter | None = None

    def set_next(self, handler: JobFilter) -> JobFilter:
        self._next = handler
        return handler

    def evaluate(self, job: Job) -> str | None:
        """Return a rejection reason string, or ``None`` to accept.

        If this filter accepts, delegates to the next filter in the chain.
        """
        reason = self._check(job)
        if reason is not None:
            return reason
        if self._next:
            return self._next.evaluate(job)
        return None

    @abstractmethod
    def _check(self, job: Job) -> str | None:
        ...


class LocationFilter(JobFilter):
    """Keep jobs whose location contains the term."""

    def __init__(self, term: str) -> None:
        super().__init__()
        self._term = term.strip().lower()

    def _check(self, job: Job) -> str | None:
        if self._term not in job.location.lower():
            return f"location:{self._term}"
        return None


class CompanyFilter(JobFilter):
    """Keep jobs whose company name contains the term."""

    def __init__(self, term: str) -> None:
        super().__init__()
        self._term = term.strip().lower()

    def _check(self, job: Job) -> str | None:
        if self._term not in job.company.lower():
            return f"company:{self._term}"
        return None


class JobTypeFilter(JobFilter):
    """Keep jobs of exactly this type."""

    def __init__(self, job_type: str) -> None:
        super().__init__()
        self._job_type = job_type

    def _check(self, job: Job) -> str | None:
        if job.job_type != self._job_type:
            return f"job_type:{self._job_type}"
        return None


class ExperienceFilter(JobFilter):
    """Keep jobs whose experience text contains the term."""

    def __init__(self, term: str) -> None:
        super().__init__()
        self._term = term.strip().lower()

    def _check(self, job: Job) -> str | None:
        if self._term not in job.experience.lower():
            return f"experience:{self._term}"
        return None


class SalaryFloorFilter(JobFilter):
    """Reject jobs whose parsed salary is below the floor.

    A salary that can not be parsed never causes rejection.
    """

    def __init__(self, floor: int) -> None:
        super().__init__()
        self._floor = floor

    def _check(self, job: Job) -> str | None:
        amount = parse_salary_floor(job.salary)
        if amount is None:
            logger.debug("Unparseable salary %r on job %d; keeping it.", job.salary, job.id)
            return None
        if amount < self._floor:
            return f"salary_below:{self._floor}"
        return None


class SkillsFilter(JobFilter):
    """Keep jobs where any job skill contains any of the wanted skills."""

    def __init__(self, skills: tuple[str, ...]) -> None:
        super().__init__()
        self._skills = [s.strip().lower() for s in skills if s.strip()]

    def _check(self, job: Job) -> str | None:
        for skill in job.skills:
            skill_lower = skill.lower()
            if any(wanted in skill_lower for wanted in self._skills):
                return None
        return "skills:no_overlap"


class DepartmentFilter(JobFilter):
    """Keep jobs that explicitly list the department as eligible."""

    def __init__(self, department: str) -> None:
        super().__init__()
        self._department = department

    def _check(self, job: Job) -> str | None:
        criteria = job.eligibility_criteria
        if criteria is None or self._department not in criteria.departments:
            return f"department:{self._department}"
        return None


def build_filter_chain(filters: JobSearchFilters) -> JobFilter | None:
    """Assemble and return the head of the filter chain (or ``None`` if empty)."""
    chain: list[JobFilter] = []
    if filters.location.strip():
        chain.append(LocationFilter(filters.location))
    if filters.job_type:
        chain.append(JobTypeFilter(filters.job_type))
    if filters.company.strip():
        chain.append(CompanyFilter(filters.company))
    if filters.experience.strip():
        chain.append(ExperienceFilter(filters.experience))
    if filters.min_salary:
        chain.append(SalaryFloorFilter(filters.min_salary))
    if any(s.strip() for s in filters.skills):
        chain.append(SkillsFilter(filters.skills))
    if filters.department:
        chain.append(DepartmentFilter(filters.department))

    if not chain:
        return None

    for i in range(len(chain) - 1):
        chain[i].set_next(chain[i + 1])

    return chain[0]
