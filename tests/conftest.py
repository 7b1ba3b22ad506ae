"""Shared test fixtures."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from placementdesk.portal import PlacementPortal
from placementdesk.settings import AppSettings
from placementdesk.storage import MemoryStore

NOW = datetime(2024, 3, 20, 12, 0, tzinfo=timezone.utc)

COVER_LETTER = (
    "I am excited to apply for this role and believe my projects in data "
    "engineering make me a strong fit."
)


class FakeClock:
    """Callable clock that tests can move forward."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def student_data(**overrides):
    data = {
        "name": "Asha Verma",
        "email": "asha@campus.edu",
        "phone": "9876543210",
        "student_number": "CS2021001",
        "department": "Computer Science",
        "year": 4,
        "cgpa": 8.2,
        "skills": ["Python", "SQL"],
    }
    data.update(overrides)
    return data


def employer_data(**overrides):
    data = {
        "company_name": "Northwind Analytics",
        "email": "careers@northwind.example",
        "phone": "0801234567",
        "website": "https://northwind.example",
        "address": "12 MG Road, Bengaluru",
        "industry": "Software",
        "contact_person": "Priya Raman",
    }
    data.update(overrides)
    return data


def job_data(**overrides):
    data = {
        "title": "Data Engineer",
        "location": "Bengaluru",
        "job_type": "Full-time",
        "experience": "Fresher",
        "salary": "$85,000 - $95,000",
        "description": "Build data pipelines.",
        "requirements": ["SQL", "Python"],
        "skills": ["Python", "SQL"],
        "application_deadline": "2024-04-30",
    }
    data.update(overrides)
    return data


@pytest.fixture()
def clock():
    return FakeClock(NOW)


@pytest.fixture()
def settings():
    return AppSettings(storage_backend="memory")


@pytest.fixture()
def store(clock):
    return MemoryStore(clock)


@pytest.fixture()
def portal(settings, store, clock):
    p = PlacementPortal(settings, store=store, clock=clock)
    yield p
    p.close()


@pytest.fixture()
def verified_employer(portal):
    employer = portal.register_employer(employer_data())
    return portal.verify_employer(employer.id)


@pytest.fixture()
def student(portal):
    return portal.register_student(student_data())


@pytest.fixture()
def job(portal, verified_employer):
    return portal.post_job(verified_employer.id, job_data())


@pytest.fixture()
def tmp_settings_yaml(tmp_path):
    """Write a minimal settings.yaml and return its path."""
    content = """\
storage_backend: "memory"
deadline_window_days: 5
recommendation_limit: 3
enforce_status_transitions: true
api_port: 9000
state_dir: "{state}"
""".format(state=str(tmp_path / ".state"))
    p = tmp_path / "settings.yaml"
    p.write_text(content)
    return p
