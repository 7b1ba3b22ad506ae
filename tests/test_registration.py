"""Tests for registration, verification and job posting."""

from __future__ import annotations

import pytest

from conftest import employer_data, job_data, student_data
from placementdesk.exceptions import NotFoundError, UnverifiedError, ValidationError


def test_register_student_derives_eligibility(portal):
    eligible = portal.register_student(student_data(cgpa=7.5, year=4))
    junior = portal.register_student(student_data(email="jr@campus.edu", cgpa=9.0, year=3))
    assert eligible.is_eligible is True
    assert junior.is_eligible is False
    assert eligible.skills == frozenset({"Python", "SQL"})
    assert eligible.email == "asha@campus.edu"


def test_register_student_welcome_notification(portal):
    student = portal.register_student(student_data())
    [note] = portal.notifications.notifications_for("student", student.id)
    assert note.type == "profile_created"


def test_register_student_invalid(portal):
    with pytest.raises(ValidationError, match="Invalid email format"):
        portal.register_student(student_data(email="nope"))
    assert portal.list_students() == []


def test_update_recomputes_eligibility(portal, student):
    assert student.is_eligible is True
    dropped = portal.update_student_profile(student.id, {"cgpa": 6.9})
    assert dropped.is_eligible is False
    assert dropped.name == student.name
    restored = portal.update_student_profile(student.id, {"cgpa": "7.0"})
    assert restored.is_eligible is True
    assert restored.cgpa == 7.0


def test_update_ignores_workflow_owned_fields(portal, student):
    updated = portal.update_student_profile(
        student.id, {"is_eligible": True, "applied_jobs": [5], "phone": "9000000000"}
    )
    assert updated.applied_jobs == ()
    assert updated.phone == "9000000000"


def test_update_unknown_student(portal):
    with pytest.raises(NotFoundError):
        portal.update_student_profile(42, {"cgpa": 9})


def test_unverified_employer_can_not_post(portal):
    employer = portal.register_employer(employer_data())
    with pytest.raises(UnverifiedError, match="Company must be verified to post jobs"):
        portal.post_job(employer.id, job_data())
    assert portal.get_employer(employer.id).jobs_posted == ()
    assert portal.store.jobs.get_all() == []


def test_verify_is_one_way_and_idempotent(portal):
    employer = portal.register_employer(employer_data())
    assert employer.is_verified is False
    portal.verify_employer(employer.id)
    again = portal.verify_employer(employer.id)
    assert again.is_verified is True

    types = [n.type for n in portal.notifications.notifications_for("employer", employer.id)]
    assert types.count("company_verification") == 1
    assert "company_registration" in types


def test_employer_update_can_not_touch_verification(portal, verified_employer):
    updated = portal.update_employer_profile(
        verified_employer.id, {"is_verified": False, "industry": "Analytics"}
    )
    assert updated.is_verified is True
    assert updated.industry == "Analytics"


def test_post_job_records_and_broadcasts(portal, verified_employer, clock):
    job = portal.post_job(
        verified_employer.id,
        job_data(eligibility_criteria={"min_cgpa": "7.5", "departments": "Computer Science, Civil"}),
    )
    assert job.status == "active"
    assert job.company == verified_employer.company_name
    assert job.posted_date == clock.now
    assert job.applications_received == 0
    assert job.eligibility_criteria.min_cgpa == 7.5
    assert job.eligibility_criteria.departments == frozenset({"Computer Science", "Civil"})
    assert job.application_deadline.isoformat() == "2024-04-30T00:00:00+00:00"
    assert portal.get_employer(verified_employer.id).jobs_posted == (job.id,)

    [broadcast] = [
        n for n in portal.notifications.all_notifications() if n.type == "job_posting"
    ]
    assert broadcast.recipient == "all_students"
    assert broadcast.related_job_id == job.id


def test_post_job_validation(portal, verified_employer):
    with pytest.raises(ValidationError, match="requirements is required"):
        portal.post_job(verified_employer.id, job_data(requirements=[]))
    assert portal.employer_jobs(verified_employer.id) == []


def test_set_job_status(portal, job):
    assert portal.set_job_status(job.id, "inactive").status == "inactive"
    with pytest.raises(ValidationError):
        portal.set_job_status(job.id, "expired")
