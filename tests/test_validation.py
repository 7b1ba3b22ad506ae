"""Tests for record validation rules."""

from __future__ import annotations

import pytest

from conftest import employer_data, job_data, student_data
from placementdesk.exceptions import ValidationError
from placementdesk.validation.rules import (
    as_str_list,
    is_missing,
    validate_application,
    validate_cover_letter,
    validate_employer,
    validate_job,
    validate_notification,
    validate_student,
)


@pytest.mark.parametrize("length, ok", [(49, False), (50, True), (1000, True), (1001, False)])
def test_cover_letter_bounds(length, ok):
    text = "x" * length
    if ok:
        validate_cover_letter(text)
    else:
        with pytest.raises(ValidationError) as exc:
            validate_cover_letter(text)
        assert exc.value.field == "cover_letter"


def test_cover_letter_messages():
    with pytest.raises(ValidationError, match="at least 50 characters"):
        validate_cover_letter("too short")
    with pytest.raises(ValidationError, match="must not exceed 1000"):
        validate_cover_letter("x" * 1001)


def test_zero_is_a_value():
    assert is_missing(0) is False
    assert is_missing("  ") is True
    assert is_missing([]) is True


def test_as_str_list_accepts_comma_string():
    assert as_str_list("Python, SQL,, ", "skills") == ["Python", "SQL"]
    assert as_str_list(None, "skills") == []
    with pytest.raises(ValidationError):
        as_str_list(42, "skills")


def test_valid_student():
    validate_student(student_data())


def test_student_fail_fast_reports_first_rule():
    with pytest.raises(ValidationError) as exc:
        validate_student(student_data(name="", email="not-an-email"))
    assert str(exc.value) == "name is required"
    assert exc.value.field == "name"


def test_student_invalid_email():
    with pytest.raises(ValidationError, match="Invalid email format"):
        validate_student(student_data(email="asha@campus"))


def test_student_cgpa_zero_is_present_but_range_checked():
    validate_student(student_data(cgpa=0))
    with pytest.raises(ValidationError, match="CGPA must be between 0 and 10"):
        validate_student(student_data(cgpa=10.5))


def test_student_year_range():
    with pytest.raises(ValidationError, match="Year must be between 1 and 4"):
        validate_student(student_data(year=5))


def test_student_unknown_department():
    with pytest.raises(ValidationError) as exc:
        validate_student(student_data(department="Astrology"))
    assert exc.value.field == "department"


def test_employer_required_and_website():
    validate_employer(employer_data())
    with pytest.raises(ValidationError, match="address is required"):
        validate_employer(employer_data(address=""))
    with pytest.raises(ValidationError, match="Invalid website URL"):
        validate_employer(employer_data(website="northwind dot com"))


def test_job_criteria_rules():
    validate_job(job_data(eligibility_criteria={"min_cgpa": 7, "departments": ["Civil"]}))
    with pytest.raises(ValidationError, match="Valid minimum CGPA is required"):
        validate_job(job_data(eligibility_criteria={"min_cgpa": 11, "departments": ["Civil"]}))
    with pytest.raises(ValidationError, match="At least one department"):
        validate_job(job_data(eligibility_criteria={"min_cgpa": 7, "departments": []}))


def test_job_requires_deadline_and_known_type():
    with pytest.raises(ValidationError) as exc:
        validate_job(job_data(application_deadline=None))
    assert exc.value.field == "application_deadline"
    with pytest.raises(ValidationError) as exc:
        validate_job(job_data(job_type="Gig"))
    assert exc.value.field == "job_type"


def _notification(**kw):
    data = {
        "type": "deadline_reminder",
        "title": "Deadline",
        "message": "Applications close soon.",
        "recipient": "all_students",
        "priority": "low",
    }
    data.update(kw)
    return data


def test_notification_enums():
    validate_notification(_notification())
    with pytest.raises(ValidationError, match="Invalid notification type"):
        validate_notification(_notification(type="application_submitted"))
    with pytest.raises(ValidationError, match="Invalid recipient type"):
        validate_notification(_notification(recipient="everyone"))
    with pytest.raises(ValidationError, match="Invalid priority level"):
        validate_notification(_notification(priority="urgent"))


def test_notification_message_length():
    validate_notification(_notification(message="m" * 500))
    with pytest.raises(ValidationError):
        validate_notification(_notification(message="m" * 501))


def test_application_requires_ids_and_letter():
    with pytest.raises(ValidationError, match="job_id is required"):
        validate_application({"student_id": 1, "cover_letter": "x" * 60})
    with pytest.raises(ValidationError):
        validate_application({"student_id": "abc", "job_id": 1, "cover_letter": "x" * 60})


@pytest.mark.parametrize("value", ["nan", "inf", "-Infinity", float("nan")])
def test_non_finite_numbers_rejected(value):
    with pytest.raises(ValidationError, match="cgpa must be a number"):
        validate_student(student_data(cgpa=value))


def test_non_finite_year_is_a_validation_error():
    with pytest.raises(ValidationError) as exc:
        validate_student(student_data(year="nan"))
    assert exc.value.field == "year"


@pytest.mark.parametrize("value", ["inf", "nan"])
def test_non_finite_ids_rejected(value):
    with pytest.raises(ValidationError) as exc:
        validate_application({"student_id": value, "job_id": 1, "cover_letter": "x" * 60})
    assert exc.value.field == "student_id"
