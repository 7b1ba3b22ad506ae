"""Field-level and cross-field validation for incoming records.

Every validator is fail-fast: the first failing rule raises
:class:`~placementdesk.exceptions.ValidationError` naming its field.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Mapping
from typing import Any
from urllib.parse import urlparse

from placementdesk.exceptions import ValidationError
from placementdesk.models import (
    DEPARTMENTS,
    JOB_TYPES,
    NOTIFICATION_TYPES,
    PRIORITIES,
    RECIPIENTS,
    parse_timestamp,
)

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

COVER_LETTER_MIN = 50
COVER_LETTER_MAX = 1000
NOTIFICATION_MESSAGE_MAX = 500

STUDENT_REQUIRED = ("name", "email", "phone", "department", "year", "cgpa")
EMPLOYER_REQUIRED = (
    "company_name",
    "email",
    "phone",
    "website",
    "address",
    "industry",
    "contact_person",
)
JOB_REQUIRED = (
    "title",
    "location",
    "job_type",
    "experience",
    "salary",
    "description",
    "requirements",
)
NOTIFICATION_REQUIRED = ("type", "title", "message", "recipient", "priority")
APPLICATION_REQUIRED = ("student_id", "job_id", "cover_letter")


def is_missing(value: Any) -> bool:
    """``None``, blank strings and empty collections count as missing; ``0`` does not."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, frozenset, dict)):
        return len(value) == 0
    return False


def require(data: Mapping[str, Any], fields: Iterable[str]) -> None:
    for name in fields:
        if is_missing(data.get(name)):
            raise ValidationError(f"{name} is required", field=name)


def as_float(value: Any, name: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be a number", field=name)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be a number", field=name) from None
    if not math.isfinite(number):
        raise ValidationError(f"{name} must be a number", field=name)
    return number


def as_int(value: Any, name: str) -> int:
    number = as_float(value, name)
    if number != int(number):
        raise ValidationError(f"{name} must be a whole number", field=name)
    return int(number)


def as_str_list(value: Any, name: str) -> list[str]:
    """Accept a list of strings or a comma-separated string."""
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, (list, tuple, set, frozenset)):
        return [str(v).strip() for v in value if str(v).strip()]
    raise ValidationError(f"{name} must be a list of strings", field=name)


def validate_email(value: str, name: str = "email") -> None:
    if not _EMAIL_RE.match(str(value)):
        raise ValidationError("Invalid email format", field=name)


def validate_website(value: str) -> None:
    parsed = urlparse(str(value).strip())
    if not parsed.scheme or not parsed.netloc:
        raise ValidationError("Invalid website URL", field="website")


def validate_student(data: Mapping[str, Any]) -> None:
    require(data, STUDENT_REQUIRED)
    validate_email(data["email"])
    cgpa = as_float(data["cgpa"], "cgpa")
    if cgpa < 0 or cgpa > 10:
        raise ValidationError("CGPA must be between 0 and 10", field="cgpa")
    year = as_int(data["year"], "year")
    if year < 1 or year > 4:
        raise ValidationError("Year must be between 1 and 4", field="year")
    if data["department"] not in DEPARTMENTS:
        raise ValidationError(f"Unknown department: {data['department']}", field="department")


def validate_employer(data: Mapping[str, Any]) -> None:
    require(data, EMPLOYER_REQUIRED)
    validate_email(data["email"])
    validate_website(data["website"])


def validate_eligibility_criteria(criteria: Mapping[str, Any]) -> None:
    if is_missing(criteria.get("min_cgpa")):
        raise ValidationError("Valid minimum CGPA is required (0-10)", field="min_cgpa")
    min_cgpa = as_float(criteria["min_cgpa"], "min_cgpa")
    if min_cgpa < 0 or min_cgpa > 10:
        raise ValidationError("Valid minimum CGPA is required (0-10)", field="min_cgpa")

    departments = as_str_list(criteria.get("departments"), "departments")
    if not departments:
        raise ValidationError(
            "At least one department must be specified", field="departments"
        )
    for dept in departments:
        if dept not in DEPARTMENTS:
            raise ValidationError(f"Unknown department: {dept}", field="departments")

    if not is_missing(criteria.get("year")):
        year = as_int(criteria["year"], "year")
        if year < 1 or year > 4:
            raise ValidationError("Year must be between 1 and 4", field="year")


def validate_job(data: Mapping[str, Any]) -> None:
    require(data, JOB_REQUIRED)
    if data["job_type"] not in JOB_TYPES:
        raise ValidationError(f"Invalid job type: {data['job_type']}", field="job_type")
    if not as_str_list(data["requirements"], "requirements"):
        raise ValidationError("requirements is required", field="requirements")

    criteria = data.get("eligibility_criteria")
    if criteria:
        if not isinstance(criteria, Mapping):
            raise ValidationError(
                "eligibility_criteria must be a mapping", field="eligibility_criteria"
            )
        validate_eligibility_criteria(criteria)

    if is_missing(data.get("application_deadline")):
        raise ValidationError("application_deadline is required", field="application_deadline")
    try:
        parse_timestamp(data["application_deadline"])
    except (TypeError, ValueError):
        raise ValidationError(
            "application_deadline must be an ISO date", field="application_deadline"
        ) from None


def validate_notification(
    data: Mapping[str, Any],
    allowed_types: Iterable[str] = NOTIFICATION_TYPES,
) -> None:
    require(data, NOTIFICATION_REQUIRED)
    if data["type"] not in tuple(allowed_types):
        raise ValidationError("Invalid notification type", field="type")
    if data["recipient"] not in RECIPIENTS:
        raise ValidationError("Invalid recipient type", field="recipient")
    if data["priority"] not in PRIORITIES:
        raise ValidationError("Invalid priority level", field="priority")
    if len(str(data["message"])) > NOTIFICATION_MESSAGE_MAX:
        raise ValidationError(
            f"Message must not exceed {NOTIFICATION_MESSAGE_MAX} characters", field="message"
        )


def validate_cover_letter(text: str) -> None:
    length = len(text)
    if length < COVER_LETTER_MIN:
        raise ValidationError(
            f"Cover letter must be at least {COVER_LETTER_MIN} characters long",
            field="cover_letter",
        )
    if length > COVER_LETTER_MAX:
        raise ValidationError(
            f"Cover letter must not exceed {COVER_LETTER_MAX} characters",
            field="cover_letter",
        )


def validate_application(data: Mapping[str, Any]) -> None:
    require(data, APPLICATION_REQUIRED)
    as_int(data["student_id"], "student_id")
    as_int(data["job_id"], "job_id")
    if not isinstance(data["cover_letter"], str):
        raise ValidationError("cover_letter must be text", field="cover_letter")
    validate_cover_letter(data["cover_letter"])
