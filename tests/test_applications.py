"""Tests for application submission and status changes."""

from __future__ import annotations

import pytest

from conftest import COVER_LETTER, employer_data, job_data, student_data
from placementdesk.api.server import dispatch
from placementdesk.exceptions import (
    ClosedError,
    DuplicateError,
    IneligibleError,
    NotFoundError,
    ValidationError,
)
from placementdesk.portal import PlacementPortal
from placementdesk.settings import AppSettings
from placementdesk.workflow.applications import STATUS_MESSAGES


def _apply(portal, student_id, job_id, cover_letter=COVER_LETTER):
    return portal.submit_application(
        {"student_id": student_id, "job_id": job_id, "cover_letter": cover_letter}
    )


def _student_notes(portal, student_id, type_):
    notes = portal.notifications.notifications_for(
        "student", student_id, include_broadcast=False
    )
    return [n for n in notes if n.type == type_]


def test_submit_success_effects(portal, student, job, clock):
    app = _apply(portal, student.id, job.id)

    assert app.status == "under_review"
    assert app.student_name == student.name
    assert app.job_title == job.title
    assert app.company == job.company
    assert app.application_date == clock.now
    assert portal.get_job(job.id).applications_received == 1
    assert portal.get_student(student.id).applied_jobs == (job.id,)

    submitted = _student_notes(portal, student.id, "application_submitted")
    assert len(submitted) == 1
    assert submitted[0].related_application_id == app.id
    assert submitted[0].related_job_id == job.id


def test_duplicate_rejected_without_side_effects(portal, student, job):
    _apply(portal, student.id, job.id)
    with pytest.raises(DuplicateError, match="You have already applied for this job"):
        _apply(portal, student.id, job.id)
    assert portal.get_job(job.id).applications_received == 1
    assert len(portal.applications.applications_for_job(job.id)) == 1


def test_missing_student_or_job(portal, student, job):
    with pytest.raises(NotFoundError, match="Student not found"):
        _apply(portal, 99, job.id)
    with pytest.raises(NotFoundError, match="Job not found"):
        _apply(portal, student.id, 99)


def test_short_cover_letter(portal, student, job):
    with pytest.raises(ValidationError):
        _apply(portal, student.id, job.id, cover_letter="x" * 49)
    assert portal.get_job(job.id).applications_received == 0


def test_globally_ineligible_student(portal, job):
    weak = portal.register_student(student_data(email="weak@campus.edu", year=3))
    with pytest.raises(IneligibleError, match="not eligible for placements"):
        _apply(portal, weak.id, job.id)


def test_job_criteria_not_met(portal, verified_employer, student):
    strict = portal.post_job(
        verified_employer.id,
        job_data(eligibility_criteria={"min_cgpa": 9.0, "departments": ["Computer Science"]}),
    )
    with pytest.raises(IneligibleError, match="does not meet job eligibility criteria"):
        _apply(portal, student.id, strict.id)


def test_inactive_job_closed(portal, student, job):
    portal.set_job_status(job.id, "inactive")
    with pytest.raises(ClosedError, match="no longer accepting"):
        _apply(portal, student.id, job.id)
    assert portal.get_job(job.id).applications_received == 0


def test_past_deadline_closed(portal, student, job, clock):
    clock.advance(days=60)
    with pytest.raises(ClosedError, match="deadline has passed"):
        _apply(portal, student.id, job.id)
    assert portal.get_student(student.id).applied_jobs == ()
    assert portal.applications.all_applications() == []


def test_failed_notification_rolls_back_everything(portal, student, job, monkeypatch):
    def boom(**kwargs):
        raise RuntimeError("notification sink down")

    monkeypatch.setattr(portal.notifications, "emit", boom)
    with pytest.raises(RuntimeError):
        _apply(portal, student.id, job.id)

    assert portal.applications.all_applications() == []
    assert portal.get_job(job.id).applications_received == 0
    assert portal.get_student(student.id).applied_jobs == ()


def test_snapshots_survive_profile_changes(portal, student, job):
    app = _apply(portal, student.id, job.id)
    portal.update_student_profile(student.id, {"name": "Asha V. Rao"})
    assert portal.applications.application_details(app.id)["application"].student_name == (
        "Asha Verma"
    )


@pytest.mark.parametrize("status", ["under_review", "shortlisted", "accepted", "rejected"])
def test_status_update_notifies_with_canned_message(portal, student, job, status):
    app = _apply(portal, student.id, job.id)
    updated = portal.update_application_status(app.id, status)
    assert updated.status == status

    [note] = _student_notes(portal, student.id, "application_status")
    assert note.message.endswith(STATUS_MESSAGES[status])
    assert note.message.startswith(f"{job.title} at {job.company}")
    assert note.priority == ("high" if status == "accepted" else "medium")


def test_canned_messages_exact():
    assert STATUS_MESSAGES["shortlisted"] == (
        "Congratulations! You have been shortlisted for the next round."
    )
    assert STATUS_MESSAGES["rejected"] == (
        "Thank you for your interest. Unfortunately, your application was not selected "
        "this time."
    )


def test_feedback_kept_when_omitted(portal, student, job):
    app = _apply(portal, student.id, job.id)
    portal.update_application_status(app.id, "shortlisted", feedback="Strong SQL round")
    again = portal.update_application_status(app.id, "accepted")
    assert again.feedback == "Strong SQL round"
    replaced = portal.update_application_status(app.id, "accepted", feedback="Offer sent")
    assert replaced.feedback == "Offer sent"


def test_interview_date_emits_second_notification(portal, student, job):
    app = _apply(portal, student.id, job.id)
    updated = portal.update_application_status(
        app.id, "shortlisted", interview_date="2024-03-25T10:30:00Z"
    )
    assert updated.interview_date.isoformat() == "2024-03-25T10:30:00+00:00"

    [interview] = _student_notes(portal, student.id, "interview_schedule")
    assert interview.priority == "high"
    assert "2024-03-25 at 10:30 UTC" in interview.message
    assert len(_student_notes(portal, student.id, "application_status")) == 1


def test_invalid_status_and_unknown_application(portal, student, job):
    app = _apply(portal, student.id, job.id)
    with pytest.raises(ValidationError):
        portal.update_application_status(app.id, "hired")
    with pytest.raises(ValidationError):
        portal.update_application_status(app.id, "shortlisted", interview_date="next tuesday")
    with pytest.raises(NotFoundError, match="Application not found"):
        portal.update_application_status(99, "accepted")


def test_any_transition_allowed_by_default(portal, student, job):
    app = _apply(portal, student.id, job.id)
    portal.update_application_status(app.id, "rejected")
    assert portal.update_application_status(app.id, "under_review").status == "under_review"


def test_enforced_transitions(store, clock, verified_employer, student, job):
    strict = PlacementPortal(
        AppSettings(storage_backend="memory", enforce_status_transitions=True),
        store=store,
        clock=clock,
    )
    app = _apply(strict, student.id, job.id)
    strict.update_application_status(app.id, "shortlisted")
    strict.update_application_status(app.id, "accepted")
    with pytest.raises(ValidationError, match="Cannot move application"):
        strict.update_application_status(app.id, "under_review")
    assert strict.applications.application_details(app.id)["application"].status == "accepted"


def test_queries_by_owner(portal, verified_employer, student, job):
    other = portal.register_student(student_data(email="other@campus.edu"))
    a1 = _apply(portal, student.id, job.id)
    a2 = _apply(portal, other.id, job.id)

    assert [a.id for a in portal.applications.applications_for_student(student.id)] == [a1.id]
    assert [a.id for a in portal.applications.applications_for_job(job.id)] == [a1.id, a2.id]
    assert len(portal.applications.applications_for_employer(verified_employer.id)) == 2


@pytest.mark.parametrize("student_id", ["inf", "nan"])
def test_non_finite_student_id(portal, job, student_id):
    with pytest.raises(ValidationError):
        _apply(portal, student_id, job.id)
    assert portal.get_job(job.id).applications_received == 0


def test_ineligibility_reported_before_missing_job(portal):
    weak = portal.register_student(student_data(email="weak@campus.edu", cgpa=6.0))
    with pytest.raises(IneligibleError, match="not eligible for placements"):
        _apply(portal, weak.id, 404)


def test_non_text_feedback_rejected(portal, student, job):
    app = _apply(portal, student.id, job.id)
    with pytest.raises(ValidationError, match="feedback must be text"):
        portal.update_application_status(app.id, "rejected", feedback=5)
    stored = portal.applications.application_details(app.id)["application"]
    assert stored.status == "under_review"
    assert stored.feedback is None


def test_non_text_feedback_leaves_sqlite_readable(tmp_path, clock):
    settings = AppSettings(storage_backend="sqlite", state_dir=str(tmp_path))
    sqlite_portal = PlacementPortal(settings, clock=clock)
    try:
        employer = sqlite_portal.register_employer(employer_data())
        sqlite_portal.verify_employer(employer.id)
        posted = sqlite_portal.post_job(employer.id, job_data())
        student = sqlite_portal.register_student(student_data())
        app = _apply(sqlite_portal, student.id, posted.id)

        status, body = dispatch(
            sqlite_portal,
            "PUT",
            f"/api/applications/{app.id}/status",
            body={"status": "rejected", "feedback": 5},
        )
        assert status == 400
        assert body["errorKind"] == "ValidationError"

        [stored] = sqlite_portal.applications.all_applications()
        assert stored.status == "under_review"
        assert sqlite_portal.application_statistics()["total"] == 1
    finally:
        sqlite_portal.close()
