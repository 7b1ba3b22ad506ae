"""Lightweight JSON API over the placement portal.

Routing is done by :func:`dispatch`, which takes plain values and returns
``(status, payload)``, so it can be exercised without a socket.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable, Mapping
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Any
from urllib.parse import parse_qs, urlparse

from placementdesk.exceptions import NotFoundError, PlacementDeskError, ValidationError
from placementdesk.models import JobSearchFilters
from placementdesk.portal import PlacementPortal
from placementdesk.storage.codec import to_jsonable
from placementdesk.validation.rules import as_int, as_str_list

logger = logging.getLogger(__name__)

Query = Mapping[str, list[str]]
Handler = Callable[[PlacementPortal, tuple[str, ...], Query, dict[str, Any]], tuple[int, Any]]

_STATUS_BY_KIND = {
    "ValidationError": 400,
    "ConfigurationError": 400,
    "NotFoundError": 404,
    "DuplicateError": 409,
    "ClosedError": 409,
    "IneligibleError": 403,
    "UnverifiedError": 403,
}

_ROUTES: list[tuple[str, re.Pattern[str], Handler]] = []


def route(method: str, pattern: str) -> Callable[[Handler], Handler]:
    def register(fn: Handler) -> Handler:
        _ROUTES.append((method, re.compile(f"^{pattern}$"), fn))
        return fn

    return register


def _first(query: Query, name: str) -> str:
    values = query.get(name) or [""]
    return values[0].strip()


def _search_filters(query: Query) -> JobSearchFilters:
    min_salary = _first(query, "min_salary")
    return JobSearchFilters(
        location=_first(query, "location"),
        company=_first(query, "company"),
        job_type=_first(query, "job_type"),
        experience=_first(query, "experience"),
        min_salary=as_int(min_salary, "min_salary") if min_salary else 0,
        skills=tuple(as_str_list(_first(query, "skills"), "skills")),
        department=_first(query, "department"),
    )


# ---- routes ----


@route("GET", r"/api/health")
def _health(portal, params, query, body):
    return 200, {"status": "OK", "message": "Placement Management API is running"}


@route("GET", r"/api/students")
def _list_students(portal, params, query, body):
    return 200, portal.list_students()


@route("POST", r"/api/students")
def _register_student(portal, params, query, body):
    return 201, portal.register_student(body)


@route("GET", r"/api/students/(\d+)")
def _get_student(portal, params, query, body):
    return 200, portal.get_student(int(params[0]))


@route("PUT", r"/api/students/(\d+)")
def _update_student(portal, params, query, body):
    return 200, portal.update_student_profile(int(params[0]), body)


@route("GET", r"/api/students/(\d+)/jobs")
def _jobs_for_student(portal, params, query, body):
    return 200, portal.jobs_for_student(int(params[0]))


@route("GET", r"/api/students/(\d+)/recommendations")
def _recommendations(portal, params, query, body):
    limit = _first(query, "limit")
    return 200, portal.recommended_jobs(int(params[0]), as_int(limit, "limit") if limit else None)


@route("GET", r"/api/students/(\d+)/applications")
def _student_applications(portal, params, query, body):
    return 200, portal.applications.applications_for_student(int(params[0]))


@route("GET", r"/api/students/(\d+)/report")
def _student_report(portal, params, query, body):
    return 200, portal.student_report(int(params[0]))


@route("GET", r"/api/employers")
def _list_employers(portal, params, query, body):
    return 200, portal.list_employers()


@route("POST", r"/api/employers")
def _register_employer(portal, params, query, body):
    return 201, portal.register_employer(body)


@route("GET", r"/api/employers/(\d+)")
def _get_employer(portal, params, query, body):
    return 200, portal.get_employer(int(params[0]))


@route("PUT", r"/api/employers/(\d+)")
def _update_employer(portal, params, query, body):
    return 200, portal.update_employer_profile(int(params[0]), body)


@route("POST", r"/api/employers/(\d+)/verify")
def _verify_employer(portal, params, query, body):
    return 200, portal.verify_employer(int(params[0]))


@route("GET", r"/api/employers/(\d+)/jobs")
def _employer_jobs(portal, params, query, body):
    return 200, portal.employer_jobs(int(params[0]))


@route("POST", r"/api/employers/(\d+)/jobs")
def _post_job(portal, params, query, body):
    return 201, portal.post_job(int(params[0]), body)


@route("GET", r"/api/employers/(\d+)/applications")
def _employer_applications(portal, params, query, body):
    return 200, portal.applications.applications_for_employer(int(params[0]))


@route("GET", r"/api/employers/(\d+)/dashboard")
def _employer_dashboard(portal, params, query, body):
    return 200, portal.employer_dashboard(int(params[0]))


@route("GET", r"/api/jobs")
def _search_jobs(portal, params, query, body):
    if _first(query, "active") in ("1", "true"):
        return 200, portal.active_jobs()
    return 200, portal.search_jobs(_search_filters(query))


@route("GET", r"/api/jobs/(\d+)")
def _job_details(portal, params, query, body):
    return 200, portal.job_details(int(params[0]))


@route("PUT", r"/api/jobs/(\d+)/status")
def _job_status(portal, params, query, body):
    return 200, portal.set_job_status(int(params[0]), str(body.get("status", "")))


@route("GET", r"/api/jobs/(\d+)/candidates")
def _job_candidates(portal, params, query, body):
    return 200, portal.eligible_students_for_job(int(params[0]))


@route("GET", r"/api/jobs/(\d+)/applications")
def _job_applications(portal, params, query, body):
    return 200, portal.applications.applications_for_job(int(params[0]))


@route("GET", r"/api/applications")
def _list_applications(portal, params, query, body):
    return 200, portal.applications.all_applications()


@route("POST", r"/api/applications")
def _submit_application(portal, params, query, body):
    return 201, portal.submit_application(body)


@route("GET", r"/api/applications/(\d+)")
def _application_details(portal, params, query, body):
    return 200, portal.applications.application_details(int(params[0]))


@route("PUT", r"/api/applications/(\d+)/status")
def _application_status(portal, params, query, body):
    return 200, portal.update_application_status(
        int(params[0]),
        str(body.get("status", "")),
        feedback=body.get("feedback"),
        interview_date=body.get("interview_date") or None,
    )


@route("GET", r"/api/notifications")
def _notifications(portal, params, query, body):
    recipient = _first(query, "recipient")
    if not recipient:
        return 200, portal.notifications.all_notifications()
    recipient_id = _first(query, "recipient_id")
    return 200, portal.notifications.notifications_for(
        recipient, as_int(recipient_id, "recipient_id") if recipient_id else None
    )


@route("POST", r"/api/notifications")
def _create_notification(portal, params, query, body):
    return 201, portal.create_notification(body)


@route("PUT", r"/api/notifications/(\d+)/read")
def _mark_read(portal, params, query, body):
    return 200, portal.mark_notification_read(int(params[0]))


@route("GET", r"/api/stats/dashboard")
def _stats_dashboard(portal, params, query, body):
    return 200, portal.dashboard()


@route("GET", r"/api/stats/applications")
def _stats_applications(portal, params, query, body):
    return 200, portal.application_statistics()


@route("GET", r"/api/stats/jobs")
def _stats_jobs(portal, params, query, body):
    return 200, portal.job_statistics()


@route("GET", r"/api/stats/notifications")
def _stats_notifications(portal, params, query, body):
    return 200, portal.notification_statistics()


@route("GET", r"/api/stats/deadlines")
def _stats_deadlines(portal, params, query, body):
    days = _first(query, "days")
    return 200, portal.jobs_closing_soon(as_int(days, "days") if days else None)


# ---- dispatch ----


def error_body(exc: PlacementDeskError) -> dict[str, str]:
    return {"message": str(exc), "errorKind": exc.error_kind}


def dispatch(
    portal: PlacementPortal,
    method: str,
    path: str,
    query: Query | None = None,
    body: dict[str, Any] | None = None,
) -> tuple[int, Any]:
    """Route one request and return ``(status, json-ready payload)``."""
    query = query or {}
    body = body or {}
    path = path.rstrip("/") or "/"
    try:
        for route_method, pattern, handler in _ROUTES:
            match = pattern.match(path)
            if match and route_method == method:
                status, payload = handler(portal, match.groups(), query, body)
                return status, to_jsonable(payload)
        raise NotFoundError("API endpoint not found")
    except PlacementDeskError as exc:
        status = _STATUS_BY_KIND.get(exc.error_kind, 400)
        logger.info("%s %s -> %d %s: %s", method, path, status, exc.error_kind, exc)
        return status, error_body(exc)


class PlacementRequestHandler(BaseHTTPRequestHandler):
    portal: PlacementPortal  # bound by make_handler

    def do_GET(self):
        self._handle("GET")

    def do_POST(self):
        self._handle("POST")

    def do_PUT(self):
        self._handle("PUT")

    def _read_body(self) -> dict[str, Any]:
        try:
            length = int(self.headers.get("Content-Length") or 0)
        except ValueError:
            raise ValidationError("Content-Length must be a whole number") from None
        if length <= 0:
            return {}
        try:
            data = json.loads(self.rfile.read(length).decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            raise ValidationError("Request body must be valid JSON") from None
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
        return data

    def _handle(self, method: str) -> None:
        parsed = urlparse(self.path)
        try:
            body = self._read_body()
        except ValidationError as exc:
            self._json_response(400, error_body(exc))
            return
        status, payload = dispatch(self.portal, method, parsed.path, parse_qs(parsed.query), body)
        self._json_response(status, payload)

    def _json_response(self, status: int, data: Any) -> None:
        body = json.dumps(data, default=str).encode()
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Access-Control-Allow-Origin", "*")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        logger.debug("%s - %s", self.address_string(), format % args)


def make_handler(portal: PlacementPortal) -> type[PlacementRequestHandler]:
    return type("BoundPlacementRequestHandler", (PlacementRequestHandler,), {"portal": portal})


def serve(portal: PlacementPortal, host: str, port: int) -> None:
    server = HTTPServer((host, port), make_handler(portal))
    logger.info("Placement API running at http://%s:%d", host, port)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down.")
    finally:
        server.server_close()
