"""JSON / CSV export of applications for spreadsheet and UI consumption."""

from __future__ import annotations

import csv
import io
import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from placementdesk.models import Application
from placementdesk.storage.codec import to_jsonable

logger = logging.getLogger(__name__)

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)

_CSV_COLUMNS = (
    "id",
    "student_id",
    "student_name",
    "job_id",
    "job_title",
    "company",
    "status",
    "application_date",
    "interview_date",
    "feedback",
)


def _since(applications: list[Application], since: datetime | None) -> list[Application]:
    rows = [
        a for a in applications
        if since is None or (a.application_date is not None and a.application_date >= since)
    ]
    return sorted(rows, key=lambda a: a.application_date or _OLDEST, reverse=True)


def export_json(applications: list[Application], since: datetime | None = None) -> str:
    """Applications newest first as a JSON array."""
    return json.dumps(to_jsonable(_since(applications, since)), indent=2)


def export_csv(applications: list[Application], since: datetime | None = None) -> str:
    """Applications newest first as CSV (cover letters are left out)."""
    rows = to_jsonable(_since(applications, since))
    if not rows:
        return ""
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=_CSV_COLUMNS, extrasaction="ignore")
    writer.writeheader()
    for row in rows:
        writer.writerow({k: "" if row.get(k) is None else row[k] for k in _CSV_COLUMNS})
    return buf.getvalue()


def export_to_file(
    applications: list[Application],
    output_dir: str | Path,
    fmt: str = "json",
    since: datetime | None = None,
) -> Path:
    """Write an export file and return its path.

    *fmt* is ``"json"`` or ``"csv"``.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    if fmt == "csv":
        content = export_csv(applications, since)
        suffix = ".csv"
    else:
        content = export_json(applications, since)
        suffix = ".json"

    dest = output_dir / f"applications_export{suffix}"
    dest.write_text(content, encoding="utf-8")
    logger.info("Exported %s to %s.", fmt.upper(), dest)
    return dest
