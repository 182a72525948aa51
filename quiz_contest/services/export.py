"""Spreadsheet export of quiz submissions."""

from __future__ import annotations

from datetime import datetime
from io import BytesIO
from typing import Iterable, Sequence, Tuple

from openpyxl import Workbook

from quiz_contest.models.submission import Submission


SHEET_TITLE = "Quiz Submissions"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

COLUMNS: Sequence[Tuple[str, str]] = [
    ("name", "Name"),
    ("mobile", "Mobile"),
    ("panchayath", "Panchayath"),
    ("reference_id", "Reference ID"),
    ("score", "Score"),
    ("created_at", "Submission Time"),
]


def export_file_name(now: datetime | None = None) -> str:
    now = now or datetime.now()
    return f"quiz_submissions_{now:%Y-%m-%d_%H-%M}.xlsx"


def _row(submission: Submission) -> list:
    return [
        submission.name,
        submission.mobile,
        submission.panchayath,
        submission.reference_id or "-",
        submission.score,
        f"{submission.created_at:%b %d, %Y %H:%M}",
    ]


def build_submissions_workbook(submissions: Iterable[Submission]) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE
    ws.append([label for _, label in COLUMNS])
    for s in submissions:
        ws.append(_row(s))

    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()
