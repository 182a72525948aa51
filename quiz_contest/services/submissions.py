# quiz_contest/services/submissions.py
from __future__ import annotations

import logging
from typing import Iterable, Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from quiz_contest.models.submission import Submission
from quiz_contest.schemas.submission import SubmissionCreate
from quiz_contest.services.questions import fetch_questions_by_ids
from quiz_contest.services.scoring import calculate_score


logger = logging.getLogger(__name__)


class SubmissionError(Exception):
    pass


class AlreadySubmitted(SubmissionError):
    """The mobile number already has a submission."""

    def __init__(self, mobile: str):
        super().__init__("This mobile number has already been used to submit the quiz.")
        self.mobile = mobile


MOBILE_CONSTRAINT = "uq_submissions_mobile"
UNIQUE_VIOLATION = "23505"


def is_mobile_conflict(exc: IntegrityError) -> bool:
    """True when the insert hit the unique constraint on ``submissions.mobile``."""
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    msg = str(orig)
    if code is not None:
        return code == UNIQUE_VIOLATION and MOBILE_CONSTRAINT in msg
    # sqlite: "UNIQUE constraint failed: submissions.mobile"
    return "UNIQUE constraint failed: submissions.mobile" in msg


async def submit_quiz(
    session: AsyncSession,
    payload: SubmissionCreate,
) -> tuple[Submission, int]:
    """
    Scores the answers against the stored questions and inserts the submission.
    Returns (submission, total_questions).

    The store's unique constraint on ``mobile`` decides duplicates.
    """
    question_ids = payload.scored_question_ids()
    questions = await fetch_questions_by_ids(session, question_ids)
    score = calculate_score(payload.answers, questions)

    submission = Submission(
        name=payload.name,
        mobile=payload.mobile,
        panchayath=payload.panchayath,
        reference_id=payload.reference_id,
        answers=dict(payload.answers),
        score=score,
    )
    session.add(submission)
    try:
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        if not is_mobile_conflict(e):
            raise
        logger.info("Duplicate submission rejected for mobile %s", payload.mobile)
        raise AlreadySubmitted(payload.mobile)

    await session.refresh(submission)
    logger.info("Submission %s stored (score %d/%d)", submission.id, score, len(question_ids))
    return submission, len(question_ids)


async def list_submissions(session: AsyncSession) -> Sequence[Submission]:
    """All submissions, newest first."""
    rows = await session.execute(
        select(Submission).order_by(Submission.created_at.desc())
    )
    return rows.scalars().all()


async def fetch_all_submissions(session: AsyncSession) -> Sequence[Submission]:
    rows = await session.execute(select(Submission))
    return rows.scalars().all()


def filter_submissions(submissions: Iterable[Submission], search: str | None) -> list[Submission]:
    """Name/panchayath match case-insensitively; mobile/reference match as typed."""
    if not search:
        return list(submissions)

    needle = search.lower()
    out = []
    for s in submissions:
        if (
            needle in s.name.lower()
            or search in s.mobile
            or needle in s.panchayath.lower()
            or (s.reference_id and search in s.reference_id)
        ):
            out.append(s)
    return out


async def count_submissions(session: AsyncSession, *, referred_only: bool = False) -> int:
    stmt = select(func.count()).select_from(Submission)
    if referred_only:
        stmt = stmt.where(Submission.reference_id.is_not(None))
    res = await session.execute(stmt)
    return res.scalar_one()
