from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from quiz_contest.core.config import settings
from quiz_contest.core.db import get_session
from quiz_contest.core.security import create_admin_token, get_current_admin, verify_admin_credentials
from quiz_contest.schemas.admin import AdminLoginRequest, DashboardStats, TokenResponse
from quiz_contest.schemas.leaderboard import (
    Certificate,
    FastestSubmission,
    QuizWinner,
    ReferralCertificateIn,
    ReferralStanding,
)
from quiz_contest.schemas.question import QuestionIn, QuestionOut
from quiz_contest.schemas.submission import SubmissionOut
from quiz_contest.services import questions as question_service
from quiz_contest.services.certificates import CertificateError, referral_certificate, winner_certificate
from quiz_contest.services.export import XLSX_MEDIA_TYPE, build_submissions_workbook, export_file_name
from quiz_contest.services.leaderboard import fastest_submissions, quiz_winners
from quiz_contest.services.referrals import aggregate_referrals
from quiz_contest.services.submissions import (
    count_submissions,
    fetch_all_submissions,
    filter_submissions,
    list_submissions,
)


logger = logging.getLogger(__name__)


router = APIRouter(prefix="/admin", tags=["admin"])
protected = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(get_current_admin)],
)


@router.post("/login", response_model=TokenResponse)
async def login(payload: AdminLoginRequest):
    if not verify_admin_credentials(payload.username, payload.password):
        logger.warning("Failed admin login for %r", payload.username)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid username or password.")

    return TokenResponse(access_token=create_admin_token(payload.username))


@protected.get("/stats", response_model=DashboardStats)
async def get_stats(session: AsyncSession = Depends(get_session)):
    return DashboardStats(
        total_submissions=await count_submissions(session),
        total_questions=await question_service.count_questions(session),
        total_referrals=await count_submissions(session, referred_only=True),
    )


# ---------- questions ----------

@protected.get("/questions", response_model=list[QuestionOut])
async def list_questions(session: AsyncSession = Depends(get_session)):
    return await question_service.list_questions(session)


@protected.post("/questions", response_model=QuestionOut, status_code=status.HTTP_201_CREATED)
async def create_question(body: QuestionIn, session: AsyncSession = Depends(get_session)):
    return await question_service.create_question(session, body)


@protected.put("/questions/{question_id}", response_model=QuestionOut)
async def update_question(
    question_id: str,
    body: QuestionIn,
    session: AsyncSession = Depends(get_session),
):
    try:
        return await question_service.update_question(session, question_id, body)
    except question_service.QuestionNotFound:
        raise HTTPException(404, "Question not found")


@protected.delete("/questions/{question_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_question(question_id: str, session: AsyncSession = Depends(get_session)):
    try:
        await question_service.delete_question(session, question_id)
    except question_service.QuestionNotFound:
        raise HTTPException(404, "Question not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---------- submissions ----------

@protected.get("/submissions", response_model=list[SubmissionOut])
async def get_submissions(
    search: str | None = Query(default=None),
    session: AsyncSession = Depends(get_session),
):
    rows = await list_submissions(session)
    return filter_submissions(rows, search)


@protected.get("/submissions/export")
async def export_submissions(
    search: str | None = Query(default=None),
    session: AsyncSession = Depends(get_session),
):
    rows = filter_submissions(await list_submissions(session), search)
    content = build_submissions_workbook(rows)
    file_name = export_file_name()
    logger.info("Exported %d submissions to %s", len(rows), file_name)
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'},
    )


# ---------- rankings ----------

@protected.get("/winners", response_model=list[QuizWinner])
async def get_winners(session: AsyncSession = Depends(get_session)):
    return await quiz_winners(session, limit=settings.WINNERS_LIMIT)


@protected.get("/fastest", response_model=list[FastestSubmission])
async def get_fastest(
    seed: int | None = Query(default=None),
    session: AsyncSession = Depends(get_session),
):
    return await fastest_submissions(
        session,
        limit=settings.FASTEST_LIMIT,
        min_score=settings.QUALIFYING_SCORE,
        seed=seed,
    )


@protected.get("/fastest/{submission_id}/certificate", response_model=Certificate)
async def get_winner_certificate(submission_id: str, session: AsyncSession = Depends(get_session)):
    ranked = await fastest_submissions(
        session,
        limit=settings.FASTEST_LIMIT,
        min_score=settings.QUALIFYING_SCORE,
    )
    winner = next((w for w in ranked if w.id == submission_id), None)
    if winner is None:
        raise HTTPException(404, "Submission is not among the fastest qualifying submissions")
    return winner_certificate(winner)


async def _referral_standings(session: AsyncSession) -> list[ReferralStanding]:
    rows = await fetch_all_submissions(session)
    return aggregate_referrals(
        rows,
        qualifying_score=settings.QUALIFYING_SCORE,
        certificate_max_rank=settings.REFERRAL_CERTIFICATE_MAX_RANK,
        certificate_min_count=settings.REFERRAL_CERTIFICATE_MIN_COUNT,
    )


@protected.get("/referrals", response_model=list[ReferralStanding])
async def get_referral_leaderboard(session: AsyncSession = Depends(get_session)):
    return await _referral_standings(session)


@protected.post("/referrals/{reference_id}/certificate", response_model=Certificate)
async def create_referral_certificate(
    reference_id: str,
    body: ReferralCertificateIn,
    session: AsyncSession = Depends(get_session),
):
    standings = await _referral_standings(session)
    standing = next((s for s in standings if s.reference_id == reference_id), None)
    if standing is None:
        raise HTTPException(404, "Reference ID not found")

    try:
        return referral_certificate(standing, body.contestant_name)
    except CertificateError as e:
        raise HTTPException(status_code=400, detail=str(e))
