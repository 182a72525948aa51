from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from quiz_contest.core.config import settings
from quiz_contest.core.db import get_session
from quiz_contest.schemas.leaderboard import ReferralLinkIn, ReferralLinkOut
from quiz_contest.schemas.question import QuizQuestionOut
from quiz_contest.schemas.submission import SubmissionCreate, SubmissionResult
from quiz_contest.services.questions import fetch_random_questions
from quiz_contest.services.referrals import ReferralLinkError, build_referral_link
from quiz_contest.services.submissions import AlreadySubmitted, submit_quiz


router = APIRouter(tags=["quiz"])


@router.get("/quiz/questions", response_model=list[QuizQuestionOut])
async def get_quiz_questions(
    limit: int | None = Query(default=None, ge=1, le=50),
    session: AsyncSession = Depends(get_session),
):
    questions = await fetch_random_questions(
        session, limit=min(limit or settings.QUESTIONS_PER_QUIZ, settings.QUESTIONS_PER_QUIZ)
    )
    return questions


@router.post(
    "/quiz/submissions",
    response_model=SubmissionResult,
    status_code=status.HTTP_201_CREATED,
)
async def create_submission(
    body: SubmissionCreate,
    session: AsyncSession = Depends(get_session),
):
    try:
        submission, total = await submit_quiz(session, body)
    except AlreadySubmitted as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return SubmissionResult(id=submission.id, score=submission.score, total=total)


@router.post("/referrals/link", response_model=ReferralLinkOut)
async def create_referral_link(body: ReferralLinkIn):
    try:
        link = build_referral_link(
            settings.PUBLIC_BASE_URL,
            body.mobile,
            min_length=settings.REFERRAL_MIN_MOBILE_LENGTH,
        )
    except ReferralLinkError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return ReferralLinkOut(link=link)
