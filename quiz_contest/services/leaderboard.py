# quiz_contest/services/leaderboard.py
from __future__ import annotations

from typing import List, Optional, Sequence
import random

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quiz_contest.models.submission import Submission
from quiz_contest.schemas.leaderboard import FastestSubmission, QuizWinner


PRIZES = {1: "Gold Prize", 2: "Silver Prize", 3: "Bronze Prize"}


async def fetch_earliest_submissions(
    session: AsyncSession,
    *,
    limit: int,
    min_score: Optional[int] = None,
) -> Sequence[Submission]:
    stmt = select(Submission)
    if min_score is not None:
        stmt = stmt.where(Submission.score >= min_score)
    stmt = stmt.order_by(Submission.created_at.asc(), Submission.id.asc()).limit(limit)
    rows = await session.execute(stmt)
    return rows.scalars().all()


def rank_winners(rows: Sequence[Submission]) -> List[QuizWinner]:
    return [
        QuizWinner(
            id=s.id,
            name=s.name,
            mobile=s.mobile,
            panchayath=s.panchayath,
            score=s.score,
            created_at=s.created_at,
            position=pos,
            prize=PRIZES.get(pos, ""),
        )
        for pos, s in enumerate(rows, start=1)
    ]


def simulated_seconds(position: int, rng: random.Random) -> int:
    """Display-only filler: 30s per position plus up to a minute of jitter.

    Nothing here is measured; callers must not present it as telemetry.
    """
    return int(position * 30 + rng.random() * 60)


def rank_fastest(
    rows: Sequence[Submission],
    *,
    rng: Optional[random.Random] = None,
) -> List[FastestSubmission]:
    rng = rng or random.Random()
    return [
        FastestSubmission(
            id=s.id,
            name=s.name,
            mobile=s.mobile,
            panchayath=s.panchayath,
            score=s.score,
            created_at=s.created_at,
            position=pos,
            simulated_seconds=simulated_seconds(pos, rng),
        )
        for pos, s in enumerate(rows, start=1)
    ]


async def quiz_winners(session: AsyncSession, *, limit: int) -> List[QuizWinner]:
    rows = await fetch_earliest_submissions(session, limit=limit)
    return rank_winners(rows)


async def fastest_submissions(
    session: AsyncSession,
    *,
    limit: int,
    min_score: int,
    seed: Optional[int] = None,
) -> List[FastestSubmission]:
    rows = await fetch_earliest_submissions(session, limit=limit, min_score=min_score)
    return rank_fastest(rows, rng=random.Random(seed))
