# quiz_contest/services/questions.py
from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from quiz_contest.models.question import Question
from quiz_contest.schemas.question import QuestionIn


logger = logging.getLogger(__name__)


class QuestionNotFound(Exception):
    pass


async def fetch_random_questions(session: AsyncSession, *, limit: int) -> Sequence[Question]:
    """Random subset of the question bank for one quiz attempt."""
    rows = await session.execute(
        select(Question).order_by(func.random()).limit(limit)
    )
    return rows.scalars().all()


async def fetch_questions_by_ids(session: AsyncSession, ids: Sequence[str]) -> Sequence[Question]:
    if not ids:
        return []
    rows = await session.execute(select(Question).where(Question.id.in_(ids)))
    return rows.scalars().all()


async def list_questions(session: AsyncSession) -> Sequence[Question]:
    rows = await session.execute(select(Question).order_by(Question.created_at))
    return rows.scalars().all()


async def count_questions(session: AsyncSession) -> int:
    res = await session.execute(select(func.count()).select_from(Question))
    return res.scalar_one()


async def create_question(session: AsyncSession, data: QuestionIn) -> Question:
    question = Question(
        question_text=data.question_text,
        options=data.options.model_dump(),
        correct_answer=data.correct_answer,
    )
    session.add(question)
    await session.commit()
    await session.refresh(question)
    logger.info("Question %s created", question.id)
    return question


async def update_question(session: AsyncSession, question_id: str, data: QuestionIn) -> Question:
    question = await session.get(Question, question_id)
    if not question:
        raise QuestionNotFound(question_id)

    question.question_text = data.question_text
    question.options = data.options.model_dump()
    question.correct_answer = data.correct_answer

    await session.commit()
    await session.refresh(question)
    logger.info("Question %s updated", question.id)
    return question


async def delete_question(session: AsyncSession, question_id: str) -> None:
    question = await session.get(Question, question_id)
    if not question:
        raise QuestionNotFound(question_id)

    await session.delete(question)
    await session.commit()
    logger.info("Question %s deleted", question_id)
