from __future__ import annotations

from typing import Iterable, Mapping, Protocol


class ScorableQuestion(Protocol):
    id: str
    correct_answer: str


def calculate_score(answers: Mapping[str, str], questions: Iterable[ScorableQuestion]) -> int:
    """Number of questions whose selected option equals the correct one.

    Unanswered questions (ids missing from ``answers``) count as wrong.
    """
    return sum(1 for q in questions if answers.get(q.id) == q.correct_answer)


def is_qualified(score: int, threshold: int) -> bool:
    return score >= threshold
