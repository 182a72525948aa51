from quiz_contest.models.base import Base
from quiz_contest.models.question import Question
from quiz_contest.models.submission import Submission

__all__ = ["Base", "Question", "Submission"]
