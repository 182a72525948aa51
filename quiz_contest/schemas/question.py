from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


OptionKey = Literal["A", "B", "C", "D"]


class Options(BaseModel):
    A: str = Field(..., min_length=1)
    B: str = Field(..., min_length=1)
    C: str = Field(..., min_length=1)
    D: str = Field(..., min_length=1)

    model_config = ConfigDict(str_strip_whitespace=True)


class QuestionIn(BaseModel):
    question_text: str = Field(..., min_length=1)
    options: Options
    correct_answer: OptionKey

    model_config = ConfigDict(str_strip_whitespace=True)


class QuestionOut(BaseModel):
    """Admin view: includes the correct answer."""

    id: str
    question_text: str
    options: Options
    correct_answer: OptionKey
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class QuizQuestionOut(BaseModel):
    """Participant view: the correct answer stays on the server."""

    id: str
    question_text: str
    options: Options

    model_config = ConfigDict(from_attributes=True)
