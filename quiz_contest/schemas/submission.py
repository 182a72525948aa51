from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from quiz_contest.core.config import settings
from quiz_contest.schemas.question import OptionKey


class SubmissionCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    mobile: str = Field(..., min_length=1, max_length=20)
    panchayath: str = Field(..., min_length=1, max_length=200)
    reference_id: Optional[str] = Field(default=None, max_length=64)

    # question id -> selected option
    answers: dict[str, OptionKey]
    # ids of the questions the participant was shown; all must be answered
    question_ids: Optional[list[str]] = None

    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator("reference_id", mode="before")
    @classmethod
    def blank_reference_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def check_answers_complete(self):
        if not self.answers:
            raise ValueError("Please answer all questions before submitting.")
        if self.question_ids is not None:
            missing = [qid for qid in self.question_ids if qid not in self.answers]
            if missing:
                raise ValueError("Please answer all questions before submitting.")
        limit = settings.QUESTIONS_PER_QUIZ
        if len(self.scored_question_ids()) > limit or len(self.answers) > limit:
            raise ValueError(f"A quiz has at most {limit} questions.")
        return self

    def scored_question_ids(self) -> list[str]:
        if self.question_ids is not None:
            return list(dict.fromkeys(self.question_ids))
        return list(self.answers)


class SubmissionResult(BaseModel):
    id: str
    score: int
    total: int


class SubmissionOut(BaseModel):
    id: str
    name: str
    mobile: str
    panchayath: str
    reference_id: Optional[str]
    score: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
