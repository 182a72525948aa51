from __future__ import annotations

from datetime import datetime
import uuid

from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from quiz_contest.models.base import Base


class Question(Base):
    __tablename__ = "questions"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    question_text: Mapped[str] = mapped_column(Text, nullable=False)

    # {"A": "...", "B": "...", "C": "...", "D": "..."}
    options: Mapped[dict] = mapped_column(JSON, nullable=False)

    correct_answer: Mapped[str] = mapped_column(String(1), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
    )
