from __future__ import annotations

from datetime import datetime
from typing import Optional
import uuid

from sqlalchemy import Integer, String, DateTime, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from quiz_contest.models.base import Base


class Submission(Base):
    __tablename__ = "submissions"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    mobile: Mapped[str] = mapped_column(String(20), nullable=False)
    panchayath: Mapped[str] = mapped_column(String(200), nullable=False)

    # mobile or submission id of whoever invited this participant
    reference_id: Mapped[Optional[str]] = mapped_column(
        String(64),
        nullable=True,
        index=True,
    )

    # question id -> option key
    answers: Mapped[dict] = mapped_column(JSON, nullable=False)

    score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
        index=True,
    )

    __table_args__ = (UniqueConstraint("mobile", name="uq_submissions_mobile"),)
