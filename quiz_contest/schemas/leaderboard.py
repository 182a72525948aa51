from datetime import datetime

from pydantic import BaseModel, Field


class ReferralStanding(BaseModel):
    reference_id: str
    count: int
    qualified_referrals: int
    attended_panchayaths: int
    rank: int
    certificate_eligible: bool = False


class RankedSubmission(BaseModel):
    id: str
    name: str
    mobile: str
    panchayath: str
    score: int
    created_at: datetime
    position: int


class QuizWinner(RankedSubmission):
    prize: str


class FastestSubmission(RankedSubmission):
    # display filler derived from position, not a measured duration
    simulated_seconds: int


class Certificate(BaseModel):
    title: str
    ordinal: str
    message: str
    share_url: str
    file_name: str


class ReferralCertificateIn(BaseModel):
    contestant_name: str = Field(..., min_length=1, max_length=200)


class ReferralLinkIn(BaseModel):
    mobile: str


class ReferralLinkOut(BaseModel):
    link: str
