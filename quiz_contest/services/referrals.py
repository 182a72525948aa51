# quiz_contest/services/referrals.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Protocol
from urllib.parse import urlencode

from quiz_contest.schemas.leaderboard import ReferralStanding
from quiz_contest.services.scoring import is_qualified


class ReferralLinkError(ValueError):
    pass


class ReferredSubmission(Protocol):
    id: str
    mobile: str
    panchayath: str
    reference_id: str | None
    score: int


@dataclass
class _Bucket:
    count: int = 0
    qualified: int = 0
    panchayaths: set[str] = field(default_factory=set)


def aggregate_referrals(
    submissions: Iterable[ReferredSubmission],
    *,
    qualifying_score: int,
    certificate_max_rank: int = 10,
    certificate_min_count: int = 5,
) -> List[ReferralStanding]:
    """Group submissions by referrer and rank the referrers.

    Ordering: count descending, then referrer identity ascending.
    A referral is "qualified" when the referred submission's own score
    reaches ``qualifying_score``. ``attended_panchayaths`` counts distinct
    panchayaths among submissions made by the referrer (matched on
    submission id or mobile).
    """
    subs = list(submissions)
    buckets: dict[str, _Bucket] = {}

    for s in subs:
        if not s.reference_id:
            continue
        b = buckets.setdefault(s.reference_id, _Bucket())
        b.count += 1
        if is_qualified(s.score, qualifying_score):
            b.qualified += 1

    for s in subs:
        for key in (s.id, s.mobile):
            b = buckets.get(key)
            if b is not None:
                b.panchayaths.add(s.panchayath)

    ordered = sorted(buckets.items(), key=lambda kv: (-kv[1].count, kv[0]))

    standings: List[ReferralStanding] = []
    for rank, (ref, b) in enumerate(ordered, start=1):
        standings.append(
            ReferralStanding(
                reference_id=ref,
                count=b.count,
                qualified_referrals=b.qualified,
                attended_panchayaths=len(b.panchayaths),
                rank=rank,
                certificate_eligible=(
                    rank <= certificate_max_rank and b.count >= certificate_min_count
                ),
            )
        )
    return standings


def build_referral_link(base_url: str, mobile: str, *, min_length: int = 10) -> str:
    mobile = (mobile or "").strip()
    if len(mobile) < min_length:
        raise ReferralLinkError(f"Please enter a valid {min_length}-digit mobile number.")
    return f"{base_url.rstrip('/')}/quiz?{urlencode({'ref': mobile})}"
