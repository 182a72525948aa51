# quiz_contest/services/certificates.py
from __future__ import annotations

from datetime import datetime
from urllib.parse import quote

from slugify import slugify

from quiz_contest.schemas.leaderboard import Certificate, FastestSubmission, ReferralStanding


WHATSAPP_SHARE_URL = "https://wa.me/?text="

_PLACE_TITLES = {1: "FIRST PLACE", 2: "SECOND PLACE", 3: "THIRD PLACE"}


class CertificateError(Exception):
    pass


def position_title(position: int) -> str:
    return _PLACE_TITLES.get(position, f"{position}TH PLACE")


def ordinal(n: int) -> str:
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def format_award_date(d: datetime) -> str:
    # "August 15, 2025"
    return f"{d:%B} {d.day}, {d.year}"


def share_url(message: str) -> str:
    return WHATSAPP_SHARE_URL + quote(message, safe="")


def certificate_file_name(name: str, kind: str) -> str:
    stem = slugify(name, separator="_", lowercase=False) or "participant"
    return f"{stem}_{kind}_certificate.png"


def winner_certificate(winner: FastestSubmission) -> Certificate:
    title = position_title(winner.position)
    place = ordinal(winner.position)
    message = (
        f"🎉 Congratulations! {winner.name} has won {place} place in the Quiz Competition!\n"
        "\n"
        f"🏆 Position: {title}\n"
        f"📊 Score: {winner.score}\n"
        f"📍 Panchayath: {winner.panchayath}\n"
        f"📅 Date: {format_award_date(winner.created_at)}\n"
        "\n"
        "Well done! 🎊"
    )
    return Certificate(
        title=title,
        ordinal=place,
        message=message,
        share_url=share_url(message),
        file_name=certificate_file_name(winner.name, "winner"),
    )


def referral_certificate(
    standing: ReferralStanding,
    contestant_name: str,
    *,
    awarded_on: datetime | None = None,
) -> Certificate:
    """Certificate for a referral leader; the contestant types their own name."""
    contestant_name = (contestant_name or "").strip()
    if not contestant_name:
        raise CertificateError("Please fill in your name before sharing.")
    if not standing.certificate_eligible:
        raise CertificateError(
            f"Reference ID {standing.reference_id} is not eligible for a certificate."
        )

    awarded_on = awarded_on or datetime.utcnow()
    title = position_title(standing.rank)
    place = ordinal(standing.rank)
    message = (
        f"🎉 Congratulations! {contestant_name} has won {place} place in the Referral Competition!\n"
        "\n"
        f"🏆 Position: {title}\n"
        f"📊 Total References: {standing.count}\n"
        f"✅ Qualified Referrals: {standing.qualified_referrals}\n"
        f"📅 Date: {format_award_date(awarded_on)}\n"
        "\n"
        "Well done! 🎊"
    )
    return Certificate(
        title=title,
        ordinal=place,
        message=message,
        share_url=share_url(message),
        file_name=certificate_file_name(contestant_name, "referral"),
    )
