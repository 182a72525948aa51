import pytest
from sqlalchemy.exc import IntegrityError

from quiz_contest.services.submissions import is_mobile_conflict


class PgError(Exception):
    def __init__(self, message, sqlstate):
        super().__init__(message)
        self.sqlstate = sqlstate


def integrity(orig):
    return IntegrityError("INSERT INTO submissions ...", {}, orig)


@pytest.mark.parametrize(
    "orig, expected",
    [
        (PgError('duplicate key value violates unique constraint "uq_submissions_mobile"', "23505"), True),
        (PgError('duplicate key value violates unique constraint "submissions_pkey"', "23505"), False),
        (PgError('null value in column "name" violates not-null constraint', "23502"), False),
        (Exception("UNIQUE constraint failed: submissions.mobile"), True),
        (Exception("UNIQUE constraint failed: submissions.id"), False),
        (Exception("NOT NULL constraint failed: submissions.name"), False),
    ],
)
def test_only_mobile_unique_violation_counts_as_duplicate(orig, expected):
    assert is_mobile_conflict(integrity(orig)) is expected
