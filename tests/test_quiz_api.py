from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from quiz_contest.core.db import get_session
from quiz_contest.main import app
from quiz_contest.models import Submission


def payload(question_ids, answers, mobile="9876543210", **kw):
    data = {
        "name": "Anu Joseph",
        "mobile": mobile,
        "panchayath": "Pala",
        "answers": answers,
        "question_ids": question_ids,
    }
    data.update(kw)
    return data


async def test_root(client):
    r = await client.get("/")
    assert r.status_code == 200


async def test_questions_hide_correct_answer(client, add_question):
    for i in range(7):
        await add_question(text=f"Q{i}")

    r = await client.get("/quiz/questions")
    assert r.status_code == 200
    body = r.json()
    assert len(body) == 5
    assert all("correct_answer" not in q for q in body)
    assert set(body[0]["options"]) == {"A", "B", "C", "D"}

    r = await client.get("/quiz/questions", params={"limit": 2})
    assert len(r.json()) == 2


async def test_no_questions_loaded(client):
    r = await client.get("/quiz/questions")
    assert r.status_code == 200
    assert r.json() == []


async def test_submit_scores_on_server(client, add_question, session):
    q1 = await add_question(correct="A")
    q2 = await add_question(correct="B")

    r = await client.post("/quiz/submissions", json=payload([q1.id, q2.id], {q1.id: "A", q2.id: "C"}))
    assert r.status_code == 201, r.text
    assert r.json()["score"] == 1
    assert r.json()["total"] == 2

    stored = (await session.execute(select(Submission))).scalar_one()
    assert stored.score == 1
    assert stored.reference_id is None
    assert stored.answers == {q1.id: "A", q2.id: "C"}


async def test_duplicate_mobile_is_rejected(client, add_question, session):
    q1 = await add_question(correct="A")
    body = payload([q1.id], {q1.id: "A"})

    first = await client.post("/quiz/submissions", json=body)
    assert first.status_code == 201

    second = await client.post("/quiz/submissions", json={**body, "name": "Someone Else"})
    assert second.status_code == 409
    assert "already been used" in second.json()["detail"]

    count = (await session.execute(select(func.count()).select_from(Submission))).scalar_one()
    assert count == 1


async def test_incomplete_answer_set_is_rejected(client, add_question, session):
    q1 = await add_question()
    q2 = await add_question()

    r = await client.post("/quiz/submissions", json=payload([q1.id, q2.id], {q1.id: "A"}))
    assert r.status_code == 422

    r = await client.post("/quiz/submissions", json=payload([], {}))
    assert r.status_code == 422

    count = (await session.execute(select(func.count()).select_from(Submission))).scalar_one()
    assert count == 0


async def test_missing_required_field_and_bad_option(client, add_question):
    q1 = await add_question()

    r = await client.post("/quiz/submissions", json=payload([q1.id], {q1.id: "A"}, name="   "))
    assert r.status_code == 422

    r = await client.post("/quiz/submissions", json=payload([q1.id], {q1.id: "E"}))
    assert r.status_code == 422


async def test_referrer_is_stored_and_blank_referrer_dropped(client, add_question, session):
    q1 = await add_question()

    r = await client.post(
        "/quiz/submissions",
        json=payload([q1.id], {q1.id: "A"}, reference_id="9999999999"),
    )
    assert r.status_code == 201
    r = await client.post(
        "/quiz/submissions",
        json=payload([q1.id], {q1.id: "A"}, mobile="9876500000", reference_id="  "),
    )
    assert r.status_code == 201

    rows = (await session.execute(select(Submission).order_by(Submission.mobile))).scalars().all()
    assert [s.reference_id for s in rows] == [None, "9999999999"]


async def test_deleted_question_does_not_match(client, add_question):
    q1 = await add_question(correct="A")

    r = await client.post(
        "/quiz/submissions",
        json=payload([q1.id, "gone"], {q1.id: "A", "gone": "A"}),
    )
    assert r.status_code == 201
    assert r.json() == {"id": r.json()["id"], "score": 1, "total": 2}


async def test_referral_link(client):
    r = await client.post("/referrals/link", json={"mobile": "9876543210"})
    assert r.status_code == 200
    assert r.json()["link"] == "https://contest.example/quiz?ref=9876543210"

    r = await client.post("/referrals/link", json={"mobile": "98765"})
    assert r.status_code == 422


async def test_store_failure_is_reported_as_503(client):
    class BrokenSession:
        async def execute(self, *args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("connection refused"))

    async def _broken():
        yield BrokenSession()

    app.dependency_overrides[get_session] = _broken
    r = await client.get("/quiz/questions")
    assert r.status_code == 503
    assert r.json() == {"detail": "Data store unavailable"}


async def test_submission_cannot_claim_more_questions_than_a_quiz(client, add_question, session):
    questions = [await add_question(correct="A") for _ in range(20)]
    ids = [q.id for q in questions]
    all_a = {qid: "A" for qid in ids}

    r = await client.post("/quiz/submissions", json=payload(ids, all_a))
    assert r.status_code == 422

    r = await client.post("/quiz/submissions", json=payload(None, all_a, mobile="9876500001"))
    assert r.status_code == 422

    five = ids[:5]
    r = await client.post("/quiz/submissions", json=payload(five, {qid: "A" for qid in five}, mobile="9876500002"))
    assert r.status_code == 201
    assert r.json()["score"] == 5

    count = (await session.execute(select(func.count()).select_from(Submission))).scalar_one()
    assert count == 1


async def test_question_limit_is_capped_at_quiz_size(client, add_question):
    for i in range(8):
        await add_question(text=f"Q{i}")

    r = await client.get("/quiz/questions", params={"limit": 8})
    assert r.status_code == 200
    assert len(r.json()) == 5


async def test_refused_connection_is_reported_as_503(client):
    class UnreachableSession:
        async def execute(self, *args, **kwargs):
            raise ConnectionRefusedError(111, "Connect call failed ('127.0.0.1', 1)")

    async def _unreachable():
        yield UnreachableSession()

    app.dependency_overrides[get_session] = _unreachable
    r = await client.get("/quiz/questions")
    assert r.status_code == 503
    assert r.json() == {"detail": "Data store unavailable"}
