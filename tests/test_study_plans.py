from datetime import date, timedelta

import pytest

from conftest import STUDY_TEXT

USER_ID = 301


def _headers(user_id=USER_ID):
    return {"X-User-Id": str(user_id)}


@pytest.fixture()
def document(client):
    resp = client.post(
        "/api/documents/upload",
        files={"file": ("algebra.txt", STUDY_TEXT.encode(), "text/plain")},
        headers=_headers(),
    )
    assert resp.status_code == 200, resp.text
    doc_id = resp.json()["document"]["id"]
    topics = client.get(f"/api/topics/by-document/{doc_id}", headers=_headers()).json()
    return {"id": doc_id, "topic_ids": [t["id"] for t in topics]}


def _create_plan(client, document, **overrides):
    payload = {
        "document_id": document["id"],
        "topic_ids": document["topic_ids"],
        "due_date": (date.today() + timedelta(days=6)).isoformat(),
        "pace": "fast",
    }
    payload.update(overrides)
    return client.post("/api/study/plans", json=payload, headers=_headers())


class TestCreatePlan:
    def test_spreads_topics_until_due_date(self, client, document):
        resp = _create_plan(client, document)
        assert resp.status_code == 201, resp.text
        plan = resp.json()
        assert plan["pace"] == "fast"
        assert plan["owner_id"] == USER_ID

        sessions = plan["sessions"]
        today = date.today()
        assert [s["topic_id"] for s in sessions] == document["topic_ids"]
        assert [date.fromisoformat(s["scheduled_date"]) for s in sessions] == [
            today, today + timedelta(days=2), today + timedelta(days=4),
        ]
        assert all(s["duration_minutes"] >= 10 for s in sessions)
        assert not any(s["completed"] for s in sessions)

    def test_fast_is_shorter_than_slow(self, client, document):
        fast = _create_plan(client, document, pace="fast").json()["sessions"]
        slow = _create_plan(client, document, pace="slow").json()["sessions"]
        assert all(f["duration_minutes"] < s["duration_minutes"] for f, s in zip(fast, slow))

    def test_past_due_date_schedules_today(self, client, document):
        resp = _create_plan(client, document, due_date=(date.today() - timedelta(days=2)).isoformat())
        assert resp.status_code == 201
        dates = {s["scheduled_date"] for s in resp.json()["sessions"]}
        assert dates == {date.today().isoformat()}

    def test_duplicate_topic_ids_collapse(self, client, document):
        first = document["topic_ids"][0]
        resp = _create_plan(client, document, topic_ids=[first, first])
        assert resp.status_code == 201
        assert [s["topic_id"] for s in resp.json()["sessions"]] == [first]

    def test_pace_is_case_insensitive(self, client, document):
        resp = _create_plan(client, document, pace="Moderate")
        assert resp.status_code == 201
        assert resp.json()["pace"] == "moderate"

    def test_empty_selection_rejected(self, client, document):
        assert _create_plan(client, document, topic_ids=[]).status_code == 422

    def test_unknown_pace_rejected(self, client, document):
        assert _create_plan(client, document, pace="sprint").status_code == 422

    def test_invalid_due_date_rejected(self, client, document):
        assert _create_plan(client, document, due_date="next tuesday").status_code == 422

    def test_topic_from_another_document_rejected(self, client, document):
        other = client.post(
            "/api/documents/upload",
            files={"file": ("other.txt", STUDY_TEXT.encode(), "text/plain")},
            headers=_headers(),
        ).json()["document"]["id"]
        other_topic = client.get(f"/api/topics/by-document/{other}", headers=_headers()).json()[0]["id"]

        resp = _create_plan(client, document, topic_ids=[document["topic_ids"][0], other_topic])
        assert resp.status_code == 400

    def test_other_owner_forbidden(self, client, document):
        payload = {
            "document_id": document["id"],
            "topic_ids": document["topic_ids"],
            "due_date": date.today().isoformat(),
        }
        resp = client.post("/api/study/plans", json=payload, headers=_headers(302))
        assert resp.status_code == 403

    def test_requires_identity(self, client, document):
        payload = {
            "document_id": document["id"],
            "topic_ids": document["topic_ids"],
            "due_date": date.today().isoformat(),
        }
        assert client.post("/api/study/plans", json=payload).status_code == 401


class TestListPlans:
    def test_lists_own_plans_newest_first(self, client, document):
        first = _create_plan(client, document).json()["id"]
        second = _create_plan(client, document, pace="slow").json()["id"]

        resp = client.get("/api/study/plans/mine", headers=_headers())
        assert resp.status_code == 200
        ids = [p["id"] for p in resp.json()]
        assert ids.index(second) < ids.index(first)

    def test_other_user_sees_none_of_them(self, client, document):
        _create_plan(client, document)
        resp = client.get("/api/study/plans/mine", headers=_headers(399))
        assert resp.status_code == 200
        assert resp.json() == []
