from __future__ import annotations

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from diary.config import Settings
from diary.http import create_app
from diary.services.diary_repo import MemoryDiaryRepository


@pytest.fixture
def client():
    app = create_app(settings=Settings(), repository=MemoryDiaryRepository())
    with TestClient(app) as c:
        yield c


def _create(client, day: str, marker: str = "😊", title: str = "Title", note: str = "Note"):
    resp = client.post(
        "/diaries",
        json={"date": day, "title": title, "note": note, "emotion_marker": marker, "mood": "Okay"},
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_health_carries_request_id(client):
    resp = client.get("/health", headers={"X-Request-ID": "abc123"})
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}
    assert resp.headers["X-Request-ID"] == "abc123"


def test_diary_crud_flow(client):
    created = _create(client, "2025-11-13", "😢", title="Rough day")
    assert created["emotion_category"] == "sad"
    assert created["ai_comment"]

    got = client.get("/diaries/details", params={"date": "2025-11-13"}).json()
    assert got == created

    patched = client.patch(
        f"/diaries/{created['id']}",
        params={"date": "2025-11-13"},
        json={"title": "Better", "note": "", "emotion_marker": "🌈"},
    )
    assert patched.status_code == 200
    assert patched.json()["id"] == created["id"]
    assert patched.json()["emotion_category"] == "hopeful"

    for _ in range(2):
        resp = client.delete(f"/diaries/{created['id']}", params={"date": "2025-11-13"})
        assert resp.status_code == 204

    assert client.get("/diaries/details", params={"date": "2025-11-13"}).status_code == 404


def test_missing_entry_and_foreign_id_are_404(client):
    assert client.get("/diaries/details", params={"date": "2030-01-01"}).status_code == 404

    _create(client, "2025-01-01")
    resp = client.patch(
        "/diaries/d-not-mine",
        params={"date": "2025-01-01"},
        json={"emotion_marker": "😊"},
    )
    assert resp.status_code == 404


def test_malformed_input_is_422(client):
    assert client.post("/diaries", json={"date": "2025-1-1", "emotion_marker": "😊"}).status_code == 422
    assert client.post("/diaries", json={"date": "2025-01-01", "emotion_marker": ""}).status_code == 422
    assert client.get("/diaries/details", params={"date": "yesterday"}).status_code == 422
    assert client.get("/diaries/search", params={"page": 0}).status_code == 422


def test_heatmap_and_daily_stats(client):
    _create(client, "2025-11-30", "😊")
    _create(client, "2025-12-02", "😰", title="b")
    _create(client, "2025-12-01", "😢", title="a")

    marks = client.get("/diaries/heatmap", params={"month": "2025-12"}).json()
    assert [(m["date"], m["emotion_category"]) for m in marks] == [
        ("2025-12-01", "sad"),
        ("2025-12-02", "anxious"),
    ]

    stats = client.get("/stats/daily", params={"month": "2025-12"}).json()
    assert [(s["date"], s["title"]) for s in stats] == [("2025-12-01", "a"), ("2025-12-02", "b")]


def test_search_endpoint(client):
    _create(client, "2025-01-01", title="Old Project")
    _create(client, "2025-01-05", title="Project Kickoff")
    _create(client, "2025-01-03", title="Gym")

    page1 = client.get("/diaries/search", params={"keyword": "project", "limit": 1}).json()
    page2 = client.get("/diaries/search", params={"keyword": "project", "limit": 1, "page": 2}).json()
    assert page1["total"] == 2
    assert page1["total_pages"] == 2
    assert [e["title"] for e in page1["entries"]] == ["Project Kickoff"]
    assert [e["title"] for e in page2["entries"]] == ["Old Project"]

    by_cat = client.get("/diaries/search", params={"emotion_category": "happy"}).json()
    assert by_cat["total"] == 3


def test_chart_endpoint(client):
    for day in ("2025-01-01", "2025-01-04", "2025-01-05"):
        _create(client, day, "😢")

    weekly = client.get("/stats/chart", params={"start": "2025-01-01", "end": "2025-01-31"}).json()
    assert [(p["bucket_key"], p["sad"], p["total"]) for p in weekly] == [
        ("2024-12-29", 2, 2),
        ("2025-01-05", 1, 1),
    ]

    monthly = client.get(
        "/stats/chart", params={"start": "2025-01-01", "end": "2025-01-31", "type": "monthly"}
    ).json()
    assert [(p["bucket_key"], p["display_label"], p["total"]) for p in monthly] == [("2025-01", "Jan 2025", 3)]

    bad = client.get("/stats/chart", params={"start": "2025-01-01", "end": "2025-01-31", "type": "yearly"})
    assert bad.status_code == 422


def test_risk_endpoint_lists_resources_when_at_risk(client):
    today = date(2025, 3, 31)
    for i in range(7):
        _create(client, (today - timedelta(days=i)).isoformat(), "😢")

    res = client.get("/risk", params={"today": today.isoformat()}).json()
    assert res["is_at_risk"] is True
    assert res["risk_level"] == "high"
    assert res["window_days"] == 14
    assert res["consecutive_negative_days"] == 7
    assert res["resources"]


def test_risk_endpoint_quiet_when_fine(client):
    _create(client, "2025-03-31", "😊")
    res = client.get("/risk", params={"today": "2025-03-31", "days": 7}).json()
    assert res["is_at_risk"] is False
    assert res["risk_level"] == "none"
    assert res["window_days"] == 7
    assert res["resources"] == []


def test_support_resources(client):
    everything = client.get("/support-resources").json()
    assert len(everything) == 8
    hotlines = client.get("/support-resources", params={"category": "hotline"}).json()
    assert hotlines and all(r["category"] == "hotline" for r in hotlines)
    assert client.get("/support-resources", params={"category": "spa"}).status_code == 422


@pytest.mark.parametrize("day", ["2025-02-30", "2025-13-01", "2025-00-10"])
def test_impossible_dates_are_rejected_on_write(client, day):
    resp = client.post("/diaries", json={"date": day, "emotion_marker": "😊"})
    assert resp.status_code == 422
    assert client.get("/diaries/search").json()["total"] == 0


def test_impossible_dates_are_rejected_on_read(client):
    _create(client, "2025-02-28", "😢")

    assert client.get("/risk", params={"today": "2025-13-01"}).status_code == 422
    assert client.get("/diaries/details", params={"date": "2025-02-30"}).status_code == 422
    assert client.get("/diaries/heatmap", params={"month": "2025-13"}).status_code == 422
    assert client.get("/diaries/search", params={"start_date": "2025-02-30"}).status_code == 422
    bad_end = client.get("/stats/chart", params={"start": "2025-02-01", "end": "2025-02-31", "type": "weekly"})
    assert bad_end.status_code == 422

    ok = client.get("/stats/chart", params={"start": "2025-02-01", "end": "2025-02-28", "type": "weekly"})
    assert ok.status_code == 200
    assert [(p["bucket_key"], p["sad"]) for p in ok.json()] == [("2025-02-23", 1)]


def test_unknown_search_category_is_422(client):
    assert client.get("/diaries/search", params={"emotion_category": "bogus"}).status_code == 422


def test_support_categories(client):
    cats = client.get("/support-resources/categories").json()
    assert [c["category"] for c in cats] == ["emergency", "counseling", "hotline", "community"]
    assert all(c["label"] for c in cats)


def test_docs_are_hidden_in_production(monkeypatch):
    monkeypatch.setenv("ENV", "production")
    app = create_app(settings=Settings(), repository=MemoryDiaryRepository())
    with TestClient(app) as c:
        assert c.get("/docs").status_code == 404
        assert c.get("/openapi.json").status_code == 404
        assert c.get("/health").status_code == 200


def test_docs_are_served_outside_production(client):
    assert client.get("/openapi.json").status_code == 200
