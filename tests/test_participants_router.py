from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from availability_engine.db.session import SessionLocal, init_db
from availability_engine.main import app
from availability_engine.models import ParticipantProfile

client = TestClient(app)


def _clean_db():
    init_db()
    db: Session = SessionLocal()
    try:
        db.query(ParticipantProfile).delete()
        db.commit()
    finally:
        db.close()


def _create(payload):
    resp = client.post("/participants", json=payload)
    assert resp.status_code == 200, resp.text
    return resp.json()


def test_create_participant_stores_canonical_windows():
    _clean_db()

    data = _create({
        "name": "Sam",
        "windows": {
            "4": [
                {"start": "19:00", "end": "23:00"},
                {"start": "18:00", "end": "19:00"},
            ],
        },
        "preferences": {"time_of_day": ["EVENING"], "min_duration_minutes": 120},
    })

    assert data["name"] == "Sam"
    # touching windows merged into one
    assert data["windows"] == {"4": [{"start": 1080, "end": 1380}]}
    assert data["preferences"]["bands"] == [{"start": 1020, "end": 1320}]
    assert data["preferences"]["min_duration_minutes"] == 120

    resp = client.get(f"/participants/{data['id']}")
    assert resp.status_code == 200
    assert resp.json() == data


def test_create_participant_rejects_invalid_window():
    _clean_db()

    resp = client.post("/participants", json={
        "name": "Sam",
        "windows": {"1": [{"start": "22:00", "end": "26:00"}]},
    })
    assert resp.status_code == 422

    resp = client.post("/participants", json={
        "name": "Sam",
        "windows": {"1": [{"start": 1300, "end": 1500}]},
    })
    assert resp.status_code == 400
    assert resp.json()["detail"]["error"] == "invalid_window"

    db: Session = SessionLocal()
    try:
        assert db.query(ParticipantProfile).count() == 0
    finally:
        db.close()


def test_replace_participant():
    _clean_db()
    created = _create({"name": "Sam", "windows": {"0": [{"start": 540, "end": 600}]}})

    resp = client.put(f"/participants/{created['id']}", json={
        "windows": {"2": [{"start": 600, "end": 720}]},
        "preferences": {"max_duration_minutes": 180},
    })
    assert resp.status_code == 200, resp.text

    data = resp.json()
    assert data["name"] == "Sam"
    assert data["windows"] == {"2": [{"start": 600, "end": 720}]}
    assert data["preferences"]["max_duration_minutes"] == 180

    resp = client.put(f"/participants/{created['id']}", json={
        "windows": {"2": [{"start": 720, "end": 600}]},
    })
    assert resp.status_code == 400
    assert client.get(f"/participants/{created['id']}").json() == data


def test_unknown_participant_is_404():
    _clean_db()
    assert client.get("/participants/999").status_code == 404
    assert client.put("/participants/999", json={"windows": {}}).status_code == 404


def test_suggestions_for_stored_participants():
    _clean_db()
    evening = {"4": [{"start": "17:00", "end": "22:00"}], "5": [{"start": "17:00", "end": "22:00"}]}
    sam = _create({"name": "Sam", "windows": evening, "preferences": {"time_of_day": ["EVENING"]}})
    alex = _create({"name": "Alex", "windows": evening, "preferences": {"time_of_day": ["EVENING"]}})

    resp = client.post("/participants/suggestions", json={
        "user1_id": sam["id"],
        "user2_id": alex["id"],
        "date_range": {"start": "2025-01-06", "end": "2025-01-12"},
        "config": {"min_duration_minutes": 60, "max_suggestions": 5},
    })
    assert resp.status_code == 200, resp.text

    data = resp.json()
    assert data["counts"] == {"ideal": 2, "good": 0, "possible": 0}
    assert [s["date"] for s in data["suggestions"]] == ["2025-01-10", "2025-01-11"]

    resp = client.post("/participants/suggestions", json={
        "user1_id": sam["id"],
        "user2_id": 999,
        "date_range": {"start": "2025-01-06", "end": "2025-01-12"},
    })
    assert resp.status_code == 404
