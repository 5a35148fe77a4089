"""
Tests for record composition: companions, ownership and soft delete.
"""
from datetime import datetime
from decimal import Decimal
import pytest
from app.core.exceptions import NotFound, Unauthorized
from app.models.record import Mood, Record, RecordCompanion
from app.schemas.record import RecordRequest
from app.services.record_service import RecordCompositionEngine


def record_body(companion_ids=None, **overrides):
    body = {
        "title": "Dinner",
        "note": "Ramen downtown",
        "date": 1546300800000,  # epoch milliseconds
        "mood": "happy",
        "amount": "24.50",
        "currency": "EUR",
    }
    if companion_ids is not None:
        body["companion_ids"] = companion_ids
    body.update(overrides)
    return body


def request(companion_ids=None, **overrides):
    return RecordRequest(**record_body(companion_ids, **overrides))


def test_create_drops_unknown_companions(db, make_user):
    """Unknown companion ids are silently dropped."""
    alice = make_user("alice")
    bob = make_user("bob")

    intact = RecordCompositionEngine(db).create(alice, request([bob.id, 9999]))

    assert [c.id for c in intact.companions] == [bob.id]
    assert intact.mood == Mood.HAPPY
    assert intact.amount == Decimal("24.50")
    assert intact.date == datetime(2019, 1, 1)
    assert db.query(Record).one().user_id == alice.id


@pytest.mark.parametrize("before, after", [
    (["bob", "carol"], ["carol"]),
    ([], ["bob"]),
    (["bob"], []),
    (["bob"], ["bob", "carol"]),
])
def test_update_replaces_companions(db, make_user, before, after):
    """Updating yields exactly the newly resolved set, whatever was there before."""
    alice = make_user("alice")
    users = {"bob": make_user("bob"), "carol": make_user("carol")}
    engine = RecordCompositionEngine(db)

    created = engine.create(alice, request([users[n].id for n in before]))
    engine.update(alice, created.id, request([users[n].id for n in after] + [9999]))

    fetched = engine.get(alice, created.id)
    assert sorted(c.id for c in fetched.companions) == sorted(users[n].id for n in after)
    assert db.query(RecordCompanion).count() == len(after)


def test_update_without_companion_ids_clears_them(db, make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    engine = RecordCompositionEngine(db)
    created = engine.create(alice, request([bob.id]))

    updated = engine.update(alice, created.id, request(title="Lunch"))

    assert updated.title == "Lunch"
    assert updated.companions == []


def test_other_users_record_is_unauthorized(db, make_user):
    alice = make_user("alice")
    mallory = make_user("mallory")
    engine = RecordCompositionEngine(db)
    created = engine.create(alice, request())

    with pytest.raises(Unauthorized):
        engine.get(mallory, created.id)
    with pytest.raises(Unauthorized):
        engine.update(mallory, created.id, request())
    with pytest.raises(Unauthorized):
        engine.delete(mallory, created.id)
    with pytest.raises(Unauthorized):
        engine.get(mallory, 9999)

    assert engine.get(alice, created.id).title == "Dinner"


def test_soft_deleted_record_is_invisible(db, make_user):
    alice = make_user("alice")
    engine = RecordCompositionEngine(db)
    created = engine.create(alice, request())

    engine.delete(alice, created.id)

    assert db.get(Record, created.id).is_deleted
    with pytest.raises(NotFound):
        engine.get(alice, created.id)
    with pytest.raises(NotFound):
        engine.update(alice, created.id, request())
    with pytest.raises(NotFound):
        engine.delete(alice, created.id)
    assert engine.list_for(alice) == []


def test_create_or_update_dispatches(db, make_user):
    alice = make_user("alice")
    engine = RecordCompositionEngine(db)

    created = engine.create_or_update(alice, None, request())
    record = db.get(Record, created.id)
    updated = engine.create_or_update(alice, record, request(title="Brunch"))

    assert updated.id == created.id
    assert updated.title == "Brunch"


def test_records_endpoints(client, signup, bearer):
    """Test create, get, list, update and delete through the API."""
    alice = signup("alice")
    bob = signup("bob")
    headers = bearer(alice["token"])

    response = client.post("/api/v1/records", json=record_body([bob["id"], 9999]), headers=headers)
    assert response.status_code == 201
    record = response.json()
    assert [c["id"] for c in record["companions"]] == [bob["id"]]
    assert record["companions"][0]["token"] is None
    assert record["currency"] == "EUR"
    assert record["amount"] == 24.5

    response = client.get(f"/api/v1/records/{record['id']}", headers=headers)
    assert response.status_code == 200
    assert response.json()["title"] == "Dinner"

    response = client.put(f"/api/v1/records/{record['id']}", json=record_body(title="Lunch"), headers=headers)
    assert response.status_code == 200
    assert response.json()["companions"] == []

    assert len(client.get("/api/v1/records", headers=headers).json()) == 1

    assert client.delete(f"/api/v1/records/{record['id']}", headers=headers).status_code == 204
    assert client.get(f"/api/v1/records/{record['id']}", headers=headers).status_code == 404
    assert client.get("/api/v1/records", headers=headers).json() == []


def test_records_list_newest_first(client, signup, bearer):
    alice = signup("alice")
    headers = bearer(alice["token"])
    client.post("/api/v1/records", json=record_body(title="old", date="2019-01-01T10:00:00"), headers=headers)
    client.post("/api/v1/records", json=record_body(title="new", date="2019-02-01T10:00:00"), headers=headers)

    titles = [r["title"] for r in client.get("/api/v1/records", headers=headers).json()]
    assert titles == ["new", "old"]


def test_other_users_record_endpoint_is_unauthorized(client, signup, bearer):
    alice = signup("alice")
    mallory = signup("mallory")
    record = client.post("/api/v1/records", json=record_body(), headers=bearer(alice["token"])).json()
    headers = bearer(mallory["token"])

    assert client.get(f"/api/v1/records/{record['id']}", headers=headers).status_code == 401
    assert client.put(f"/api/v1/records/{record['id']}", json=record_body(), headers=headers).status_code == 401
    assert client.delete(f"/api/v1/records/{record['id']}", headers=headers).status_code == 401
    assert client.get("/api/v1/records/9999", headers=headers).status_code == 401


def test_invalid_record_body_is_bad_request(client, signup, bearer):
    alice = signup("alice")
    headers = bearer(alice["token"])

    assert client.post("/api/v1/records", json=record_body(mood="ecstatic"), headers=headers).status_code == 400
    assert client.post("/api/v1/records", json=record_body(currency="EURO"), headers=headers).status_code == 400
    assert client.post("/api/v1/records", json={"title": "x"}, headers=headers).status_code == 400


def test_records_require_token(client):
    assert client.get("/api/v1/records").status_code == 401
    assert client.post("/api/v1/records", json=record_body()).status_code == 401
