"""
Tests for the friendship graph and friends endpoints.
"""
import pytest
from app.core.exceptions import BadRequest, NotFound
from app.models.friendship import Friendship
from app.services.friendship_service import FriendshipGraph


def test_add_is_idempotent(db, make_user):
    """Adding the same friend twice leaves exactly one edge."""
    alice = make_user("alice")
    bob = make_user("bob")
    graph = FriendshipGraph(db)

    assert graph.add(alice, bob.id) is True
    assert graph.add(alice, bob.id) is False
    assert graph.add(bob, alice.id) is False

    assert db.query(Friendship).count() == 1


def test_exists_is_symmetric(db, make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    graph = FriendshipGraph(db)
    graph.add(bob, alice.id)

    assert graph.exists(alice, bob)
    assert graph.exists(bob, alice)
    assert [u.id for u in graph.list_friends(alice)] == [bob.id]
    assert [u.id for u in graph.list_friends(bob)] == [alice.id]


def test_remove_absent_edge_is_noop(db, make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    graph = FriendshipGraph(db)

    assert graph.remove(alice, bob.id) is False
    assert db.query(Friendship).count() == 0


def test_remove_works_from_either_side(db, make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    graph = FriendshipGraph(db)
    graph.add(alice, bob.id)

    assert graph.remove(bob, alice.id) is True
    assert not graph.exists(alice, bob)


def test_add_unknown_person_is_bad_request(db, make_user):
    alice = make_user("alice")
    with pytest.raises(BadRequest):
        FriendshipGraph(db).add(alice, 9999)


def test_get_one_requires_friendship(db, make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    graph = FriendshipGraph(db)

    with pytest.raises(NotFound):
        graph.get_one(alice, bob.id)
    with pytest.raises(NotFound):
        graph.get_one(alice, 9999)

    graph.add(alice, bob.id)
    assert graph.get_one(alice, bob.id).id == bob.id


def test_friends_endpoints(client, signup, bearer):
    """Test add twice, list, get one and remove through the API."""
    alice = signup("alice")
    bob = signup("bob")
    headers = bearer(alice["token"])
    url = f"/api/v1/users/{alice['id']}/friends"

    assert client.post(url, json={"person_id": bob["id"]}, headers=headers).status_code == 201
    assert client.post(url, json={"person_id": bob["id"]}, headers=headers).status_code == 201

    response = client.get(url, headers=headers)
    assert response.status_code == 200
    assert len(response.json()) == 1
    assert response.json()[0]["id"] == bob["id"]
    assert response.json()[0]["token"] is None

    response = client.get(f"{url}/{bob['id']}", headers=headers)
    assert response.status_code == 200
    assert response.json()["username"] == "bob"

    assert client.delete(f"{url}/{bob['id']}", headers=headers).status_code == 204
    assert client.delete(f"{url}/{bob['id']}", headers=headers).status_code == 204
    assert client.get(f"{url}/{bob['id']}", headers=headers).status_code == 404
    assert client.get(url, headers=headers).json() == []


def test_add_unknown_friend_endpoint(client, signup, bearer):
    alice = signup("alice")
    response = client.post(
        f"/api/v1/users/{alice['id']}/friends",
        json={"person_id": 9999},
        headers=bearer(alice["token"])
    )
    assert response.status_code == 400


def test_other_users_friends_are_unauthorized(client, signup, bearer):
    """Test reading someone else's friends list is unauthorized, not not-found."""
    alice = signup("alice")
    bob = signup("bob")
    headers = bearer(alice["token"])

    assert client.get(f"/api/v1/users/{bob['id']}/friends", headers=headers).status_code == 401
    assert client.get(f"/api/v1/users/{bob['id']}/friends/{alice['id']}", headers=headers).status_code == 401
    assert client.get("/api/v1/users/9999/friends", headers=headers).status_code == 401
    assert client.get(f"/api/v1/users/{alice['id']}/friends", headers=bearer("XYZ")).status_code == 401


def test_remove_unknown_person_is_not_found(db, make_user):
    alice = make_user("alice")
    with pytest.raises(NotFound):
        FriendshipGraph(db).remove(alice, 9999)


def test_remove_unknown_friend_endpoint(client, signup, bearer):
    alice = signup("alice")
    response = client.delete(
        f"/api/v1/users/{alice['id']}/friends/9999",
        headers=bearer(alice["token"])
    )
    assert response.status_code == 404
