"""End-to-end scenario across hasher, sanitizer, validator and stores."""

import pytest

from blog_core.exceptions import ResourceNotFound
from blog_core.sanitize import RecordSanitizer
from blog_core.schemas import Post, User
from blog_core.validation import FieldValidator, ValidationMode


def test_alice_lifecycle(test_db, users, posts, hasher, clock):
    sanitizer = RecordSanitizer(clock=clock)
    validator = FieldValidator()

    # Register
    alice = User(nickname="alice", email="a@x.com", password="secret")
    sanitizer.sanitize_user_fields(alice)
    validator.validate_user(alice, ValidationMode.CREATE)
    alice = users.create(alice)

    stored_hash = test_db.execute(
        "SELECT password FROM users WHERE id = ?", (alice.id,)
    ).fetchone()["password"]
    assert stored_hash != "secret"
    assert hasher.verify(stored_hash, "secret") is True

    # Create post
    draft = Post(title="Hi", content="World", author_id=alice.id)
    sanitizer.sanitize_post_fields(draft)
    validator.validate_post(draft)
    created = posts.create(draft)
    assert created.author.nickname == "alice"

    # Update by alice
    edit = Post(title="Hi", content="World2", author_id=alice.id)
    sanitizer.sanitize_post_fields(edit)
    validator.validate_post(edit)
    posts.update(created.id, edit)

    found = posts.get_by_id(created.id)
    assert found.content == "World2"
    assert found.created_at == created.created_at
    assert found.updated_at > created.updated_at

    # Delete by someone else
    with pytest.raises(ResourceNotFound):
        posts.delete(created.id, alice.id + 1)

    # Delete by alice
    assert posts.delete(created.id, alice.id) == 1


def test_api_lifecycle(client, register):
    """Same story through the HTTP surface."""
    from conftest import bearer

    alice = register("alice", "a@x.com", "secret")

    created = client.post(
        "/api/v1/posts", json={"title": "Hi", "content": "World"}, headers=bearer(alice["id"])
    ).get_json()
    assert created["author"]["nickname"] == "alice"

    response = client.put(
        f"/api/v1/posts/{created['id']}",
        json={"title": "Hi", "content": "World2"},
        headers=bearer(alice["id"])
    )
    assert response.status_code == 200

    found = client.get(f"/api/v1/posts/{created['id']}").get_json()
    assert found["content"] == "World2"
    assert found["created_at"] == created["created_at"]

    assert client.delete(
        f"/api/v1/posts/{created['id']}", headers=bearer(alice["id"] + 1)
    ).status_code == 404
    assert client.delete(
        f"/api/v1/posts/{created['id']}", headers=bearer(alice["id"])
    ).status_code == 204
