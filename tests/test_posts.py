"""Post endpoint tests."""

from datetime import UTC, datetime, timedelta

from src.config import Settings, get_settings
from src.models.post import Post
from src.services.security import TokenIssuer


def create_post(client, headers, title="Title", body="Body"):
    response = client.post("/api/posts", headers=headers, json={"title": title, "body": body})
    assert response.status_code == 200
    return response.json()


def test_create_post(client, auth_headers):
    """Test creating a post."""
    response = client.post(
        "/api/posts", headers=auth_headers, json={"title": "Hello", "body": "First post"}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Hello"
    assert data["body"] == "First post"
    assert data["owner_id"] == auth_headers.user_id
    assert data["created_at"] is not None


def test_create_post_validation(client, db, auth_headers):
    """Test post validation reports 400 with one message per field."""
    response = client.post("/api/posts", headers=auth_headers, json={"title": ""})
    assert response.status_code == 400
    fields = sorted(error["field"] for error in response.json()["errors"])
    assert fields == ["body", "title"]
    assert db.query(Post).count() == 0


def test_create_post_requires_token(client, db):
    """Test the handler never runs without a token."""
    response = client.post("/api/posts", json={"title": "t", "body": "b"})
    assert response.status_code == 401
    assert db.query(Post).count() == 0


def test_create_post_rejects_foreign_secret(client, db, auth_headers):
    """Test a token signed with another secret is rejected before the handler runs."""
    forged = TokenIssuer(Settings(jwt_secret="someone-elses-secret")).issue(auth_headers.user_id)
    response = client.post(
        "/api/posts", headers={"x-auth-token": forged}, json={"title": "t", "body": "b"}
    )
    assert response.status_code == 401
    assert response.json()["errors"][0]["msg"] == "Token is not valid"
    assert db.query(Post).count() == 0


def test_create_post_rejects_expired_token(client, db, auth_headers):
    """Test an expired token is rejected."""
    issued_at = datetime.now(UTC) - timedelta(hours=11)
    expired = TokenIssuer(get_settings(), clock=lambda: issued_at).issue(auth_headers.user_id)
    response = client.post(
        "/api/posts", headers={"x-auth-token": expired}, json={"title": "t", "body": "b"}
    )
    assert response.status_code == 401
    assert db.query(Post).count() == 0


def test_auth_checked_before_validation(client):
    """Test a missing token wins over an invalid body."""
    response = client.post("/api/posts", json={})
    assert response.status_code == 401


def test_get_posts_newest_first(client, auth_headers, other_auth_headers):
    """Test listing returns every user's posts, newest first."""
    create_post(client, auth_headers, title="first")
    create_post(client, other_auth_headers, title="second")
    create_post(client, auth_headers, title="third")

    response = client.get("/api/posts", headers=auth_headers)
    assert response.status_code == 200
    assert [post["title"] for post in response.json()] == ["third", "second", "first"]


def test_get_posts_requires_token(client):
    """Test listing requires a token."""
    response = client.get("/api/posts")
    assert response.status_code == 401


def test_get_post(client, auth_headers, other_auth_headers):
    """Test any authenticated user can read a post."""
    post = create_post(client, auth_headers)

    response = client.get(f"/api/posts/{post['id']}", headers=other_auth_headers)
    assert response.status_code == 200
    assert response.json() == post


def test_get_post_not_found(client, auth_headers):
    """Test reading a missing post."""
    response = client.get("/api/posts/9999", headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["errors"][0]["msg"] == "Post not found"


def test_update_post(client, auth_headers):
    """Test updating both fields."""
    post = create_post(client, auth_headers)

    response = client.put(
        f"/api/posts/{post['id']}",
        headers=auth_headers,
        json={"title": "New title", "body": "New body"},
    )
    assert response.status_code == 200
    assert response.json()["title"] == "New title"
    assert response.json()["body"] == "New body"


def test_update_post_title_only(client, auth_headers):
    """Test a partial update leaves the body alone."""
    post = create_post(client, auth_headers, title="Old", body="Keep me")

    response = client.put(f"/api/posts/{post['id']}", headers=auth_headers, json={"title": "X"})
    assert response.status_code == 200
    assert response.json()["title"] == "X"
    assert response.json()["body"] == "Keep me"


def test_update_post_empty_payload(client, auth_headers):
    """Test empty and blank updates keep both fields."""
    post = create_post(client, auth_headers, title="Old", body="Keep me")

    for payload in ({}, {"title": "", "body": ""}, {"title": None}):
        response = client.put(f"/api/posts/{post['id']}", headers=auth_headers, json=payload)
        assert response.status_code == 200
        assert response.json()["title"] == "Old"
        assert response.json()["body"] == "Keep me"


def test_update_post_not_owner(client, auth_headers, other_auth_headers):
    """Test only the owner can update a post."""
    post = create_post(client, auth_headers, title="Mine", body="Mine too")

    response = client.put(
        f"/api/posts/{post['id']}", headers=other_auth_headers, json={"title": "Stolen"}
    )
    assert response.status_code == 403
    assert response.json()["errors"][0]["msg"] == "User not authorized"

    current = client.get(f"/api/posts/{post['id']}", headers=auth_headers).json()
    assert current["title"] == "Mine"
    assert current["body"] == "Mine too"


def test_update_post_not_found(client, auth_headers):
    """Test updating a missing post."""
    response = client.put("/api/posts/9999", headers=auth_headers, json={"title": "X"})
    assert response.status_code == 404


def test_delete_post(client, auth_headers):
    """Test deleting a post."""
    post = create_post(client, auth_headers)

    response = client.delete(f"/api/posts/{post['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"msg": "Post removed"}

    response = client.get(f"/api/posts/{post['id']}", headers=auth_headers)
    assert response.status_code == 404


def test_delete_post_not_owner(client, auth_headers, other_auth_headers):
    """Test only the owner can delete a post."""
    post = create_post(client, auth_headers)

    response = client.delete(f"/api/posts/{post['id']}", headers=other_auth_headers)
    assert response.status_code == 403

    response = client.get(f"/api/posts/{post['id']}", headers=auth_headers)
    assert response.status_code == 200


def test_delete_post_not_found(client, auth_headers):
    """Test deleting a missing post."""
    response = client.delete("/api/posts/9999", headers=auth_headers)
    assert response.status_code == 404


def test_register_post_and_foreign_delete(client):
    """Register, post, and have another user fail to delete the post."""
    response = client.post(
        "/api/users", json={"name": "A", "email": "a@x.com", "password": "secret1"}
    )
    assert response.status_code == 200
    token_a = response.json()["token"]
    user_a = client.get("/api/auth", headers={"x-auth-token": token_a}).json()

    response = client.post(
        "/api/posts", headers={"x-auth-token": token_a}, json={"title": "t", "body": "b"}
    )
    assert response.status_code == 200
    post = response.json()
    assert post["owner_id"] == user_a["id"]

    response = client.post(
        "/api/users", json={"name": "B", "email": "b@x.com", "password": "secret2"}
    )
    token_b = response.json()["token"]

    response = client.delete(f"/api/posts/{post['id']}", headers={"x-auth-token": token_b})
    assert response.status_code == 403

    response = client.get(f"/api/posts/{post['id']}", headers={"x-auth-token": token_b})
    assert response.status_code == 200
    assert response.json()["title"] == "t"


def test_unresolvable_post_ids_not_found(client, db, auth_headers):
    """Test non-numeric and out-of-range ids are reported as missing posts."""
    create_post(client, auth_headers)

    for post_id in ("abc", "99999999999999999999", "0", "-1"):
        url = f"/api/posts/{post_id}"
        assert client.get(url, headers=auth_headers).status_code == 404
        assert client.put(url, headers=auth_headers, json={"title": "X"}).status_code == 404
        assert client.delete(url, headers=auth_headers).status_code == 404

    assert db.query(Post).count() == 1
