"""Admin authentication and moderation endpoints."""

from __future__ import annotations

from fastapi import status
from jose import jwt

from blogpress.core.settings import settings
from blogpress.schemas.comment import CommentCreate


def test_admin_token_exchange(client) -> None:
    bad = client.post("/api/v1/auth/admin/token", json={"username": "admin", "password": "wrong"})
    assert bad.status_code == status.HTTP_401_UNAUTHORIZED

    good = client.post("/api/v1/auth/admin/token", json={"username": "admin", "password": "admin123"})
    assert good.status_code == status.HTTP_200_OK
    assert good.json()["token_type"] == "bearer"


def test_admin_routes_require_token(client, pending_post) -> None:
    assert client.get("/api/v1/admin/blogs").status_code == status.HTTP_401_UNAUTHORIZED
    response = client.get(
        "/api/v1/admin/blogs", headers={"Authorization": "Bearer not-a-token"}
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_admin_approve_and_reject(client, admin_headers, make_post, notifier) -> None:
    first = make_post("First")
    second = make_post("Second")

    approved = client.post(f"/api/v1/admin/blogs/{first.id}/approve", headers=admin_headers)
    assert approved.status_code == status.HTTP_200_OK
    assert approved.json()["status"] == "PUBLISHED"
    assert approved.json()["approved_by_admin_id"] == "admin"

    again = client.post(f"/api/v1/admin/blogs/{first.id}/approve", headers=admin_headers)
    assert again.status_code == status.HTTP_400_BAD_REQUEST
    assert again.json()["current_status"] == "PUBLISHED"
    assert again.json()["required_status"] == "PENDING"

    rejected = client.post(
        f"/api/v1/admin/blogs/{second.id}/reject",
        json={"reason": "Needs sources"},
        headers=admin_headers,
    )
    assert rejected.json()["status"] == "REJECTED"
    assert rejected.json()["rejection_reason"] == "Needs sources"
    assert "Update on your blog submission" in notifier.subjects("a@x.com")


def test_admin_edit_and_delete(client, admin_headers, published_post) -> None:
    url = f"/api/v1/admin/blogs/{published_post.id}"

    edited = client.patch(url, json={"title": "Renamed"}, headers=admin_headers)
    assert edited.json()["title"] == "Renamed"
    assert edited.json()["slug"] == published_post.slug

    assert client.delete(url, headers=admin_headers).status_code == status.HTTP_204_NO_CONTENT
    assert client.get(url, headers=admin_headers).status_code == status.HTTP_404_NOT_FOUND


def test_admin_list_rejects_unknown_status(client, admin_headers) -> None:
    response = client.get("/api/v1/admin/blogs", params={"status": "LIVE"}, headers=admin_headers)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "PENDING" in response.json()["message"]


def test_admin_comment_moderation(client, admin_headers, published_post, comments) -> None:
    comment = comments.add(published_post.id, CommentCreate(name="R", comment_text="Hi"), "1.2.3.4")

    hidden = client.post(f"/api/v1/admin/comments/{comment.id}/hide", headers=admin_headers)
    assert hidden.status_code == status.HTTP_200_OK
    assert client.get(f"/api/v1/blogs/{published_post.id}/comments").json()["items"] == []

    deleted = client.delete(f"/api/v1/admin/comments/{comment.id}", headers=admin_headers)
    assert deleted.status_code == status.HTTP_204_NO_CONTENT

    pending = client.get("/api/v1/admin/comments/pending", headers=admin_headers).json()
    assert pending["total_elements"] == 0


def test_admin_subscriber_listing(client, admin_headers, subscriptions) -> None:
    subscriptions.start("r@x.com", "R")

    listing = client.get("/api/v1/admin/subscribers", headers=admin_headers).json()

    assert [item["email"] for item in listing["items"]] == ["r@x.com"]


def test_token_for_other_role_is_refused(client) -> None:
    forged = jwt.encode({"sub": "someone", "role": "reader"}, settings.secret_key, algorithm="HS256")
    response = client.get("/api/v1/admin/blogs", headers={"Authorization": f"Bearer {forged}"})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_admin_patch_with_null_body_keeps_content(client, admin_headers, published_post) -> None:
    url = f"/api/v1/admin/blogs/{published_post.id}"

    edited = client.patch(url, json={"content_html": None}, headers=admin_headers)

    assert edited.status_code == status.HTTP_200_OK
    assert edited.json()["content_html"] == published_post.content_html
    assert edited.json()["content_html"]
