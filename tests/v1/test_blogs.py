"""Public blog read endpoints."""

from __future__ import annotations

from fastapi import status


def test_health_and_root(client) -> None:
    assert client.get("/health").json() == {"status": "ok"}
    body = client.get("/").json()
    assert body["name"] == "BlogPress"
    assert body["docs"] == "/docs"



def test_public_listing_and_detail(client, published_post, pending_post) -> None:
    listing = client.get("/api/v1/blogs").json()
    assert listing["total_elements"] == 1
    assert listing["first"] is True and listing["last"] is True
    assert listing["items"][0]["slug"] == published_post.slug
    assert "author_email" not in listing["items"][0]

    detail = client.get(f"/api/v1/blogs/{published_post.slug}")
    assert detail.status_code == status.HTTP_200_OK
    assert detail.json()["views_count"] == 1
    assert client.get(f"/api/v1/blogs/{published_post.slug}").json()["views_count"] == 2

    assert client.get(f"/api/v1/blogs/{pending_post.slug}").status_code == status.HTTP_404_NOT_FOUND


def test_unknown_slug_maps_to_404(client) -> None:
    response = client.get("/api/v1/blogs/nope")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    body = response.json()
    assert body["kind"] == "not_found"
    assert body["status"] == 404
    assert body["message"] == "Blog not found with slug: 'nope'"


def test_archive_endpoint(client, published_post) -> None:
    assert client.get("/api/v1/blogs/archive").json() == [
        {"year": 2026, "months": [{"month": 3, "count": 1}]}
    ]
