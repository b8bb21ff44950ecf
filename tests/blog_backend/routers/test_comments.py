"""Tests for comments router."""

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from blog_backend.models.comment import Comment


@pytest.fixture
def post_and_commenter(create_user, create_post):
    author, _ = create_user(email="postauthor@example.com", name="Post Author")
    commenter, token = create_user(email="commenter@example.com", name="Commenter", roles=[])
    post = create_post(author, "Commentable", "Technology")
    return str(post.id), commenter, {"Authorization": f"Bearer {token}"}


def test_authenticated_user_can_comment_on_post(test_client: TestClient, post_and_commenter, test_db_session):
    """Test that any authenticated user, even without a role, can comment."""
    post_id, commenter, headers = post_and_commenter

    response = test_client.post(f"/posts/{post_id}/comments", json={"body": "This is a comment"}, headers=headers)

    assert response.status_code == 201
    data = response.json()
    assert data["body"] == "This is a comment"
    assert data["post_id"] == post_id
    assert data["user"] == {"id": str(commenter.id), "name": "Commenter"}
    assert "created_at" in data
    assert test_db_session.query(Comment).count() == 1


def test_comment_appears_on_post(test_client: TestClient, post_and_commenter):
    """Test that comments are returned oldest first when showing the post."""
    post_id, _, headers = post_and_commenter
    test_client.post(f"/posts/{post_id}/comments", json={"body": "first"}, headers=headers)
    test_client.post(f"/posts/{post_id}/comments", json={"body": "second"}, headers=headers)

    response = test_client.get(f"/posts/{post_id}", headers=headers)

    assert [comment["body"] for comment in response.json()["data"]["comments"]] == ["first", "second"]


def test_unauthenticated_user_cannot_comment(test_client: TestClient, post_and_commenter, test_db_session):
    """Test that commenting without a token is 401 and stores nothing."""
    post_id, _, _ = post_and_commenter

    response = test_client.post(f"/posts/{post_id}/comments", json={"body": "This is a comment"})

    assert response.status_code == 401
    assert test_db_session.query(Comment).count() == 0


def test_comment_on_missing_post(test_client: TestClient, post_and_commenter):
    """Test that commenting on an unknown post is 404."""
    _, _, headers = post_and_commenter

    response = test_client.post(f"/posts/{uuid4()}/comments", json={"body": "hello?"}, headers=headers)

    assert response.status_code == 404


def test_comment_body_is_required(test_client: TestClient, post_and_commenter):
    """Test that blank comments are rejected."""
    post_id, _, headers = post_and_commenter

    response = test_client.post(f"/posts/{post_id}/comments", json={"body": "   "}, headers=headers)

    assert response.status_code == 422
    assert "body" in response.json()["errors"]
