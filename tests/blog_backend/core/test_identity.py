"""Tests for the identity store and seeding."""

import pytest

from blog_backend.config import settings
from blog_backend.core.exceptions import ConflictError
from blog_backend.core.identity import (
    create_user,
    ensure_roles,
    get_user_by_email,
    resolve_role,
    to_actor,
)
from blog_backend.core.security import verify_password
from blog_backend.models.user import Role
from blog_backend.seed import seed_roles_and_admin


@pytest.mark.parametrize(
    "requested, expected",
    [(None, "author"), ("author", "author"), ("admin", "admin"), (" Admin ", "admin"), ("superuser", "author")],
)
def test_resolve_role(requested, expected):
    """Test that unknown or missing roles fall back to author."""
    assert resolve_role(requested) == expected


def test_create_user_hashes_password_and_assigns_roles(test_db_session):
    """Test that the stored user has a hash and the requested roles."""
    user = create_user(
        test_db_session,
        name="Writer",
        email="writer@example.com",
        password="secret123",
        roles=["author"],
    )

    assert user.role_names == frozenset({"author"})
    assert user.password_hash != "secret123"
    assert verify_password("secret123", user.password_hash)
    assert get_user_by_email(test_db_session, "writer@example.com").id == user.id


def test_create_user_without_roles(test_db_session):
    """Test that a user may hold no role at all."""
    user = create_user(test_db_session, name="Reader", email="reader@example.com", password="secret123", roles=[])

    assert user.role_names == frozenset()


def test_duplicate_email_is_a_conflict(test_db_session):
    """Test that emails are unique."""
    create_user(test_db_session, name="One", email="dup@example.com", password="secret123")

    with pytest.raises(ConflictError) as exc_info:
        create_user(test_db_session, name="Two", email="dup@example.com", password="secret123")

    assert exc_info.value.status_code == 422
    assert "email" in exc_info.value.errors


def test_ensure_roles_is_idempotent(test_db_session):
    """Test that the role catalogue is only created once."""
    ensure_roles(test_db_session)
    ensure_roles(test_db_session)
    test_db_session.commit()

    names = sorted(role.name for role in test_db_session.query(Role).all())
    assert names == ["admin", "author"]


def test_to_actor_copies_identity_and_roles(test_db_session):
    """Test the policy-facing view of a user."""
    user = create_user(test_db_session, name="Ada", email="ada@example.com", password="secret123", roles=["admin"])

    actor = to_actor(user)

    assert actor.id == user.id
    assert actor.name == "Ada"
    assert actor.roles == frozenset({"admin"})


def test_seed_creates_admin_once(test_db_session):
    """Test that seeding twice yields a single admin user."""
    first = seed_roles_and_admin(test_db_session)
    second = seed_roles_and_admin(test_db_session)

    assert first.id == second.id
    assert first.email == settings.admin_email
    assert "admin" in second.role_names


def test_seed_grants_admin_to_existing_user(test_db_session):
    """Test that an existing account with the admin email is promoted."""
    create_user(test_db_session, name="Early", email=settings.admin_email, password="secret123", roles=["author"])

    admin = seed_roles_and_admin(test_db_session)

    assert admin.role_names == frozenset({"admin", "author"})
