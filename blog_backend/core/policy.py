"""Authorization policy for posts and comments.

The policy is a pure decision over an ``Actor`` (explicit capability set),
an ``Action`` and an optional owned resource. Rules are evaluated in order
and the first match wins:

- create post: allowed for the "admin" or "author" role
- update/delete post: allowed for "admin", otherwise only for the owner
- create comment: allowed for any authenticated actor
- read post: always allowed
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Protocol
from uuid import UUID

from blog_backend.core.exceptions import AuthenticationError, AuthorizationError
from blog_backend.models.user import ROLE_ADMIN, ROLE_AUTHOR

logger = logging.getLogger(__name__)

REASON_CREATE_POST = "not allowed to create posts"
REASON_OWNER_OR_ADMIN = "only admin or owner"
REASON_AUTHENTICATION = "authentication required"


class Action(str, Enum):
    """Actions the policy decides on."""

    READ_POST = "read_post"
    CREATE_POST = "create_post"
    UPDATE_POST = "update_post"
    DELETE_POST = "delete_post"
    CREATE_COMMENT = "create_comment"


class OwnedResource(Protocol):
    """Anything that records the id of the user who owns it."""

    author_id: UUID


@dataclass(frozen=True)
class Actor:
    """Authenticated identity performing a request."""

    id: UUID
    name: str
    email: str
    roles: frozenset[str] = field(default_factory=frozenset)

    def has_role(self, role: str) -> bool:
        return role in self.roles

    def has_any_role(self, *roles: str) -> bool:
        return not self.roles.isdisjoint(roles)


@dataclass(frozen=True)
class Decision:
    """Outcome of a policy check."""

    allowed: bool
    reason: Optional[str] = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "Decision":
        return cls(allowed=False, reason=reason)


def _can_create_post(actor: Actor) -> Decision:
    if actor.has_any_role(ROLE_ADMIN, ROLE_AUTHOR):
        return Decision.allow()
    return Decision.deny(REASON_CREATE_POST)


def _can_modify_post(actor: Actor, post: OwnedResource) -> Decision:
    if actor.has_role(ROLE_ADMIN):
        return Decision.allow()
    if actor.id == post.author_id:
        return Decision.allow()
    return Decision.deny(REASON_OWNER_OR_ADMIN)


def decide(
    actor: Optional[Actor],
    action: Action,
    resource: Optional[OwnedResource] = None,
) -> Decision:
    """Decide whether ``actor`` may perform ``action`` on ``resource``.

    Args:
        actor: The acting identity, or None for an unauthenticated caller
        action: The action being attempted
        resource: The post being updated or deleted; unused for other actions

    Returns:
        Decision: allow, or deny with a human readable reason

    Raises:
        ValueError: If an update or delete is checked without a resource
    """
    if action is Action.READ_POST:
        return Decision.allow()

    if actor is None:
        return Decision.deny(REASON_AUTHENTICATION)

    if action is Action.CREATE_POST:
        return _can_create_post(actor)

    if action in (Action.UPDATE_POST, Action.DELETE_POST):
        if resource is None:
            raise ValueError(f"{action.value} requires the post being modified")
        return _can_modify_post(actor, resource)

    if action is Action.CREATE_COMMENT:
        return Decision.allow()

    raise ValueError(f"Unknown action: {action!r}")


def authorize(
    actor: Optional[Actor],
    action: Action,
    resource: Optional[OwnedResource] = None,
) -> None:
    """Raise unless ``actor`` may perform ``action`` on ``resource``.

    Raises:
        AuthenticationError: If the action needs an actor and none was given
        AuthorizationError: If the actor is denied by the rules above
    """
    decision = decide(actor, action, resource)
    if decision.allowed:
        return
    logger.warning(f"Denied {action.value} for actor {actor.id if actor else None}: {decision.reason}")
    if actor is None:
        raise AuthenticationError()
    raise AuthorizationError(decision.reason)
