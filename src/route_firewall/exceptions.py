"""Exception hierarchy for route-firewall.

Denials (401/403) are outcomes, not errors, and are never raised.
Everything here signals a misconfiguration or a failing collaborator.
"""

from __future__ import annotations

__all__ = [
    "FirewallError",
    "RoleCheckError",
    "RouteConfigError",
    "UserResolutionError",
]


class FirewallError(Exception):
    """Base exception for all route-firewall errors."""


class RouteConfigError(FirewallError):
    """A route declaration is invalid.

    Raised while building ``RouteSpec`` objects or compiling a route table,
    never at request time.

    Example::

        RouteSpec("/admin", access=[])  # raises: empty role collection
    """


class RoleCheckError(FirewallError):
    """The user's role-membership test raised or its awaitable failed.

    A broken ``has_role`` is a bug in the caller's user model, not a
    policy outcome, so it is never reported as a 403.

    Attributes:
        access: The role requirement that was being checked.
        user: The user whose ``has_role`` failed.
    """

    def __init__(self, *, access: object, user: object, message: str | None = None) -> None:
        self.access = access
        self.user = user
        if message is None:
            message = f"Role check for {access!r} failed on user {user!r}"
        super().__init__(message)


class UserResolutionError(FirewallError):
    """The user adapter could not resolve the current user.

    Distinct from "no user": an adapter that finds nobody returns ``None``,
    an adapter whose lookup fails raises this.

    Attributes:
        user_id: The identifier being looked up, if known.
    """

    def __init__(self, *, user_id: object = None, message: str | None = None) -> None:
        self.user_id = user_id
        if message is None:
            message = f"Could not resolve user {user_id!r}"
        super().__init__(message)
