"""Reserved access sentinels and normalization of access declarations."""

from __future__ import annotations

from collections.abc import Iterable

from route_firewall._types import Access
from route_firewall.exceptions import RouteConfigError

__all__ = ["AUTHENTICATED", "PUBLIC", "RESERVED", "normalize_access"]

PUBLIC = "PUBLIC"
AUTHENTICATED = "AUTHENTICATED"

RESERVED: frozenset[str] = frozenset({PUBLIC, AUTHENTICATED})


def normalize_access(access: object) -> Access:
    """Normalize a raw access declaration.

    Strings are kept as-is (a sentinel or a single role). Any other
    iterable becomes a tuple of roles in declaration order. ``None``
    stays ``None`` (no policy declared).

    Raises:
        RouteConfigError: For empty role collections, non-string roles,
            or reserved sentinels used inside a collection.

    Example::

        normalize_access("ADMIN")              # "ADMIN"
        normalize_access(["MEMBER", "ADMIN"])  # ("MEMBER", "ADMIN")
    """
    if access is None:
        return None

    if isinstance(access, str):
        if not access:
            raise RouteConfigError("Role identifiers must be non-empty strings")
        return access

    if not isinstance(access, Iterable):
        raise RouteConfigError(
            f"access must be a string, a collection of strings, or None, got {access!r}"
        )

    roles = tuple(access)
    if not roles:
        raise RouteConfigError("A role collection must contain at least one role")
    for role in roles:
        if not isinstance(role, str) or not role:
            raise RouteConfigError(f"Role identifiers must be non-empty strings, got {role!r}")
        if role in RESERVED:
            raise RouteConfigError(
                f"{role!r} is a reserved access value and cannot appear in a role "
                f"collection; use it on its own"
            )
    return roles
