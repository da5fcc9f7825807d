"""Role-check invocation — one awaitable contract for sync and async ``has_role``."""

from __future__ import annotations

import inspect

from route_firewall._types import Roles, UserLike
from route_firewall.exceptions import RoleCheckError

__all__ = ["check_roles"]


async def check_roles(user: UserLike, required: Roles) -> bool:
    """Ask *user* whether it holds *required*, awaiting the answer if needed.

    ``user.has_role`` is called exactly once. A plain boolean is returned
    directly; an awaitable is awaited. Results are never cached, since
    membership can change between requests.

    Args:
        user: The resolved user.
        required: A role or a tuple of roles (any one suffices).

    Returns:
        Whether the user holds at least one of the roles.

    Raises:
        RoleCheckError: If ``has_role`` raises or its awaitable fails.

    Example::

        if await check_roles(user, ("MEMBER", "ADMIN")):
            ...
    """
    try:
        result = user.has_role(required)
        if inspect.isawaitable(result):
            result = await result
    except RoleCheckError:
        raise
    except Exception as exc:
        raise RoleCheckError(access=required, user=user) from exc
    return bool(result)
