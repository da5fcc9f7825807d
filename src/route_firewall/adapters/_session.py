"""Session-based user adapter."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from typing import Any

from route_firewall._firewall import RequestInfo
from route_firewall._types import UserLike
from route_firewall.exceptions import UserResolutionError

__all__ = ["session_based"]

UserGetter = Callable[[Any], Awaitable[UserLike | None] | UserLike | None]


def session_based(
    user_getter: UserGetter,
    *,
    session_key: str = "user_id",
) -> Callable[[RequestInfo], Awaitable[UserLike | None]]:
    """Build a user adapter that loads the user named by the session.

    The adapter leaves an already-resolved user alone. Without a session,
    or without ``session[session_key]``, it resolves to no user. Otherwise
    it calls ``user_getter(user_id)``; a falsy result means no user.

    Args:
        user_getter: ``(user_id) -> user | None``, sync or async.
        session_key: Session key holding the user identifier.

    Returns:
        An async adapter suitable for ``Firewall(user_adapter=...)``.

    Raises:
        UserResolutionError: At request time, if ``user_getter`` fails.
            Lookup failures are never treated as "no user".

    Example::

        async def load_user(user_id):
            async with SessionLocal() as db:
                return await db.get(User, int(user_id))

        adapter = session_based(load_user)
    """

    async def adapter(info: RequestInfo) -> UserLike | None:
        if info.user is not None:
            return info.user
        if not info.session:
            return None
        user_id = info.session.get(session_key)
        if not user_id:
            return None

        try:
            user = user_getter(user_id)
            if inspect.isawaitable(user):
                user = await user
        except Exception as exc:
            raise UserResolutionError(
                user_id=user_id, message=f"Could not load user {user_id!r}: {exc}"
            ) from exc

        # The getter may succeed without finding anyone.
        return user or None

    return adapter
