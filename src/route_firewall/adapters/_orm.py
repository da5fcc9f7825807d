"""SQLAlchemy-backed user lookup for the session adapter."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

import anyio

__all__ = ["orm_user_getter"]


def _is_async_factory(session_factory: object) -> bool:
    """Check for an ``async_sessionmaker`` without hard-importing asyncio extras."""
    try:
        from sqlalchemy.ext.asyncio import async_sessionmaker

        return isinstance(session_factory, async_sessionmaker)
    except ImportError:
        return False


def orm_user_getter(
    session_factory: Any,
    model: type,
    *,
    id_type: Callable[[Any], Any] | None = int,
) -> Callable[[Any], Awaitable[Any]]:
    """Build a ``user_getter`` that loads *model* by primary key.

    Works with both a sync ``sessionmaker`` and an ``async_sessionmaker``.
    Sync lookups run in a worker thread so they do not block the event loop.
    Session-stored identifiers are usually strings, so they are passed
    through *id_type* first (``int`` by default, ``None`` to skip).

    Args:
        session_factory: ``sessionmaker`` or ``async_sessionmaker``.
        model: The mapped user class.
        id_type: Converter applied to the stored identifier.

    Returns:
        An async getter for :func:`~route_firewall.adapters.session_based`.

    Example::

        SessionLocal = async_sessionmaker(engine, expire_on_commit=False)
        adapter = session_based(orm_user_getter(SessionLocal, User))
    """
    use_async = _is_async_factory(session_factory)

    def _load(key: Any) -> Any:
        with session_factory() as session:
            return session.get(model, key)

    async def getter(user_id: Any) -> Any:
        key = id_type(user_id) if id_type is not None else user_id
        if use_async:
            async with session_factory() as session:
                return await session.get(model, key)
        return await anyio.to_thread.run_sync(_load, key)

    return getter
