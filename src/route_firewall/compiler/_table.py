"""Route table compiler — binds one guard to every non-public route."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from route_firewall._audit import log_route_compiled
from route_firewall._decision import AccessEvaluation
from route_firewall._engine import evaluate_access
from route_firewall._types import Access, UserLike
from route_firewall.config._config import FirewallConfig
from route_firewall.exceptions import RouteConfigError
from route_firewall.policy._base import RouteSpec, load_routes

__all__ = ["RouteGuard", "RouteTable", "compile_routes"]


@dataclass(frozen=True, slots=True)
class RouteGuard:
    """Decision handler bound to a single ``(method, path)``.

    Attributes:
        method: Lowercase HTTP method.
        path: The route's path pattern.
        access: The route's normalized access requirement (never ``PUBLIC``).
    """

    method: str
    path: str
    access: Access

    async def check(
        self, user: UserLike | None, *, config: FirewallConfig | None = None
    ) -> AccessEvaluation:
        """Evaluate this route's requirement for *user*."""
        return await evaluate_access(
            self.access, user, config=config, method=self.method, path=self.path
        )


class RouteTable:
    """Immutable mapping from ``(method, path)`` to a ``RouteGuard``.

    Built once by :func:`compile_routes` and only read afterwards, so it
    is safe to share between concurrent requests.

    Example::

        table = compile_routes([RouteSpec("/admin", access="ADMIN")])
        guard = table.lookup("GET", "/admin")
    """

    __slots__ = ("_guards", "_public")

    def __init__(
        self,
        guards: Mapping[tuple[str, str], RouteGuard],
        public: Iterable[RouteSpec] = (),
    ) -> None:
        self._guards: Mapping[tuple[str, str], RouteGuard] = MappingProxyType(dict(guards))
        self._public: tuple[RouteSpec, ...] = tuple(public)

    def lookup(self, method: str, path: str) -> RouteGuard | None:
        """Return the guard for a route pattern, or ``None`` if unguarded.

        Args:
            method: HTTP method, any case.
            path: The declared path pattern (not a concrete URL).
        """
        return self._guards.get((method.lower(), path))

    def guards(self) -> tuple[RouteGuard, ...]:
        """All guards in declaration order."""
        return tuple(self._guards.values())

    def public_routes(self) -> tuple[RouteSpec, ...]:
        """Routes declared ``PUBLIC`` (no guard installed)."""
        return self._public

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, tuple) or len(key) != 2:
            return False
        method, path = key
        return isinstance(method, str) and (method.lower(), path) in self._guards

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self._guards)

    def __len__(self) -> int:
        return len(self._guards)

    def __repr__(self) -> str:
        return f"RouteTable(guarded={len(self._guards)}, public={len(self._public)})"


def compile_routes(routes: Iterable[RouteSpec | Mapping[str, Any]]) -> RouteTable:
    """Compile declared routes into a :class:`RouteTable`.

    ``PUBLIC`` routes get no guard, so requests to them fall through to
    whatever the host router does. Every other route gets exactly one.

    Args:
        routes: ``RouteSpec`` objects or plain mappings, in declaration order.

    Returns:
        The compiled, read-only route table.

    Raises:
        RouteConfigError: If a declaration is invalid or two non-public
            routes share the same method and path.

    Example::

        table = compile_routes([
            {"path": "/members", "access": ["MEMBER", "ADMIN"]},
            {"path": "/public", "access": "PUBLIC", "method": "post"},
            {"path": "/profile", "access": "AUTHENTICATED"},
        ])
        assert len(table) == 2
    """
    guards: dict[tuple[str, str], RouteGuard] = {}
    public: list[RouteSpec] = []

    for spec in load_routes(routes):
        if spec.is_public:
            public.append(spec)
            log_route_compiled(method=spec.method, path=spec.path, guarded=False)
            continue

        if spec.key in guards:
            raise RouteConfigError(
                f"Duplicate access policy for {spec.method.upper()} {spec.path}"
            )
        guards[spec.key] = RouteGuard(method=spec.method, path=spec.path, access=spec.access)
        log_route_compiled(method=spec.method, path=spec.path, guarded=True)

    return RouteTable(guards, public)
