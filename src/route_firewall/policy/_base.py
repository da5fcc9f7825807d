"""RouteSpec dataclass — one declared route and its access policy."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from route_firewall._types import Access
from route_firewall.exceptions import RouteConfigError
from route_firewall.policy._access import AUTHENTICATED, PUBLIC, normalize_access

__all__ = ["DEFAULT_METHOD", "RouteSpec", "load_routes"]

DEFAULT_METHOD = "get"

_ALLOWED_KEYS = frozenset({"path", "method", "access"})


@dataclass(frozen=True, slots=True)
class RouteSpec:
    """A declared route: path pattern, HTTP method and required access.

    ``method`` is stored lowercase and defaults to ``"get"``. ``access``
    is normalized: role collections become tuples, ``None`` means no
    policy was declared (treated as unsatisfiable by any user).

    Attributes:
        path: A path pattern understood by the host framework's router.
        method: Lowercase HTTP method.
        access: ``PUBLIC``, ``AUTHENTICATED``, a role, a tuple of roles,
            or ``None``.

    Example::

        RouteSpec("/members", access=["MEMBER", "ADMIN"])
        RouteSpec("/login", method="POST", access=PUBLIC)
    """

    path: str
    method: str = DEFAULT_METHOD
    access: Access = None

    def __post_init__(self) -> None:
        if not isinstance(self.path, str) or not self.path:
            raise RouteConfigError(f"Route path must be a non-empty string, got {self.path!r}")
        if not isinstance(self.method, str) or not self.method:
            raise RouteConfigError(f"Route method must be a non-empty string, got {self.method!r}")
        # Frozen dataclass: normalize in place via object.__setattr__
        object.__setattr__(self, "method", self.method.lower())
        object.__setattr__(self, "access", normalize_access(self.access))

    @property
    def is_public(self) -> bool:
        """True when the route needs no authentication at all."""
        return self.access == PUBLIC

    @property
    def requires_roles(self) -> bool:
        """True when the route is gated on one or more concrete roles."""
        return self.access is not None and self.access not in (PUBLIC, AUTHENTICATED)

    @property
    def key(self) -> tuple[str, str]:
        """The ``(method, path)`` pair identifying this route."""
        return (self.method, self.path)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RouteSpec:
        """Build a route spec from a plain mapping with ``path``, ``method``, ``access``.

        Example::

            RouteSpec.from_dict({"path": "/public", "access": "PUBLIC", "method": "post"})
        """
        unknown = set(data) - _ALLOWED_KEYS
        if unknown:
            raise RouteConfigError(f"Unknown route keys: {sorted(unknown)!r}")
        if "path" not in data:
            raise RouteConfigError(f"Route declaration is missing 'path': {dict(data)!r}")
        return cls(
            path=data["path"],
            method=data.get("method") or DEFAULT_METHOD,
            access=data.get("access"),
        )


def load_routes(routes: Iterable[RouteSpec | Mapping[str, Any]]) -> tuple[RouteSpec, ...]:
    """Coerce a route list into ``RouteSpec`` objects, keeping declaration order."""
    loaded: list[RouteSpec] = []
    for route in routes:
        if isinstance(route, RouteSpec):
            loaded.append(route)
        elif isinstance(route, Mapping):
            loaded.append(RouteSpec.from_dict(route))
        else:
            raise RouteConfigError(
                f"Routes must be RouteSpec instances or mappings, got {type(route).__name__}"
            )
    return tuple(loaded)
