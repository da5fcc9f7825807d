"""Firewall — compiled routes, user adapter and denial callbacks in one unit.

Framework integrations wrap a :class:`Firewall`; they supply the request
matching and response plumbing, the firewall supplies the decisions.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Iterable, Mapping, MutableMapping
from dataclasses import dataclass
from typing import Any

from route_firewall._decision import AccessEvaluation, Decision
from route_firewall._types import UserLike
from route_firewall.compiler._table import RouteGuard, RouteTable, compile_routes
from route_firewall.config._config import FirewallConfig, get_global_config
from route_firewall.exceptions import FirewallError, UserResolutionError
from route_firewall.policy._access import PUBLIC
from route_firewall.policy._base import RouteSpec

__all__ = ["DenialCallback", "Firewall", "RequestInfo", "UserAdapter"]


@dataclass(frozen=True, slots=True)
class RequestInfo:
    """Framework-neutral view of a request, handed to user adapters.

    Attributes:
        method: Lowercase HTTP method.
        path: The request path.
        full_path: Path plus query string, as the client requested it.
        session: The request's session mapping, or ``None`` if the app
            has no session support.
        user: A user some earlier layer already resolved, or ``None``.
        request: The underlying framework request object.
    """

    method: str
    path: str
    full_path: str
    session: MutableMapping[str, Any] | None = None
    user: UserLike | None = None
    request: Any = None


UserAdapter = Callable[[RequestInfo], Awaitable[UserLike | None] | UserLike | None]
DenialCallback = Callable[[Any], Any]


class Firewall:
    """Route firewall: decides allow / 401 / 403 for each request.

    Compiles *routes* once. At request time an integration resolves the
    user through *user_adapter*, checks the matched route, and on a
    denial invokes exactly one of the callbacks, which must produce the
    response.

    Args:
        routes: ``RouteSpec`` objects or mappings with ``path``,
            ``method`` (default ``GET``) and ``access``.
        user_adapter: ``(RequestInfo) -> user | None``, sync or async.
        on_unauthenticated: ``(request) -> response``, sync or async.
            Called when a guarded route is hit without a user.
        on_unauthorized: ``(request) -> response``, sync or async.
            Called when the user lacks the required access.
        config: Optional config. Defaults to the global config at
            construction time.

    Example::

        firewall = Firewall(
            [
                {"path": "/members", "access": ["MEMBER", "ADMIN"]},
                {"path": "/public", "access": "PUBLIC", "method": "POST"},
                {"path": "/profile", "access": "AUTHENTICATED"},
            ],
            session_based(load_user),
            on_unauthenticated=lambda request: RedirectResponse("/login"),
            on_unauthorized=lambda request: PlainTextResponse("Forbidden", 403),
        )
    """

    __slots__ = ("_config", "_on_unauthenticated", "_on_unauthorized", "_table", "_user_adapter")

    def __init__(
        self,
        routes: Iterable[RouteSpec | Mapping[str, Any]],
        user_adapter: UserAdapter,
        on_unauthenticated: DenialCallback,
        on_unauthorized: DenialCallback,
        *,
        config: FirewallConfig | None = None,
    ) -> None:
        self._config = config if config is not None else get_global_config()
        self._table = compile_routes(routes)
        self._user_adapter = user_adapter
        self._on_unauthenticated = on_unauthenticated
        self._on_unauthorized = on_unauthorized

    @property
    def table(self) -> RouteTable:
        return self._table

    @property
    def config(self) -> FirewallConfig:
        return self._config

    async def resolve_user(self, info: RequestInfo) -> UserLike | None:
        """Run the user adapter for a request.

        Raises:
            UserResolutionError: If the adapter fails. Errors that are
                already ``FirewallError`` instances propagate unchanged.
        """
        try:
            result = self._user_adapter(info)
            if inspect.isawaitable(result):
                result = await result
        except FirewallError:
            raise
        except Exception as exc:
            raise UserResolutionError(message=f"User adapter failed: {exc}") from exc
        return result

    async def check(self, method: str, path: str, user: UserLike | None) -> AccessEvaluation:
        """Evaluate a declared route pattern for *user*.

        Unguarded routes are allowed; the host router handles them.

        Raises:
            RoleCheckError: If the user's role check fails.
        """
        guard = self._table.lookup(method, path)
        if guard is None:
            return AccessEvaluation(decision=Decision.ALLOW, reason="public", access=PUBLIC)
        return await guard.check(user, config=self._config)

    async def check_guards(
        self, guards: Iterable[RouteGuard], user: UserLike | None
    ) -> AccessEvaluation | None:
        """Evaluate every guard matching a request, in declaration order.

        Overlapping patterns (``/users/{uid}`` and ``/users/me``) can both
        match one URL; each of them must allow the request. Evaluation stops
        at the first denial, so later guards are not consulted.

        Returns:
            The denying evaluation, the last allowing one, or ``None`` when
            no guard matched.

        Raises:
            RoleCheckError: If a role check fails.
        """
        evaluation: AccessEvaluation | None = None
        for guard in guards:
            evaluation = await guard.check(user, config=self._config)
            if not evaluation.allowed:
                break
        return evaluation

    def record_return_to(self, info: RequestInfo) -> str:
        """Remember where an unauthenticated request wanted to go.

        Stores ``info.full_path`` in the session under
        ``config.return_to_key`` when the request has a session. Returns
        the stored target so integrations can also put it in request state.
        """
        if info.session is not None:
            info.session[self._config.return_to_key] = info.full_path
        return info.full_path

    async def deny(self, decision: Decision, request: Any) -> Any:
        """Invoke the callback for a denial and return whatever it produced."""
        if decision is Decision.UNAUTHENTICATED:
            callback = self._on_unauthenticated
        elif decision is Decision.UNAUTHORIZED:
            callback = self._on_unauthorized
        else:
            raise ValueError(f"deny() called with a non-denial decision: {decision!r}")
        result = callback(request)
        if inspect.isawaitable(result):
            result = await result
        return result

    def __repr__(self) -> str:
        return f"Firewall({self._table!r})"
