"""explain_route() — explain the decision a route would produce for a user."""

from __future__ import annotations

from route_firewall._decision import AccessEvaluation, Decision
from route_firewall._types import UserLike
from route_firewall.compiler._table import RouteTable
from route_firewall.config._config import FirewallConfig
from route_firewall.policy._access import PUBLIC

__all__ = ["explain_route"]


async def explain_route(
    table: RouteTable,
    method: str,
    path: str,
    user: UserLike | None,
    *,
    config: FirewallConfig | None = None,
) -> AccessEvaluation:
    """Explain why *user* would be allowed or denied on a declared route.

    Routes without a guard (declared ``PUBLIC`` or not declared at all)
    are reported as allowed with reason ``"public"``; the host router
    decides what happens to them.

    Args:
        table: A compiled route table.
        method: HTTP method, any case.
        path: The declared path pattern.
        user: The resolved user, or ``None``.
        config: Optional config. Defaults to the global config.

    Example::

        evaluation = await explain_route(table, "GET", "/admin", user)
        print(evaluation)
    """
    guard = table.lookup(method, path)
    if guard is None:
        return AccessEvaluation(decision=Decision.ALLOW, reason="public", access=PUBLIC)
    return await guard.check(user, config=config)
