"""Access decision engine — maps (access requirement, user) to a Decision."""

from __future__ import annotations

from route_firewall._audit import log_decision
from route_firewall._decision import AccessEvaluation, Decision
from route_firewall._roles import check_roles
from route_firewall._types import Access, ApprovableUser, UserLike
from route_firewall.config._config import FirewallConfig, get_global_config
from route_firewall.policy._access import AUTHENTICATED, PUBLIC

__all__ = ["decide", "evaluate_access"]


async def evaluate_access(
    access: Access,
    user: UserLike | None,
    *,
    config: FirewallConfig | None = None,
    method: str | None = None,
    path: str | None = None,
) -> AccessEvaluation:
    """Evaluate *access* for *user* and explain the outcome.

    The checks run in a fixed order, which decides between 401 and 403
    when several could apply:

    1. No user: ``UNAUTHENTICATED``, whatever the requirement.
    2. ``AUTHENTICATED``: ``ALLOW`` without consulting roles.
    3. No declared policy (``None``): ``UNAUTHORIZED``.
    4. Roles: ``ALLOW`` iff ``has_role`` is true and the user's approval
       flag, when present and honored, is true. Otherwise ``UNAUTHORIZED``.

    ``PUBLIC`` never reaches the engine through a compiled route table;
    evaluated directly it allows any user, but still answers
    ``UNAUTHENTICATED`` when there is none.

    Args:
        access: A normalized access requirement.
        user: The resolved user, or ``None``.
        config: Optional config. Defaults to the global config.
        method: Route method, used only for audit logging.
        path: Route path, used only for audit logging.

    Raises:
        RoleCheckError: If the role-membership test fails.

    Example::

        evaluation = await evaluate_access(("MEMBER", "ADMIN"), user)
        print(evaluation.decision, evaluation.reason)
    """
    cfg = config if config is not None else get_global_config()
    evaluation = await _evaluate(access, user, cfg)
    if cfg.log_decisions:
        log_decision(evaluation, user=user, method=method, path=path)
    return evaluation


async def _evaluate(
    access: Access, user: UserLike | None, cfg: FirewallConfig
) -> AccessEvaluation:
    if user is None:
        return AccessEvaluation(
            decision=Decision.UNAUTHENTICATED, reason="no_user", access=access
        )

    if access == PUBLIC:
        return AccessEvaluation(decision=Decision.ALLOW, reason="public", access=access)

    if access == AUTHENTICATED:
        return AccessEvaluation(decision=Decision.ALLOW, reason="authenticated", access=access)

    if access is None:
        return AccessEvaluation(
            decision=Decision.UNAUTHORIZED, reason="no_policy", access=access
        )

    has_role = await check_roles(user, access)

    approved: bool | None = None
    if cfg.approval_flag == "honor" and isinstance(user, ApprovableUser):
        approved = bool(user.is_approved)

    if not has_role:
        return AccessEvaluation(
            decision=Decision.UNAUTHORIZED,
            reason="role_denied",
            access=access,
            role_checked=True,
            role_result=False,
            approved=approved,
        )
    if approved is False:
        return AccessEvaluation(
            decision=Decision.UNAUTHORIZED,
            reason="not_approved",
            access=access,
            role_checked=True,
            role_result=True,
            approved=approved,
        )
    return AccessEvaluation(
        decision=Decision.ALLOW,
        reason="role_granted",
        access=access,
        role_checked=True,
        role_result=True,
        approved=approved,
    )


async def decide(
    access: Access,
    user: UserLike | None,
    *,
    config: FirewallConfig | None = None,
) -> Decision:
    """Return only the ``Decision`` for *access* and *user*.

    Example::

        if await decide(AUTHENTICATED, user) is Decision.ALLOW:
            ...
    """
    evaluation = await evaluate_access(access, user, config=config)
    return evaluation.decision
