"""Layered configuration for route-firewall."""

from __future__ import annotations

from dataclasses import dataclass

from route_firewall._types import OnApprovalFlag

__all__ = [
    "FirewallConfig",
    "configure",
    "get_global_config",
    "_reset_global_config",
    "_set_global_config",
]

_VALID_APPROVAL_FLAG: set[str] = {"honor", "ignore"}


@dataclass(frozen=True, slots=True)
class FirewallConfig:
    """Firewall configuration with merge semantics (global -> firewall).

    Attributes:
        log_decisions: Emit an audit log record for every decision.
        approval_flag: ``"honor"`` requires ``user.is_approved`` on
            role-gated routes when the user exposes it. ``"ignore"``
            decides on role membership alone.
        return_to_key: Session / request-state key under which the
            requested URL is stored before the unauthenticated callback.
        user_state_key: Request-state attribute that holds the resolved user.

    Example::

        config = FirewallConfig(approval_flag="ignore")
        merged = config.merge(log_decisions=True)
    """

    log_decisions: bool = False
    approval_flag: OnApprovalFlag = "honor"
    return_to_key: str = "return_to"
    user_state_key: str = "user"

    def __post_init__(self) -> None:
        if self.approval_flag not in _VALID_APPROVAL_FLAG:
            raise ValueError(
                f"approval_flag must be one of {_VALID_APPROVAL_FLAG!r}, "
                f"got {self.approval_flag!r}"
            )
        if not self.return_to_key:
            raise ValueError("return_to_key must be a non-empty string")
        if not self.user_state_key.isidentifier():
            raise ValueError(
                f"user_state_key must be a valid identifier, got {self.user_state_key!r}"
            )

    def merge(
        self,
        *,
        log_decisions: bool | None = None,
        approval_flag: OnApprovalFlag | None = None,
        return_to_key: str | None = None,
        user_state_key: str | None = None,
    ) -> FirewallConfig:
        """Return a new config with non-None overrides applied.

        Example::

            base = FirewallConfig()
            strict = base.merge(approval_flag="honor", log_decisions=True)
        """
        return FirewallConfig(
            log_decisions=(log_decisions if log_decisions is not None else self.log_decisions),
            approval_flag=(approval_flag if approval_flag is not None else self.approval_flag),
            return_to_key=(return_to_key if return_to_key is not None else self.return_to_key),
            user_state_key=(
                user_state_key if user_state_key is not None else self.user_state_key
            ),
        )


# ---------------------------------------------------------------------------
# Global configuration singleton
# ---------------------------------------------------------------------------

_global_config = FirewallConfig()


def get_global_config() -> FirewallConfig:
    """Return the current global configuration."""
    return _global_config


def configure(
    *,
    log_decisions: bool | None = None,
    approval_flag: OnApprovalFlag | None = None,
    return_to_key: str | None = None,
    user_state_key: str | None = None,
) -> FirewallConfig:
    """Update the global configuration by merging overrides.

    Only non-None values are applied. Firewalls built without an explicit
    config pick up the global config at construction time.

    Returns:
        The updated global ``FirewallConfig``.

    Example::

        configure(log_decisions=True)
    """
    global _global_config
    _global_config = _global_config.merge(
        log_decisions=log_decisions,
        approval_flag=approval_flag,
        return_to_key=return_to_key,
        user_state_key=user_state_key,
    )
    return _global_config


def _set_global_config(cfg: FirewallConfig) -> None:
    """Replace global config with an exact snapshot. For testing only."""
    global _global_config
    _global_config = cfg


def _reset_global_config() -> None:
    """Reset global config to defaults. For testing only."""
    global _global_config
    _global_config = FirewallConfig()
