"""Shared protocols and type aliases for route-firewall."""

from __future__ import annotations

from collections.abc import Awaitable
from typing import Literal, Protocol, runtime_checkable

__all__ = [
    "Access",
    "ApprovableUser",
    "OnApprovalFlag",
    "RoleResult",
    "Roles",
    "UserLike",
]

# A single role identifier or an ordered collection of them (OR semantics).
Roles = str | tuple[str, ...]

# A normalized access declaration. ``None`` means no policy was declared.
Access = Roles | None

# What a role-membership test may return.
RoleResult = bool | Awaitable[bool]

# Valid values for FirewallConfig.approval_flag.
OnApprovalFlag = Literal["honor", "ignore"]


@runtime_checkable
class UserLike(Protocol):
    """Structural type for resolved users.

    Any object with a ``has_role`` method satisfies this protocol.
    ``has_role`` receives either a single role or a tuple of roles and
    returns whether the user holds at least one of them, either directly
    or as an awaitable.

    Example::

        @dataclass
        class User:
            roles: set[str]

            def has_role(self, roles: str | tuple[str, ...]) -> bool:
                wanted = {roles} if isinstance(roles, str) else set(roles)
                return bool(self.roles & wanted)

        assert isinstance(User(roles={"ADMIN"}), UserLike)
    """

    def has_role(self, roles: Roles) -> RoleResult: ...


@runtime_checkable
class ApprovableUser(UserLike, Protocol):
    """A user that also carries an approval flag.

    When a user satisfies this protocol, role-gated routes additionally
    require ``is_approved`` to be true (unless the config says to ignore
    the flag).
    """

    is_approved: bool
