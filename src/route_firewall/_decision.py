"""Decision outcomes and the evaluation record behind each one."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Literal

from route_firewall._types import Access

__all__ = ["AccessEvaluation", "Decision", "Reason"]


class Decision(enum.Enum):
    """Outcome of evaluating a route's access requirement for a request.

    Example::

        decision = await decide("ADMIN", user)
        if decision is Decision.UNAUTHORIZED:
            ...
    """

    ALLOW = "allow"
    UNAUTHENTICATED = "unauthenticated"
    UNAUTHORIZED = "unauthorized"

    @property
    def allowed(self) -> bool:
        return self is Decision.ALLOW

    @property
    def status_code(self) -> int:
        """HTTP status conventionally associated with the decision."""
        return _STATUS_CODES[self]


_STATUS_CODES: dict[Decision, int] = {
    Decision.ALLOW: 200,
    Decision.UNAUTHENTICATED: 401,
    Decision.UNAUTHORIZED: 403,
}

Reason = Literal[
    "public",
    "no_user",
    "authenticated",
    "no_policy",
    "role_granted",
    "role_denied",
    "not_approved",
]


@dataclass(frozen=True, slots=True)
class AccessEvaluation:
    """The decision for one request plus the facts that produced it.

    Attributes:
        decision: The outcome.
        reason: Which branch of the decision procedure was taken.
        access: The access requirement that was evaluated.
        role_checked: Whether ``has_role`` was invoked.
        role_result: The role-check answer, or ``None`` if not checked.
        approved: The user's approval flag, or ``None`` if the user has
            none or it was not consulted.
    """

    decision: Decision
    reason: Reason
    access: Access
    role_checked: bool = False
    role_result: bool | None = None
    approved: bool | None = None

    @property
    def allowed(self) -> bool:
        return self.decision is Decision.ALLOW

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable dictionary."""
        return {
            "decision": self.decision.value,
            "reason": self.reason,
            "access": list(self.access) if isinstance(self.access, tuple) else self.access,
            "role_checked": self.role_checked,
            "role_result": self.role_result,
            "approved": self.approved,
        }

    def __str__(self) -> str:
        """Return a human-readable multi-line explanation."""
        lines = [f"Access Check: {self.decision.name} ({self.reason})"]
        lines.append(f"  Access: {self.access!r}")
        if self.role_checked:
            lines.append(f"  Role check: {self.role_result}")
        if self.approved is not None:
            lines.append(f"  Approved: {self.approved}")
        return "\n".join(lines)
