"""Built-in user adapters.

A user adapter receives a :class:`~route_firewall.RequestInfo` and returns
the current user, or ``None`` when nobody is signed in.
"""

from route_firewall.adapters._orm import orm_user_getter
from route_firewall.adapters._session import session_based

__all__ = ["orm_user_getter", "session_based"]
