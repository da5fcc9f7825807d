"""route-firewall testing utilities — mock users, assertions, and fixtures.

Provides test helpers for verifying route policies:

- **MockUser / factories**: Users with per-instance ``has_role`` call logs.
- **Assertion helpers**: ``assert_allowed``, ``assert_unauthenticated``,
  ``assert_unauthorized``, ``assert_decision``.
- **Fixtures**: ``firewall_config``, ``isolated_firewall_config``.

Example::

    from route_firewall.testing import assert_unauthorized, make_user

    async def test_members_cannot_admin(table):
        await assert_unauthorized(table, "GET", "/admin", make_user("MEMBER"))
"""

from route_firewall.testing._assertions import (
    assert_allowed,
    assert_decision,
    assert_unauthenticated,
    assert_unauthorized,
)
from route_firewall.testing._fixtures import firewall_config, isolated_firewall_config
from route_firewall.testing._isolation import isolated_config
from route_firewall.testing._users import (
    MockApprovableUser,
    MockUser,
    make_admin,
    make_unapproved,
    make_user,
)

__all__ = [
    "MockApprovableUser",
    "MockUser",
    "assert_allowed",
    "assert_decision",
    "assert_unauthenticated",
    "assert_unauthorized",
    "firewall_config",
    "isolated_config",
    "isolated_firewall_config",
    "make_admin",
    "make_unapproved",
    "make_user",
]
