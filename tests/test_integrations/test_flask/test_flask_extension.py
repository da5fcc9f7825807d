"""Tests for the Flask extension (FirewallExtension)."""

from __future__ import annotations

import pytest
from flask import Flask, g, redirect, session
from sqlalchemy import Boolean, Integer, String, create_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, sessionmaker
from sqlalchemy.pool import StaticPool

from route_firewall.adapters import orm_user_getter, session_based
from route_firewall.exceptions import RoleCheckError
from route_firewall.integrations.flask import FirewallExtension
from route_firewall.testing import MockUser, make_user

ROUTES = [
    {"path": "/members", "access": ["MEMBER", "ADMIN"]},
    {"path": "/public", "access": "PUBLIC", "method": "POST"},
    {"path": "/x"},
    {"path": "/profile", "access": "AUTHENTICATED"},
    {"path": "/admin", "access": "ADMIN"},
    {"path": "/posts/<int:post_id>", "access": "EDITOR", "method": "DELETE"},
]

# ---------------------------------------------------------------------------
# Test-local models
# ---------------------------------------------------------------------------


class Base(DeclarativeBase):
    pass


class Account(Base):
    __tablename__ = "flask_accounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(50))
    role: Mapped[str] = mapped_column(String(20))
    is_approved: Mapped[bool] = mapped_column(Boolean, default=True)

    def has_role(self, roles):
        wanted = {roles} if isinstance(roles, str) else set(roles)
        return self.role in wanted


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def session_factory():
    # Flask runs async hooks on a loop in another thread, so share one connection.
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, expire_on_commit=False)
    with factory() as db:
        db.add_all(
            [
                Account(id=1, name="Mia", role="MEMBER", is_approved=True),
                Account(id=2, name="Ada", role="ADMIN", is_approved=True),
                Account(id=3, name="Pat", role="MEMBER", is_approved=False),
                Account(id=4, name="Eve", role="EDITOR", is_approved=True),
            ]
        )
        db.commit()
    yield factory
    engine.dispose()


@pytest.fixture()
def denials() -> list[tuple[str, object]]:
    return []


def create_app(session_factory, denials, *, secret_key: str | None = "test-secret", **kwargs):
    app = Flask(__name__)
    app.config["TESTING"] = True
    if secret_key is not None:
        app.config["SECRET_KEY"] = secret_key

    @app.get("/members")
    def members():
        return {"page": "members"}

    @app.post("/public")
    def public():
        return {"page": "public"}

    @app.get("/x")
    def undeclared():
        return {"page": "x"}

    @app.get("/profile")
    def profile():
        return {"name": g.user.name}

    @app.get("/admin")
    def admin():
        return {"page": "admin"}

    @app.delete("/posts/<int:post_id>")
    def delete_post(post_id: int):
        return {"deleted": post_id}

    @app.post("/login/<user_id>")
    def login(user_id: str):
        session["user_id"] = user_id
        return {"ok": True}

    def on_unauthenticated(request):
        denials.append(("unauthenticated", g.get("return_to")))
        return redirect("/login")

    def on_unauthorized(request):
        denials.append(("unauthorized", request.path))
        return "Forbidden", 403

    kwargs.setdefault("user_adapter", session_based(orm_user_getter(session_factory, Account)))
    kwargs.setdefault("on_unauthenticated", on_unauthenticated)
    kwargs.setdefault("on_unauthorized", on_unauthorized)
    FirewallExtension(app, routes=ROUTES, **kwargs)
    return app


@pytest.fixture()
def client(session_factory, denials):
    return create_app(session_factory, denials).test_client()


def _login(client, user_id: str) -> None:
    assert client.post(f"/login/{user_id}").status_code == 200


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestAnonymous:
    def test_members_redirects_to_login(self, client, denials) -> None:
        resp = client.get("/members")
        assert resp.status_code == 302
        assert resp.headers["Location"] == "/login"
        assert denials == [("unauthenticated", "/members")]

    def test_public_post_reaches_view(self, client, denials) -> None:
        resp = client.post("/public")
        assert resp.status_code == 200
        assert resp.get_json() == {"page": "public"}
        assert denials == []

    def test_return_to_stored_in_session(self, client, denials) -> None:
        client.get("/members?page=2")
        with client.session_transaction() as sess:
            assert sess["return_to"] == "/members?page=2"
        assert denials == [("unauthenticated", "/members?page=2")]

    def test_return_to_without_session_support(self, session_factory, denials) -> None:
        client = create_app(session_factory, denials, secret_key=None).test_client()
        assert client.get("/profile").status_code == 302
        assert denials == [("unauthenticated", "/profile")]

    def test_other_methods_on_guarded_path_pass(self, client) -> None:
        assert client.post("/members").status_code == 405


class TestLoggedIn:
    def test_member_sees_members(self, client) -> None:
        _login(client, "1")
        assert client.get("/members").get_json() == {"page": "members"}

    def test_member_forbidden_on_admin(self, client, denials) -> None:
        _login(client, "1")
        resp = client.get("/admin")
        assert resp.status_code == 403
        assert resp.get_data(as_text=True) == "Forbidden"
        assert denials == [("unauthorized", "/admin")]

    def test_admin_sees_admin(self, client) -> None:
        _login(client, "2")
        assert client.get("/admin").status_code == 200

    def test_undeclared_route_forbidden_for_admin(self, client) -> None:
        _login(client, "2")
        assert client.get("/x").status_code == 403

    def test_unapproved_member(self, client) -> None:
        _login(client, "3")
        assert client.get("/members").status_code == 403
        assert client.get("/profile").get_json() == {"name": "Pat"}

    def test_path_converters_matched(self, client) -> None:
        _login(client, "1")
        assert client.delete("/posts/5").status_code == 403
        _login(client, "4")
        assert client.delete("/posts/5").get_json() == {"deleted": 5}

    def test_unknown_user_is_anonymous(self, client) -> None:
        _login(client, "404")
        assert client.get("/members").status_code == 302


class TestDenialResponses:
    def test_none_becomes_empty_status(self, session_factory, denials) -> None:
        app = create_app(
            session_factory,
            denials,
            on_unauthenticated=lambda request: None,
            on_unauthorized=lambda request: None,
        )
        client = app.test_client()
        assert client.get("/admin").status_code == 401
        _login(client, "1")
        assert client.get("/admin").status_code == 403

    def test_success_status_replaced(self, session_factory, denials) -> None:
        app = create_app(session_factory, denials, on_unauthorized=lambda request: "nope")
        client = app.test_client()
        _login(client, "1")
        resp = client.get("/admin")
        assert resp.status_code == 403
        assert resp.get_data(as_text=True) == "nope"

    def test_async_callback(self, session_factory, denials) -> None:
        async def on_unauthenticated(request):
            return "sign in first", 401

        app = create_app(session_factory, denials, on_unauthenticated=on_unauthenticated)
        resp = app.test_client().get("/admin")
        assert resp.status_code == 401
        assert resp.get_data(as_text=True) == "sign in first"


class TestErrors:
    def test_user_resolution_error_is_json_500(self, client) -> None:
        _login(client, "abc")
        resp = client.get("/members")
        assert resp.status_code == 500
        assert "'abc'" in resp.get_json()["detail"]

    def test_role_check_error_is_json_500(self, session_factory, denials) -> None:
        broken = MockUser(roles={"ADMIN"}, error=RuntimeError("directory offline"))
        app = create_app(session_factory, denials, user_adapter=lambda info: broken)
        resp = app.test_client().get("/admin")
        assert resp.status_code == 500
        assert "detail" in resp.get_json()
        assert denials == []

    def test_without_error_handlers_errors_propagate(self, session_factory, denials) -> None:
        broken = MockUser(roles={"ADMIN"}, error=RuntimeError("directory offline"))
        app = create_app(
            session_factory,
            denials,
            user_adapter=lambda info: broken,
            register_error_handlers=False,
        )
        with pytest.raises(RoleCheckError):
            app.test_client().get("/admin")


class TestInitApp:
    def test_app_factory_pattern(self, session_factory) -> None:
        ext = FirewallExtension(
            routes=ROUTES,
            user_adapter=lambda info: None,
            on_unauthenticated=lambda request: ("login", 401),
            on_unauthorized=lambda request: ("no", 403),
        )
        app = Flask(__name__)

        @app.get("/admin")
        def admin():
            return "admin"

        ext.init_app(app)
        assert app.extensions["route_firewall"] is ext
        assert app.test_client().get("/admin").status_code == 401

    def test_user_stored_on_g(self, session_factory, denials) -> None:
        app = create_app(session_factory, denials)
        seen: list[object] = []

        @app.get("/whoami")
        def whoami():
            seen.append(g.user)
            return "ok"

        client = app.test_client()
        client.get("/whoami")
        _login(client, "2")
        client.get("/whoami")
        assert seen[0] is None
        assert seen[1].name == "Ada"


class TestOverlappingRoutes:
    """``/users/<uid>`` also matches ``/users/me``; both guards apply."""

    USERS = {"member": make_user("MEMBER"), "admin": make_user("ADMIN")}

    def _client(self, routes):
        app = Flask(__name__)

        @app.get("/users/me")
        def me():
            return "me"

        @app.get("/users/<uid>")
        def user(uid: str):
            return uid

        FirewallExtension(
            app,
            routes=routes,
            user_adapter=lambda info: self.USERS.get(info.request.headers.get("X-User", "")),
            on_unauthenticated=lambda request: ("login", 401),
            on_unauthorized=lambda request: ("no", 403),
        )
        return app.test_client()

    @pytest.mark.parametrize(
        "routes",
        [
            [{"path": "/users/<uid>", "access": "AUTHENTICATED"}, {"path": "/users/me", "access": "ADMIN"}],
            [{"path": "/users/me", "access": "ADMIN"}, {"path": "/users/<uid>", "access": "AUTHENTICATED"}],
        ],
    )
    def test_every_matching_guard_applies(self, routes) -> None:
        client = self._client(routes)
        assert client.get("/users/me", headers={"X-User": "member"}).status_code == 403
        assert client.get("/users/me", headers={"X-User": "admin"}).status_code == 200
        assert client.get("/users/5", headers={"X-User": "member"}).status_code == 200
        assert client.get("/users/me").status_code == 401
        assert client.get("/users/5").status_code == 401
