"""Auth module test suite — signup, login, JWT validation, password change."""

from __future__ import annotations

from sqlalchemy import select

from hrops.common.audit import AuditTrail
from hrops.common.constants import PredefinedRole
from hrops.config import settings
from tests.conftest import (
    DEFAULT_PASSWORD,
    _seed_user,
    auth_headers,
    create_access_token,
)


# ── Signup ──────────────────────────────────────────────────────────


async def test_signup_creates_admin(client, session_factory):
    resp = await client.post(
        "/api/v1/auth/signup",
        json={
            "name": "Founder",
            "email": "Founder@Acme-HR.com",
            "password": "founder-pass",
            "company_name": "Acme",
        },
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["role"] == PredefinedRole.admin.value
    assert data["email"] == "founder@acme-hr.com"
    assert "password" not in data and "password_hash" not in data

    async with session_factory() as session:
        entries = (await session.execute(select(AuditTrail))).scalars().all()
    assert [e.action for e in entries] == ["signup"]


async def test_signup_duplicate_email_is_case_insensitive(client, admin):
    resp = await client.post(
        "/api/v1/auth/signup",
        json={"name": "Dup", "email": "ADMIN@acme-hr.com", "password": "whatever1"},
    )
    assert resp.status_code == 409
    assert resp.json()["type"].endswith("/conflict")


async def test_signup_short_password_is_invalid_input(client):
    resp = await client.post(
        "/api/v1/auth/signup",
        json={"name": "X", "email": "x@acme-hr.com", "password": "123"},
    )
    assert resp.status_code == 400
    body = resp.json()
    assert body["type"].endswith("/invalid-input")
    assert "password" in body["errors"]


async def test_signup_disabled(client, monkeypatch):
    monkeypatch.setattr(settings, "ALLOW_SIGNUP", False)
    resp = await client.post(
        "/api/v1/auth/signup",
        json={"name": "Late", "email": "late@acme-hr.com", "password": "latecomer"},
    )
    assert resp.status_code == 403


# ── Login ───────────────────────────────────────────────────────────


async def test_login_returns_bearer_token(client, employee):
    resp = await client.post(
        "/api/v1/auth/login",
        json={"email": "EMP@acme-hr.com", "password": DEFAULT_PASSWORD},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["token_type"] == "bearer"
    assert data["expires_in"] == settings.JWT_EXPIRY_HOURS * 3600
    assert data["user"]["id"] == employee.id

    me = await client.get(
        "/api/v1/auth/me",
        headers={"Authorization": f"Bearer {data['access_token']}"},
    )
    assert me.status_code == 200
    assert me.json()["email"] == "emp@acme-hr.com"


async def test_login_wrong_password_and_unknown_email_look_the_same(client, employee):
    wrong = await client.post(
        "/api/v1/auth/login",
        json={"email": "emp@acme-hr.com", "password": "not-the-password"},
    )
    unknown = await client.post(
        "/api/v1/auth/login",
        json={"email": "nobody@acme-hr.com", "password": "not-the-password"},
    )
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json()["detail"] == unknown.json()["detail"]


async def test_login_rate_limited(client, employee):
    payload = {"email": "emp@acme-hr.com", "password": "wrong-password"}
    limit = int(settings.LOGIN_RATE_LIMIT.split("/")[0])
    for _ in range(limit):
        resp = await client.post("/api/v1/auth/login", json=payload)
        assert resp.status_code == 401
    resp = await client.post("/api/v1/auth/login", json=payload)
    assert resp.status_code == 429


# ── Token validation ────────────────────────────────────────────────


async def test_verify_valid_token(client, employee):
    resp = await client.get("/api/v1/auth/verify", headers=auth_headers(employee))
    assert resp.status_code == 200
    assert resp.json()["valid"] is True
    assert resp.json()["user"]["role"] == "Employee"


async def test_missing_authorization_header(client):
    resp = await client.get("/api/v1/auth/me")
    assert resp.status_code == 401
    assert resp.headers["content-type"].startswith("application/problem+json")


async def test_expired_token_rejected(client, employee):
    token = create_access_token(employee.id, expired=True)
    resp = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
    assert "expired" in resp.json()["detail"].lower()


async def test_malformed_token_rejected(client):
    resp = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not.a.jwt"})
    assert resp.status_code == 401


async def test_wrong_token_type_rejected(client, employee):
    token = create_access_token(employee.id, token_type="refresh")
    resp = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401


async def test_token_for_missing_user_rejected(client):
    token = create_access_token(999)
    resp = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401


async def test_role_is_read_from_database_not_token(client, employee):
    """A stale Admin claim in the token grants nothing."""
    token = create_access_token(employee.id, email=employee.email, role="Admin")
    resp = await client.post(
        "/api/v1/payroll",
        json={"user_id": employee.id, "month": "2025-01", "amount": "100.00"},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert resp.status_code == 403


# ── Password change ─────────────────────────────────────────────────


async def test_change_password(client, employee):
    resp = await client.post(
        "/api/v1/auth/password",
        json={"old_password": DEFAULT_PASSWORD, "new_password": "brand-new-pass"},
        headers=auth_headers(employee),
    )
    assert resp.status_code == 200

    old = await client.post(
        "/api/v1/auth/login",
        json={"email": "emp@acme-hr.com", "password": DEFAULT_PASSWORD},
    )
    assert old.status_code == 401
    new = await client.post(
        "/api/v1/auth/login",
        json={"email": "emp@acme-hr.com", "password": "brand-new-pass"},
    )
    assert new.status_code == 200


async def test_change_password_wrong_old_password(client, db):
    user = await _seed_user(db, email="pw@acme-hr.com")
    resp = await client.post(
        "/api/v1/auth/password",
        json={"old_password": "guess-guess", "new_password": "brand-new-pass"},
        headers=auth_headers(user),
    )
    assert resp.status_code == 401
