"""User management tests — listing scope, creation rights, role changes."""

from __future__ import annotations

from sqlalchemy import select

from hrops.common.audit import AuditTrail
from tests.conftest import _seed_user, auth_headers


def _new_user(role: str = "Employee", email: str = "new.hire@acme-hr.com") -> dict:
    return {
        "name": "New Hire",
        "email": email,
        "password": "welcome1",
        "role": role,
        "department": "Design",
    }


# ── Listing ─────────────────────────────────────────────────────────


async def test_employee_sees_only_self(client, employee, other_employee, admin):
    resp = await client.get("/api/v1/users", headers=auth_headers(employee))
    assert resp.status_code == 200
    body = resp.json()
    assert [u["id"] for u in body["data"]] == [employee.id]
    assert body["meta"]["total"] == 1


async def test_admin_sees_everyone(client, employee, other_employee, admin):
    resp = await client.get("/api/v1/users", headers=auth_headers(admin))
    assert resp.status_code == 200
    assert resp.json()["meta"]["total"] == 3


async def test_list_filter_by_department(client, db, admin):
    await _seed_user(db, email="d1@acme-hr.com", department="Finance")
    await _seed_user(db, email="d2@acme-hr.com", department="Sales")
    resp = await client.get(
        "/api/v1/users", params={"department": "Finance"}, headers=auth_headers(admin),
    )
    assert [u["email"] for u in resp.json()["data"]] == ["d1@acme-hr.com"]


async def test_custom_role_is_denied(client, db):
    intern = await _seed_user(db, email="intern@acme-hr.com", role="Intern")
    resp = await client.get("/api/v1/users", headers=auth_headers(intern))
    assert resp.status_code == 403


# ── Creation ────────────────────────────────────────────────────────


async def test_hr_creates_employee(client, hr_officer):
    resp = await client.post(
        "/api/v1/users", json=_new_user(), headers=auth_headers(hr_officer),
    )
    assert resp.status_code == 201
    assert resp.json()["role"] == "Employee"
    assert resp.json()["department"] == "Design"


async def test_manager_cannot_create_admin(client, manager):
    resp = await client.post(
        "/api/v1/users", json=_new_user(role="Admin"), headers=auth_headers(manager),
    )
    assert resp.status_code == 403


async def test_admin_creates_admin(client, admin):
    resp = await client.post(
        "/api/v1/users", json=_new_user(role="Admin"), headers=auth_headers(admin),
    )
    assert resp.status_code == 201


async def test_employee_cannot_create_users(client, employee):
    resp = await client.post(
        "/api/v1/users", json=_new_user(), headers=auth_headers(employee),
    )
    assert resp.status_code == 403


async def test_duplicate_email_conflict(client, admin, employee):
    resp = await client.post(
        "/api/v1/users",
        json=_new_user(email="Emp@Acme-HR.com"),
        headers=auth_headers(admin),
    )
    assert resp.status_code == 409


async def test_unknown_role_is_invalid_input(client, admin):
    resp = await client.post(
        "/api/v1/users", json=_new_user(role="Overlord"), headers=auth_headers(admin),
    )
    assert resp.status_code == 400


# ── Role changes ────────────────────────────────────────────────────


async def test_admin_changes_role(client, admin, employee, session_factory):
    resp = await client.patch(
        f"/api/v1/users/{employee.id}/role",
        json={"role": "Manager"},
        headers=auth_headers(admin),
    )
    assert resp.status_code == 200
    assert resp.json()["role"] == "Manager"

    async with session_factory() as session:
        entry = (
            await session.execute(
                select(AuditTrail).where(AuditTrail.action == "change_role")
            )
        ).scalars().one()
    assert entry.old_values == {"role": "Employee"}
    assert entry.new_values == {"role": "Manager"}


async def test_role_change_takes_effect_on_existing_token(client, admin, employee):
    headers = auth_headers(employee)
    before = await client.get("/api/v1/users", headers=headers)
    assert before.json()["meta"]["total"] == 1

    await client.patch(
        f"/api/v1/users/{employee.id}/role",
        json={"role": "HR Officer"},
        headers=auth_headers(admin),
    )
    after = await client.get("/api/v1/users", headers=headers)
    assert after.json()["meta"]["total"] == 2


async def test_admin_cannot_demote_self(client, db, admin):
    # Another admin exists; self-demotion is still refused.
    await _seed_user(db, email="admin2@acme-hr.com", role="Admin")
    resp = await client.patch(
        f"/api/v1/users/{admin.id}/role",
        json={"role": "Employee"},
        headers=auth_headers(admin),
    )
    assert resp.status_code == 403
    assert "own Admin role" in resp.json()["detail"]


async def test_non_admin_cannot_change_roles(client, hr_officer, employee):
    resp = await client.patch(
        f"/api/v1/users/{employee.id}/role",
        json={"role": "Manager"},
        headers=auth_headers(hr_officer),
    )
    assert resp.status_code == 403


async def test_role_change_unknown_user(client, admin):
    resp = await client.patch(
        "/api/v1/users/999/role", json={"role": "Manager"}, headers=auth_headers(admin),
    )
    assert resp.status_code == 404
