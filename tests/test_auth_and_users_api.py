"""
Registration, login, the self-service account and admin user management.
"""
from datetime import date

import pytest
from pydantic import ValidationError
from sqlalchemy import select

from rental_api.core.config import Settings
from rental_api.core.security import create_access_token, verify_password
from rental_api.core.startup import ensure_default_admin
from rental_api.models.enums import Role
from rental_api.models.user import User

from conftest import DEFAULT_PASSWORD

ADMIN_USERS = "/api/v1/admin/users/"


async def test_health(client):
    response = await client.get("/api/v1/health/")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


async def test_register_creates_unverified_customer(client):
    response = await client.post(
        "/api/v1/auth/register", json={"name": "Rina", "email": "rina@example.com", "password": "hunter22"}
    )

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Registration successful"
    assert body["user"]["role"] == "CUSTOMER"
    assert body["user"]["is_verified_by_admin"] is False
    assert "password_hash" not in body["user"]


async def test_register_rejects_duplicate_email(client, customer):
    response = await client.post(
        "/api/v1/auth/register", json={"name": "Again", "email": customer.email, "password": "hunter22"}
    )

    assert response.status_code == 409
    assert response.json() == {"message": "Email already registered"}


async def test_register_rejects_short_password(client):
    response = await client.post(
        "/api/v1/auth/register", json={"name": "Rina", "email": "rina@example.com", "password": "123"}
    )

    assert response.status_code == 400
    assert response.json()["message"].startswith("Invalid password")


async def test_login_returns_token_for_current_user(client, customer):
    login = await client.post("/api/v1/auth/login", json={"email": customer.email, "password": DEFAULT_PASSWORD})
    assert login.status_code == 200
    token = login.json()["access_token"]

    me = await client.get("/api/v1/user/current", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["id"] == customer.id


async def test_login_rejects_wrong_password(client, customer):
    response = await client.post("/api/v1/auth/login", json={"email": customer.email, "password": "nope-nope"})

    assert response.status_code == 401
    assert response.json() == {"message": "Incorrect email or password"}


async def test_login_rejects_inactive_user(client, make_user):
    user = await make_user(Role.customer, is_active=False)

    response = await client.post("/api/v1/auth/login", json={"email": user.email, "password": DEFAULT_PASSWORD})

    assert response.status_code == 401


async def test_malformed_json_is_a_server_error(client):
    response = await client.post(
        "/api/v1/auth/login", content="{not json", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 500
    assert response.json() == {"message": "Request body is not valid JSON"}


async def test_current_user_requires_valid_token(client):
    missing = await client.get("/api/v1/user/current")
    forged = await client.get("/api/v1/user/current", headers={"Authorization": "Bearer not-a-token"})
    ghost = await client.get(
        "/api/v1/user/current", headers={"Authorization": f"Bearer {create_access_token({'sub': 9999})}"}
    )

    assert missing.status_code == 401
    assert forged.status_code == 401
    assert ghost.status_code == 401


async def test_inactive_user_is_forbidden(client, make_user, auth_headers):
    user = await make_user(Role.customer, is_active=False)

    response = await client.get("/api/v1/user/current", headers=auth_headers(user))

    assert response.status_code == 403


async def test_update_profile(client, session_maker, customer, auth_headers):
    response = await client.put(
        "/api/v1/user/profile",
        json={"name": "Renamed", "email": "renamed@example.com", "password": "newpass1"},
        headers=auth_headers(customer),
    )

    assert response.status_code == 200
    assert response.json()["name"] == "Renamed"
    async with session_maker() as session:
        stored = await session.get(User, customer.id)
    assert stored.email == "renamed@example.com"
    assert verify_password("newpass1", stored.password_hash)


async def test_update_profile_ignores_short_password(client, session_maker, customer, auth_headers):
    response = await client.put(
        "/api/v1/user/profile",
        json={"name": customer.name, "email": customer.email, "password": "abc"},
        headers=auth_headers(customer),
    )

    assert response.status_code == 200
    async with session_maker() as session:
        stored = await session.get(User, customer.id)
    assert verify_password(DEFAULT_PASSWORD, stored.password_hash)


async def test_update_profile_rejects_taken_email(client, admin, customer, auth_headers):
    response = await client.put(
        "/api/v1/user/profile", json={"name": "x", "email": admin.email}, headers=auth_headers(customer)
    )

    assert response.status_code == 409
    assert response.json() == {"message": "Email is already used by another user"}


async def test_admin_user_crud(client, admin, auth_headers):
    created = await client.post(
        ADMIN_USERS,
        json={"name": "Owner", "email": "owner@example.com", "password": "ownerpw", "role": "OWNER"},
        headers=auth_headers(admin),
    )
    assert created.status_code == 201
    user_id = created.json()["id"]

    owners = await client.get(ADMIN_USERS, params={"role": "OWNER"}, headers=auth_headers(admin))
    assert [u["id"] for u in owners.json()] == [user_id]

    updated = await client.put(
        f"{ADMIN_USERS}{user_id}", json={"is_verified_by_admin": True}, headers=auth_headers(admin)
    )
    assert updated.status_code == 200
    assert updated.json()["is_verified_by_admin"] is True
    assert updated.json()["role"] == "OWNER"

    deleted = await client.delete(f"{ADMIN_USERS}{user_id}", headers=auth_headers(admin))
    assert deleted.json() == {"message": "User deleted successfully"}

    missing = await client.get(f"{ADMIN_USERS}{user_id}", headers=auth_headers(admin))
    assert missing.status_code == 404


async def test_admin_update_rejects_taken_email(client, admin, customer, auth_headers):
    response = await client.put(
        f"{ADMIN_USERS}{customer.id}", json={"email": admin.email}, headers=auth_headers(admin)
    )

    assert response.status_code == 409


async def test_user_with_orders_cannot_be_deleted(client, admin, customer, make_vehicle, make_order, auth_headers):
    vehicle = await make_vehicle(admin)
    await make_order(customer, vehicle, date(2024, 6, 1), date(2024, 6, 4))

    with_orders = await client.delete(f"{ADMIN_USERS}{customer.id}", headers=auth_headers(admin))
    with_vehicles = await client.delete(f"{ADMIN_USERS}{admin.id}", headers=auth_headers(admin))

    assert with_orders.status_code == 409
    assert with_orders.json() == {"message": "Cannot delete user that has orders"}
    assert with_vehicles.status_code == 409
    assert with_vehicles.json() == {"message": "Cannot delete user that owns vehicles"}


@pytest.mark.parametrize("role", [None, Role.customer])
async def test_admin_users_forbidden_for_non_staff(client, make_user, auth_headers, role):
    headers = auth_headers(await make_user(role)) if role else {}

    response = await client.get(ADMIN_USERS, headers=headers)

    assert response.status_code == 403


async def test_default_admin_is_seeded_once(session_maker, monkeypatch):
    monkeypatch.setattr("rental_api.core.startup.get_async_session_maker_instance", lambda: session_maker)

    await ensure_default_admin()
    await ensure_default_admin()

    async with session_maker() as session:
        admins = (await session.execute(select(User).where(User.role == Role.admin.value))).scalars().all()
    assert len(admins) == 1
    assert admins[0].name == "Admin User"
    assert admins[0].is_verified_by_admin is True


def test_default_admin_email_must_be_a_login_address():
    with pytest.raises(ValidationError):
        Settings(DEFAULT_ADMIN_EMAIL="admin@rental.test")

    assert Settings(DEFAULT_ADMIN_EMAIL="root@example.com").DEFAULT_ADMIN_EMAIL == "root@example.com"
