import asyncio
from pathlib import Path

import pytest
from fastapi import HTTPException

from app.core.config import settings
from app.models import Admin, Role as RoleModel
from app.services.auth import AuthService
from conftest import ADMIN_KEY, API, PNG_BYTES, auth_headers, login, unique


def test_register_requires_admin_key(client):
    response = client.post(
        f"{API}/admin/register",
        data={"full_name": "Intruder", "login": unique("intruder"), "password": "secret", "secret_key": "wrong"},
    )
    assert response.status_code == 401


def test_register_duplicate_login_rejected(client, super_admin):
    response = client.post(
        f"{API}/admin/register",
        data={"full_name": "Root Again", "login": "root", "password": "rootpass", "secret_key": ADMIN_KEY},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Login already registered!"


def test_login_returns_token_and_role(client, super_admin):
    data = login(client, "admin", "root", "rootpass")
    assert data["token"]
    assert data["admin"]["role"]["name"] == "super-admin"
    assert "hashed_password" not in data["admin"]


def test_wrong_password_rejected(client, super_admin):
    response = client.post(f"{API}/admin/login", json={"login": "root", "password": "nope"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Login or password is wrong"


def test_requests_without_token_rejected(client):
    assert client.get(f"{API}/admin/").status_code == 401
    response = client.get(f"{API}/admin/", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401


def test_super_admin_creates_admin_with_limited_rights(client, sa_headers):
    admin_login = unique("admin")
    response = client.post(
        f"{API}/admin/create",
        data={"full_name": "Olga Admin", "login": admin_login, "password": "secret"},
        headers=sa_headers,
    )
    assert response.status_code == 201, response.text
    created = response.json()
    assert created["role"]["name"] == "admin"

    fetched = client.get(f"{API}/admin/{created['id']}", headers=sa_headers)
    assert fetched.status_code == 200
    assert fetched.json()["full_name"] == "Olga Admin"

    headers = auth_headers(login(client, "admin", admin_login, "secret")["token"])
    assert client.get(f"{API}/admin/", headers=headers).status_code == 200
    assert client.get(f"{API}/role/", headers=headers).status_code == 200

    # plain admins may not create admins, delete them or promote themselves
    response = client.post(
        f"{API}/admin/create",
        data={"full_name": "Other", "login": unique("admin"), "password": "secret"},
        headers=headers,
    )
    assert response.status_code == 401
    response = client.patch(f"{API}/admin/update/{created['id']}", data={"role": "super-admin"}, headers=headers)
    assert response.status_code == 401
    assert client.delete(f"{API}/admin/delete/{created['id']}", headers=headers).status_code == 401

    response = client.patch(f"{API}/admin/update/{created['id']}", data={"phone": "+7 900"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["phone"] == "+7 900"

    assert client.delete(f"{API}/admin/delete/{created['id']}", headers=sa_headers).status_code == 200
    assert client.get(f"{API}/admin/{created['id']}", headers=sa_headers).status_code == 404


def test_admin_role_must_be_admin_role(client, sa_headers):
    response = client.post(
        f"{API}/admin/create",
        data={"full_name": "Wrong", "login": unique("admin"), "password": "secret", "role": "student"},
        headers=sa_headers,
    )
    assert response.status_code == 400


def test_super_admin_cannot_delete_itself(client, super_admin):
    response = client.delete(f"{API}/admin/delete/{super_admin['id']}", headers=super_admin["headers"])
    assert response.status_code == 400


def test_roles_are_seeded_and_protected(client, sa_headers):
    roles = client.get(f"{API}/role/", headers=sa_headers).json()
    names = {role["name"] for role in roles}
    assert {"super-admin", "admin", "teacher", "student"} <= names

    super_admin_role = next(role for role in roles if role["name"] == "super-admin")
    response = client.delete(f"{API}/role/delete/{super_admin_role['id']}", headers=sa_headers)
    assert response.status_code == 400

    response = client.post(f"{API}/role/create", json={"name": "admin"}, headers=sa_headers)
    assert response.status_code == 400

    response = client.post(f"{API}/role/create", json={"name": unique("auditor")}, headers=sa_headers)
    assert response.status_code == 201
    role_id = response.json()["id"]
    assert client.delete(f"{API}/role/delete/{role_id}", headers=sa_headers).status_code == 204
    assert client.get(f"{API}/role/{role_id}", headers=sa_headers).status_code == 404


def test_system_roles_cannot_be_renamed_or_deleted(client, sa_headers):
    admin_login = unique("admin")
    client.post(
        f"{API}/admin/create",
        data={"full_name": "Kept Admin", "login": admin_login, "password": "secret"},
        headers=sa_headers,
    )
    roles = client.get(f"{API}/role/", headers=sa_headers).json()
    admin_role = next(role for role in roles if role["name"] == "admin")
    student_role = next(role for role in roles if role["name"] == "student")

    response = client.patch(f"{API}/role/update/{admin_role['id']}", json={"name": "moderator"}, headers=sa_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "System roles cannot be renamed"

    response = client.delete(f"{API}/role/delete/{student_role['id']}", headers=sa_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "System roles cannot be deleted"

    response = client.patch(
        f"{API}/role/update/{admin_role['id']}", json={"description": "Учебная часть"}, headers=sa_headers
    )
    assert response.status_code == 200
    assert response.json()["name"] == "admin"

    # admins holding the role can still log in and be created
    assert login(client, "admin", admin_login, "secret")["admin"]["role"]["name"] == "admin"
    response = client.post(
        f"{API}/admin/create",
        data={"full_name": "New Admin", "login": unique("admin"), "password": "secret"},
        headers=sa_headers,
    )
    assert response.status_code == 201


def test_unknown_admin_role_fails_closed():
    admin = Admin(login="ghost", full_name="Ghost", role=RoleModel(name="moderator"))

    with pytest.raises(HTTPException) as exc:
        asyncio.run(AuthService.get_role(admin))
    assert exc.value.status_code == 401
    assert exc.value.detail == "Restricted action"


def test_deleting_admin_removes_image(client, sa_headers):
    response = client.post(
        f"{API}/admin/create",
        data={"full_name": "Pictured Admin", "login": unique("admin"), "password": "secret"},
        files={"image": ("admin.png", PNG_BYTES, "image/png")},
        headers=sa_headers,
    )
    assert response.status_code == 201, response.text
    created = response.json()
    path = Path(settings.STATIC_DIR) / created["image"]["image"]
    assert path.exists()

    assert client.delete(f"{API}/admin/delete/{created['id']}", headers=sa_headers).status_code == 200
    assert not path.exists()
    assert client.get(f"{API}/image/{created['image_id']}", headers=sa_headers).status_code == 404
