import os
import tempfile
from uuid import uuid4

import pytest

TMP_DIR = tempfile.mkdtemp(prefix="edu-admin-tests-")
ADMIN_KEY = "test-admin-key"

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(TMP_DIR, 'test.db')}"
os.environ["ADMIN_KEY"] = ADMIN_KEY
os.environ["ACCESS_TOKEN_KEY"] = "test-access-key"
os.environ["REFRESH_TOKEN_KEY"] = "test-refresh-key"
os.environ["STATIC_DIR"] = os.path.join(TMP_DIR, "static")
os.environ["LOG_DIR"] = os.path.join(TMP_DIR, "logs")
os.environ["ENVIRONMENT"] = "test"

from fastapi.testclient import TestClient  # noqa: E402

from app.main import app  # noqa: E402

API = "/api/v1"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def unique(prefix: str) -> str:
    return f"{prefix}-{uuid4().hex[:8]}"


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def login(client: TestClient, kind: str, user_login: str, password: str) -> dict:
    response = client.post(f"{API}/{kind}/login", json={"login": user_login, "password": password})
    assert response.status_code == 200, response.text
    return response.json()


@pytest.fixture(scope="session")
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="session")
def super_admin(client):
    credentials = {"full_name": "Root Admin", "login": "root", "password": "rootpass"}
    response = client.post(f"{API}/admin/register", data={**credentials, "secret_key": ADMIN_KEY})
    assert response.status_code == 201, response.text

    data = login(client, "admin", credentials["login"], credentials["password"])
    return {"id": data["admin"]["id"], "headers": auth_headers(data["token"])}


@pytest.fixture(scope="session")
def sa_headers(super_admin):
    return super_admin["headers"]


@pytest.fixture
def group(client, sa_headers):
    response = client.post(f"{API}/group/create", json={"name": unique("group"), "course": 1}, headers=sa_headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def make_student(client, sa_headers, group):
    def _make(password: str = "secret", files=None):
        user_login = unique("student")
        response = client.post(
            f"{API}/student/create",
            data={"full_name": "Ivan Petrov", "login": user_login, "password": password, "group_id": group["id"]},
            files=files,
            headers=sa_headers,
        )
        assert response.status_code == 201, response.text
        return {**response.json(), "login": user_login, "password": password}

    return _make


@pytest.fixture
def make_teacher(client, sa_headers):
    def _make(password: str = "secret", files=None):
        user_login = unique("teacher")
        response = client.post(
            f"{API}/teacher/create",
            data={"full_name": "Anna Smirnova", "login": user_login, "password": password},
            files=files,
            headers=sa_headers,
        )
        assert response.status_code == 201, response.text
        return {**response.json(), "login": user_login, "password": password}

    return _make
