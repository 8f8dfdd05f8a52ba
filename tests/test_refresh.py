from conftest import API, auth_headers

REFRESH_COOKIE = "refresh_token"


def _login(client, kind: str, user: dict) -> str:
    response = client.post(f"{API}/{kind}/login", json={"login": user["login"], "password": user["password"]})
    assert response.status_code == 200, response.text
    return response.cookies.get(REFRESH_COOKIE)


def _refresh(client, token):
    client.cookies.clear()
    if token:
        client.cookies.set(REFRESH_COOKIE, token)
    return client.post(f"{API}/auth/refresh")


def test_refresh_rotates_token(client, make_student):
    student = make_student()
    first = _login(client, "student", student)
    assert first

    response = _refresh(client, first)
    assert response.status_code == 200, response.text
    second = response.cookies.get(REFRESH_COOKIE)
    assert second and second != first

    access = response.json()["token"]
    assert client.get(f"{API}/student/{student['id']}", headers=auth_headers(access)).status_code == 200

    # rotated token can not be replayed
    assert _refresh(client, first).status_code == 401
    assert _refresh(client, second).status_code == 200


def test_refresh_without_valid_cookie_rejected(client):
    response = _refresh(client, None)
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid refresh token"

    assert _refresh(client, "garbage").status_code == 401


def test_logout_revokes_refresh_token(client, make_teacher):
    teacher = make_teacher()
    token = _login(client, "teacher", teacher)

    client.cookies.clear()
    client.cookies.set(REFRESH_COOKIE, token)
    assert client.post(f"{API}/auth/logout").status_code == 204

    assert _refresh(client, token).status_code == 401
