from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from app.core.config import settings
from app.services.image import schedule_file_removal, track_written_file
from conftest import API, PNG_BYTES, auth_headers, login, unique


def _image_path(user: dict) -> Path:
    return Path(settings.STATIC_DIR) / user["image"]["image"]


def _png(name: str = "avatar.png") -> dict:
    return {"image": (name, PNG_BYTES, "image/png")}


def test_create_then_get_student(client, sa_headers, make_student, group):
    student = make_student()
    assert student["group_id"] == group["id"]
    assert student["group"]["name"] == group["name"]
    assert "hashed_password" not in student

    response = client.get(f"{API}/student/{student['id']}", headers=sa_headers)
    assert response.status_code == 200
    fetched = response.json()
    assert fetched["full_name"] == student["full_name"]
    assert fetched["group_id"] == group["id"]


def test_create_student_requires_existing_group(client, sa_headers):
    response = client.post(
        f"{API}/student/create",
        data={"full_name": "Lost", "login": unique("student"), "password": "secret", "group_id": "missing"},
        headers=sa_headers,
    )
    assert response.status_code == 404
    assert response.json()["detail"] == "Group not found"


def test_duplicate_student_login_rejected(client, sa_headers, make_student, group):
    student = make_student()
    response = client.post(
        f"{API}/student/create",
        data={"full_name": "Copy", "login": student["login"], "password": "secret", "group_id": group["id"]},
        headers=sa_headers,
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Login already registered!"


def test_student_login_and_wrong_password(client, make_student):
    student = make_student(password="pa55word")
    data = login(client, "student", student["login"], "pa55word")
    assert data["student"]["id"] == student["id"]

    response = client.post(f"{API}/student/login", json={"login": student["login"], "password": "wrong"})
    assert response.status_code == 401
    response = client.post(f"{API}/student/login", json={"login": unique("ghost"), "password": "wrong"})
    assert response.status_code == 401


def test_student_can_update_self_but_not_others(client, make_student):
    first = make_student()
    second = make_student()
    headers = auth_headers(login(client, "student", first["login"], first["password"])["token"])

    assert client.get(f"{API}/student/{first['id']}", headers=headers).status_code == 200
    assert client.get(f"{API}/student/{second['id']}", headers=headers).status_code == 401
    assert client.get(f"{API}/student/", headers=headers).status_code == 401

    response = client.patch(f"{API}/student/update/{second['id']}", data={"full_name": "Hacked"}, headers=headers)
    assert response.status_code == 401
    assert response.json()["detail"] == "Restricted action"

    new_login = unique("renamed")
    response = client.patch(
        f"{API}/student/update/{first['id']}",
        data={"full_name": "Ivan Updated", "login": new_login, "password": "newsecret"},
        headers=headers,
    )
    assert response.status_code == 200, response.text
    assert response.json()["full_name"] == "Ivan Updated"
    assert login(client, "student", new_login, "newsecret")["student"]["id"] == first["id"]


def test_update_to_taken_login_rejected(client, sa_headers, make_student):
    first = make_student()
    second = make_student()
    response = client.patch(f"{API}/student/update/{first['id']}", data={"login": second["login"]}, headers=sa_headers)
    assert response.status_code == 400


def test_teacher_cannot_update_student(client, make_student, make_teacher):
    student = make_student()
    teacher = make_teacher()
    headers = auth_headers(login(client, "teacher", teacher["login"], teacher["password"])["token"])

    response = client.patch(f"{API}/student/update/{student['id']}", data={"full_name": "X"}, headers=headers)
    assert response.status_code == 401


def test_only_super_admin_creates_users(client, make_student, group):
    student = make_student()
    headers = auth_headers(login(client, "student", student["login"], student["password"])["token"])
    response = client.post(
        f"{API}/student/create",
        data={"full_name": "Friend", "login": unique("student"), "password": "secret", "group_id": group["id"]},
        headers=headers,
    )
    assert response.status_code == 401


def test_change_student_group(client, sa_headers, make_student):
    student = make_student()
    other = client.post(f"{API}/group/create", json={"name": unique("group")}, headers=sa_headers).json()

    response = client.patch(f"{API}/student/group/{student['id']}", json={"group_id": other["id"]}, headers=sa_headers)
    assert response.status_code == 200
    assert response.json()["group_id"] == other["id"]

    response = client.patch(f"{API}/student/group/{student['id']}", json={"group_id": "missing"}, headers=sa_headers)
    assert response.status_code == 404


def test_deleting_student_removes_image(client, sa_headers, make_student):
    student = make_student(files=_png())
    assert student["image"] is not None
    path = _image_path(student)
    assert path.exists()

    response = client.delete(f"{API}/student/delete/{student['id']}", headers=sa_headers)
    assert response.status_code == 200
    assert not path.exists()
    assert client.get(f"{API}/student/{student['id']}", headers=sa_headers).status_code == 404
    assert client.get(f"{API}/image/{student['image_id']}", headers=sa_headers).status_code == 404


def test_image_replacement_removes_previous_file(client, sa_headers, make_teacher):
    teacher = make_teacher(files=_png("first.png"))
    old_path = _image_path(teacher)
    assert old_path.exists()

    response = client.patch(
        f"{API}/teacher/update/{teacher['id']}",
        data={"telegram": "@teacher"},
        files=_png("second.png"),
        headers=sa_headers,
    )
    assert response.status_code == 200, response.text
    updated = response.json()
    assert updated["telegram"] == "@teacher"
    assert updated["image_id"] != teacher["image_id"]
    assert _image_path(updated).exists()
    assert not old_path.exists()

    assert client.get(f"/static/{updated['image']['image']}").status_code == 200


def test_non_image_upload_rejected(client, sa_headers):
    response = client.post(
        f"{API}/teacher/create",
        data={"full_name": "Bad Upload", "login": unique("teacher"), "password": "secret"},
        files={"image": ("notes.txt", b"plain text", "text/plain")},
        headers=sa_headers,
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Only image files are allowed"


def test_create_then_get_teacher(client, make_teacher):
    teacher = make_teacher()
    data = login(client, "teacher", teacher["login"], teacher["password"])
    headers = auth_headers(data["token"])

    response = client.get(f"{API}/teacher/{teacher['id']}", headers=headers)
    assert response.status_code == 200
    assert response.json()["full_name"] == teacher["full_name"]

    other = make_teacher()
    assert client.get(f"{API}/teacher/{other['id']}", headers=headers).status_code == 401


def test_deleting_teacher_removes_image(client, sa_headers, make_teacher):
    teacher = make_teacher(files=_png())
    path = _image_path(teacher)
    assert path.exists()

    assert client.delete(f"{API}/teacher/delete/{teacher['id']}", headers=sa_headers).status_code == 200
    assert not path.exists()


def test_oversized_image_rejected(client, sa_headers, monkeypatch):
    monkeypatch.setattr(settings, "MAX_IMAGE_SIZE", 16)
    before = set(Path(settings.STATIC_DIR).iterdir())

    response = client.post(
        f"{API}/teacher/create",
        data={"full_name": "Big Upload", "login": unique("teacher"), "password": "secret"},
        files=_png("huge.png"),
        headers=sa_headers,
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Image is too large"
    assert set(Path(settings.STATIC_DIR).iterdir()) == before


def test_image_files_follow_transaction_outcome(tmp_path):
    engine = create_engine("sqlite://")
    removed = tmp_path / "removed.png"
    written = tmp_path / "written.png"
    removed.write_bytes(PNG_BYTES)
    written.write_bytes(PNG_BYTES)

    with Session(engine) as session:
        session.connection()
        schedule_file_removal(session, removed)
        track_written_file(session, written)
        session.rollback()

        # rolled back removal keeps the file, rolled back upload is discarded
        assert removed.exists()
        assert not written.exists()

        session.connection()
        schedule_file_removal(session, removed)
        session.commit()

    assert not removed.exists()
    engine.dispose()
