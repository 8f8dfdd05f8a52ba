from conftest import API, auth_headers, login, unique


def test_subject_crud_and_unique_title(client, sa_headers, make_student):
    title = unique("Math")
    response = client.post(f"{API}/subject/create", json={"title": title, "description": "Algebra"}, headers=sa_headers)
    assert response.status_code == 201
    subject = response.json()

    duplicate = client.post(f"{API}/subject/create", json={"title": title}, headers=sa_headers)
    assert duplicate.status_code == 400
    assert duplicate.json()["detail"] == "Subject already exists"

    student = make_student()
    headers = auth_headers(login(client, "student", student["login"], student["password"])["token"])
    assert client.get(f"{API}/subject/{subject['id']}", headers=headers).json()["title"] == title
    assert client.post(f"{API}/subject/create", json={"title": unique("Art")}, headers=headers).status_code == 401

    response = client.patch(f"{API}/subject/update/{subject['id']}", json={"description": "Geometry"}, headers=sa_headers)
    assert response.status_code == 200
    assert response.json()["description"] == "Geometry"

    assert client.delete(f"{API}/subject/delete/{subject['id']}", headers=sa_headers).status_code == 204
    assert client.get(f"{API}/subject/{subject['id']}", headers=sa_headers).status_code == 404


def test_teacher_subject_assignment(client, sa_headers, make_teacher):
    teacher = make_teacher()
    subject = client.post(f"{API}/subject/create", json={"title": unique("Physics")}, headers=sa_headers).json()
    payload = {"teacher_id": teacher["id"], "subject_id": subject["id"]}

    response = client.post(f"{API}/teacher-subject/create", json=payload, headers=sa_headers)
    assert response.status_code == 201, response.text
    link = response.json()
    assert link["subject"]["title"] == subject["title"]

    assert client.post(f"{API}/teacher-subject/create", json=payload, headers=sa_headers).status_code == 400
    missing = {"teacher_id": "missing", "subject_id": subject["id"]}
    assert client.post(f"{API}/teacher-subject/create", json=missing, headers=sa_headers).status_code == 404

    headers = auth_headers(login(client, "teacher", teacher["login"], teacher["password"])["token"])
    subjects = client.get(f"{API}/teacher/{teacher['id']}/subjects", headers=headers).json()
    assert [item["id"] for item in subjects] == [subject["id"]]

    links = client.get(f"{API}/teacher-subject/", params={"teacher_id": teacher["id"]}, headers=headers).json()
    assert [item["id"] for item in links] == [link["id"]]

    assert client.delete(f"{API}/teacher-subject/delete/{link['id']}", headers=headers).status_code == 401
    assert client.delete(f"{API}/teacher-subject/delete/{link['id']}", headers=sa_headers).status_code == 204
    assert client.get(f"{API}/teacher/{teacher['id']}/subjects", headers=headers).json() == []


def test_group_students_and_group_removal(client, sa_headers, make_student, make_teacher, group):
    student = make_student()
    teacher = make_teacher()
    teacher_headers = auth_headers(login(client, "teacher", teacher["login"], teacher["password"])["token"])
    student_headers = auth_headers(login(client, "student", student["login"], student["password"])["token"])

    response = client.get(f"{API}/group/{group['id']}/students", headers=teacher_headers)
    assert response.status_code == 200
    assert [item["id"] for item in response.json()] == [student["id"]]
    assert client.get(f"{API}/group/{group['id']}/students", headers=student_headers).status_code == 401

    duplicate = client.post(f"{API}/group/create", json={"name": group["name"]}, headers=sa_headers)
    assert duplicate.status_code == 400

    assert client.delete(f"{API}/group/delete/{group['id']}", headers=sa_headers).status_code == 204
    assert client.get(f"{API}/group/{group['id']}", headers=sa_headers).status_code == 404

    orphan = client.get(f"{API}/student/{student['id']}", headers=sa_headers).json()
    assert orphan["group_id"] is None
