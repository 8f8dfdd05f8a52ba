import pytest

from conftest import API, auth_headers, login, unique


@pytest.fixture
def exam(client, sa_headers, make_teacher):
    """Тест из двух вопросов, созданный преподавателем."""
    teacher = make_teacher()
    headers = auth_headers(login(client, "teacher", teacher["login"], teacher["password"])["token"])
    subject = client.post(f"{API}/subject/create", json={"title": unique("History")}, headers=sa_headers).json()

    response = client.post(
        f"{API}/test/create",
        json={"title": "Midterm", "time_limit": 30, "subject_id": subject["id"]},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    test_data = response.json()

    questions = []
    for text, options in (
            ("Capital of France?", [("Paris", True), ("Lyon", False)]),
            ("Prime numbers?", [("2", True), ("3", True), ("4", False)]),
    ):
        question = client.post(
            f"{API}/question/create", json={"question": text, "test_id": test_data["id"]}, headers=headers
        ).json()
        answers = [
            client.post(
                f"{API}/answer/create",
                json={"answer": answer, "is_true": is_true, "question_id": question["id"]},
                headers=headers,
            ).json()
            for answer, is_true in options
        ]
        questions.append({**question, "answers": answers})

    return {"test": test_data, "questions": questions, "headers": headers, "subject": subject}


@pytest.fixture
def student_headers(client, make_student):
    student = make_student()
    data = login(client, "student", student["login"], student["password"])
    return {"id": student["id"], "headers": auth_headers(data["token"])}


def test_test_requires_existing_subject(client, sa_headers):
    response = client.post(f"{API}/test/create", json={"title": "Orphan", "subject_id": "missing"}, headers=sa_headers)
    assert response.status_code == 404


def test_students_cannot_author_tests(client, exam, student_headers):
    headers = student_headers["headers"]
    payload = {"title": "Cheat", "subject_id": exam["subject"]["id"]}
    assert client.post(f"{API}/test/create", json=payload, headers=headers).status_code == 401

    question_id = exam["questions"][0]["id"]
    response = client.post(f"{API}/answer/create", json={"answer": "x", "question_id": question_id}, headers=headers)
    assert response.status_code == 401


def test_correct_answers_hidden_from_students(client, exam, student_headers):
    test_id = exam["test"]["id"]

    staff_view = client.get(f"{API}/test/{test_id}/full", headers=exam["headers"]).json()
    assert len(staff_view["questions"]) == 2
    assert any(answer["is_true"] for answer in staff_view["questions"][0]["answers"])

    student_view = client.get(f"{API}/test/{test_id}/full", headers=student_headers["headers"]).json()
    assert all(answer["is_true"] is None for q in student_view["questions"] for answer in q["answers"])

    question_id = exam["questions"][0]["id"]
    answers = client.get(f"{API}/answer/", params={"question_id": question_id}, headers=student_headers["headers"])
    assert len(answers.json()) == 2
    assert all(answer["is_true"] is None for answer in answers.json())


def test_submit_grades_and_stores_result(client, exam, student_headers):
    first, second = exam["questions"]
    payload = {
        "test_id": exam["test"]["id"],
        "answers": [
            {"question_id": first["id"], "answer_ids": [first["answers"][0]["id"]]},
            # only one of the two true options
            {"question_id": second["id"], "answer_ids": [second["answers"][0]["id"]]},
        ],
    }
    response = client.post(f"{API}/result/submit", json=payload, headers=student_headers["headers"])
    assert response.status_code == 201, response.text
    result = response.json()
    assert result["correct_answers"] == 1
    assert result["total_questions"] == 2
    assert result["student_id"] == student_headers["id"]

    own = client.get(f"{API}/result/{result['id']}", headers=student_headers["headers"])
    assert own.status_code == 200

    listed = client.get(f"{API}/result/", headers=student_headers["headers"]).json()
    assert [item["id"] for item in listed] == [result["id"]]

    staff_list = client.get(f"{API}/result/", params={"test_id": exam["test"]["id"]}, headers=exam["headers"]).json()
    assert result["id"] in [item["id"] for item in staff_list]

    result_questions = client.get(
        f"{API}/result-question/", params={"result_id": result["id"]}, headers=exam["headers"]
    ).json()
    correctness = {item["question_id"]: item["is_correct"] for item in result_questions}
    assert correctness == {first["id"]: True, second["id"]: False}

    first_rq = next(item for item in result_questions if item["question_id"] == first["id"])
    own_rq = client.get(f"{API}/result-question/{first_rq['id']}", headers=student_headers["headers"])
    assert own_rq.status_code == 200

    result_answers = client.get(
        f"{API}/result-answer/", params={"result_question_id": first_rq["id"]}, headers=exam["headers"]
    ).json()
    assert [item["answer_id"] for item in result_answers] == [first["answers"][0]["id"]]
    own_ra = client.get(f"{API}/result-answer/{result_answers[0]['id']}", headers=student_headers["headers"])
    assert own_ra.status_code == 200


def test_other_student_cannot_read_result(client, exam, student_headers, make_student):
    first = exam["questions"][0]
    payload = {
        "test_id": exam["test"]["id"],
        "answers": [{"question_id": first["id"], "answer_ids": [first["answers"][0]["id"]]}],
    }
    result = client.post(f"{API}/result/submit", json=payload, headers=student_headers["headers"]).json()

    other = make_student()
    other_headers = auth_headers(login(client, "student", other["login"], other["password"])["token"])
    assert client.get(f"{API}/result/{result['id']}", headers=other_headers).status_code == 401
    assert client.get(f"{API}/result/", headers=other_headers).json() == []


def test_invalid_submissions_rejected(client, exam, student_headers, sa_headers):
    first, second = exam["questions"]
    test_id = exam["test"]["id"]
    headers = student_headers["headers"]

    foreign_answer = {"question_id": first["id"], "answer_ids": [second["answers"][0]["id"]]}
    response = client.post(f"{API}/result/submit", json={"test_id": test_id, "answers": [foreign_answer]}, headers=headers)
    assert response.status_code == 400

    unknown_question = {"question_id": "missing", "answer_ids": []}
    response = client.post(f"{API}/result/submit", json={"test_id": test_id, "answers": [unknown_question]}, headers=headers)
    assert response.status_code == 400

    twice = [{"question_id": first["id"], "answer_ids": []}] * 2
    response = client.post(f"{API}/result/submit", json={"test_id": test_id, "answers": twice}, headers=headers)
    assert response.status_code == 400

    response = client.post(f"{API}/result/submit", json={"test_id": "missing", "answers": []}, headers=headers)
    assert response.status_code == 404

    # only students submit
    response = client.post(f"{API}/result/submit", json={"test_id": test_id, "answers": []}, headers=sa_headers)
    assert response.status_code == 401


def test_deleting_test_removes_questions(client, exam):
    test_id = exam["test"]["id"]
    question_id = exam["questions"][0]["id"]
    headers = exam["headers"]

    response = client.patch(f"{API}/test/update/{test_id}", json={"title": "Final"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["title"] == "Final"

    assert client.delete(f"{API}/test/delete/{test_id}", headers=headers).status_code == 204
    assert client.get(f"{API}/test/{test_id}", headers=headers).status_code == 404
    assert client.get(f"{API}/question/{question_id}", headers=headers).status_code == 404


def test_admin_deletes_result_with_its_answers(client, exam, student_headers, sa_headers):
    first = exam["questions"][0]
    payload = {
        "test_id": exam["test"]["id"],
        "answers": [{"question_id": first["id"], "answer_ids": [first["answers"][0]["id"]]}],
    }
    result = client.post(f"{API}/result/submit", json=payload, headers=student_headers["headers"]).json()

    result_question = client.get(
        f"{API}/result-question/", params={"result_id": result["id"]}, headers=sa_headers
    ).json()[0]
    result_answer = client.get(
        f"{API}/result-answer/", params={"result_question_id": result_question["id"]}, headers=sa_headers
    ).json()[0]

    # teachers and the owning student may read but not delete
    assert client.delete(f"{API}/result/delete/{result['id']}", headers=exam["headers"]).status_code == 401
    assert client.delete(f"{API}/result/delete/{result['id']}", headers=student_headers["headers"]).status_code == 401

    assert client.delete(f"{API}/result/delete/{result['id']}", headers=sa_headers).status_code == 204
    assert client.get(f"{API}/result/{result['id']}", headers=sa_headers).status_code == 404
    assert client.get(f"{API}/result-question/{result_question['id']}", headers=sa_headers).status_code == 404
    assert client.get(f"{API}/result-answer/{result_answer['id']}", headers=sa_headers).status_code == 404
    assert client.get(f"{API}/result-question/", params={"result_id": result["id"]}, headers=sa_headers).json() == []
