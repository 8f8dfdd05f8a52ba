from datetime import timedelta

import pytest
from fastapi import HTTPException

from app.core.jwt import create_access_token, create_refresh_token, verify_refresh_token, verify_token
from app.models import Answer, Question
from app.services.result import grade_question
from app.utils.roles import (
    Role,
    is_admin,
    is_staff,
    is_staff_or_owner,
    is_super_admin,
    is_user_self,
    verify_access_token,
)
from app.utils.security import hash_password, hash_token, verify_password, verify_token_hash

PAYLOAD = {"id": "user-1", "login": "user", "role": "teacher"}


def test_access_token_roundtrip_keeps_identity():
    payload = verify_token(create_access_token(PAYLOAD))
    assert payload["id"] == "user-1"
    assert payload["role"] == "teacher"
    assert "exp" in payload


def test_tokens_are_signed_with_separate_keys():
    access = create_access_token(PAYLOAD)
    refresh = create_refresh_token(PAYLOAD)
    assert verify_refresh_token(access) is None
    assert verify_token(refresh) is None
    assert verify_refresh_token(refresh)["login"] == "user"


def test_two_tokens_for_same_user_differ():
    assert create_refresh_token(PAYLOAD) != create_refresh_token(PAYLOAD)


def test_expired_and_garbage_tokens_are_rejected():
    assert verify_token(create_access_token(PAYLOAD, expires_delta=timedelta(seconds=-1))) is None
    assert verify_token("not-a-jwt") is None
    assert verify_token(create_access_token({"login": "no-id"})) is None


def test_verify_access_token_header_formats():
    token = create_access_token(PAYLOAD)
    assert verify_access_token(f"Bearer {token}")["id"] == "user-1"

    for header in (None, "", token, f"Basic {token}", "Bearer "):
        with pytest.raises(HTTPException) as exc:
            verify_access_token(header)
        assert exc.value.status_code == 401
        assert exc.value.detail == "Invalid token"


def test_password_and_refresh_token_hashing():
    hashed = hash_password("secret")
    assert hashed != "secret"
    assert verify_password("secret", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("secret", None)

    token = create_refresh_token(PAYLOAD)
    assert verify_token_hash(token, hash_token(token))
    assert not verify_token_hash(token, None)


def _user(role: Role, user_id: str = "u1") -> dict:
    return {"id": user_id, "login": role.value, "role": role.value}


def test_role_checks():
    is_super_admin(_user(Role.SUPER_ADMIN))
    is_admin(_user(Role.ADMIN))
    is_staff(_user(Role.TEACHER))

    for check, user in (
            (is_super_admin, _user(Role.ADMIN)),
            (is_admin, _user(Role.TEACHER)),
            (is_staff, _user(Role.STUDENT)),
    ):
        with pytest.raises(HTTPException) as exc:
            check(user)
        assert exc.value.status_code == 401
        assert exc.value.detail == "Restricted action"


def test_is_user_self():
    is_user_self(_user(Role.STUDENT, "s1"), "s1", Role.STUDENT)
    is_user_self(_user(Role.SUPER_ADMIN, "root"), "s1", Role.STUDENT)
    is_user_self(_user(Role.ADMIN, "a1"), "a1", Role.ADMIN)

    with pytest.raises(HTTPException):
        is_user_self(_user(Role.STUDENT, "s2"), "s1", Role.STUDENT)
    with pytest.raises(HTTPException):
        # same id in another user table
        is_user_self(_user(Role.TEACHER, "s1"), "s1", Role.STUDENT)
    with pytest.raises(HTTPException):
        is_user_self(_user(Role.ADMIN, "a2"), "s1", Role.STUDENT)


def test_is_staff_or_owner():
    is_staff_or_owner(_user(Role.TEACHER), "s1")
    is_staff_or_owner(_user(Role.STUDENT, "s1"), "s1")
    with pytest.raises(HTTPException):
        is_staff_or_owner(_user(Role.STUDENT, "s2"), "s1")


def test_grade_question_requires_exact_true_set():
    question = Question(
        question="2 + 2?",
        answers=[
            Answer(id="a1", answer="4", is_true=True),
            Answer(id="a2", answer="four", is_true=True),
            Answer(id="a3", answer="5", is_true=False),
        ],
    )
    assert grade_question({"a1", "a2"}, question)
    assert not grade_question({"a1"}, question)
    assert not grade_question({"a1", "a2", "a3"}, question)
    assert not grade_question(set(), question)

    no_true = Question(question="?", answers=[Answer(id="b1", answer="x", is_true=False)])
    assert not grade_question(set(), no_true)
