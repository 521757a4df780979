from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest
from jose import jwt

from src.adapters.auth.identity import JWTIdentityGate, issue_token
from src.domain.entities import Role
from src.ports.auth import AuthenticationError
from src.rules.models import AuthRules

SECRET = "unit-secret"


@pytest.fixture
def gate():
    return JWTIdentityGate.from_rules(AuthRules(), SECRET)


def test_valid_token_yields_actor(gate):
    user_id = uuid4()
    token = issue_token(user_id, SECRET, role=Role.EDITOR, email="ed@example.com")

    actor = gate.verify(token)

    assert actor.id == user_id
    assert actor.role is Role.EDITOR
    assert actor.email == "ed@example.com"


def test_missing_role_defaults_to_viewer(gate):
    actor = gate.verify(issue_token(uuid4(), SECRET))

    assert actor.role is Role.VIEWER
    assert actor.email == ""


def test_unknown_role_rejected(gate):
    token = jwt.encode(
        {"sub": str(uuid4()), "user_metadata": {"role": "superuser"}}, SECRET, algorithm="HS256"
    )

    with pytest.raises(AuthenticationError):
        gate.verify(token)


def test_wrong_secret_rejected(gate):
    with pytest.raises(AuthenticationError):
        gate.verify(issue_token(uuid4(), "other-secret", role="admin"))


def test_expired_token_rejected(gate):
    token = issue_token(
        uuid4(),
        SECRET,
        role="admin",
        now_utc=datetime.now(UTC) - timedelta(hours=2),
        expires_delta=timedelta(minutes=5),
    )

    with pytest.raises(AuthenticationError):
        gate.verify(token)


def test_garbage_rejected(gate):
    with pytest.raises(AuthenticationError):
        gate.verify("not.a.token")


def test_non_uuid_subject_rejected(gate):
    token = jwt.encode({"sub": "user-42"}, SECRET, algorithm="HS256")

    with pytest.raises(AuthenticationError):
        gate.verify(token)


def test_custom_claim_path():
    gate = JWTIdentityGate(SECRET, role_claim_path=["app_role"])
    token = jwt.encode({"sub": str(uuid4()), "app_role": "admin"}, SECRET, algorithm="HS256")

    assert gate.verify(token).role is Role.ADMIN


def test_empty_secret_refused():
    with pytest.raises(ValueError):
        JWTIdentityGate("")
