from datetime import datetime, timedelta, timezone

import jwt
import pytest

from academy.core.errors import Unauthorized
from academy.core.roles import Role
from academy.core.tokens import JwtTokenCodec
from academy.schemas.session import SessionToken


def make_token(**overrides) -> SessionToken:
    now = datetime.now(timezone.utc).replace(microsecond=0)
    fields = dict(
        id=7,
        email="coach@example.com",
        name="Coach",
        timezone="Europe/Berlin",
        is_student=True,
        is_teacher=True,
        is_admin=False,
        access_expiry=now + timedelta(days=10),
        current_role=Role.TEACHER,
        issued_at=now,
        expires_at=now + timedelta(hours=24),
    )
    fields.update(overrides)
    return SessionToken(**fields)


def test_decode_restores_session_fields():
    codec = JwtTokenCodec(secret_key="test-secret")
    token = make_token()

    decoded = codec.decode(codec.encode(token))

    assert decoded == token
    assert codec.verify(codec.encode(token)) is True


def test_token_signed_with_other_key_is_rejected():
    raw = JwtTokenCodec(secret_key="someone-else").encode(make_token())

    with pytest.raises(Unauthorized):
        JwtTokenCodec(secret_key="test-secret").decode(raw)


def test_expired_token_is_rejected():
    past = datetime.now(timezone.utc) - timedelta(days=2)
    codec = JwtTokenCodec(secret_key="test-secret")
    raw = codec.encode(make_token(issued_at=past, expires_at=past + timedelta(hours=24)))

    with pytest.raises(Unauthorized) as exc:
        codec.decode(raw)
    assert exc.value.status_code == 401
    assert codec.verify(raw) is False


def test_garbage_is_rejected():
    assert JwtTokenCodec(secret_key="test-secret").verify("not-a-token") is False


def test_forged_current_role_is_rejected():
    # correctly signed, but claims a persona the flags don't grant
    now = datetime.now(timezone.utc)
    claims = {
        "sub": "7",
        "email": "coach@example.com",
        "name": "Coach",
        "tz": "UTC",
        "is_student": True,
        "is_teacher": False,
        "is_admin": False,
        "access_expiry": None,
        "current_role": "admin",
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(hours=1)).timestamp()),
    }
    raw = jwt.encode(claims, "test-secret", algorithm="HS256")

    with pytest.raises(Unauthorized):
        JwtTokenCodec(secret_key="test-secret").decode(raw)


def test_session_token_requires_granted_current_role():
    with pytest.raises(ValueError):
        make_token(is_teacher=False, current_role=Role.TEACHER)
