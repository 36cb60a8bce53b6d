from datetime import timedelta
from uuid import uuid4

from jose import jwt

from app.config import settings
from app.core.security import (
    create_access_token,
    get_password_hash,
    verify_password,
    verify_token,
)
from app.utils.constants import Role


def test_password_hash_roundtrip():
    hashed = get_password_hash("s3cret-password")
    assert hashed != "s3cret-password"
    assert verify_password("s3cret-password", hashed)
    assert not verify_password("wrong-password", hashed)


def test_verify_password_without_hash():
    assert verify_password("anything", None) is False
    assert verify_password("anything", "") is False


def test_valid_token_yields_claims():
    user_id = uuid4()
    token = create_access_token(user_id, Role.EMPLOYER, email="hr@acme.com")

    claims = verify_token(token)

    assert claims is not None
    assert claims.user_id == user_id
    assert claims.role == Role.EMPLOYER
    assert claims.email == "hr@acme.com"


def test_missing_token_is_none():
    assert verify_token(None) is None
    assert verify_token("") is None


def test_garbage_token_is_none():
    assert verify_token("not-a-jwt") is None


def test_expired_token_is_none():
    token = create_access_token(uuid4(), Role.STUDENT, expires_delta=timedelta(seconds=-30))
    assert verify_token(token) is None


def test_wrong_signature_is_none():
    payload = {"sub": str(uuid4()), "role": "STUDENT", "exp": 4102444800, "type": "access"}
    token = jwt.encode(payload, "some-other-key", algorithm=settings.ALGORITHM)
    assert verify_token(token) is None


def test_token_without_expiry_is_none():
    payload = {"sub": str(uuid4()), "role": "STUDENT", "type": "access"}
    token = jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    assert verify_token(token) is None


def test_unknown_role_is_none():
    payload = {"sub": str(uuid4()), "role": "SUPERUSER", "exp": 4102444800, "type": "access"}
    token = jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    assert verify_token(token) is None


def test_non_uuid_subject_is_none():
    payload = {"sub": "42", "role": "STUDENT", "exp": 4102444800, "type": "access"}
    token = jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    assert verify_token(token) is None


def test_non_access_token_is_none():
    payload = {"sub": str(uuid4()), "role": "STUDENT", "exp": 4102444800, "type": "refresh"}
    token = jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    assert verify_token(token) is None
