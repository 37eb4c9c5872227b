from datetime import timedelta

import pytest
from jose import jwt

from uaifood.core.config import get_settings
from uaifood.core.errors import UnauthenticatedError
from uaifood.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from uaifood.models import UserRole


def test_password_hash_round_trip():
    hashed = hash_password("senha123")

    assert hashed != "senha123"
    assert verify_password("senha123", hashed)
    assert not verify_password("outra", hashed)


def test_token_carries_only_id_role_and_expiry():
    token = create_access_token(7, UserRole.ADMIN)
    claims = decode_access_token(token)

    assert claims.user_id == 7
    assert claims.role is UserRole.ADMIN
    assert claims.token_id

    settings = get_settings()
    payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    assert set(payload) == {"sub", "role", "jti", "exp"}


def test_each_token_has_its_own_id():
    first = decode_access_token(create_access_token(1, UserRole.CLIENT))
    second = decode_access_token(create_access_token(1, UserRole.CLIENT))

    assert first.token_id != second.token_id


def test_expired_token_is_rejected():
    token = create_access_token(1, UserRole.CLIENT, expires_delta=timedelta(seconds=-10))

    with pytest.raises(UnauthenticatedError):
        decode_access_token(token)


def test_forged_token_is_rejected():
    token = jwt.encode({"sub": "1", "role": "ADMIN", "jti": "x", "exp": 9999999999}, "wrong")

    with pytest.raises(UnauthenticatedError):
        decode_access_token(token)


def test_token_with_unknown_role_is_rejected():
    settings = get_settings()
    token = jwt.encode(
        {"sub": "1", "role": "ROOT", "jti": "x", "exp": 9999999999},
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )

    with pytest.raises(UnauthenticatedError):
        decode_access_token(token)
