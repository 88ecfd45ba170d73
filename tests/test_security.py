from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi import HTTPException

from core.security import UserRole, create_access_token, decode_access_token, require_roles
from core.settings import settings


def test_round_trip_claims():
    user = decode_access_token(create_access_token(7, 'jane', UserRole.MANAGER))

    assert user.user_id == 7
    assert user.username == 'jane'
    assert user.role is UserRole.MANAGER


def test_expired_token():
    token = jwt.encode(
        {'sub': '1', 'role': 'admin', 'exp': datetime.now(timezone.utc) - timedelta(minutes=1)},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )

    with pytest.raises(HTTPException) as exc:
        decode_access_token(token)
    assert exc.value.status_code == 401


def test_wrong_secret():
    token = jwt.encode({'sub': '1', 'role': 'admin'}, 'x' * 40, algorithm='HS256')

    with pytest.raises(HTTPException) as exc:
        decode_access_token(token)
    assert exc.value.status_code == 401


def test_unknown_role():
    token = jwt.encode({'sub': '1', 'role': 'owner'}, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)

    with pytest.raises(HTTPException) as exc:
        decode_access_token(token)
    assert exc.value.status_code == 401


async def test_require_roles_denies_other_roles():
    checker = require_roles(UserRole.ADMIN)
    user = decode_access_token(create_access_token(1, 'bob', UserRole.USER))

    with pytest.raises(HTTPException) as exc:
        await checker(user=user)
    assert exc.value.status_code == 403
