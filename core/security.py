from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.logger import logger
from core.settings import settings

bearer_scheme = HTTPBearer(auto_error=False)


class UserRole(str, Enum):
    ADMIN = 'admin'
    MANAGER = 'manager'
    USER = 'user'


@dataclass(frozen=True)
class CurrentUser:
    user_id: int
    username: str
    role: UserRole


def create_access_token(user_id: int, username: str, role: UserRole) -> str:
    """Issue a signed access token. Login/refresh live in the auth service."""
    expires = datetime.now(timezone.utc) + timedelta(minutes=settings.JWT_EXPIRES_MINUTES)
    payload = {
        'sub': str(user_id),
        'username': username,
        'role': role.value,
        'exp': expires,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> CurrentUser:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Token has expired')
    except jwt.InvalidTokenError as e:
        logger.warning(f'[AUTH] Invalid token: {e}')
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Invalid or expired token')

    try:
        return CurrentUser(
            user_id=int(payload['sub']),
            username=payload.get('username', ''),
            role=UserRole(payload['role']),
        )
    except (KeyError, ValueError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Invalid or expired token')


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> CurrentUser:
    if credentials is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Not authenticated')
    return decode_access_token(credentials.credentials)


def require_roles(*roles: UserRole):
    """Dependency factory: allow only the listed roles through."""

    async def checker(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in roles:
            logger.warning(f'[AUTH] User ID={user.user_id} with role {user.role.value} denied')
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail='Forbidden resource')
        return user

    return checker
