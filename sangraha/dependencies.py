from typing import Annotated

from fastapi import Depends, HTTPException, Request, Response, status
from fastapi.security import APIKeyHeader
from fastapi_limiter import FastAPILimiter
from fastapi_limiter.depends import RateLimiter
from jose import jwt, JWTError

from .config import settings
from .models import UserRole
from .schemas import Identity

api_key_header = APIKeyHeader(name="Authorization")


def _decode_bearer(token: str | None) -> dict:
    scheme, jwt_token = token.split()
    if scheme.lower() != "bearer":
        raise ValueError("Not a bearer token")
    return jwt.decode(jwt_token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])


async def get_key_by_user_id_or_ip(request: Request) -> str:
    """
    Tries to get the user ID from the JWT token.
    If it fails (no token, invalid token), it falls back to the client's IP.
    """
    try:
        payload = _decode_bearer(request.headers.get("Authorization"))
        user_id = payload.get("sub")
        if user_id:
            return str(user_id)
    except (JWTError, ValueError, AttributeError, TypeError):
        # If token is invalid, missing, or malformed, limit by IP
        pass
    return request.client.host if request.client else "unknown"


async def get_current_identity(
        token: Annotated[str, Depends(api_key_header)]
) -> Identity:
    """
    Decodes the JWT from the 'Authorization: Bearer ...' header into the
    caller's user id and role.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = _decode_bearer(token)
        user_id = payload.get("sub")
        if not user_id:
            raise credentials_exception
        role = UserRole(payload.get("role") or UserRole.FARMER.value)
        return Identity(user_id=str(user_id), role=role)
    except (JWTError, ValueError, AttributeError):
        raise credentials_exception


def rate_limit(times: int, minutes: int = 1):
    """
    Per-user (or per-IP) request limit. A no-op when Redis was never
    configured for the limiter.
    """
    limiter = RateLimiter(times=times, minutes=minutes, identifier=get_key_by_user_id_or_ip)

    async def dependency(request: Request, response: Response):
        if FastAPILimiter.redis is None:
            return
        await limiter(request, response)

    return dependency
