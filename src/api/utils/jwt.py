from datetime import UTC, datetime, timedelta
from typing import Optional
from uuid import UUID

from jose import JWTError, jwt

from config import ApplicationConfig


def generate_jwt(user_id: UUID, role: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Generate JWT access token

    Args:
        user_id: User UUID
        role: System role (admin, user)
        expires_delta: Token lifetime, JWT_EXPIRE_MINUTES by default

    Returns:
        JWT token string (HS256)
    """
    now = datetime.now(UTC)
    expires_delta = expires_delta or timedelta(minutes=ApplicationConfig.JWT_EXPIRE_MINUTES)
    payload = {
        "user_id": str(user_id),
        "role": role,
        "exp": now + expires_delta,
        "iat": now,
    }
    return jwt.encode(payload, ApplicationConfig.JWT_SECRET, algorithm="HS256")


def verify_jwt(token: str) -> Optional[dict]:
    """
    Verify and decode JWT token

    Returns:
        Decoded payload dict or None if invalid
    """
    try:
        payload = jwt.decode(token, ApplicationConfig.JWT_SECRET, algorithms=["HS256"])
    except JWTError:
        return None
    if "user_id" not in payload:
        return None
    return payload
