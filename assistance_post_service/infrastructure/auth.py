"""
JWT token utilities
"""
from typing import Optional, Dict, Any
from jose import jwt, JWTError

from ..config import settings


def decode_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Decode a JWT issued by the auth service

    Returns:
        Token payload, or None if the token is invalid or expired
    """
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM]
        )
    except JWTError:
        return None
