from typing import Any, Dict
from jose import jwt, JWTError

from ..core.config import settings

# --- JWT Token Verification ---

def decode_access_token(token: str) -> Dict[str, Any]:
    """Decodes and validates an access token issued by the auth service."""
    if not settings.SECRET_KEY:
        raise ValueError("SECRET_KEY is not configured")

    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    if payload.get("type", "access") != "access":
        raise JWTError("Invalid token type")
    return payload
