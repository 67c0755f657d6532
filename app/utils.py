import jwt
import random
from datetime import datetime, timedelta
from typing import Optional
from .config import settings

SHARE_CODE_MIN = 10_000_000
SHARE_CODE_MAX = 99_999_999
SHARE_CODE_LENGTH = 8

# =========================
# Share Codes
# =========================
def generate_share_code() -> str:
    """Generate an 8-digit share code. Uniqueness is not checked."""
    return str(random.randint(SHARE_CODE_MIN, SHARE_CODE_MAX))


def is_valid_share_code(code: Optional[str]) -> bool:
    return (
        code is not None
        and len(code) == SHARE_CODE_LENGTH
        and code.isascii()
        and code.isdigit()
    )


# =========================
# Content Classification
# =========================
def classify_upload(content_type: Optional[str], has_file: bool) -> str:
    if not has_file:
        return "text"
    if content_type and content_type.startswith("image/"):
        return "image"
    return "file"


def file_extension(filename: str) -> str:
    # Last dot-separated segment; a name without a dot is its own extension
    return filename.rsplit(".", 1)[-1]


# =========================
# JWT Token Handling
# =========================
def create_jwt_token(data: dict, expires_minutes: Optional[int] = None):
    """Create a JWT access token. Used by development tooling and tests; production tokens come from the identity provider."""
    to_encode = data.copy()
    expire = datetime.utcnow() + timedelta(minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire, "type": "access"})

    # Ensure SECRET_KEY is properly set
    if not settings.SECRET_KEY or settings.SECRET_KEY == "change-me-in-prod":
        raise ValueError("SECRET_KEY not properly configured")

    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return encoded_jwt

def decode_jwt_token(token: str):
    """Decode and verify JWT token"""
    if not token:
        return None
    # Ensure SECRET_KEY is properly set
    if not settings.SECRET_KEY or settings.SECRET_KEY == "change-me-in-prod":
        return None
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None
