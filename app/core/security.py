import hmac
import time
import logging
import jwt
from typing import Any, Dict, Optional

from app.core.config import settings

logger = logging.getLogger(__name__)


def verify_admin_credentials(username: str, password: str) -> bool:
    user_ok = hmac.compare_digest(username.encode("utf-8"), settings.ADMIN_USERNAME.encode("utf-8"))
    pass_ok = hmac.compare_digest(password.encode("utf-8"), settings.ADMIN_PASSWORD.encode("utf-8"))
    return user_ok and pass_ok


def create_access_token(username: str, now: Optional[int] = None) -> str:
    now = now or int(time.time())
    payload = {
        "sub": username,
        "username": username,
        "iat": now,
        "exp": now + settings.JWT_EXPIRE_DAYS * 24 * 60 * 60,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired staff token.")
    except jwt.InvalidTokenError as e:
        logger.warning(f"Rejected invalid staff token: {e}")
    return None
