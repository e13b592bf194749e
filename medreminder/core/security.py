from datetime import datetime, timedelta, timezone as dt_timezone
from typing import Any, Optional, Union
import hmac

from jose import jwt
from passlib.context import CryptContext

from medreminder.core.config import settings

# Export the algorithm constant for use in other modules
ALGORITHM = settings.ALGORITHM

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def create_access_token(subject: Union[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    if expires_delta:
        expire = datetime.now(dt_timezone.utc) + expires_delta
    else:
        expire = datetime.now(dt_timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {"exp": expire, "sub": str(subject)}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_service_key(api_key: Optional[str]) -> bool:
    """
    Constant-time check of the privileged key used by the reminder functions
    """
    if not api_key:
        return False
    return hmac.compare_digest(api_key.encode("utf-8"), settings.SERVICE_API_KEY.encode("utf-8"))
