import logging
from datetime import datetime, timedelta, timezone

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tenantcms.config import settings
from tenantcms.constants.auth import ACCESS_TOKEN_EXPIRE_MINUTES, ALGORITHM
from tenantcms.database import get_db
from tenantcms.exceptions import AuthenticationError
from tenantcms.middleware.logging import bind_acting_user
from tenantcms.models.user import User

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bearer tokens are optional: unauthenticated callers reach the access rules as None
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def _signing_secret() -> str:
    if not settings.secret_key:
        logger.error("SECRET_KEY is not configured; bearer tokens cannot be signed or verified")
        raise AuthenticationError("Token signing secret is not configured")
    return settings.secret_key


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    to_encode = data.copy()
    if "sub" not in to_encode:
        raise ValueError("Missing 'sub' claim (user email) in token data.")

    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, _signing_secret(), algorithm=ALGORITHM)


def decode_access_token(token: str) -> str:
    """Return the email carried in the token's ``sub`` claim."""
    try:
        payload = jwt.decode(token, _signing_secret(), algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        logger.warning("Token expired")
        raise AuthenticationError("Token has expired")
    except JWTError as e:
        logger.warning(f"JWT decoding failed: {str(e)}")
        raise AuthenticationError("Invalid token")

    email = payload.get("sub")
    if not email:
        logger.warning("Token is missing 'sub' claim")
        raise AuthenticationError("Token does not contain 'sub' field.")
    return email


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """
    Resolve the acting user from the bearer token.

    Returns None when no token is supplied; the access rules then treat the
    caller as unauthenticated. A token that is present but invalid, or that
    names an unknown user, is rejected with 401.
    """
    if credentials is None:
        return None

    email = decode_access_token(credentials.credentials)
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalars().first()
    if user is None:
        logger.warning(f"User with email '{email}' not found.")
        raise AuthenticationError()

    bind_acting_user(request, user)
    return user
