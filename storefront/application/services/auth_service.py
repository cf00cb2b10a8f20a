"""Auth service — JWT token management, password hashing and identity resolution."""

from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog
from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError
from passlib.context import CryptContext

from storefront.config import get_settings
from storefront.core.exceptions import (
    AccountInactiveException,
    InvalidTokenException,
    MissingCredentialsException,
    TokenExpiredException,
)
from storefront.domain.repositories.user_repository import UserRepository
from storefront.domain.schemas.auth import Identity

logger = structlog.get_logger(__name__)

settings = get_settings()
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

BEARER_PREFIX = "Bearer "


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Unrecognized or malformed hash
        return False


def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """Issue a signed token for a user id."""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.JWT_EXPIRATION_MINUTES))
    claims = {"sub": str(user_id), "iat": now, "exp": expire}
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> str:
    """Verify signature and expiry; returns the subject user id.

    Expired tokens and tampered/garbage tokens raise different errors.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise TokenExpiredException()
    except JWTError:
        raise InvalidTokenException()

    user_id = payload.get("sub")
    if not user_id:
        raise InvalidTokenException()
    return user_id


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Pull the token out of an `Authorization: Bearer <token>` header (case-sensitive)."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise MissingCredentialsException()

    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise MissingCredentialsException()
    return token


def resolve_identity(repo: UserRepository, authorization: Optional[str]) -> Identity:
    """Turn an Authorization header into the caller's identity.

    Tokens are not revocable, so the account's active flag is re-read from the
    store on every call.
    """
    token = extract_bearer_token(authorization)
    user_id = decode_access_token(token)

    user = repo.find_by_id(user_id, include_inactive=True)
    if user is None:
        raise InvalidTokenException("Token inválido - usuario no encontrado")
    if not user.is_active:
        logger.info("Rejected token for inactive account", user_id=user_id)
        raise AccountInactiveException()

    return Identity(id=user.id, name=user.name, email=user.email, role=user.role)
