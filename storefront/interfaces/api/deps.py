"""FastAPI dependencies — JWT auth gate in required, optional and admin modes."""

from typing import Optional

from fastapi import Depends
from fastapi.security import APIKeyHeader

from storefront.application.services.auth_service import resolve_identity
from storefront.core.exceptions import AppError, ForbiddenException
from storefront.domain.repositories.user_repository import UserRepository
from storefront.domain.schemas.auth import Identity
from storefront.interfaces.deps import get_user_repository

# Raw header so the "Bearer " prefix can be matched case-sensitively
authorization_header = APIKeyHeader(name="Authorization", auto_error=False, scheme_name="Bearer")


def get_current_user(
    authorization: Optional[str] = Depends(authorization_header),
    repo: UserRepository = Depends(get_user_repository),
) -> Identity:
    """Required mode: resolve the caller or fail with a 401."""
    return resolve_identity(repo, authorization)


def get_optional_user(
    authorization: Optional[str] = Depends(authorization_header),
    repo: UserRepository = Depends(get_user_repository),
) -> Optional[Identity]:
    """Optional mode: any auth failure means an anonymous caller."""
    if not authorization:
        return None
    try:
        return resolve_identity(repo, authorization)
    except AppError:
        return None


def require_admin(user: Identity = Depends(get_current_user)) -> Identity:
    """Admin-only mode."""
    if not user.is_admin:
        raise ForbiddenException("Acceso denegado. Se requieren privilegios de administrador")
    return user
