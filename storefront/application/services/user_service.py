"""User service — registration, login, profile and account administration."""

import structlog

from storefront.application.services.auth_service import (
    create_access_token,
    hash_password,
    verify_password,
)
from storefront.application.services.catalog_query import validate_pagination
from storefront.core.exceptions import (
    EntityNotFoundException,
    ForbiddenException,
    InvalidCredentialsException,
    ValidationException,
)
from storefront.domain.models.user import ROLE_USER, ROLES
from storefront.domain.repositories.user_repository import UserRepository
from storefront.domain.schemas.auth import (
    AuthResult,
    Identity,
    PasswordChange,
    ProfileUpdate,
    PublicUser,
    RegisterRequest,
    RoleStats,
    UserFilter,
    UserPage,
    UserStats,
)

logger = structlog.get_logger(__name__)

USER_NOT_FOUND = "Usuario no encontrado"


def create_user(repo: UserRepository, name: str, email: str, password: str, role: str = ROLE_USER) -> PublicUser:
    """Hash the password and store the user."""
    if role not in ROLES:
        raise ValidationException("Rol no válido", details={"role": role})
    return repo.create(name=name, email=email, password_hash=hash_password(password), role=role)


def register_user(repo: UserRepository, body: RegisterRequest) -> AuthResult:
    """Public sign-up. Always creates a regular user."""
    user = create_user(repo, name=body.name, email=body.email, password=body.password)
    logger.info("User registered", user_id=user.id)
    return AuthResult(user=user, token=create_access_token(user.id))


def authenticate_user(repo: UserRepository, email: str, password: str) -> AuthResult:
    """Login. Unknown email, inactive account and wrong password fail identically."""
    stored = repo.find_by_email(email, include_inactive=True)

    if stored is None or not stored.is_active or not verify_password(password, stored.password_hash):
        logger.info("Login failed", email_domain=email.rsplit("@", 1)[-1])
        raise InvalidCredentialsException()

    repo.touch_last_login(stored.id)
    user = repo.find_by_id(stored.id)
    logger.info("Login succeeded", user_id=stored.id)
    return AuthResult(user=user, token=create_access_token(stored.id))


def get_profile(repo: UserRepository, user_id: str) -> PublicUser:
    user = repo.find_by_id(user_id)
    if user is None:
        raise EntityNotFoundException(USER_NOT_FOUND)
    return user


def update_profile(repo: UserRepository, user_id: str, body: ProfileUpdate) -> PublicUser:
    changes = body.model_dump(exclude_unset=True)
    if changes.get("name") is None:
        changes.pop("name", None)

    user = repo.update_profile(user_id, changes)
    if user is None:
        raise EntityNotFoundException(USER_NOT_FOUND)
    logger.info("Profile updated", user_id=user_id, fields=sorted(changes))
    return user


def change_password(repo: UserRepository, user_id: str, body: PasswordChange) -> None:
    """Previously issued tokens stay valid until they expire."""
    stored = repo.find_by_id(user_id, with_hash=True)
    if stored is None:
        raise EntityNotFoundException(USER_NOT_FOUND)

    if not verify_password(body.current_password, stored.password_hash):
        raise ValidationException("Contraseña actual incorrecta")

    repo.set_password_hash(user_id, hash_password(body.new_password))
    logger.info("Password changed", user_id=user_id)


def get_user_by_id(repo: UserRepository, identity: Identity, user_id: str) -> PublicUser:
    """Self or admin only. Admins also see deactivated accounts."""
    if identity.id != user_id and not identity.is_admin:
        raise ForbiddenException("No tienes permisos para ver este perfil")

    user = repo.find_by_id(user_id, include_inactive=identity.is_admin)
    if user is None:
        raise EntityNotFoundException(USER_NOT_FOUND)
    return user


def list_users(repo: UserRepository, filters: UserFilter) -> UserPage:
    validate_pagination(filters.page, filters.limit)
    if filters.role is not None and filters.role not in ROLES:
        raise ValidationException("Rol no válido", details={"role": filters.role})
    return UserPage(**repo.get_with_filters(filters))


def get_user_stats(repo: UserRepository) -> UserStats:
    by_role = [RoleStats(**row) for row in repo.get_stats()]
    total = sum(r.count for r in by_role)
    active = sum(r.active for r in by_role)
    return UserStats(total=total, active=active, inactive=total - active, by_role=by_role)


def deactivate_user(repo: UserRepository, identity: Identity, user_id: str) -> None:
    if identity.id == user_id:
        raise ValidationException("No puedes desactivar tu propia cuenta")

    if not repo.deactivate(user_id):
        raise EntityNotFoundException(USER_NOT_FOUND)
    logger.info("User deactivated", user_id=user_id, by=identity.id)
