"""User API routes — register, login, profile, password and admin management."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from storefront.application.services.catalog_query import MAX_PAGE, MAX_PAGE_SIZE
from storefront.application.services.user_service import (
    authenticate_user,
    change_password,
    deactivate_user,
    get_profile,
    get_user_by_id,
    get_user_stats,
    list_users,
    register_user,
    update_profile,
)
from storefront.domain.repositories.user_repository import UserRepository
from storefront.domain.schemas.auth import (
    Identity,
    LoginRequest,
    PasswordChange,
    ProfileUpdate,
    RegisterRequest,
    UserFilter,
)
from storefront.interfaces.api.deps import get_current_user, require_admin
from storefront.interfaces.api.responses import envelope
from storefront.interfaces.deps import get_user_repository

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(body: RegisterRequest, repo: UserRepository = Depends(get_user_repository)):
    result = register_user(repo, body)
    return envelope(result, "Usuario registrado exitosamente")


@router.post("/login")
def login(body: LoginRequest, repo: UserRepository = Depends(get_user_repository)):
    result = authenticate_user(repo, body.email, body.password)
    return envelope(result, "Inicio de sesión exitoso")


@router.get("/profile")
def read_profile(
    user: Identity = Depends(get_current_user),
    repo: UserRepository = Depends(get_user_repository),
):
    return envelope(get_profile(repo, user.id))


@router.put("/profile")
def edit_profile(
    body: ProfileUpdate,
    user: Identity = Depends(get_current_user),
    repo: UserRepository = Depends(get_user_repository),
):
    return envelope(update_profile(repo, user.id, body), "Perfil actualizado exitosamente")


@router.put("/change-password")
def edit_password(
    body: PasswordChange,
    user: Identity = Depends(get_current_user),
    repo: UserRepository = Depends(get_user_repository),
):
    change_password(repo, user.id, body)
    return envelope(message="Contraseña actualizada exitosamente")


@router.get("/stats/overview")
def user_stats(
    admin: Identity = Depends(require_admin),
    repo: UserRepository = Depends(get_user_repository),
):
    return envelope(get_user_stats(repo))


@router.get("")
def all_users(
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    role: Optional[str] = None,
    is_active: Optional[bool] = Query(None, alias="isActive"),
    search: Optional[str] = None,
    created_after: Optional[datetime] = Query(None, alias="createdAfter"),
    admin: Identity = Depends(require_admin),
    repo: UserRepository = Depends(get_user_repository),
):
    filters = UserFilter(
        page=page,
        limit=limit,
        role=role,
        is_active=is_active,
        search=search,
        created_after=created_after,
    )
    return envelope(list_users(repo, filters))


@router.get("/{user_id}")
def read_user(
    user_id: UUID,
    user: Identity = Depends(get_current_user),
    repo: UserRepository = Depends(get_user_repository),
):
    return envelope(get_user_by_id(repo, user, str(user_id)))


@router.delete("/{user_id}")
def deactivate(
    user_id: UUID,
    admin: Identity = Depends(require_admin),
    repo: UserRepository = Depends(get_user_repository),
):
    deactivate_user(repo, admin, str(user_id))
    return envelope(message="Usuario desactivado exitosamente")
