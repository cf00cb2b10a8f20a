"""
SQLAlchemy Implementation of the Credential Store.

ORM rows never leave this module: reads are converted into PublicUser or
StoredUser right here.
"""

from typing import Any, Dict, List, Optional

import structlog
from sqlalchemy import case, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.application.services.catalog_query import escape_like
from storefront.core.exceptions import DuplicateEmailException
from storefront.domain.models.user import ROLE_USER, User, utcnow
from storefront.domain.repositories.user_repository import UserRepository
from storefront.domain.schemas.auth import PublicUser, StoredUser, UserFilter
from storefront.domain.schemas.common import Pagination

logger = structlog.get_logger(__name__)

PROFILE_FIELDS = ("name", "avatar", "bio", "phone")


class SQLAlchemyUserRepository(UserRepository):
    """Credential store backed by the 'users' table."""

    def __init__(self, db: Session):
        self.db = db

    def _query(self, include_inactive: bool = False):
        query = self.db.query(User)
        if not include_inactive:
            query = query.filter(User.is_active.is_(True))
        return query

    def _email_taken(self, email: str) -> bool:
        return (
            self.db.query(User.id).filter(func.lower(User.email) == email.lower()).first()
            is not None
        )

    def create(self, name: str, email: str, password_hash: str, role: str = ROLE_USER) -> PublicUser:
        email = email.strip().lower()
        if self._email_taken(email):
            raise DuplicateEmailException()

        user = User(name=name, email=email, password_hash=password_hash, role=role or ROLE_USER)
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race against a concurrent registration
            self.db.rollback()
            raise DuplicateEmailException()
        self.db.refresh(user)
        return PublicUser.model_validate(user)

    def find_by_email(self, email: str, include_inactive: bool = False) -> Optional[StoredUser]:
        user = (
            self._query(include_inactive)
            .filter(func.lower(User.email) == email.strip().lower())
            .first()
        )
        return StoredUser.model_validate(user) if user else None

    def find_by_id(
        self, user_id: str, with_hash: bool = False, include_inactive: bool = False
    ) -> Optional[PublicUser]:
        user = self._query(include_inactive).filter(User.id == user_id).first()
        if user is None:
            return None
        projection = StoredUser if with_hash else PublicUser
        return projection.model_validate(user)

    def touch_last_login(self, user_id: str) -> None:
        # Single-column UPDATE; no ORM flush of the rest of the row
        self.db.query(User).filter(User.id == user_id).update({User.last_login: utcnow()})
        self.db.commit()

    def update_profile(self, user_id: str, changes: Dict[str, Any]) -> Optional[PublicUser]:
        user = self._query().filter(User.id == user_id).first()
        if user is None:
            return None

        for field in PROFILE_FIELDS:
            if field in changes:
                setattr(user, field, changes[field])

        self.db.commit()
        self.db.refresh(user)
        return PublicUser.model_validate(user)

    def set_password_hash(self, user_id: str, password_hash: str) -> None:
        self.db.query(User).filter(User.id == user_id).update(
            {User.password_hash: password_hash, User.updated_at: utcnow()}
        )
        self.db.commit()

    def deactivate(self, user_id: str) -> bool:
        updated = self.db.query(User).filter(User.id == user_id).update(
            {User.is_active: False, User.updated_at: utcnow()}
        )
        self.db.commit()
        return updated > 0

    def get_with_filters(self, filters: UserFilter) -> Dict[str, Any]:
        query = self._query(include_inactive=True)

        if filters.role:
            query = query.filter(User.role == filters.role)
        if filters.is_active is not None:
            query = query.filter(User.is_active.is_(filters.is_active))
        if filters.search:
            pattern = f"%{escape_like(filters.search.strip())}%"
            query = query.filter(
                or_(User.name.ilike(pattern, escape="\\"), User.email.ilike(pattern, escape="\\"))
            )
        if filters.created_after:
            query = query.filter(User.created_at >= filters.created_after)

        total = query.count()
        offset = (filters.page - 1) * filters.limit
        users = (
            query.order_by(User.created_at.desc(), User.id.asc())
            .offset(offset)
            .limit(filters.limit)
            .all()
        )

        return {
            "users": [PublicUser.model_validate(u) for u in users],
            "pagination": Pagination.build(filters.page, filters.limit, len(users), total),
        }

    def get_stats(self) -> List[Dict[str, Any]]:
        results = (
            self.db.query(
                User.role,
                func.count(User.id).label("count"),
                func.coalesce(func.sum(case((User.is_active.is_(True), 1), else_=0)), 0).label("active"),
            )
            .group_by(User.role)
            .order_by(User.role)
            .all()
        )
        return [{"role": r.role, "count": r.count, "active": int(r.active)} for r in results]
