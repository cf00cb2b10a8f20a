"""
Credential Store Interface.
Owns user records; hands out PublicUser or, on request, StoredUser (with hash).
"""

from typing import Any, Dict, List, Optional, Protocol

from storefront.domain.schemas.auth import PublicUser, StoredUser, UserFilter


class UserRepository(Protocol):
    """Interface for User-specific operations."""

    def create(self, name: str, email: str, password_hash: str, role: str = "user") -> PublicUser:
        """Store a new user. Raises DuplicateEmailException if the email is taken."""
        ...

    def find_by_email(self, email: str, include_inactive: bool = False) -> Optional[StoredUser]:
        """Look up a user (with hash) by case-insensitive email."""
        ...

    def find_by_id(
        self, user_id: str, with_hash: bool = False, include_inactive: bool = False
    ) -> Optional[PublicUser]:
        """Look up a user by id; the hash is only included when asked for."""
        ...

    def touch_last_login(self, user_id: str) -> None:
        """Stamp last_login without touching any other column."""
        ...

    def update_profile(self, user_id: str, changes: Dict[str, Any]) -> Optional[PublicUser]:
        """Apply profile changes to an active user."""
        ...

    def set_password_hash(self, user_id: str, password_hash: str) -> None:
        """Replace the stored hash."""
        ...

    def deactivate(self, user_id: str) -> bool:
        """Soft-delete a user. Returns False if the user does not exist."""
        ...

    def get_with_filters(self, filters: UserFilter) -> Dict[str, Any]:
        """Paginated admin listing, inactive users included."""
        ...

    def get_stats(self) -> List[Dict[str, Any]]:
        """Counts grouped by role."""
        ...
