"""
Base Repository Interface.
Defines the standard contract for data access operations.
"""

from typing import TypeVar, Optional, Any, Protocol

T = TypeVar("T")


class BaseRepository(Protocol[T]):
    """Interface for generic create/read/update operations.

    There is no delete: records are deactivated, never removed.
    """

    def get_by_id(self, id: str) -> Optional[T]:
        """Get a single entity by ID."""
        ...

    def create(self, obj_in: Any) -> T:
        """Create a new entity."""
        ...

    def update(self, db_obj: T, obj_in: Any) -> T:
        """Update an existing entity."""
        ...
