"""
Category Lookup Interface.
"""

from typing import List, Optional, Protocol

from storefront.domain.models.category import Category


class CategoryRepository(Protocol):
    """Interface for Category operations. Append-only."""

    def list_all(self) -> List[Category]:
        """All categories ordered by description."""
        ...

    def get_by_id(self, category_id: str) -> Optional[Category]:
        """Get a category by its generated id."""
        ...

    def exists(self, description: str) -> bool:
        """Whether a category label exists."""
        ...

    def create(self, description: str) -> Category:
        """Create a category. Raises DuplicateCategoryException on conflict."""
        ...
