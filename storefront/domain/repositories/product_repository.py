"""
Product Catalog Store Interface.
Defines specific data access operations for Products.
"""

from typing import Any, Dict, List, Optional, Tuple

from storefront.domain.repositories.base import BaseRepository
from storefront.domain.models.product import Product


class ProductRepository(BaseRepository[Product]):
    """Interface for Product-specific operations."""

    def get_with_creator(self, product_id: str) -> Optional[Product]:
        """Get a product (active or not) with its owner loaded."""
        ...

    def find_page(self, query: Any) -> Tuple[List[Product], int]:
        """Run a catalog query; returns the page of rows and the total match count."""
        ...

    def get_statistics(self, conditions: List[Any]) -> Dict[str, Any]:
        """Average/min/max price and total stock over the matching set."""
        ...

    def soft_delete(self, product: Product) -> Product:
        """Flip the active flag off."""
        ...
