"""
SQLAlchemy Implementation of Product Repository.
"""

from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from storefront.application.services.catalog_query import CatalogQuery
from storefront.domain.models.product import Product
from storefront.domain.repositories.product_repository import ProductRepository
from storefront.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyProductRepository(SQLAlchemyRepository[Product], ProductRepository):
    """Product repository implementation using SQLAlchemy."""

    def __init__(self, db: Session):
        super().__init__(db, Product)

    def get_with_creator(self, product_id: str) -> Optional[Product]:
        return (
            self.db.query(Product)
            .options(joinedload(Product.creator))
            .filter(Product.id == product_id)
            .first()
        )

    def find_page(self, query: CatalogQuery) -> Tuple[List[Product], int]:
        """Run a catalog query with the owner relation loaded."""
        base = self.db.query(Product).filter(*query.conditions)

        total = base.count()
        products = (
            base.options(joinedload(Product.creator))
            .order_by(*query.ordering)
            .offset(query.offset)
            .limit(query.limit)
            .all()
        )
        return products, total

    def get_statistics(self, conditions: List[Any]) -> Dict[str, Any]:
        """Aggregate price/stock over the matching set; empty sets yield zeros."""
        row = (
            self.db.query(
                func.coalesce(func.avg(Product.price), 0).label("avg_price"),
                func.coalesce(func.min(Product.price), 0).label("min_price"),
                func.coalesce(func.max(Product.price), 0).label("max_price"),
                func.coalesce(func.sum(Product.stock), 0).label("total_stock"),
            )
            .filter(*conditions)
            .one()
        )
        return {
            "average_price": round(float(row.avg_price or 0), 2),
            "min_price": float(row.min_price or 0),
            "max_price": float(row.max_price or 0),
            "total_stock": int(row.total_stock or 0),
        }

    def soft_delete(self, product: Product) -> Product:
        return self.update(product, {"is_active": False})
