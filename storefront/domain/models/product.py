"""Product domain model — maps to the 'products' table."""

from sqlalchemy import Column, Integer, String, Numeric, Boolean, DateTime, ForeignKey, Text, JSON
from sqlalchemy.orm import relationship

from storefront.infrastructure.database import Base
from storefront.domain.models.user import User, new_id, utcnow


class Product(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    category = Column(String(100), nullable=False, index=True)
    stock = Column(Integer, nullable=False, default=0)
    images = Column(JSON, nullable=False, default=list)
    tags = Column(JSON, nullable=False, default=list)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    rating_average = Column(Numeric(3, 2), nullable=False, default=0)
    rating_count = Column(Integer, nullable=False, default=0)

    # Owner is set at creation and never reassigned
    owner_id = Column("created_by", String(36), ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=utcnow)

    creator = relationship(User, lazy="select")

    @property
    def rating(self) -> dict:
        return {
            "average": float(self.rating_average or 0),
            "count": int(self.rating_count or 0),
        }

    @property
    def in_stock(self) -> bool:
        return (self.stock or 0) > 0

    def __repr__(self):
        return f"<Product {self.id} - {self.name}>"
