"""Category lookup — maps to the 'category' table."""

from sqlalchemy import Column, String, DateTime

from storefront.infrastructure.database import Base
from storefront.domain.models.user import new_id, utcnow


class Category(Base):
    __tablename__ = "category"

    description = Column(String(100), primary_key=True)
    id = Column(String(36), unique=True, nullable=False, default=new_id)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    def __repr__(self):
        return f"<Category {self.description}>"
