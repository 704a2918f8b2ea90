from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from stockwatch.database.base import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    supplier_id = Column(Integer, ForeignKey("suppliers.id"))

    name = Column(String, nullable=False)
    sku = Column(String, nullable=False, unique=True)

    quantity = Column(Float, nullable=False, default=0)
    unit = Column(String, nullable=False, default="units")
    reorder_level = Column(Float, nullable=False, default=0)
    location = Column(String, nullable=False, default="")

    expires_at = Column(DateTime(timezone=True))

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    supplier = relationship("Supplier", lazy="joined")

    __table_args__ = (
        Index("idx_products_expires_at", "expires_at"),
    )


__all__ = ["Product"]
