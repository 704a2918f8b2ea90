from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, UniqueConstraint

from stockwatch.database.base import Base


class Alert(Base):
    __tablename__ = "alerts"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    alert_day = Column(Date, nullable=False)
    category = Column(String, nullable=False)

    title = Column(String, nullable=False)
    description = Column(String, nullable=False)
    severity = Column(String, nullable=False, default="medium")
    location = Column(String, nullable=False, default="")
    status = Column(String, nullable=False, default="New")

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("product_id", "category", "alert_day", name="uq_alerts_product_category_day"),
    )


__all__ = ["Alert"]
