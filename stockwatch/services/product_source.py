import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from stockwatch.core.dates import ensure_utc, window_end
from stockwatch.core.errors import SourceUnavailable
from stockwatch.core.types import ProductRecord, SupplierContact
from stockwatch.models.product import Product

logger = logging.getLogger(__name__)


def _clean(value):
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def to_product_record(product):
    return ProductRecord(
        id=product.id,
        name=product.name,
        sku=product.sku,
        quantity=product.quantity,
        unit=product.unit or "",
        reorder_level=product.reorder_level,
        location=product.location or "",
        expires_at=ensure_utc(product.expires_at),
        supplier_id=product.supplier_id,
    )


def to_supplier_contact(supplier):
    if supplier is None:
        return None
    return SupplierContact(
        id=supplier.id,
        name=supplier.name,
        email=_clean(supplier.email),
        phone=_clean(supplier.phone),
    )


class SqlProductSource:
    """Product query interface over the inventory tables.

    Each query returns ``(ProductRecord, SupplierContact | None)`` pairs.
    Detached snapshots are returned so the rest of the scan never touches
    the session.
    """

    def __init__(self, session_factory=None):
        if session_factory is None:
            from stockwatch.database.session import SessionLocal

            session_factory = SessionLocal
        self._session_factory = session_factory

    def query_expiring(self, window_days, now):
        stmt = (
            select(Product)
            .where(
                Product.expires_at.is_not(None),
                Product.expires_at > now,
                Product.expires_at <= window_end(now, window_days),
            )
            .order_by(Product.expires_at.asc(), Product.id.asc())
        )
        return self._fetch(stmt, "expiring")

    def query_low_stock(self):
        stmt = (
            select(Product)
            .where(Product.quantity <= Product.reorder_level)
            .order_by(Product.quantity.asc(), Product.id.asc())
        )
        return self._fetch(stmt, "low-stock")

    def _fetch(self, stmt, label):
        db = self._session_factory()
        try:
            products = db.execute(stmt).unique().scalars().all()
            return [(to_product_record(p), to_supplier_contact(p.supplier)) for p in products]
        except SQLAlchemyError as exc:
            logger.error("Product source %s query failed: %s", label, exc)
            raise SourceUnavailable("Product source unavailable: {}".format(exc)) from exc
        finally:
            db.close()


__all__ = ["SqlProductSource", "to_product_record", "to_supplier_contact"]
