import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from stockwatch.core.errors import RecordingFailed
from stockwatch.core.types import AlertCategory, AlertRecord, AlertStatus, RecordStatus
from stockwatch.models.alert import Alert

logger = logging.getLogger(__name__)


class SqlAlertStore:
    """Alert store backed by the ``alerts`` table.

    The unique constraint on (product_id, category, alert_day) is what
    de-duplicates alerts, across processes as well as across runs.
    """

    def __init__(self, session_factory=None):
        if session_factory is None:
            from stockwatch.database.session import SessionLocal

            session_factory = SessionLocal
        self._session_factory = session_factory

    def insert_if_absent(self, product_id, category, day, fields):
        db = self._session_factory()
        try:
            db.add(
                Alert(
                    product_id=product_id,
                    category=AlertCategory(category).value,
                    alert_day=day,
                    status=AlertStatus.NEW.value,
                    **fields,
                )
            )
            db.commit()
            return RecordStatus.CREATED
        except IntegrityError:
            db.rollback()
            return RecordStatus.ALREADY_EXISTS
        except SQLAlchemyError as exc:
            db.rollback()
            raise RecordingFailed("Alert insert failed: {}".format(exc)) from exc
        finally:
            db.close()


def alert_fields(candidate, severity):
    product = candidate.product
    if candidate.category == AlertCategory.EXPIRY:
        title = "Product Expiring Soon: {}".format(product.name)
        description = "{} (SKU: {}) will expire in {} days.".format(
            product.name,
            product.sku,
            candidate.days_until_expiry,
        )
    else:
        title = "Low Stock Alert: {}".format(product.name)
        description = (
            "{} (SKU: {}) is below reorder level. "
            "Current quantity: {:g}, Reorder Level: {:g}"
        ).format(product.name, product.sku, product.quantity, product.reorder_level)
    return {
        "title": title,
        "description": description,
        "severity": severity.value,
        "location": product.location,
    }


class AlertRecorder:
    def __init__(self, store):
        self._store = store

    def record(self, candidate, severity, day):
        product_id = candidate.product.id
        try:
            status = self._store.insert_if_absent(
                product_id,
                candidate.category,
                day,
                alert_fields(candidate, severity),
            )
        except RecordingFailed as exc:
            logger.warning(
                "Alert recording failed for product %s (%s): %s",
                product_id,
                candidate.category.value,
                exc,
            )
            return AlertRecord(
                product_id=product_id,
                category=candidate.category,
                status=RecordStatus.FAILED,
                severity=severity,
                detail=str(exc),
            )
        except Exception as exc:
            logger.exception(
                "Unexpected alert store error for product %s (%s)",
                product_id,
                candidate.category.value,
            )
            return AlertRecord(
                product_id=product_id,
                category=candidate.category,
                status=RecordStatus.FAILED,
                severity=severity,
                detail=str(exc) or type(exc).__name__,
            )

        status = RecordStatus(status)
        if status == RecordStatus.ALREADY_EXISTS:
            logger.debug("Alert for product %s already recorded on %s", product_id, day)
        return AlertRecord(
            product_id=product_id,
            category=candidate.category,
            status=status,
            severity=severity,
        )

    def record_all(self, candidates, severity_for, day, results=None):
        """Record candidates in order, appending each record to ``results`` as it lands."""
        if results is None:
            results = []
        for candidate in candidates:
            results.append(self.record(candidate, severity_for(candidate), day))
        return results


__all__ = ["AlertRecorder", "SqlAlertStore", "alert_fields"]
