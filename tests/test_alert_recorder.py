import unittest
from datetime import date, datetime, timedelta, timezone

from sqlalchemy import func, select

from stockwatch.core.errors import RecordingFailed
from stockwatch.core.types import AlertCategory, RecordStatus, Severity
from stockwatch.models.alert import Alert
from stockwatch.models.product import Product
from stockwatch.services.alert_recorder import AlertRecorder, SqlAlertStore, alert_fields

from support import FakeAlertStore, make_candidate, memory_session_factory


class SqlAlertStoreTest(unittest.TestCase):
    def setUp(self):
        self.engine, self.Session = memory_session_factory()
        db = self.Session()
        db.add(
            Product(
                id=1,
                name="Product 1",
                sku="SKU-1",
                quantity=5,
                reorder_level=10,
                location="Main Pharmacy",
                expires_at=datetime.now(timezone.utc) + timedelta(days=10),
            )
        )
        db.commit()
        db.close()
        self.recorder = AlertRecorder(SqlAlertStore(self.Session))

    def tearDown(self):
        self.engine.dispose()

    def _alert_count(self):
        db = self.Session()
        try:
            return db.execute(select(func.count(Alert.id))).scalar_one()
        finally:
            db.close()

    def test_second_record_same_day_is_deduplicated(self):
        candidate = make_candidate(1, days=10)
        today = date(2026, 3, 1)

        first = self.recorder.record(candidate, Severity.HIGH, today)
        second = self.recorder.record(candidate, Severity.HIGH, today)

        self.assertEqual(first.status, RecordStatus.CREATED)
        self.assertEqual(second.status, RecordStatus.ALREADY_EXISTS)
        self.assertEqual(self._alert_count(), 1)

    def test_new_day_or_category_creates_new_alert(self):
        today = date(2026, 3, 1)
        self.recorder.record(make_candidate(1, days=10), Severity.HIGH, today)
        tomorrow = self.recorder.record(make_candidate(1, days=9), Severity.HIGH, today + timedelta(days=1))
        low_stock = self.recorder.record(
            make_candidate(1, category=AlertCategory.LOW_STOCK), Severity.HIGH, today
        )

        self.assertEqual(tomorrow.status, RecordStatus.CREATED)
        self.assertEqual(low_stock.status, RecordStatus.CREATED)
        self.assertEqual(self._alert_count(), 3)

    def test_stored_alert_fields(self):
        self.recorder.record(make_candidate(1, days=10), Severity.HIGH, date(2026, 3, 1))
        db = self.Session()
        try:
            alert = db.execute(select(Alert)).scalar_one()
        finally:
            db.close()
        self.assertEqual(alert.title, "Product Expiring Soon: Product 1")
        self.assertEqual(alert.description, "Product 1 (SKU: SKU-1) will expire in 10 days.")
        self.assertEqual(alert.severity, "high")
        self.assertEqual(alert.category, "Expiry")
        self.assertEqual(alert.status, "New")

    def test_non_duplicate_store_error_is_reported_not_raised(self):
        engine, Session = memory_session_factory()
        Alert.__table__.drop(bind=engine)
        recorder = AlertRecorder(SqlAlertStore(Session))

        record = recorder.record(make_candidate(1), Severity.HIGH, date(2026, 3, 1))

        self.assertEqual(record.status, RecordStatus.FAILED)
        self.assertIn("Alert insert failed", record.detail)
        engine.dispose()


class AlertRecorderTest(unittest.TestCase):
    def test_record_all_isolates_failing_product(self):
        store = FakeAlertStore(fail_for={2}, error=RecordingFailed("disk full"))
        recorder = AlertRecorder(store)
        candidates = [make_candidate(1, index=0), make_candidate(2, index=1), make_candidate(3, index=2)]

        records = recorder.record_all(candidates, lambda c: Severity.HIGH, date(2026, 3, 1))

        self.assertEqual(
            [r.status for r in records],
            [RecordStatus.CREATED, RecordStatus.FAILED, RecordStatus.CREATED],
        )
        self.assertEqual(records[1].detail, "disk full")

    def test_any_store_error_is_recorded_as_failure(self):
        store = FakeAlertStore(fail_for={1}, error=ConnectionError("connection reset"))
        recorder = AlertRecorder(store)
        candidates = [make_candidate(1, index=0), make_candidate(2, index=1)]

        with self.assertLogs("stockwatch.services.alert_recorder", level="ERROR"):
            records = recorder.record_all(candidates, lambda c: Severity.HIGH, date(2026, 3, 1))

        self.assertEqual([r.status for r in records], [RecordStatus.FAILED, RecordStatus.CREATED])
        self.assertEqual(records[0].detail, "connection reset")

    def test_low_stock_alert_fields(self):
        candidate = make_candidate(7, category=AlertCategory.LOW_STOCK)
        fields = alert_fields(candidate, Severity.CRITICAL)
        self.assertEqual(fields["title"], "Low Stock Alert: Product 7")
        self.assertIn("Current quantity: 10, Reorder Level: 5", fields["description"])
        self.assertEqual(fields["severity"], "critical")


if __name__ == "__main__":
    unittest.main()
