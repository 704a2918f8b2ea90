import unittest

from fastapi import FastAPI
from fastapi.testclient import TestClient

from stockwatch.core.errors import SourceUnavailable
from stockwatch.core.types import Channel, CheckType
from stockwatch.routers import health_router, scans_router
from stockwatch.routers.scans import get_orchestrator
from stockwatch.services.alert_recorder import AlertRecorder
from stockwatch.services.dispatcher import NotificationDispatcher
from stockwatch.services.expiry_scanner import ExpiryScanner
from stockwatch.services.scan_service import ScanOrchestrator

from support import NOW, FakeAlertStore, FakeChannel, FakeSource, make_product, make_supplier


def _client(source):
    orchestrator = ScanOrchestrator(
        scanner=ExpiryScanner(source, clock=lambda: NOW),
        recorder=AlertRecorder(FakeAlertStore()),
        dispatcher=NotificationDispatcher([FakeChannel(Channel.EMAIL), FakeChannel(Channel.SMS)]),
        clock=lambda: NOW,
    )
    app = FastAPI()
    app.include_router(health_router)
    app.include_router(scans_router)
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    return TestClient(app)


class ScansRouterTest(unittest.TestCase):
    def test_run_returns_report(self):
        source = FakeSource(expiring=[(make_product(1, days=10), make_supplier(1, phone=None))])

        response = _client(source).post("/scans/run", json={"check_type": CheckType.EXPIRY.value})

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["check_type"], "expiry")
        self.assertEqual(body["status"], "completed")
        self.assertEqual(body["totals"]["sent"], 1)
        outcomes = body["reports"][0]["outcomes"]
        self.assertEqual([(o["channel"], o["status"]) for o in outcomes], [("email", "sent"), ("sms", "skipped")])
        self.assertEqual(body["reports"][0]["alerts"][0]["severity"], "high")

    def test_source_failure_returns_503(self):
        source = FakeSource(error=SourceUnavailable("database is down"))
        response = _client(source).post("/scans/run", json={"check_type": "low_stock"})
        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["detail"], "database is down")

    def test_invalid_window_is_rejected(self):
        response = _client(FakeSource()).post("/scans/run", json={"window_days": 0})
        self.assertEqual(response.status_code, 422)

    def test_health(self):
        response = _client(FakeSource()).get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "ok")


if __name__ == "__main__":
    unittest.main()
