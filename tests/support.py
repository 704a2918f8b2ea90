import threading
import time
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import sessionmaker

from stockwatch.core.types import (
    AlertCategory,
    Candidate,
    Channel,
    ProductRecord,
    RecordStatus,
    SupplierContact,
)
from stockwatch.database import build_engine, init_db
from stockwatch.notifications.channels.base import ChannelAdapter

NOW = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


def memory_session_factory():
    engine = build_engine("sqlite:///:memory:")
    init_db(bind=engine)
    return engine, sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def make_product(product_id, *, days=None, quantity=10, reorder_level=5, name=None, now=NOW):
    return ProductRecord(
        id=product_id,
        name=name or "Product {}".format(product_id),
        sku="SKU-{}".format(product_id),
        quantity=quantity,
        unit="boxes",
        reorder_level=reorder_level,
        location="Main Pharmacy",
        expires_at=None if days is None else now + timedelta(days=days),
        supplier_id=product_id,
    )


def make_supplier(supplier_id=1, *, email="orders@example.com", phone="+15550100001"):
    return SupplierContact(id=supplier_id, name="Supplier {}".format(supplier_id), email=email, phone=phone)


def make_candidate(product_id, *, index=0, supplier="default", category=AlertCategory.EXPIRY, days=10):
    if supplier == "default":
        supplier = make_supplier(product_id)
    return Candidate(
        product=make_product(product_id, days=days),
        supplier=supplier,
        category=category,
        index=index,
        days_until_expiry=days if category == AlertCategory.EXPIRY else None,
    )


class FakeSource:
    def __init__(self, expiring=(), low_stock=(), error=None):
        self.expiring = list(expiring)
        self.low_stock = list(low_stock)
        self.error = error

    def query_expiring(self, window_days, now):
        if self.error:
            raise self.error
        return list(self.expiring)

    def query_low_stock(self):
        if self.error:
            raise self.error
        return list(self.low_stock)


class FakeChannel(ChannelAdapter):
    """Channel double; ``script`` maps a target to the results of successive sends."""

    def __init__(self, channel, script=None, delays=None):
        self._channel = Channel(channel)
        self._script = {target: list(results) for target, results in (script or {}).items()}
        self._delays = dict(delays or {})
        self._lock = threading.Lock()
        self.calls = []

    @property
    def channel(self):
        return self._channel

    def resolve_target(self, supplier):
        if supplier is None:
            return None
        if self._channel == Channel.EMAIL:
            return supplier.email
        return supplier.phone

    def send(self, target, subject, body):
        with self._lock:
            self.calls.append((target, subject, body))
            results = self._script.get(target)
            result = results.pop(0) if results else "ok"
        delay = self._delays.get(target)
        if delay:
            time.sleep(delay)
        if isinstance(result, Exception):
            raise result
        return result


class FakeAlertStore:
    def __init__(self, fail_for=(), error=None):
        self.rows = {}
        self.fail_for = set(fail_for)
        self.error = error

    def insert_if_absent(self, product_id, category, day, fields):
        if product_id in self.fail_for:
            raise self.error
        key = (product_id, AlertCategory(category), day)
        if key in self.rows:
            return RecordStatus.ALREADY_EXISTS
        self.rows[key] = fields
        return RecordStatus.CREATED
