import logging

from stockwatch.core.dates import days_until, utc_now, window_end
from stockwatch.core.types import AlertCategory, Candidate

logger = logging.getLogger(__name__)


def _stock_ratio(product):
    if product.reorder_level <= 0:
        return 0.0 if product.quantity <= 0 else float("inf")
    return product.quantity / product.reorder_level


def is_expiring(product, now, window_days):
    if product.expires_at is None:
        return False
    return now < product.expires_at <= window_end(now, window_days)


def is_low_stock(product):
    return product.quantity <= product.reorder_level


class ExpiryScanner:
    """Selects candidates from the product source, most urgent first."""

    def __init__(self, source, *, clock=utc_now):
        self._source = source
        self._clock = clock

    def scan(self, window_days, mode):
        if window_days is None or int(window_days) <= 0:
            raise ValueError("window_days must be a positive integer")
        window_days = int(window_days)
        mode = AlertCategory(mode)
        now = self._clock()

        if mode == AlertCategory.EXPIRY:
            rows = [
                (product, supplier)
                for product, supplier in self._source.query_expiring(window_days, now)
                if is_expiring(product, now, window_days)
            ]
            rows.sort(key=lambda row: (row[0].expires_at, row[0].id))
        else:
            rows = [
                (product, supplier)
                for product, supplier in self._source.query_low_stock()
                if is_low_stock(product)
            ]
            rows.sort(key=lambda row: (_stock_ratio(row[0]), row[0].id))

        candidates = []
        for index, (product, supplier) in enumerate(rows):
            days_left = None
            if mode == AlertCategory.EXPIRY:
                days_left = days_until(product.expires_at, now)
            candidates.append(
                Candidate(
                    product=product,
                    supplier=supplier,
                    category=mode,
                    index=index,
                    days_until_expiry=days_left,
                )
            )

        logger.info("%s scan found %d candidate(s)", mode.value, len(candidates))
        return candidates


__all__ = ["ExpiryScanner", "is_expiring", "is_low_stock"]
