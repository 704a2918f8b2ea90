from stockwatch.core.types import AlertCategory, Severity

DEFAULT_HIGH_WITHIN_DAYS = 30


def expiry_severity(days_until_expiry, high_within_days=DEFAULT_HIGH_WITHIN_DAYS):
    if days_until_expiry is None:
        return Severity.MEDIUM
    if days_until_expiry <= high_within_days:
        return Severity.HIGH
    return Severity.MEDIUM


def low_stock_severity(quantity):
    if quantity is None or quantity <= 0:
        return Severity.CRITICAL
    return Severity.HIGH


def alert_severity(candidate, high_within_days=DEFAULT_HIGH_WITHIN_DAYS):
    if candidate.category == AlertCategory.EXPIRY:
        return expiry_severity(candidate.days_until_expiry, high_within_days)
    return low_stock_severity(candidate.product.quantity)
