import unittest

from stockwatch.core.severity_rules import alert_severity, expiry_severity, low_stock_severity
from stockwatch.core.types import AlertCategory, Severity

from support import make_candidate


class SeverityRulesTest(unittest.TestCase):
    def test_expiry_boundaries(self):
        cases = [
            (1, Severity.HIGH),
            (30, Severity.HIGH),
            (31, Severity.MEDIUM),
            (90, Severity.MEDIUM),
        ]
        for days, expected in cases:
            with self.subTest(days=days):
                self.assertEqual(expiry_severity(days), expected)

    def test_expiry_threshold_is_configurable(self):
        self.assertEqual(expiry_severity(45, high_within_days=60), Severity.HIGH)
        self.assertEqual(expiry_severity(10, high_within_days=7), Severity.MEDIUM)

    def test_low_stock(self):
        self.assertEqual(low_stock_severity(0), Severity.CRITICAL)
        self.assertEqual(low_stock_severity(3), Severity.HIGH)

    def test_alert_severity_uses_candidate_category(self):
        self.assertEqual(alert_severity(make_candidate(1, days=12)), Severity.HIGH)
        self.assertEqual(
            alert_severity(make_candidate(1, category=AlertCategory.LOW_STOCK)),
            Severity.HIGH,
        )


if __name__ == "__main__":
    unittest.main()
