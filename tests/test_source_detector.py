# tests/test_source_detector.py

"""Tests for hostname-to-marketplace detection."""

import unittest

from dropship_import.extractors.source_detector import (
    detect_source,
    shipping_family,
)


class TestDetectSource(unittest.TestCase):
    """Verify marketplace label resolution."""

    def test_known_hosts(self) -> None:
        cases = {
            "www.alibaba.com": "Alibaba",
            "m.aliexpress.com": "AliExpress",
            "detail.1688.com": "1688",
            "www.ebay.com": "eBay",
            "www.walmart.com": "Walmart",
        }
        for host, label in cases.items():
            with self.subTest(host=host):
                self.assertEqual(detect_source(host), label)

    def test_most_specific_domain_wins(self) -> None:
        """amazon.com.mx must not be reported as plain Amazon."""
        self.assertEqual(detect_source("www.amazon.com.mx"), "Amazon MX")
        self.assertEqual(detect_source("www.amazon.com"), "Amazon")

    def test_unknown_host_falls_back_to_first_label(self) -> None:
        self.assertEqual(detect_source("www.myshop.co"), "myshop")
        self.assertEqual(detect_source("store.example.org"), "store")

    def test_case_insensitive(self) -> None:
        self.assertEqual(detect_source("WWW.ETSY.COM"), "Etsy")


class TestShippingFamily(unittest.TestCase):
    """Verify marketplace-to-shipping-table classification."""

    def test_families(self) -> None:
        cases = {
            "AliExpress": "cross_border",
            "1688": "cross_border",
            "DHgate": "cross_border",
            "Amazon UK": "amazon",
            "eBay": "ebay",
            "Walmart": "walmart",
            "Shein": "budget",
            "Temu": "budget",
            "Etsy": "generic",
            "myshop": "generic",
        }
        for source, family in cases.items():
            with self.subTest(source=source):
                self.assertEqual(shipping_family(source), family)


if __name__ == "__main__":
    unittest.main()
