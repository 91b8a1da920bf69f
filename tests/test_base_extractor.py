# tests/test_base_extractor.py

"""Tests for BaseExtractor step isolation."""

import re
import unittest

from dropship_import.extractors.base_extractor import (
    BaseExtractor,
    ExtractionStep,
    FieldRule,
    PageDocument,
)
from dropship_import.models.product import PartialProduct


def _explode(match: re.Match[str]) -> float:
    raise ValueError(f"cannot convert {match.group(0)}")


class _StubExtractor(BaseExtractor):
    """Concrete extractor with one failing step and one rule table."""

    def __init__(self) -> None:
        super().__init__("stub")

    def _steps(self) -> list[ExtractionStep]:
        return [self._broken_step, self._title_step, self._rules_step]

    @staticmethod
    def _broken_step(page: PageDocument, partial: PartialProduct) -> None:
        raise RuntimeError("step failed")

    @staticmethod
    def _title_step(page: PageDocument, partial: PartialProduct) -> None:
        partial.title = "Still Extracted"

    def _rules_step(self, page: PageDocument, partial: PartialProduct) -> None:
        self._apply_rules(page, partial, {
            "price": [FieldRule(re.compile(r"price=(\d+)"), _explode)],
            "sku": [FieldRule(re.compile(r"sku=(\w+)"))],
            "title": [FieldRule(re.compile(r"title=(\w+)"))],
        })


class TestBaseExtractor(unittest.TestCase):
    """Verify per-step and per-field failure isolation."""

    def setUp(self) -> None:
        self.page = PageDocument(
            html="<p>price=12 sku=AB12 title=Override</p>",
            url="https://shop.example.com/p/1",
        )

    def test_failing_step_does_not_stop_others(self) -> None:
        result = _StubExtractor().extract(self.page)
        self.assertEqual(result.title, "Still Extracted")

    def test_failing_field_left_unset(self) -> None:
        result = _StubExtractor().extract(self.page)
        self.assertIsNone(result.price)
        self.assertEqual(result.sku, "AB12")

    def test_rules_skip_fields_already_set(self) -> None:
        result = _StubExtractor().extract(self.page)
        self.assertEqual(result.title, "Still Extracted")

    def test_soup_parsed_once(self) -> None:
        self.assertIs(self.page.soup, self.page.soup)


if __name__ == "__main__":
    unittest.main()
