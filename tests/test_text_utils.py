# tests/test_text_utils.py

"""Tests for the shared text helpers."""

import unittest

from dropship_import.extractors.text_utils import (
    clean_text,
    dedupe_images,
    normalise_image_url,
    parse_float,
    parse_int,
    tags_from_title,
    unique_lower,
)


class TestCleanText(unittest.TestCase):
    """Verify entity decoding and whitespace collapsing."""

    def test_decodes_entities(self) -> None:
        self.assertEqual(clean_text("Tom &amp; Jerry"), "Tom & Jerry")

    def test_collapses_whitespace(self) -> None:
        self.assertEqual(clean_text("  a \n\t b  "), "a b")

    def test_none_becomes_empty(self) -> None:
        self.assertEqual(clean_text(None), "")


class TestParseNumbers(unittest.TestCase):
    """Verify lenient number parsing."""

    def test_plain_float(self) -> None:
        self.assertEqual(parse_float(19.99), 19.99)

    def test_currency_string_with_commas(self) -> None:
        self.assertEqual(parse_float("$1,299.00"), 1299.0)

    def test_no_number_returns_none(self) -> None:
        self.assertIsNone(parse_float("call for price"))

    def test_bool_rejected(self) -> None:
        """True is not a price."""
        self.assertIsNone(parse_float(True))

    def test_parse_int_from_count_text(self) -> None:
        self.assertEqual(parse_int("1,204 reviews"), 1204)


class TestImageHelpers(unittest.TestCase):
    """Verify image normalisation and de-duplication."""

    def test_normalise_strips_query_and_fragment(self) -> None:
        self.assertEqual(
            normalise_image_url("https://cdn.x/a.jpg?w=200#top"),
            "https://cdn.x/a.jpg",
        )

    def test_dedupe_ignores_query_string_keeps_first_seen(self) -> None:
        urls = [
            "https://cdn.x/a.jpg?w=100",
            "https://cdn.x/b.jpg",
            "https://cdn.x/a.jpg?w=800",
        ]
        self.assertEqual(
            dedupe_images(urls, 10),
            ["https://cdn.x/a.jpg?w=100", "https://cdn.x/b.jpg"],
        )

    def test_dedupe_respects_limit(self) -> None:
        urls = [f"https://cdn.x/{i}.jpg" for i in range(20)]
        self.assertEqual(len(dedupe_images(urls, 10)), 10)


class TestTags(unittest.TestCase):
    """Verify tag normalisation."""

    def test_unique_lower(self) -> None:
        self.assertEqual(
            unique_lower(["Audio", "audio", " Bluetooth ", ""]),
            ["audio", "bluetooth"],
        )

    def test_tags_from_title_drops_short_words(self) -> None:
        self.assertEqual(
            tags_from_title("USB-C Fast Charger for my Phone", 8),
            ["usbc", "fast", "charger", "for", "phone"],
        )

    def test_tags_from_title_limit(self) -> None:
        title = "alpha bravo charlie delta echo foxtrot golf hotel india"
        self.assertEqual(len(tags_from_title(title, 8)), 8)


if __name__ == "__main__":
    unittest.main()
