# tests/test_bulk_importer.py

"""Tests for the sequential bulk importer."""

import unittest
from unittest.mock import AsyncMock, MagicMock, patch

from dropship_import.models.errors import FetchFailedError
from dropship_import.models.product import PartialProduct
from dropship_import.services.bulk_importer import (
    BulkImporter,
    ImportOutcome,
    parse_url_list,
)
from dropship_import.services.extraction_pipeline import (
    INTERNAL_ERROR_MESSAGE,
    ProductExtractionPipeline,
)
from dropship_import.services.result_merger import merge_partials

_URLS = [
    "https://shop.example.com/p/1",
    "https://shop.example.com/p/2",
    "https://shop.example.com/p/3",
]


def _pipeline(*effects: object) -> MagicMock:
    pipeline = MagicMock(spec=ProductExtractionPipeline)
    pipeline.name = "generic"
    pipeline.import_url.side_effect = list(effects)
    return pipeline


class TestParseUrlList(unittest.TestCase):
    """Verify pasted URL parsing."""

    def test_keeps_only_http_lines(self) -> None:
        text = (
            "https://a.com/1\n"
            "\n"
            "   http://b.com/2   \n"
            "not a url\n"
            "ftp://c.com/3\n"
        )
        self.assertEqual(
            parse_url_list(text), ["https://a.com/1", "http://b.com/2"]
        )


class TestBulkImporter(unittest.IsolatedAsyncioTestCase):
    """Verify batch isolation and throttling."""

    async def test_failure_does_not_affect_neighbours(self) -> None:
        product = merge_partials(PartialProduct(title="Lamp", price=9.0))
        pipeline = _pipeline(
            product, FetchFailedError("Could not fetch"), product
        )
        importer = BulkImporter(pipeline=pipeline, delay=0)

        outcomes = await importer.import_all(_URLS)

        self.assertEqual([o.ok for o in outcomes], [True, False, True])
        self.assertEqual([o.url for o in outcomes], _URLS)
        self.assertEqual(outcomes[1].error, "Could not fetch")
        self.assertIsNone(outcomes[1].product)
        self.assertIs(outcomes[0].product, product)

    async def test_unexpected_exception_recorded_as_internal_error(self) -> None:
        importer = BulkImporter(
            pipeline=_pipeline(ValueError("bad state")), delay=0
        )
        outcomes = await importer.import_all(_URLS[:1])
        self.assertFalse(outcomes[0].ok)
        self.assertEqual(outcomes[0].error, INTERNAL_ERROR_MESSAGE)

    async def test_sleeps_between_calls_only(self) -> None:
        product = merge_partials(PartialProduct(title="Lamp"))
        importer = BulkImporter(
            pipeline=_pipeline(product, product, product), delay=0.8
        )
        with patch(
            "dropship_import.services.bulk_importer.asyncio.sleep",
            new_callable=AsyncMock,
        ) as mock_sleep:
            await importer.import_all(_URLS)
        self.assertEqual(mock_sleep.await_count, 2)
        mock_sleep.assert_awaited_with(0.8)

    async def test_progress_callback(self) -> None:
        product = merge_partials(PartialProduct(title="Lamp"))
        importer = BulkImporter(
            pipeline=_pipeline(product, product), delay=0
        )
        seen: list[tuple[int, int, bool]] = []

        def on_progress(done: int, total: int, outcome: ImportOutcome) -> None:
            seen.append((done, total, outcome.ok))

        await importer.import_all(_URLS[:2], on_progress=on_progress)
        self.assertEqual(seen, [(1, 2, True), (2, 2, True)])

    async def test_empty_batch(self) -> None:
        importer = BulkImporter(pipeline=_pipeline(), delay=0)
        self.assertEqual(await importer.import_all([]), [])


if __name__ == "__main__":
    unittest.main()
