# dropship_import/services/bulk_importer.py

"""Sequential, throttled import of many product URLs."""

import asyncio
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from dropship_import.config.settings import Settings
from dropship_import.models.errors import ExtractionError, InternalError
from dropship_import.models.product import ExtractedProduct
from dropship_import.services.extraction_pipeline import (
    INTERNAL_ERROR_MESSAGE,
    ProductExtractionPipeline,
)

logger = logging.getLogger("dropship_import.bulk")


@dataclass
class ImportOutcome:
    """Result of importing one URL: a product or an error message."""

    url: str
    product: ExtractedProduct | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.product is not None


ProgressCallback = Callable[[int, int, ImportOutcome], None]


def parse_url_list(text: str) -> list[str]:
    """Split pasted text into candidate URLs, one per line.

    Blank lines and anything not starting with ``http`` are dropped.
    """
    return [
        line.strip()
        for line in text.splitlines()
        if line.strip().startswith("http")
    ]


class BulkImporter:
    """Runs a pipeline over many URLs, one at a time.

    One URL's failure never aborts the batch; every URL yields exactly
    one :class:`ImportOutcome`, in input order.
    """

    def __init__(
        self,
        pipeline: ProductExtractionPipeline | None = None,
        delay: float | None = None,
    ) -> None:
        self.pipeline = pipeline or ProductExtractionPipeline()
        self.delay = Settings.BULK_IMPORT_DELAY if delay is None else delay

    async def _import_one(self, url: str) -> ImportOutcome:
        try:
            product = await asyncio.to_thread(self.pipeline.import_url, url)
        except ExtractionError as exc:
            logger.warning("[bulk] %s failed: %s", url, exc)
            return ImportOutcome(url=url, error=str(exc))
        except Exception as exc:
            logger.error(
                "[bulk] Unexpected failure for %s: %s",
                url,
                exc,
                exc_info=True,
            )
            return ImportOutcome(
                url=url, error=str(InternalError(INTERNAL_ERROR_MESSAGE))
            )
        return ImportOutcome(url=url, product=product)

    async def import_all(
        self,
        urls: Iterable[str],
        on_progress: ProgressCallback | None = None,
    ) -> list[ImportOutcome]:
        """Import every URL sequentially, pausing between calls."""
        pending = list(urls)
        outcomes: list[ImportOutcome] = []
        for index, url in enumerate(pending):
            if index:
                await asyncio.sleep(self.delay)
            outcome = await self._import_one(url)
            outcomes.append(outcome)
            if on_progress is not None:
                on_progress(index + 1, len(pending), outcome)

        succeeded = sum(1 for o in outcomes if o.ok)
        logger.info(
            "[bulk] Imported %d of %d URLs via %s pipeline",
            succeeded,
            len(outcomes),
            self.pipeline.name,
        )
        return outcomes
