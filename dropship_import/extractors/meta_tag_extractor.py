# dropship_import/extractors/meta_tag_extractor.py

"""Extractor for Open Graph and product ``<meta>`` tags."""

from bs4 import Tag

from dropship_import.config.settings import Settings
from dropship_import.extractors.base_extractor import (
    BaseExtractor,
    ExtractionStep,
    PageDocument,
)
from dropship_import.extractors.text_utils import clean_text, parse_float
from dropship_import.models.product import PartialProduct


class MetaTagExtractor(BaseExtractor):
    """Reads ``og:*`` and ``product:price:*`` meta tags.

    Tags are matched on their ``property`` or ``name`` attribute by
    the DOM parser, so attribute order inside the tag doesn't matter.
    """

    def __init__(self) -> None:
        super().__init__("meta_tags")

    def _steps(self) -> list[ExtractionStep]:
        return [
            self._extract_text_tags,
            self._extract_price_tags,
            self._extract_images,
        ]

    @staticmethod
    def meta_content(page: PageDocument, key: str) -> list[str]:
        """Return the non-empty ``content`` of every meta tag named *key*."""
        values: list[str] = []
        for tag in page.soup.find_all("meta"):
            if not isinstance(tag, Tag):
                continue
            name = tag.get("property") or tag.get("name") or ""
            if str(name).strip().lower() != key:
                continue
            content = tag.get("content")
            if content and str(content).strip():
                values.append(str(content).strip())
        return values

    def _first_content(self, page: PageDocument, key: str) -> str | None:
        values = self.meta_content(page, key)
        return clean_text(values[0]) if values else None

    def _extract_text_tags(
        self, page: PageDocument, partial: PartialProduct,
    ) -> None:
        partial.title = self._first_content(page, "og:title")
        partial.description = self._first_content(page, "og:description")

    def _extract_price_tags(
        self, page: PageDocument, partial: PartialProduct,
    ) -> None:
        amount = self._first_content(page, "product:price:amount")
        price = parse_float(amount) if amount else None
        if price is not None and Settings.MIN_PRICE < price < Settings.MAX_PRICE:
            partial.price = price
        partial.currency = self._first_content(page, "product:price:currency")

    def _extract_images(
        self, page: PageDocument, partial: PartialProduct,
    ) -> None:
        images = [
            url
            for url in self.meta_content(page, "og:image")
            if url.startswith("http")
        ]
        if images:
            partial.images = images
