# dropship_import/extractors/amazon_extractor.py

"""Extractor for Amazon product pages (any regional storefront)."""

import re

from dropship_import.extractors.base_extractor import (
    BaseExtractor,
    ExtractionStep,
    PageDocument,
)
from dropship_import.extractors.text_utils import clean_text
from dropship_import.models.product import PartialProduct

_ASIN_URL_RE = re.compile(r"/(?:dp|gp/product)/([A-Z0-9]{10})(?:[/?#]|$)")
_ASIN_HTML_RES: list[re.Pattern[str]] = [
    re.compile(r"/dp/([A-Z0-9]{10})"),
    re.compile(r'"asin"\s*:\s*"([A-Z0-9]{10})"'),
]
_HIRES_RE = re.compile(r'"hiRes"\s*:\s*"(https://[^"]+)"')
_LARGE_RE = re.compile(r'"large"\s*:\s*"(https://[^"]+)"')
_BYLINE_RE = re.compile(
    r'id="bylineInfo"[^>]*>.*?(?:Visit the |Brand: )([^<]+)', re.I
)
_BRAND_KEY_RE = re.compile(r'"brand"\s*:\s*"([^"]+)"')
_STORE_SUFFIX_RE = re.compile(r"\s+Store$")


def is_amazon(hostname: str) -> bool:
    """True for any amazon.* storefront host."""
    return "amazon" in hostname.lower()


class AmazonExtractor(BaseExtractor):
    """Site-specific patterns for Amazon listings.

    The ASIN is read from the product URL when possible and from the
    page otherwise. High-resolution gallery images are preferred over
    the standard "large" set.
    """

    def __init__(self) -> None:
        super().__init__("amazon")

    def _steps(self) -> list[ExtractionStep]:
        return [
            self._extract_asin,
            self._extract_images,
            self._extract_brand,
        ]

    @staticmethod
    def _extract_asin(
        page: PageDocument, partial: PartialProduct,
    ) -> None:
        match = _ASIN_URL_RE.search(page.url)
        if not match:
            for pattern in _ASIN_HTML_RES:
                match = pattern.search(page.html)
                if match:
                    break
        if match:
            partial.sku = match.group(1)

    def _collect(self, pattern: re.Pattern[str], html: str) -> list[str]:
        images: list[str] = []
        for match in pattern.finditer(html):
            url = match.group(1)
            if url not in images:
                images.append(url)
            if len(images) >= self.settings.MAX_IMAGES:
                break
        return images

    def _extract_images(
        self, page: PageDocument, partial: PartialProduct,
    ) -> None:
        images = self._collect(_HIRES_RE, page.html)
        if not images:
            images = self._collect(_LARGE_RE, page.html)
        if images:
            partial.images = images

    @staticmethod
    def _extract_brand(
        page: PageDocument, partial: PartialProduct,
    ) -> None:
        match = _BYLINE_RE.search(page.html) or _BRAND_KEY_RE.search(page.html)
        if not match:
            return
        brand = _STORE_SUFFIX_RE.sub("", clean_text(match.group(1)))
        if brand:
            partial.supplier = brand
