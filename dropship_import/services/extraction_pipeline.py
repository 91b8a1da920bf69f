# dropship_import/services/extraction_pipeline.py

"""Extraction pipelines: URL in, complete ExtractedProduct out.

Every pipeline walks the same states::

    validate URL -> detect source -> fetch -> extract -> merge -> ship

and either returns one invariant-satisfying product or raises an
:class:`~dropship_import.models.errors.ExtractionError`.
"""

import logging
from dataclasses import replace
from typing import Any
from urllib.parse import urlparse

from dropship_import.config.settings import Settings
from dropship_import.extractors.alibaba_extractor import (
    AlibabaExtractor,
    is_alibaba_family,
)
from dropship_import.extractors.amazon_extractor import AmazonExtractor, is_amazon
from dropship_import.extractors.base_extractor import BaseExtractor, PageDocument
from dropship_import.extractors.heuristic_extractor import HeuristicExtractor
from dropship_import.extractors.meta_tag_extractor import MetaTagExtractor
from dropship_import.extractors.source_detector import detect_source
from dropship_import.extractors.structured_data_extractor import (
    StructuredDataExtractor,
)
from dropship_import.extractors.text_utils import tags_from_title
from dropship_import.models.errors import (
    ExtractionError,
    InternalError,
    InvalidURLError,
    UnsupportedSourceError,
)
from dropship_import.models.product import ExtractedProduct, PartialProduct
from dropship_import.services.document_fetcher import DocumentFetcher
from dropship_import.services.result_merger import merge_partials
from dropship_import.services.shipping_synthesizer import apply_shipping

logger = logging.getLogger("dropship_import.pipeline")

INTERNAL_ERROR_MESSAGE = (
    "Failed to import product. The page might be protected or unavailable."
)


def validate_url(url: str) -> tuple[str, str]:
    """Return ``(url, hostname)`` or raise InvalidURLError."""
    candidate = (url or "").strip()
    if not candidate:
        raise InvalidURLError("URL is required")
    try:
        parsed = urlparse(candidate)
        hostname = parsed.hostname
    except ValueError as exc:
        raise InvalidURLError("Invalid URL format") from exc
    if parsed.scheme not in ("http", "https") or not hostname:
        raise InvalidURLError("Invalid URL format")
    return candidate, hostname.lower()


def finalise_product(product: ExtractedProduct) -> ExtractedProduct:
    """Synthesise shipping and derive tags for a freshly merged product."""
    shipped = apply_shipping(product)
    if shipped.tags:
        return shipped
    return replace(
        shipped,
        tags=tags_from_title(shipped.title, Settings.MAX_TITLE_TAGS),
    )


class ProductExtractionPipeline:
    """General-purpose pipeline that accepts any product page.

    Merge priority, highest first: request context, structured data,
    site-specific extractor, meta tags, heuristics, then any
    pipeline-specific fallback partials.
    """

    name = "generic"

    def __init__(self, fetcher: DocumentFetcher | None = None) -> None:
        self.settings = Settings()
        self._fetcher = fetcher
        self.structured = StructuredDataExtractor()
        self.meta = MetaTagExtractor()
        self.heuristic = HeuristicExtractor()
        self.alibaba = AlibabaExtractor()
        self.amazon = AmazonExtractor()

    @property
    def fetcher(self) -> DocumentFetcher:
        """Retrieval collaborator, built on first network use."""
        if self._fetcher is None:
            self._fetcher = DocumentFetcher(
                min_length=self._min_document_length()
            )
        return self._fetcher

    # ── Hooks for narrower pipelines ─────────────────────

    def _min_document_length(self) -> int:
        return Settings.MIN_DOCUMENT_LENGTH

    def _check_source(self, hostname: str) -> None:
        """Raise UnsupportedSourceError for hosts this pipeline rejects."""

    def _site_extractor(self, hostname: str) -> BaseExtractor | None:
        if is_alibaba_family(hostname):
            return self.alibaba
        if is_amazon(hostname):
            return self.amazon
        return None

    def _fallback_partials(self, hostname: str) -> list[PartialProduct]:
        return []

    # ── Public entry points ──────────────────────────────

    def import_url(self, url: str) -> ExtractedProduct:
        """Validate, fetch and extract the product page at *url*."""
        clean_url, hostname = validate_url(url)
        self._check_source(hostname)
        source = detect_source(hostname)
        logger.info(
            "[%s] Importing %s (source=%s)", self.name, clean_url, source
        )
        document = self.fetcher.fetch(clean_url)
        return self._extract(document, clean_url, hostname, source)

    def extract(self, document_text: str, source_url: str) -> ExtractedProduct:
        """Extract a product from already-fetched *document_text*."""
        clean_url, hostname = validate_url(source_url)
        self._check_source(hostname)
        source = detect_source(hostname)
        return self._extract(document_text, clean_url, hostname, source)

    # ── Private helpers ──────────────────────────────────

    def _extract(
        self,
        document: str,
        url: str,
        hostname: str,
        source: str,
    ) -> ExtractedProduct:
        try:
            page = PageDocument(html=document, url=url)
            partials: list[PartialProduct] = [
                PartialProduct(source_url=url, source=source),
                self.structured.extract(page),
            ]
            site = self._site_extractor(hostname)
            if site is not None:
                partials.append(site.extract(page))
            partials.append(self.meta.extract(page))
            partials.append(self.heuristic.extract(page))
            partials.extend(self._fallback_partials(hostname))

            product = finalise_product(merge_partials(*partials))
        except ExtractionError:
            raise
        except Exception as exc:
            logger.error(
                "[%s] Extraction failed for %s: %s",
                self.name,
                url,
                exc,
                exc_info=True,
            )
            raise InternalError(INTERNAL_ERROR_MESSAGE) from exc

        logger.info(
            "[%s] Extracted '%s' from %s (price=%.2f, %d images)",
            self.name,
            product.title,
            source,
            product.price,
            len(product.images),
        )
        return product


class MarketplacePipeline(ProductExtractionPipeline):
    """Narrow pipeline for Alibaba, AliExpress and 1688 only.

    Rejects every other host before fetching, always applies the
    Alibaba-family extractor and falls back to a per-marketplace
    profile (price, supplier, shipping time, minimum order) for fields
    nothing on the page supplied.
    """

    name = "marketplace"

    def _min_document_length(self) -> int:
        return Settings.MARKETPLACE_MIN_DOCUMENT_LENGTH

    @staticmethod
    def _profile_for(hostname: str) -> dict[str, Any] | None:
        for profile in Settings.MARKETPLACE_PROFILES:
            if profile["host"] in hostname:
                return profile
        return None

    def _check_source(self, hostname: str) -> None:
        if self._profile_for(hostname) is None:
            raise UnsupportedSourceError(
                "URL must be from alibaba.com, aliexpress.com, or 1688.com"
            )

    def _site_extractor(self, hostname: str) -> BaseExtractor | None:
        return self.alibaba

    def _fallback_partials(self, hostname: str) -> list[PartialProduct]:
        profile = self._profile_for(hostname)
        if profile is None:
            return []
        return [
            PartialProduct(
                price=float(profile["price"]),
                supplier=str(profile["supplier"]),
                shipping_time=str(profile["shipping_time"]),
                min_order=int(profile["min_order"]),
            )
        ]


def extract_product(document_text: str, source_url: str) -> ExtractedProduct:
    """Core entry point: extract a product from a fetched document.

    Raises InvalidURLError for a malformed *source_url* and
    InternalError for unexpected failures. Never touches the network.
    """
    return ProductExtractionPipeline().extract(document_text, source_url)
