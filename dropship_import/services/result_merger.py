# dropship_import/services/result_merger.py

"""Ranked merge of partial extraction results into one product record."""

import logging
from collections.abc import Iterable
from dataclasses import fields
from typing import Any

from dropship_import.config.settings import Settings
from dropship_import.extractors.text_utils import dedupe_images, unique_lower
from dropship_import.models.product import ExtractedProduct, PartialProduct

logger = logging.getLogger("dropship_import.merger")

DEFAULT_TITLE = "Imported Product"
DEFAULT_DESCRIPTION = "Product imported from online store."
DEFAULT_CURRENCY = "USD"
DEFAULT_CATEGORY = "General"
DEFAULT_SUPPLIER = "Online Store"
DEFAULT_SHIPPING_TIME = "7-21 days"

_FIELD_NAMES: list[str] = [f.name for f in fields(PartialProduct)]


def is_present(value: Any) -> bool:
    """Return True when *value* is worth keeping in a merge.

    ``None``, empty strings, zero, ``False`` and empty sequences are
    all treated as "nothing found".
    """
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    if isinstance(value, (bool, int, float)):
        return bool(value)
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) > 0
    return True


def combine_partials(partials: Iterable[PartialProduct]) -> PartialProduct:
    """Fold partials, highest priority first, into one partial.

    Each field takes the first present value in priority order and is
    never overwritten afterwards.
    """
    combined = PartialProduct()
    for rank, partial in enumerate(partials):
        for name in _FIELD_NAMES:
            if getattr(combined, name) is not None:
                continue
            value = getattr(partial, name)
            if not is_present(value):
                continue
            if isinstance(value, list):
                value = list(value)
            setattr(combined, name, value)
            logger.debug("Field %s taken from partial #%d", name, rank)
    return combined


def merge_partials(*partials: PartialProduct) -> ExtractedProduct:
    """Merge ranked partials and apply a default to every unset field.

    The output always satisfies: every field defined, images unique
    ignoring query strings, ``original_price >= price`` and rating
    within ``[0, 5]``. Pure and deterministic.
    """
    merged = combine_partials(partials)

    price = max(0.0, float(merged.price or 0.0))
    markup = Settings.ORIGINAL_PRICE_MARKUP
    original_price = max(0.0, float(merged.original_price or 0.0))
    if not original_price and price:
        original_price = round(price * markup, 2)
    if original_price < price:
        original_price = round(price * markup, 2)

    free_shipping = bool(merged.free_shipping)
    shipping_cost = (
        0.0 if free_shipping else max(0.0, float(merged.shipping_cost or 0.0))
    )

    return ExtractedProduct(
        title=merged.title or DEFAULT_TITLE,
        description=merged.description or DEFAULT_DESCRIPTION,
        price=price,
        original_price=original_price,
        currency=merged.currency or DEFAULT_CURRENCY,
        images=dedupe_images(merged.images or [], Settings.MAX_IMAGES),
        category=merged.category or DEFAULT_CATEGORY,
        supplier=merged.supplier or DEFAULT_SUPPLIER,
        min_order=max(1, int(merged.min_order or 1)),
        shipping_time=merged.shipping_time or DEFAULT_SHIPPING_TIME,
        shipping_cost=shipping_cost,
        free_shipping=free_shipping,
        shipping_methods=merged.shipping_methods or [],
        weight=merged.weight or "",
        dimensions=merged.dimensions or "",
        sku=merged.sku or "",
        tags=unique_lower(merged.tags or []),
        rating=min(5.0, max(0.0, float(merged.rating or 0.0))),
        reviews=max(0, int(merged.reviews or 0)),
        variants=merged.variants or [],
        source_url=merged.source_url or "",
        source=merged.source or "",
    )
