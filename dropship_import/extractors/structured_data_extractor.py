# dropship_import/extractors/structured_data_extractor.py

"""Extractor for embedded JSON-LD (schema.org Product) blocks."""

import json
from typing import Any, cast

from dropship_import.extractors.base_extractor import (
    BaseExtractor,
    ExtractionStep,
    PageDocument,
)
from dropship_import.extractors.text_utils import clean_text, parse_float, parse_int
from dropship_import.models.product import PartialProduct
from dropship_import.services.result_merger import combine_partials

_PRODUCT_TYPES = frozenset({"product", "productmodel", "individualproduct"})


def _first(value: Any) -> Any:
    """Unwrap single-entry schema.org lists (``offers: [...]``)."""
    if isinstance(value, list):
        items = cast(list[Any], value)
        return items[0] if items else None
    return value


def _is_product(item: dict[str, Any]) -> bool:
    raw_type = item.get("@type", "")
    types = raw_type if isinstance(raw_type, list) else [raw_type]
    return any(
        str(t).lower() in _PRODUCT_TYPES
        for t in cast(list[Any], types)
    )


class StructuredDataExtractor(BaseExtractor):
    """Reads canonical product attributes from JSON-LD script blocks.

    Every ``application/ld+json`` block is parsed on its own; a block
    that fails to parse is skipped. ``@graph`` wrappers and top-level
    arrays are flattened. When several Product entities are present,
    earlier ones win and later ones only fill fields left empty.
    """

    def __init__(self) -> None:
        super().__init__("structured_data")

    def _steps(self) -> list[ExtractionStep]:
        return [self._extract_products]

    # ------------------------------------------------------------------
    # Block discovery
    # ------------------------------------------------------------------

    def find_items(self, page: PageDocument) -> list[dict[str, Any]]:
        """Return every JSON-LD object on the page, flattened."""
        items: list[dict[str, Any]] = []
        scripts = page.soup.find_all(
            "script", attrs={"type": "application/ld+json"}
        )
        for index, script in enumerate(scripts):
            raw = script.string or script.get_text()
            if not raw or not raw.strip():
                continue
            try:
                data: Any = json.loads(raw.strip())
            except (json.JSONDecodeError, TypeError) as exc:
                self.logger.debug(
                    "[%s] Skipping malformed JSON-LD block %d on %s: %s",
                    self.name,
                    index,
                    page.url or "<document>",
                    exc,
                )
                continue
            items.extend(self._flatten(data))
        return items

    @staticmethod
    def _flatten(data: Any) -> list[dict[str, Any]]:
        if isinstance(data, list):
            flat: list[dict[str, Any]] = []
            for entry in cast(list[Any], data):
                flat.extend(StructuredDataExtractor._flatten(entry))
            return flat
        if isinstance(data, dict):
            obj = cast(dict[str, Any], data)
            graph = obj.get("@graph")
            if isinstance(graph, list):
                return StructuredDataExtractor._flatten(graph)
            return [obj]
        return []

    # ------------------------------------------------------------------
    # Product entity parsing
    # ------------------------------------------------------------------

    def _extract_products(
        self, page: PageDocument, partial: PartialProduct,
    ) -> None:
        found: list[PartialProduct] = []
        for item in self.find_items(page):
            if not _is_product(item):
                continue
            product = PartialProduct()
            self._attempt(
                "product_entity",
                page,
                lambda _doc, target, obj=item: self._parse_product(obj, target),
                product,
            )
            found.append(product)

        combined = combine_partials(found)
        for name in combined.filled_fields():
            setattr(partial, name, getattr(combined, name))

    def _parse_product(
        self, item: dict[str, Any], result: PartialProduct,
    ) -> None:
        if item.get("name"):
            result.title = clean_text(str(item["name"]))
        if item.get("description"):
            result.description = clean_text(str(item["description"]))
        if item.get("sku"):
            result.sku = str(item["sku"])
        if item.get("category"):
            result.category = clean_text(str(item["category"]))

        brand = _first(item.get("brand"))
        if isinstance(brand, dict):
            result.supplier = clean_text(
                str(cast(dict[str, Any], brand).get("name", ""))
            )
        elif isinstance(brand, str):
            result.supplier = clean_text(brand)

        result.images = self._parse_images(item.get("image"))

        offer = _first(item.get("offers"))
        if isinstance(offer, dict):
            self._parse_offer(cast(dict[str, Any], offer), result)

        rating = item.get("aggregateRating")
        if isinstance(rating, dict):
            rating_obj = cast(dict[str, Any], rating)
            result.rating = parse_float(rating_obj.get("ratingValue"))
            result.reviews = parse_int(
                rating_obj.get("reviewCount")
                or rating_obj.get("ratingCount")
            )

        weight = item.get("weight")
        if isinstance(weight, dict):
            w = cast(dict[str, Any], weight)
            unit = w.get("unitCode") or w.get("unitText") or "kg"
            result.weight = f"{w.get('value', '')} {unit}".strip()
        elif isinstance(weight, str) and weight.strip():
            result.weight = clean_text(weight)

    def _parse_images(self, image: Any) -> list[str] | None:
        raw: list[Any] = (
            cast(list[Any], image) if isinstance(image, list) else [image]
        )
        urls: list[str] = []
        for entry in raw:
            if isinstance(entry, str) and entry:
                urls.append(entry)
            elif isinstance(entry, dict):
                url = cast(dict[str, Any], entry).get("url")
                if isinstance(url, str) and url:
                    urls.append(url)
        return urls[: self.settings.MAX_IMAGES] or None

    @staticmethod
    def _parse_offer(
        offer: dict[str, Any], result: PartialProduct,
    ) -> None:
        price = parse_float(offer.get("price") or offer.get("lowPrice"))
        if price and price > 0:
            result.price = price
        high = parse_float(offer.get("highPrice"))
        if high and high > 0:
            result.original_price = high
        if offer.get("priceCurrency"):
            result.currency = str(offer["priceCurrency"])

        shipping = _first(offer.get("shippingDetails"))
        if not isinstance(shipping, dict):
            return
        details = cast(dict[str, Any], shipping)

        rate = _first(details.get("shippingRate"))
        if isinstance(rate, dict):
            cost = parse_float(cast(dict[str, Any], rate).get("value"))
            if cost is not None:
                result.shipping_cost = cost
                if cost == 0:
                    result.free_shipping = True

        delivery = details.get("deliveryTime")
        if isinstance(delivery, dict):
            window = cast(dict[str, Any], delivery)
            transit = window.get("transitTime")
            if isinstance(transit, dict):
                window = {**window, **cast(dict[str, Any], transit)}
            min_days = window.get("minValue")
            max_days = window.get("maxValue")
            if min_days is not None and max_days is not None:
                result.shipping_time = f"{min_days}-{max_days} days"
