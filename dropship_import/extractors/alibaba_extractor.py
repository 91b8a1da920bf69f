# dropship_import/extractors/alibaba_extractor.py

"""Extractor for Alibaba, AliExpress and 1688 product pages."""

import re
from urllib.parse import urlparse

from dropship_import.config.settings import Settings
from dropship_import.extractors.base_extractor import (
    BaseExtractor,
    ExtractionStep,
    FieldRule,
    PageDocument,
    first_valid_match,
)
from dropship_import.extractors.text_utils import (
    clean_text,
    normalise_image_url,
    parse_float,
    parse_int,
)
from dropship_import.models.product import PartialProduct

_NUM = r"(\d+(?:\.\d+)?)"

ALIBABA_HOST_MARKERS: tuple[str, ...] = ("alibaba", "aliexpress", "1688")

_CDN_IMAGE_RE = re.compile(
    r"https://[a-z0-9]+\.alicdn\.com/[^\"'\s<>]+\.(?:jpg|jpeg|png|webp)", re.I
)
_IMAGE_KEY_RE = re.compile(
    r'"(?:imageUrl|originalImageURI)"\s*:\s*"(https://[^"]+)"'
)
_EXCLUDED_IMAGE_PARTS: tuple[str, ...] = ("logo", "icon", "avatar")

# Marketplace names appended to page titles
_TITLE_SUFFIX_RE = re.compile(
    r"\s*(?:-\s*Alibaba\.com|\|\s*Alibaba|-\s*AliExpress(?:\.com)?|-\s*1688\.com)\s*$",
    re.I,
)


def _in_range(value: float) -> bool:
    return 0.1 < value < 50_000


def _price_only(match: re.Match[str]) -> tuple[float, float | None] | None:
    price = parse_float(match.group(1))
    return (price, None) if price is not None else None


def _price_range(match: re.Match[str]) -> tuple[float, float | None] | None:
    low = parse_float(match.group(1))
    high = parse_float(match.group(2))
    return (low, high) if low is not None else None


def _cny_price(match: re.Match[str]) -> tuple[float, float | None] | None:
    price = parse_float(match.group(1))
    if price is None:
        return None
    return (round(price * Settings.CNY_TO_USD, 2), None)


def _title(match: re.Match[str]) -> str | None:
    text = _TITLE_SUFFIX_RE.sub("", clean_text(match.group(1)))
    return text.strip() or None


def _text(match: re.Match[str]) -> str | None:
    return clean_text(match.group(1)) or None


def _count(match: re.Match[str]) -> int | None:
    return parse_int(match.group(1))


def _rating(match: re.Match[str]) -> float | None:
    return parse_float(match.group(1))


_PRICE_RULES: list[FieldRule] = [
    FieldRule(
        re.compile(r'"priceRange"\s*:\s*\{\s*"min"\s*:\s*' + _NUM),
        _price_only,
        lambda v: _in_range(v[0]),
    ),
    FieldRule(
        re.compile(r'"formattedPrice"\s*:\s*"US\s*\$' + _NUM + r'"'),
        _price_only,
        lambda v: _in_range(v[0]),
    ),
    FieldRule(
        re.compile(r'"minPrice"\s*:\s*"?' + _NUM + r'"?'),
        _price_only,
        lambda v: _in_range(v[0]),
    ),
    FieldRule(
        re.compile(r'"discountPrice"\s*:\s*"?' + _NUM + r'"?'),
        _price_only,
        lambda v: _in_range(v[0]),
    ),
    FieldRule(
        re.compile(r"\$" + _NUM + r"\s*-\s*\$" + _NUM),
        _price_range,
        lambda v: _in_range(v[0]),
    ),
    FieldRule(
        re.compile(r'data-price="' + _NUM + r'"'),
        _price_only,
        lambda v: _in_range(v[0]),
    ),
]

_CNY_PRICE_RULES: list[FieldRule] = [
    FieldRule(
        re.compile(r"(?:&yen;|¥|￥)\s*" + _NUM),
        _cny_price,
        lambda v: _in_range(v[0]),
    ),
]

FIELD_RULES: dict[str, list[FieldRule]] = {
    "title": [
        FieldRule(
            re.compile(r'"subject"\s*:\s*"([^"]+)"'),
            _title,
            lambda v: len(v) > 10,
        ),
    ],
    "supplier": [
        FieldRule(re.compile(r'"companyName"\s*:\s*"([^"]+)"'), _text),
        FieldRule(re.compile(r'"supplierName"\s*:\s*"([^"]+)"'), _text),
        FieldRule(re.compile(r'"sellerName"\s*:\s*"([^"]+)"'), _text),
        FieldRule(
            re.compile(r'class="[^"]*company-name[^"]*"[^>]*>([^<]+)<', re.I),
            _text,
        ),
    ],
    "min_order": [
        FieldRule(re.compile(r'"minOrderQuantity"\s*:\s*(\d+)'), _count, lambda v: v >= 1),
        FieldRule(
            re.compile(r"Min\.?\s*Order[^:<\n]{0,20}:\s*(\d+)", re.I),
            _count,
            lambda v: v >= 1,
        ),
        FieldRule(re.compile(r"MOQ[^:<\n]{0,20}:\s*(\d+)", re.I), _count, lambda v: v >= 1),
        FieldRule(
            re.compile(r"(\d+)\s*(?:Pieces?|Sets?|Units?)\s*\(Min", re.I),
            _count,
            lambda v: v >= 1,
        ),
    ],
    "rating": [
        FieldRule(re.compile(r'"averageStar"\s*:\s*"?' + _NUM + r'"?'), _rating),
    ],
    "category": [
        FieldRule(re.compile(r'"category"\s*:\s*"([^"]+)"'), _text),
        FieldRule(re.compile(r'class="[^"]*breadcrumb[^"]*"[^>]*>([^<]+)<', re.I), _text),
    ],
}


def is_alibaba_family(hostname: str) -> bool:
    """True for alibaba.com, aliexpress.* and 1688.com hosts."""
    host = hostname.lower()
    return any(marker in host for marker in ALIBABA_HOST_MARKERS)


class AlibabaExtractor(BaseExtractor):
    """Site-specific patterns for the Alibaba marketplace family.

    Product photos come from the ``alicdn.com`` CDN; supplier names,
    minimum order quantities and prices sit in platform JSON keys
    embedded in the page. 1688 prices are quoted in CNY and converted
    to USD at ``Settings.CNY_TO_USD``.
    """

    def __init__(self) -> None:
        super().__init__("alibaba")

    def _steps(self) -> list[ExtractionStep]:
        return [
            self._extract_images,
            self._extract_price,
            self._extract_rule_fields,
        ]

    def _extract_images(
        self, page: PageDocument, partial: PartialProduct,
    ) -> None:
        images: list[str] = []
        candidates = [m.group(0) for m in _CDN_IMAGE_RE.finditer(page.html)]
        candidates += [
            m.group(1)
            for m in _IMAGE_KEY_RE.finditer(page.html)
            if "alicdn" in m.group(1)
        ]
        for raw in candidates:
            url = normalise_image_url(raw)
            lowered = url.lower()
            if url in images:
                continue
            if any(part in lowered for part in _EXCLUDED_IMAGE_PARTS):
                continue
            images.append(url)
            if len(images) >= self.settings.MAX_IMAGES:
                break
        if images:
            partial.images = images

    def _extract_price(
        self, page: PageDocument, partial: PartialProduct,
    ) -> None:
        host = urlparse(page.url).hostname or ""
        rules = _PRICE_RULES
        if "1688" in host:
            rules = _CNY_PRICE_RULES + _PRICE_RULES
        found = first_valid_match(page.html, rules)
        if found is None:
            return
        price, high = found
        partial.price = price
        if high is not None and high >= price:
            partial.original_price = high

    def _extract_rule_fields(
        self, page: PageDocument, partial: PartialProduct,
    ) -> None:
        self._apply_rules(page, partial, FIELD_RULES)
