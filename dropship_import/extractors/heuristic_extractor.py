# dropship_import/extractors/heuristic_extractor.py

"""Pattern-based extraction from raw product-page markup.

Used to fill the gaps structured data and meta tags leave behind. Each
field has an ordered list of :class:`FieldRule` candidates; the first
match that passes the rule's sanity filter wins. A field with no match
is simply left unset.
"""

import re

from bs4 import Tag

from dropship_import.config.settings import Settings
from dropship_import.extractors.base_extractor import (
    BaseExtractor,
    ExtractionStep,
    FieldRule,
    PageDocument,
)
from dropship_import.extractors.meta_tag_extractor import MetaTagExtractor
from dropship_import.extractors.text_utils import clean_text, parse_float, parse_int
from dropship_import.models.product import PartialProduct, ProductVariant

_NUM = r"(\d+(?:\.\d+)?)"

# Substrings marking UI chrome rather than product photos
IMAGE_BLOCKLIST: tuple[str, ...] = ("icon", "logo", "sprite", "pixel", "1x1")

_IMAGE_EXT_RE = re.compile(r"\.(?:jpe?g|png|webp)(?:[?#].*)?$", re.I)
_TITLE_SEPARATOR_RE = re.compile(r"\s*\|\s*|\s+[-–]\s+")
_QUOTED_RE = re.compile(r'"([^"]+)"')

FREE_SHIPPING_RE = re.compile(
    r"free\s*shipping|env[ií]o\s*grat(?:is|uito)", re.I
)


def _in_price_range(value: float) -> bool:
    return Settings.MIN_PRICE < value < Settings.MAX_PRICE


def _to_float(match: re.Match[str]) -> float | None:
    return parse_float(match.group(1))


def _to_count(match: re.Match[str]) -> int | None:
    return parse_int(match.group(1).replace(",", ""))


def _to_text(match: re.Match[str]) -> str | None:
    return clean_text(match.group(1)) or None


def _whole_match(match: re.Match[str]) -> str | None:
    return clean_text(match.group(0)) or None


def _day_range(match: re.Match[str]) -> str:
    return f"{match.group(1)}-{match.group(2)} days"


FIELD_RULES: dict[str, list[FieldRule]] = {
    "price": [
        FieldRule(
            re.compile(
                r'(?:"price"|"offerPrice"|"salePrice"|"currentPrice")'
                r'\s*:\s*"?\$?' + _NUM + r'"?'
            ),
            _to_float,
            _in_price_range,
        ),
        FieldRule(
            re.compile(r'class="[^"]*price[^"]*"[^>]*>\s*\$?\s*' + _NUM, re.I),
            _to_float,
            _in_price_range,
        ),
        FieldRule(re.compile(r"\$" + _NUM), _to_float, _in_price_range),
        FieldRule(re.compile(r"US\s*\$\s*" + _NUM, re.I), _to_float, _in_price_range),
        FieldRule(re.compile(_NUM + r"\s*USD", re.I), _to_float, _in_price_range),
    ],
    "rating": [
        FieldRule(
            re.compile(_NUM + r"\s*(?:out of|/)\s*5\b"),
            _to_float,
            lambda v: 0 <= v <= 5,
        ),
        FieldRule(re.compile(r'"ratingValue"\s*:\s*"?' + _NUM + r'"?'), _to_float),
        FieldRule(re.compile(r'"averageRating"\s*:\s*"?' + _NUM + r'"?'), _to_float),
    ],
    "reviews": [
        FieldRule(
            re.compile(
                r"(?<![\d.])(\d[\d,]*)\s*(?:reviews?|ratings?|evaluations?|opinion(?:es)?)\b",
                re.I,
            ),
            _to_count,
        ),
        FieldRule(re.compile(r'"reviewCount"\s*:\s*"?(\d+)"?'), _to_count),
    ],
    "weight": [
        FieldRule(
            re.compile(r'\b(?:weight|peso)\b[^:<\n"]{0,30}:\s*([^<,\n"\[{]{2,30})', re.I),
            _to_text,
        ),
        FieldRule(re.compile(_NUM + r"\s*(?:kg|lbs?|oz|g)\b", re.I), _whole_match),
    ],
    "dimensions": [
        FieldRule(
            re.compile(
                r'\b(?:dimensions?|size)\b[^:<\n"]{0,30}:\s*([^<,\n"\[{]{2,50})', re.I
            ),
            _to_text,
        ),
        FieldRule(
            re.compile(
                _NUM + r"\s*x\s*" + _NUM + r"(?:\s*x\s*" + _NUM + r")?\s*(?:cm|in|mm)\b",
                re.I,
            ),
            _whole_match,
        ),
    ],
    "shipping_cost": [
        FieldRule(
            re.compile(
                r'\b(?:shipping|delivery|env[ií]o)\b[^:<\n"]{0,30}:\s*\$?' + _NUM, re.I
            ),
            _to_float,
            _in_price_range,
        ),
        FieldRule(
            re.compile(r'"shippingPrice"\s*:\s*"?\$?' + _NUM + r'"?'),
            _to_float,
            _in_price_range,
        ),
        FieldRule(
            re.compile(r"shipping[^>]*>\s*\$?" + _NUM, re.I),
            _to_float,
            _in_price_range,
        ),
    ],
    "shipping_time": [
        FieldRule(
            re.compile(
                r"(\d+)\s*(?:-|–|to)\s*(\d+)\s*"
                r"(?:business\s+days?|days?|d[ií]as?)\b",
                re.I,
            ),
            _day_range,
        ),
    ],
    "supplier": [
        FieldRule(re.compile(r'"brand"\s*:\s*"([^"]+)"'), _to_text),
        FieldRule(
            re.compile(
                r'\b(?:brand|marca|sold by|seller)\b[^:<\n"]{0,20}:\s*([^<,\n"]{2,50})',
                re.I,
            ),
            _to_text,
        ),
    ],
}

VARIANT_RULES: list[tuple[str, str, re.Pattern[str]]] = [
    ("color", "Color", re.compile(r'"(?:color|colour)"\s*:\s*\[([^\]]+)\]', re.I)),
    ("size", "Size", re.compile(r'"(?:size|talla|taille)"\s*:\s*\[([^\]]+)\]', re.I)),
]


class HeuristicExtractor(BaseExtractor):
    """Best-effort extraction when no structured signal is available."""

    def __init__(self) -> None:
        super().__init__("heuristic")

    def _steps(self) -> list[ExtractionStep]:
        return [
            self._extract_title,
            self._extract_description,
            self._extract_rule_fields,
            self._extract_free_shipping,
            self._extract_images,
            self._extract_tags,
            self._extract_variants,
        ]

    def _extract_title(
        self, page: PageDocument, partial: PartialProduct,
    ) -> None:
        heading = page.soup.find("h1")
        if isinstance(heading, Tag):
            text = clean_text(heading.get_text(" "))
            if text:
                partial.title = text
                return
        title_tag = page.soup.find("title")
        if isinstance(title_tag, Tag):
            text = clean_text(title_tag.get_text())
            head = _TITLE_SEPARATOR_RE.split(text, maxsplit=1)[0].strip()
            partial.title = head or None

    def _extract_description(
        self, page: PageDocument, partial: PartialProduct,
    ) -> None:
        values = MetaTagExtractor.meta_content(page, "description")
        if values:
            partial.description = clean_text(values[0])

    def _extract_rule_fields(
        self, page: PageDocument, partial: PartialProduct,
    ) -> None:
        self._apply_rules(page, partial, FIELD_RULES)

    @staticmethod
    def _extract_free_shipping(
        page: PageDocument, partial: PartialProduct,
    ) -> None:
        # An explicit free-shipping phrase overrides any numeric cost
        if FREE_SHIPPING_RE.search(page.html):
            partial.shipping_cost = 0.0
            partial.free_shipping = True

    def _extract_images(
        self, page: PageDocument, partial: PartialProduct,
    ) -> None:
        images: list[str] = []
        for img in page.soup.find_all("img"):
            if not isinstance(img, Tag):
                continue
            src = str(img.get("src") or "").strip()
            if not src.startswith(("http://", "https://")):
                continue
            if not _IMAGE_EXT_RE.search(src):
                continue
            lowered = src.lower()
            if any(blocked in lowered for blocked in IMAGE_BLOCKLIST):
                continue
            images.append(src)
            if len(images) >= self.settings.MAX_IMAGES:
                break
        if images:
            partial.images = images

    def _extract_tags(
        self, page: PageDocument, partial: PartialProduct,
    ) -> None:
        values = MetaTagExtractor.meta_content(page, "keywords")
        if not values:
            return
        tags = [
            t.strip().lower()
            for t in values[0].split(",")
            if len(t.strip()) > 1
        ]
        if tags:
            partial.tags = tags[: self.settings.MAX_TAGS]

    def _extract_variants(
        self, page: PageDocument, partial: PartialProduct,
    ) -> None:
        variants: list[ProductVariant] = []
        limit = self.settings.MAX_VARIANT_OPTIONS
        for variant_id, label, pattern in VARIANT_RULES:
            match = pattern.search(page.html)
            if not match:
                continue
            options = [
                clean_text(o) for o in _QUOTED_RE.findall(match.group(1))
            ]
            options = [o for o in options if o]
            if options:
                variants.append(
                    ProductVariant(
                        id=variant_id, name=label, options=options[:limit]
                    )
                )
        if variants:
            partial.variants = variants
