# dropship_import/extractors/source_detector.py

"""Map a product page's hostname to a marketplace label."""

from dropship_import.config.settings import Settings

# Longest domains first so "amazon.com.mx" wins over "amazon.com"
_DOMAINS_BY_SPECIFICITY: list[tuple[str, str]] = sorted(
    Settings.MARKETPLACE_DOMAINS.items(),
    key=lambda item: len(item[0]),
    reverse=True,
)

_CROSS_BORDER = (
    "Alibaba", "AliExpress", "1688", "DHgate", "Made-in-China", "Banggood",
)
_BUDGET = ("Temu", "Shein", "Wish")


def detect_source(hostname: str) -> str:
    """Return the marketplace label for *hostname*.

    Unknown hosts fall back to their first non-``www`` label, so
    ``www.myshop.co`` becomes ``myshop``.
    """
    host = hostname.strip().lower()
    for domain, label in _DOMAINS_BY_SPECIFICITY:
        if domain in host:
            return label
    if host.startswith("www."):
        host = host[len("www."):]
    return host.split(".")[0]


def shipping_family(source: str) -> str:
    """Classify a marketplace label into its shipping-table family."""
    if any(name in source for name in _CROSS_BORDER):
        return "cross_border"
    if "Amazon" in source:
        return "amazon"
    if "eBay" in source:
        return "ebay"
    if "Walmart" in source:
        return "walmart"
    if any(name in source for name in _BUDGET):
        return "budget"
    return "generic"
