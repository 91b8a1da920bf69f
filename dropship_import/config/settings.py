# dropship_import/config/settings.py

"""Central configuration for the dropship_import engine."""

import os
from pathlib import Path
from typing import Any

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the dropship_import engine."""

    # --- Retrieval ---
    REQUEST_TIMEOUT: int = 15           # Seconds per fetch attempt
    MIN_DOCUMENT_LENGTH: int = 500      # Shorter bodies are proxy error pages
    MARKETPLACE_MIN_DOCUMENT_LENGTH: int = 1000
    PROXY_ENDPOINTS: list[str] = [
        "https://api.allorigins.win/raw?url={url}",
        "https://corsproxy.io/?{url}",
        "https://api.codetabs.com/v1/proxy?quest={url}",
    ]
    HEALTH_PROBE_URL: str = "https://example.com/"
    HEALTH_TIMEOUT: int = 10
    HEALTH_SLOW_MS: float = 5000.0

    # --- Bulk import ---
    BULK_IMPORT_DELAY: float = 0.8      # Seconds between extraction calls
    MAX_BULK_URLS: int = 50

    # --- Extraction ---
    MAX_IMAGES: int = 10
    MAX_TAGS: int = 10
    MAX_TITLE_TAGS: int = 8
    MAX_VARIANT_OPTIONS: int = 10
    MIN_PRICE: float = 0.01             # Heuristic price sanity range
    MAX_PRICE: float = 100_000.0
    CNY_TO_USD: float = 0.14
    ORIGINAL_PRICE_MARKUP: float = 1.3

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": (
            "text/html,application/xhtml+xml,"
            "application/xml;q=0.9,*/*;q=0.8"
        ),
        "Accept-Language": "en-US,en;q=0.5",
    }

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    DATA_DIR: Path = Path(
        os.getenv("DROPSHIP_DATA_DIR", str(BASE_DIR / "data"))
    )
    DRAFTS_PATH: Path = DATA_DIR / "product_drafts.json"
    LOGS_DIR: Path = Path(
        os.getenv("DROPSHIP_LOGS_DIR", str(BASE_DIR / "logs"))
    )

    # --- Marketplaces (domain -> display label) ---
    MARKETPLACE_DOMAINS: dict[str, str] = {
        "alibaba.com": "Alibaba",
        "aliexpress.com": "AliExpress",
        "aliexpress.us": "AliExpress",
        "1688.com": "1688",
        "amazon.com": "Amazon",
        "amazon.co.uk": "Amazon UK",
        "amazon.de": "Amazon DE",
        "amazon.es": "Amazon ES",
        "amazon.com.mx": "Amazon MX",
        "ebay.com": "eBay",
        "etsy.com": "Etsy",
        "walmart.com": "Walmart",
        "temu.com": "Temu",
        "shein.com": "Shein",
        "dhgate.com": "DHgate",
        "made-in-china.com": "Made-in-China",
        "banggood.com": "Banggood",
        "gearbest.com": "GearBest",
        "wish.com": "Wish",
        "target.com": "Target",
        "bestbuy.com": "Best Buy",
        "newegg.com": "Newegg",
        "homedepot.com": "Home Depot",
        "wayfair.com": "Wayfair",
        "overstock.com": "Overstock",
        "costco.com": "Costco",
        "zappos.com": "Zappos",
    }

    # --- Marketplace pipeline profiles (lowest merge priority) ---
    MARKETPLACE_PROFILES: list[dict[str, Any]] = [
        {
            "id": "alibaba",
            "host": "alibaba.com",
            "label": "Alibaba",
            "price": 12.99,
            "supplier": "Alibaba Supplier",
            "shipping_time": "15-45 days",
            "min_order": 1,
        },
        {
            "id": "aliexpress",
            "host": "aliexpress",
            "label": "AliExpress",
            "price": 9.99,
            "supplier": "AliExpress Seller",
            "shipping_time": "15-30 days",
            "min_order": 1,
        },
        {
            "id": "1688",
            "host": "1688.com",
            "label": "1688",
            "price": 5.99,
            "supplier": "1688 Supplier",
            "shipping_time": "20-45 days",
            "min_order": 2,
        },
    ]
