import logging
import os

from dotenv import load_dotenv

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    # format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    format="%(levelname)s:%(name)s - %(message)s",
)

SHOPIFY_STORE = os.getenv("SHOPIFY_STORE", "")
SHOPIFY_TOKEN = os.getenv("SHOPIFY_TOKEN", "")
SHOPIFY_API_VERSION = os.getenv("SHOPIFY_API_VERSION", "2025-07")
STOREFRONT_URL = os.getenv("STOREFRONT_URL", "https://robertaonline.com").rstrip("/")
CATALOG_TIMEOUT_SECONDS = float(os.getenv("CATALOG_TIMEOUT_SECONDS", "15"))
BRAND_PAGE_SIZE = int(os.getenv("BRAND_PAGE_SIZE", "100"))
GENERAL_PAGE_SIZE = int(os.getenv("GENERAL_PAGE_SIZE", "200"))
VARIANTS_PER_PRODUCT = int(os.getenv("VARIANTS_PER_PRODUCT", "10"))

SEARCH_CACHE_TTL_SECONDS = int(os.getenv("SEARCH_CACHE_TTL_SECONDS", str(60 * 10)))
# 0 keeps the cache unbounded, entries then leave only through lazy expiry.
SEARCH_CACHE_MAX_ITEMS = int(os.getenv("SEARCH_CACHE_MAX_ITEMS", "0"))
# Bump when matching or ranking changes so stale result lists are not served.
MATCHER_REVISION = os.getenv("MATCHER_REVISION", "1")

BRAND_THRESHOLD = int(os.getenv("BRAND_THRESHOLD", "3"))
BRAND_BONUS = int(os.getenv("BRAND_BONUS", "3"))
BRAND_ALIASES_FILE = os.getenv("BRAND_ALIASES_FILE", "")
RANK_VENDOR_WEIGHT = int(os.getenv("RANK_VENDOR_WEIGHT", "4"))
RANK_TITLE_WEIGHT = int(os.getenv("RANK_TITLE_WEIGHT", "2"))
RANK_CATEGORY_WEIGHT = int(os.getenv("RANK_CATEGORY_WEIGHT", "1"))
# "<max length>:<max distance>" pairs, "*" is the catch-all for longer strings.
SIMILARITY_TOLERANCE = os.getenv("SIMILARITY_TOLERANCE", "4:1,6:1,10:2,*:3")

RESULT_LIMIT = int(os.getenv("RESULT_LIMIT", "12"))
THUMBNAIL_SIZE = os.getenv("THUMBNAIL_SIZE", "200x200")

WEB_HOST = os.getenv("WEB_HOST", "0.0.0.0")
WEB_PORT = int(os.getenv("PORT", os.getenv("WEB_PORT", "3000")))
