from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

import aiohttp

from catalog_search.config import (
    BRAND_PAGE_SIZE,
    CATALOG_TIMEOUT_SECONDS,
    GENERAL_PAGE_SIZE,
    SHOPIFY_API_VERSION,
    SHOPIFY_STORE,
    SHOPIFY_TOKEN,
    VARIANTS_PER_PRODUCT,
)
from catalog_search.models import CatalogEntry

logger = logging.getLogger(__name__)

ACTIVE_FILTER = "status:active published_status:published"

PRODUCT_FIELDS = """
            id title handle vendor productType status totalInventory
            featuredImage { url }
            variants(first: %(variants)d) { edges { node { id price availableForSale inventoryQuantity } } }
"""

DRAFT_ORDER_MUTATION = """
mutation draftOrderCreate($input: DraftOrderInput!) {
  draftOrderCreate(input: $input) {
    draftOrder { id invoiceUrl }
    userErrors { field message }
  }
}
"""


class CatalogError(Exception):
    """The remote catalog could not be reached or answered with an error."""


class OrderRejected(CatalogError):
    def __init__(self, messages: List[str]):
        super().__init__("; ".join(messages) or "Order rejected")
        self.messages = messages


def vendor_clause(vendor: str) -> str:
    escaped = vendor.replace("\\", "\\\\").replace('"', '\\"')
    return f'vendor:"{escaped}"' if " " in vendor else f"vendor:{escaped}"


def _graphql_string(value: str) -> str:
    # Search strings are embedded inside a quoted GraphQL argument.
    return json.dumps(value)


def build_products_query(first: int, vendor: str | None = None, variants: int = VARIANTS_PER_PRODUCT) -> str:
    search = ACTIVE_FILTER
    if vendor:
        search = f"{search} {vendor_clause(vendor)}"
    fields = PRODUCT_FIELDS % {"variants": variants}
    return (
        "{\n"
        f"  products(first: {int(first)}, query: {_graphql_string(search)}) {{\n"
        f"    edges {{ node {{{fields}    }} }}\n"
        "  }\n"
        "}"
    )


def build_vendors_query(first: int = GENERAL_PAGE_SIZE) -> str:
    return (
        "{\n"
        f"  products(first: {int(first)}, query: {_graphql_string(ACTIVE_FILTER)}) {{\n"
        "    edges { node { vendor } }\n"
        "  }\n"
        "}"
    )


def _product_nodes(payload: Dict[str, Any]) -> List[Dict[str, Any]]:
    products = ((payload or {}).get("data") or {}).get("products") or {}
    return [edge["node"] for edge in products.get("edges") or [] if edge and edge.get("node")]


class ShopifyCatalogClient:
    """Minimal Admin GraphQL client; one aiohttp session per client."""

    def __init__(
        self,
        store: str = SHOPIFY_STORE,
        token: str = SHOPIFY_TOKEN,
        api_version: str = SHOPIFY_API_VERSION,
        timeout: float = CATALOG_TIMEOUT_SECONDS,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.store = store
        self.token = token
        self.api_version = api_version
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None

    @property
    def endpoint(self) -> str:
        return f"https://{self.store}/admin/api/{self.api_version}/graphql.json"

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()

    async def execute(self, query: str, variables: Dict[str, Any] | None = None) -> Dict[str, Any]:
        if not self.store or not self.token:
            raise CatalogError("SHOPIFY_STORE and SHOPIFY_TOKEN must be configured")
        body: Dict[str, Any] = {"query": query}
        if variables:
            body["variables"] = variables
        headers = {
            "X-Shopify-Access-Token": self.token,
            "Content-Type": "application/json",
        }
        try:
            async with self._get_session().post(self.endpoint, json=body, headers=headers) as resp:
                if resp.status >= 400:
                    text = await resp.text()
                    raise CatalogError(f"Catalog responded {resp.status}: {text[:200]}")
                payload = await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise CatalogError(f"Catalog request failed: {exc.__class__.__name__}: {exc}") from exc
        except ValueError as exc:
            raise CatalogError(f"Catalog returned invalid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise CatalogError("Catalog returned an unexpected payload")
        if payload.get("errors"):
            raise CatalogError(f"Catalog query errors: {payload['errors']}")
        return payload

    async def fetch_products(self, vendor: str | None = None, first: int | None = None) -> List[CatalogEntry]:
        if first is None:
            first = BRAND_PAGE_SIZE if vendor else GENERAL_PAGE_SIZE
        payload = await self.execute(build_products_query(first, vendor))
        entries = [CatalogEntry.from_node(node) for node in _product_nodes(payload)]
        logger.debug("Fetched %d products (vendor=%r)", len(entries), vendor)
        return entries

    async def fetch_vendors(self) -> List[str]:
        payload = await self.execute(build_vendors_query())
        vendors = {node.get("vendor") for node in _product_nodes(payload)}
        return sorted(v for v in vendors if v)

    async def create_draft_order(self, variant_id: str, quantity: int = 1, email: str | None = None) -> Dict[str, str]:
        gid = variant_id if str(variant_id).startswith("gid://") else f"gid://shopify/ProductVariant/{variant_id}"
        order_input: Dict[str, Any] = {"lineItems": [{"variantId": gid, "quantity": int(quantity)}]}
        if email:
            order_input["email"] = email
        payload = await self.execute(DRAFT_ORDER_MUTATION, {"input": order_input})
        result = ((payload.get("data") or {}).get("draftOrderCreate")) or {}
        user_errors = result.get("userErrors") or []
        if user_errors:
            raise OrderRejected([e.get("message", "") for e in user_errors])
        draft = result.get("draftOrder") or {}
        if not draft.get("id"):
            raise CatalogError("Draft order was not created")
        return {"id": draft["id"], "invoice_url": draft.get("invoiceUrl")}
