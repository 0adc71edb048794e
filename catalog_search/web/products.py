from __future__ import annotations

import logging

from aiohttp import web

from catalog_search.catalog_client import CatalogError, OrderRejected
from catalog_search.formatting import to_payload
from catalog_search.text_cleaner import normalize
from . import SEARCH_SERVICE_KEY

logger = logging.getLogger(__name__)

EMPTY_QUERY_MESSAGE = "Please include a ?q= parameter"


async def health(request: web.Request) -> web.Response:
    return web.Response(text="Catalog search API is running (fuzzy + thumbnails + stock)")


async def search_products(request: web.Request) -> web.Response:
    query = request.rel_url.query.get("q", "")
    if not normalize(query):
        return web.json_response({"message": EMPTY_QUERY_MESSAGE})
    service = request.app[SEARCH_SERVICE_KEY]
    try:
        results = await service.search(query)
    except CatalogError:
        logger.exception("Error /products for %r", query)
        return web.json_response({"error": "Internal server error"}, status=500)
    return web.json_response(to_payload(results))


async def debug_vendors(request: web.Request) -> web.Response:
    service = request.app[SEARCH_SERVICE_KEY]
    try:
        vendors = await service.catalog.fetch_vendors()
    except CatalogError:
        logger.exception("Error /debug/vendors")
        return web.json_response({"error": "debug error"}, status=500)
    return web.json_response({"vendors": vendors, "count": len(vendors)})


async def create_order(request: web.Request) -> web.Response:
    try:
        data = await request.json()
    except ValueError:
        return web.json_response({"error": "Body must be JSON"}, status=400)
    if not isinstance(data, dict):
        return web.json_response({"error": "Body must be a JSON object"}, status=400)

    variant_id = str(data.get("variant_id") or "").strip()
    try:
        quantity = int(data.get("quantity", 1))
    except (TypeError, ValueError):
        quantity = 0
    if not variant_id or quantity <= 0:
        return web.json_response({"error": "variant_id and a positive quantity are required"}, status=400)

    service = request.app[SEARCH_SERVICE_KEY]
    try:
        order = await service.catalog.create_draft_order(variant_id, quantity, data.get("email"))
    except OrderRejected as exc:
        return web.json_response({"error": "Order rejected", "details": exc.messages}, status=400)
    except CatalogError:
        logger.exception("Error /orders for variant %s", variant_id)
        return web.json_response({"error": "Internal server error"}, status=500)
    logger.info("Draft order %s created for variant %s x%d", order["id"], variant_id, quantity)
    return web.json_response(order, status=201)


routes = [
    web.get("/", health),
    web.get("/products", search_products),
    web.get("/debug/vendors", debug_vendors),
    web.post("/orders", create_order),
]
