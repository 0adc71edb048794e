import json
import unittest

from aiohttp import web
from aiohttp.test_utils import AioHTTPTestCase

from catalog_search.catalog_client import (
    CatalogError,
    OrderRejected,
    ShopifyCatalogClient,
    build_products_query,
    build_vendors_query,
    vendor_clause,
)


class QueryBuilderTests(unittest.TestCase):
    def test_general_listing(self):
        query = build_products_query(200)
        self.assertIn('products(first: 200, query: "status:active published_status:published")', query)
        self.assertIn("variants(first: 10)", query)
        self.assertIn("totalInventory", query)

    def test_vendor_clause(self):
        self.assertEqual(vendor_clause("Redken"), "vendor:Redken")
        self.assertEqual(vendor_clause("Sebastian Professional"), 'vendor:"Sebastian Professional"')

    def test_vendor_listing_quotes_spaced_vendor(self):
        query = build_products_query(100, "Sebastian Professional")
        self.assertIn('published_status:published vendor:\\"Sebastian Professional\\""', query)

    def test_vendors_query(self):
        self.assertIn("edges { node { vendor } }", build_vendors_query(50))


class LocalCatalogClient(ShopifyCatalogClient):
    def __init__(self, url, **kwargs):
        super().__init__(store="test.myshopify.com", token="secret", **kwargs)
        self.url = url

    @property
    def endpoint(self):
        return self.url


PRODUCTS_REPLY = {
    "data": {"products": {"edges": [
        {"node": {
            "id": "gid://shopify/Product/1", "title": "Shampoo", "handle": "shampoo", "vendor": "Redken",
            "productType": "Hair Care", "status": "ACTIVE", "totalInventory": 4,
            "featuredImage": {"url": "https://cdn/x/shampoo.jpg"},
            "variants": {"edges": [{"node": {"id": "gid://shopify/ProductVariant/10", "price": "20.00",
                                             "availableForSale": True, "inventoryQuantity": 4}}]},
        }},
        {"node": {"id": "gid://shopify/Product/2", "title": "Mask", "vendor": "Fanola", "totalInventory": 0}},
        {"node": {"id": "gid://shopify/Product/3", "title": "Oil", "vendor": "Redken", "totalInventory": 1}},
    ]}},
}


class CatalogClientTests(AioHTTPTestCase):
    async def get_application(self):
        self.requests = []
        self.reply = PRODUCTS_REPLY
        self.reply_status = 200

        async def graphql(request: web.Request) -> web.Response:
            self.requests.append((dict(request.headers), await request.json()))
            return web.Response(text=json.dumps(self.reply), status=self.reply_status,
                                content_type="application/json")

        app = web.Application()
        app.router.add_post("/graphql.json", graphql)
        return app

    async def asyncSetUp(self):
        await super().asyncSetUp()
        self.catalog = LocalCatalogClient(str(self.server.make_url("/graphql.json")))

    async def asyncTearDown(self):
        await self.catalog.close()
        await super().asyncTearDown()

    async def test_fetch_products(self):
        entries = await self.catalog.fetch_products(vendor="Redken")
        self.assertEqual([e.id for e in entries], [
            "gid://shopify/Product/1", "gid://shopify/Product/2", "gid://shopify/Product/3",
        ])
        self.assertEqual(entries[0].variants[0].price, "20.00")
        headers, body = self.requests[0]
        self.assertEqual(headers["X-Shopify-Access-Token"], "secret")
        self.assertIn("vendor:Redken", body["query"])
        self.assertIn("first: 100", body["query"])

    async def test_general_page_size(self):
        await self.catalog.fetch_products()
        self.assertIn("first: 200", self.requests[0][1]["query"])

    async def test_fetch_vendors(self):
        self.assertEqual(await self.catalog.fetch_vendors(), ["Fanola", "Redken"])

    async def test_http_error(self):
        self.reply_status = 502
        with self.assertRaises(CatalogError):
            await self.catalog.fetch_products()

    async def test_graphql_errors(self):
        self.reply = {"errors": [{"message": "Throttled"}]}
        with self.assertRaises(CatalogError):
            await self.catalog.fetch_products()

    async def test_missing_data_is_empty(self):
        self.reply = {"data": None}
        self.assertEqual(await self.catalog.fetch_products(), [])

    async def test_missing_credentials(self):
        client = ShopifyCatalogClient(store="", token="")
        with self.assertRaises(CatalogError):
            await client.fetch_products()

    async def test_create_draft_order(self):
        self.reply = {"data": {"draftOrderCreate": {
            "draftOrder": {"id": "gid://shopify/DraftOrder/9", "invoiceUrl": "https://inv/9"},
            "userErrors": [],
        }}}
        order = await self.catalog.create_draft_order("10", 2)
        self.assertEqual(order, {"id": "gid://shopify/DraftOrder/9", "invoice_url": "https://inv/9"})
        variables = self.requests[0][1]["variables"]
        self.assertEqual(variables["input"]["lineItems"],
                         [{"variantId": "gid://shopify/ProductVariant/10", "quantity": 2}])

    async def test_draft_order_user_errors(self):
        self.reply = {"data": {"draftOrderCreate": {
            "draftOrder": None,
            "userErrors": [{"field": ["lineItems"], "message": "Variant is out of stock"}],
        }}}
        with self.assertRaises(OrderRejected) as ctx:
            await self.catalog.create_draft_order("10")
        self.assertEqual(ctx.exception.messages, ["Variant is out of stock"])


if __name__ == "__main__":
    unittest.main()
