import unittest

from catalog_search.models import CatalogEntry, Variant


class CatalogEntryFromNodeTests(unittest.TestCase):
    def test_full_node(self):
        node = {
            "id": "gid://shopify/Product/1",
            "title": "Shampoo 300ml",
            "handle": "shampoo-300ml",
            "vendor": "Redken",
            "productType": "Hair Care",
            "status": "ACTIVE",
            "totalInventory": 12,
            "featuredImage": {"url": "https://cdn/x/shampoo.jpg"},
            "variants": {"edges": [
                {"node": {"id": "gid://shopify/ProductVariant/10", "price": "19.90",
                          "availableForSale": True, "inventoryQuantity": 12}},
            ]},
        }
        entry = CatalogEntry.from_node(node)
        self.assertEqual(entry.vendor, "Redken")
        self.assertEqual(entry.product_type, "Hair Care")
        self.assertEqual(entry.total_inventory, 12)
        self.assertEqual(entry.image_url, "https://cdn/x/shampoo.jpg")
        self.assertEqual(entry.variants, (Variant("gid://shopify/ProductVariant/10", "19.90", True, 12),))

    def test_partial_node(self):
        entry = CatalogEntry.from_node({"id": "gid://shopify/Product/2", "vendor": None, "featuredImage": None})
        self.assertEqual(entry.title, "")
        self.assertEqual(entry.vendor, "")
        self.assertEqual(entry.total_inventory, 0)
        self.assertIsNone(entry.image_url)
        self.assertEqual(entry.variants, ())

    def test_money_price_and_unknown_quantity(self):
        variant = Variant.from_node({"id": "gid://shopify/ProductVariant/5", "price": {"amount": "9.5"},
                                     "availableForSale": True, "inventoryQuantity": None})
        self.assertEqual(variant.price, "9.5")
        self.assertIsNone(variant.inventory_quantity)
        self.assertTrue(variant.is_purchasable)
        self.assertEqual(variant.numeric_id, "5")

    def test_plain_variant_list(self):
        entry = CatalogEntry.from_node({"id": "p", "variants": [{"id": "v1", "availableForSale": False}]})
        self.assertEqual(len(entry.variants), 1)
        self.assertFalse(entry.variants[0].is_purchasable)


if __name__ == "__main__":
    unittest.main()
