import asyncio

from prettytable import PrettyTable

from catalog_search.brands import BrandDetector, configured_brand_aliases
from catalog_search.catalog_client import ShopifyCatalogClient
from catalog_search.text_cleaner import tokenize


async def _fetch_vendors():
    client = ShopifyCatalogClient()
    try:
        return await client.fetch_vendors()
    finally:
        await client.close()


if __name__ == "__main__":
    detector = BrandDetector(configured_brand_aliases())
    vendors = asyncio.run(_fetch_vendors())

    table = PrettyTable()
    table.field_names = ["Vendor", "Detected brand key"]
    table.align["Vendor"] = "l"
    table.align["Detected brand key"] = "l"

    for vendor in vendors:
        table.add_row([vendor, detector.detect(tokenize(vendor)) or "-"])

    print(table)
