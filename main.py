import asyncio
import logging

from catalog_search.catalog_client import ShopifyCatalogClient
from catalog_search.search_service import SearchService
from catalog_search.web import start_web_server


if __name__ == "__main__":

    async def app_main():
        service = SearchService(ShopifyCatalogClient())
        runner = await start_web_server(service)
        logging.info("Catalog search started with %d known brands", len(service.brands))
        try:
            await asyncio.Event().wait()
        finally:
            await runner.cleanup()


    try:
        asyncio.run(app_main())
    except KeyboardInterrupt:
        logging.info("Stopped")
