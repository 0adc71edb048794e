from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import urlencode

from aiohttp import web
from jinja2 import Environment, FileSystemLoader, select_autoescape

from catalog_search.config import WEB_HOST, WEB_PORT

BASE_DIR = Path(__file__).resolve().parent
TEMPLATE_DIR = BASE_DIR / "templates"

_JINJA_ENV = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(("jinja2", "html", "xml")),
)

SEARCH_SERVICE_KEY = web.AppKey("search_service", object)


def render_template(template_name: str, **context) -> web.Response:
    context.setdefault("message", None)
    context.setdefault("title", "Catalog search")
    template = _JINJA_ENV.get_template(template_name)
    html = template.render(**context)
    return web.Response(text=html, content_type="text/html")


def _redirect(path: str, message: str | None = None) -> web.HTTPSeeOther:
    if message:
        separator = "&" if "?" in path else "?"
        path = f"{path}{separator}{urlencode({'msg': message})}"
    raise web.HTTPSeeOther(path)


from . import cache, products  # noqa: E402  # isort:skip


async def _close_catalog(app: web.Application) -> None:
    close = getattr(app[SEARCH_SERVICE_KEY].catalog, "close", None)
    if close is not None:
        await close()


def create_app(search_service) -> web.Application:
    app = web.Application()
    app[SEARCH_SERVICE_KEY] = search_service
    app.add_routes(products.routes)
    app.add_routes(cache.routes)
    app.on_cleanup.append(_close_catalog)
    return app


async def start_web_server(search_service, host: str = WEB_HOST, port: int = WEB_PORT):
    app = create_app(search_service)
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, host=host, port=port)
    await site.start()
    logging.info("Catalog search API listening on http://%s:%s", host, port)
    return runner
