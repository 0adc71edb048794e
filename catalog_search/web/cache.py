from __future__ import annotations

from datetime import datetime

from aiohttp import web

from . import SEARCH_SERVICE_KEY, _redirect, render_template


def _format_duration(seconds: int) -> str:
    if seconds <= 0:
        return "0 s"
    minutes, sec = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    parts = []
    if hours:
        parts.append(f"{hours} h")
    if minutes:
        parts.append(f"{minutes} m")
    if sec or not parts:
        parts.append(f"{sec} s")
    return " ".join(parts)


def _serialize_cache(cache) -> list[dict]:
    entries = []
    for entry in cache.dump():
        value = entry["value"]
        expires_at = datetime.fromtimestamp(entry["expires_at"])
        entries.append({
            "key": entry["key"],
            "results": len(value) if isinstance(value, (list, tuple)) else 0,
            "titles": [item.get("title", "") for item in value[:3]] if isinstance(value, (list, tuple)) else [],
            "expires_in": entry["expires_in"],
            "expires_in_human": _format_duration(entry["expires_in"]),
            "expires_at": expires_at.strftime("%Y-%m-%d %H:%M:%S"),
        })
    entries.sort(key=lambda item: item["expires_in"])
    return entries


async def cache_overview(request: web.Request) -> web.Response:
    cache = request.app[SEARCH_SERVICE_KEY].cache
    entries = _serialize_cache(cache)
    return render_template(
        "cache.jinja2",
        title="Search cache",
        ttl=cache.ttl,
        max_items=cache.max_items,
        entries=entries,
        message=request.rel_url.query.get("msg"),
    )


async def clear_cache(request: web.Request) -> web.Response:
    cache = request.app[SEARCH_SERVICE_KEY].cache
    dropped = len(cache)
    cache.clear()
    _redirect("/cache", f"Cache cleared ({dropped} entries)")


routes = [
    web.get("/cache", cache_overview),
    web.post("/cache/clear", clear_cache),
]
