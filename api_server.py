"""
api_server.py - HTTP API for the product analysis web form.

Endpoints:
  POST /api/products/analyze  → analysis JSON (name, brand, ingredients,
                                packaging, additionalInfo?, carbonFootprint,
                                price, similarProducts)
  GET  /health                → plain-text health check

Request body for /api/products/analyze:
  {"imageUrl": "data:image/jpeg;base64,..." | "https://...", "price": 12.5}
"""
from __future__ import annotations

import json
import logging
import math
from typing import Optional

from aiohttp import web

import analyzer
import config

logger = logging.getLogger(__name__)

ANALYZE_FAILED = "Could not analyze product"


def _error(status: int, message: str) -> web.Response:
    return web.json_response({"message": message}, status=status)


def _parse_price(value) -> Optional[float]:
    """Missing / null → None. Raises ValueError for anything non-numeric."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError(value)
    price = float(value)
    if not math.isfinite(price):
        raise ValueError(value)
    return price


# ── Request handlers ───────────────────────────────────────────────────────────

async def handle_analyze(request: web.Request) -> web.Response:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return _error(400, "Request body must be JSON")
    if not isinstance(body, dict) or not body.get("imageUrl"):
        return _error(400, "imageUrl is required")

    try:
        price = _parse_price(body.get("price"))
    except (TypeError, ValueError):
        return _error(400, "price must be a number")

    try:
        image_bytes = await analyzer.load_image(str(body["imageUrl"]))
    except analyzer.ImageError as exc:
        return _error(400, str(exc))

    try:
        analysis = await analyzer.analyze_product(image_bytes)
        analysis.carbon_footprint = await analyzer.calculate_carbon_footprint(analysis.attributes)
        analysis.similar_products = await analyzer.find_similar_products(analysis.product.name, price)
    except Exception as exc:
        # Detail stays in the log; the client only learns that it failed
        raw = getattr(exc, "raw", None)
        logger.error("Analysis failed: %s", exc, exc_info=True)
        if raw:
            logger.error("Raw model response: %s", raw[:1000])
        return _error(500, ANALYZE_FAILED)

    analysis.price = price
    return web.json_response(analysis.to_dict())


async def handle_health(request: web.Request) -> web.Response:
    return web.Response(text="OK", content_type="text/plain")


# ── App factory ────────────────────────────────────────────────────────────────

def build_web_app() -> web.Application:
    app = web.Application(client_max_size=config.MAX_IMAGE_BYTES * 2)
    app.router.add_get("/health",               handle_health)
    app.router.add_post("/api/products/analyze", handle_analyze)
    return app


async def start_api_server() -> web.AppRunner:
    """Start the web server. Returns runner so caller can shut it down cleanly."""
    app    = build_web_app()
    runner = web.AppRunner(app, access_log=logger)
    await runner.setup()
    site = web.TCPSite(runner, config.API_HOST, config.API_PORT)
    await site.start()
    logger.info("API listening on %s:%d", config.API_HOST, config.API_PORT)
    return runner
