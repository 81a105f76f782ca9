# vegprice/api/app.py

"""Read-only JSON API over the collected prices.

A single endpoint is dispatched by the ``path`` query parameter:

* ``vegetables-list-with-prices``: latest price per item
* ``vegetables-history`` (default): last 30 days grouped by item
* ``vegetables``: every item from the most recent publication date

All responses share the envelope ``{"status", "data", ...}``; failures
carry ``status="error"`` with a ``message`` and a machine-readable ``code``.
"""

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse

from vegprice.config.settings import Settings
from vegprice.models.price_record import PriceRecord
from vegprice.services.projections import (
    latest_prices,
    latest_snapshot,
    recent_history,
)
from vegprice.storage.price_store import MissingStoreError, PriceStore

logger = logging.getLogger("vegprice.api")


class UnknownEndpointError(LookupError):
    """Raised for a ``path`` value with no registered view."""


def _list_with_prices(records: list[PriceRecord]) -> dict[str, Any]:
    view = latest_prices(records)
    return {
        "data": {
            "vegetables": view.items,
            "prices": {
                item: point.to_dict()
                for item, point in view.latest.items()
            },
        },
    }


def _history(records: list[PriceRecord]) -> dict[str, Any]:
    view = recent_history(records)
    return {
        "data": {
            item: [p.to_dict() for p in points]
            for item, points in view.history.items()
        },
        "dates": view.dates,
    }


def _snapshot(records: list[PriceRecord]) -> dict[str, Any]:
    return {
        "data": [
            {"name": e.name, "price": e.price}
            for e in latest_snapshot(records)
        ],
    }


VIEWS: dict[str, Callable[[list[PriceRecord]], dict[str, Any]]] = {
    "vegetables-list-with-prices": _list_with_prices,
    "vegetables-history": _history,
    "vegetables": _snapshot,
}


def _error(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "status": "error",
            "code": code,
            "message": message,
        },
    )


def handle_query(path: str, db_path: Path | None = None) -> dict[str, Any]:
    """Build the success envelope for ``path`` from the current store."""
    view = VIEWS.get(path)
    if view is None:
        raise UnknownEndpointError(f"Unknown path: {path!r}")

    store = PriceStore.open_existing(db_path)
    try:
        records = store.records()
    finally:
        store.close()
    return {"status": "success", **view(records)}


def create_app(db_path: Path | None = None) -> FastAPI:
    """Build the API bound to one store file."""
    app = FastAPI(title="vegprice", version="1.0.0")
    app.state.db_path = db_path or Settings.PRICE_DB_PATH

    def query(
        request: Request,
        path: str = Query(default=Settings.DEFAULT_QUERY_PATH),
    ) -> JSONResponse:
        # "?path=" with no value falls back to the default view
        path = path.strip() or Settings.DEFAULT_QUERY_PATH
        try:
            body = handle_query(path, request.app.state.db_path)
            response = JSONResponse(content=body)
        except UnknownEndpointError as exc:
            logger.warning("Rejected query: %s", exc)
            return _error(400, "unknown_endpoint", str(exc))
        except MissingStoreError as exc:
            logger.warning("Query before first collection: %s", exc)
            return _error(404, "missing_store", str(exc))
        except Exception as exc:
            logger.error("Query %r failed: %s", path, exc, exc_info=True)
            return _error(500, "internal_error", str(exc))
        logger.debug("Served %r", path)
        return response

    app.add_api_route("/", query, methods=["GET"])
    app.add_api_route("/api", query, methods=["GET"])
    return app
