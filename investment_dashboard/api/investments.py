"""CRUD routes over the record store."""

from __future__ import annotations

import asyncio
import json
import logging

from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Route

from investment_dashboard.api.common import instrumented
from investment_dashboard.portfolio.models import Investment, InvalidInvestment
from investment_dashboard.runtime.monitoring import ServerMetrics
from investment_dashboard.runtime.response import error_response, json_response
from investment_dashboard.storage.errors import NotFound, StorageError
from investment_dashboard.storage.record_store import RecordStore

LOGGER = logging.getLogger(__name__)


async def _read_payload(request: Request) -> dict | None:
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    return payload if isinstance(payload, dict) else None


def build_investment_routes(
    store: RecordStore,
    prefix: str = "/api",
    metrics: ServerMetrics | None = None,
) -> list[Route]:
    async def list_investments(request: Request) -> Response:
        result = await asyncio.to_thread(store.load)
        if result.failed:
            LOGGER.warning("serving empty investment list: store error=%s", result.error)
        return json_response(result.investments, headers={"X-Store-Status": result.status})

    async def create_investment(request: Request) -> Response:
        payload = await _read_payload(request)
        if payload is None:
            return error_response("Request body must be a JSON object", 400)
        try:
            record = Investment.from_payload(payload)
        except InvalidInvestment as error:
            return error_response("Invalid investment", 400, issues=error.issues)
        try:
            stored = await asyncio.to_thread(store.create, record)
        except StorageError:
            LOGGER.exception("create investment failed")
            return error_response("Failed to save investment", 500)
        return json_response(stored, status_code=201)

    async def update_investment(request: Request) -> Response:
        investment_id = request.path_params["investment_id"]
        payload = await _read_payload(request)
        if payload is None:
            return error_response("Request body must be a JSON object", 400)
        try:
            record = Investment.from_payload(payload, investment_id=investment_id)
        except InvalidInvestment as error:
            return error_response("Invalid investment", 400, issues=error.issues)
        try:
            stored = await asyncio.to_thread(store.update, investment_id, record)
        except NotFound:
            return error_response("Investment not found", 404)
        except StorageError:
            LOGGER.exception("update investment failed: id=%s", investment_id)
            return error_response("Failed to update investment", 500)
        return json_response(stored)

    async def delete_investment(request: Request) -> Response:
        investment_id = request.path_params["investment_id"]
        try:
            removed = await asyncio.to_thread(store.delete, investment_id)
        except StorageError:
            LOGGER.exception("delete investment failed: id=%s", investment_id)
            return error_response("Failed to delete investment", 500)
        return json_response({"message": "Investment deleted successfully", "removed": removed})

    collection = f"{prefix}/investments"
    item = f"{collection}/{{investment_id}}"
    return [
        Route(collection, instrumented("list_investments", metrics)(list_investments), methods=["GET"]),
        Route(collection, instrumented("create_investment", metrics)(create_investment), methods=["POST"]),
        Route(item, instrumented("update_investment", metrics)(update_investment), methods=["PUT"]),
        Route(item, instrumented("delete_investment", metrics)(delete_investment), methods=["DELETE"]),
    ]
