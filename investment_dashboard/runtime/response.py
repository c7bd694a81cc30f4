"""Response shaping helpers for REST routes and MCP tools."""

from __future__ import annotations

import json
from typing import Any

from starlette.responses import JSONResponse


def convert_data(data: Any) -> Any:
    if hasattr(data, "to_dict"):
        return data.to_dict()
    if isinstance(data, (list, tuple)):
        return [convert_data(item) for item in data]
    if isinstance(data, dict):
        return {key: convert_data(value) for key, value in data.items()}
    return data


def json_response(data: Any, status_code: int = 200, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(convert_data(data), status_code=status_code, headers=headers)


def error_response(message: str, status_code: int, **details: Any) -> JSONResponse:
    payload: dict[str, Any] = {"error": message}
    payload.update(convert_data(details))
    return JSONResponse(payload, status_code=status_code)


def tool_payload(data: Any) -> str:
    return json.dumps(convert_data(data), ensure_ascii=True)


def tool_error(code: str, message: str) -> str:
    return json.dumps({"error": True, "code": code, "message": message}, ensure_ascii=True)
