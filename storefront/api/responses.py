# storefront/api/responses.py
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def success(
    data: Any = None,
    message: str = "Success",
    status_code: int = 200,
    meta: dict | None = None,
    pagination: Any = None,
) -> JSONResponse:
    """Jednolita koperta: {success, message, data, meta? | pagination?}"""
    body = {"success": True, "message": message, "data": data}
    if meta:
        body["meta"] = meta
    if pagination is not None:
        body["pagination"] = pagination
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


def created(data: Any = None, message: str = "Resource created successfully") -> JSONResponse:
    return success(data, message, status_code=201)


def error(message: str, status_code: int = 500) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})
