# saivd/core/errors.py

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


class ApiError(Exception):
    """Raised from routes and dependencies; rendered as the standard error body."""

    def __init__(self, status_code: int, code: str, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message


def error_response(status: int, code: str, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status,
        content={"success": False, "error": {"code": code, "message": message}},
        headers=headers,
    )


def success_response(data, status: int = 200, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status, content={"success": True, "data": jsonable_encoder(data)}, headers=headers)


def unauthorized() -> ApiError:
    return ApiError(401, "unauthorized", "Authentication required")


def not_found(message: str = "Not found") -> ApiError:
    return ApiError(404, "not_found", message)


def validation_error(message: str) -> ApiError:
    return ApiError(400, "validation_error", message)


def plain_error(status: int, message: str) -> JSONResponse:
    """Profile and admin routes report errors as a bare string"""
    return JSONResponse(status_code=status, content={"success": False, "error": message})
