"""Глобальный перехват и логирование ошибок HTTP-слоя."""

from __future__ import annotations

from typing import Awaitable, Callable

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from loguru import logger

from decker.exceptions import ClientError


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    logger.debug(
        "{path}: {kind} {message}",
        path=request.url.path,
        kind=type(exc).__name__,
        message=exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def unhandled_errors_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    try:
        return await call_next(request)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Ошибка при обработке {path}: {error}", path=request.url.path, error=exc)
        return JSONResponse(status_code=500, content={"error": "Server error"})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ClientError, client_error_handler)  # type: ignore[arg-type]
    app.middleware("http")(unhandled_errors_middleware)


__all__ = ["register_error_handlers"]
