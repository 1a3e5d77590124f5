"""
Request middleware binding a transaction id to each request and logging
its outcome.
"""

import time
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .context import new_transaction_id, set_transaction_id
from .configure import get_logger

TRANSACTION_HEADER = "x-transaction-id"

request_logger = get_logger("requests")


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Reuse the caller's x-transaction-id or mint one, and echo it back."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        txn_id = request.headers.get(TRANSACTION_HEADER) or new_transaction_id()
        set_transaction_id(txn_id)

        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - started) * 1000, 2)

        request_logger.info(
            f"{request.method} {request.url.path} -> {response.status_code}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )
        response.headers[TRANSACTION_HEADER] = txn_id
        return response
