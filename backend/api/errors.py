"""
Exception handlers.

Module exceptions carry their own HTTP status, so routes simply let them
propagate and this handler renders the standard error body.
"""

import logging

from fastapi import FastAPI
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from shared.exceptions import BBTapError

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Register bbtap exception handlers on a FastAPI app."""

    @app.exception_handler(BBTapError)
    async def _bbtap_error_handler(request: Request, exc: BBTapError) -> Response:
        if exc.status_code >= 500:
            logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
        else:
            logger.debug(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())
