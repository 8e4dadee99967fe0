"""
Error types and the response-mapping middleware for the leaderboard API.
"""

import logging
from typing import Any, Awaitable, Callable, Dict

from aiohttp import web

logger = logging.getLogger(__name__)


class LeaderboardError(Exception):
    """An error that maps directly onto an HTTP response."""

    def __init__(
        self,
        status_code: int,
        error: str,
        message: str,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error = error
        self.message = message

    def payload(self) -> Dict[str, Any]:
        return {
            "statusCode": self.status_code,
            "error": self.error,
            "message": self.message,
        }


class BadRequest(LeaderboardError):
    """Submission body failed validation."""

    def __init__(self, message: str = "Invalid body") -> None:
        super().__init__(400, "Bad Request", message)


Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


@web.middleware
async def error_middleware(
    request: web.Request,
    handler: Handler,
) -> web.StreamResponse:
    """
    Render every failure as a JSON error payload.

    @param request: Incoming HTTP request
    @param handler: Next handler in the chain
    @return: Handler response, or a JSON error response
    """
    try:
        return await handler(request)
    except LeaderboardError as e:
        return web.json_response(e.payload(), status=e.status_code)
    except web.HTTPException as e:
        if e.status < 400:
            raise
        return web.json_response(
            {"statusCode": e.status, "error": e.reason, "message": e.reason},
            status=e.status,
            headers={"Allow": e.headers["Allow"]} if "Allow" in e.headers else None,
        )
    except Exception:
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return web.json_response(
            {
                "statusCode": 500,
                "error": "Internal Server Error",
                "message": "Internal Server Error",
            },
            status=500,
        )
