"""
Web route handlers for the leaderboard API.
"""

import functools
import json
import logging
from typing import Any

from aiohttp import web

from .database import LeaderboardCollection
from .models import decode_body, parse_entry

logger = logging.getLogger(__name__)

strict_dumps = functools.partial(json.dumps, allow_nan=False)


class LeaderboardHandlers:
    """Handles the leaderboard routes against an injected collection."""

    def __init__(
        self,
        collection: LeaderboardCollection,
        config: Any,
    ) -> None:
        self.collection = collection
        self.top_n = config.get("leaderboard", "top_n") or 10

    async def get_leaderboard(
        self,
        _: web.Request,
    ) -> web.Response:
        """
        API endpoint for the top entries.

        @param _: Unused request parameter, query parameters are ignored
        @return: JSON response with at most top_n entries, best score first
        """
        board = await self.collection.top(self.top_n)

        return web.json_response(
            {"result": [entry.to_dict() for entry in board]},
            dumps=strict_dumps,
        )

    async def put_leaderboard(
        self,
        request: web.Request,
    ) -> web.Response:
        """
        API endpoint for submitting a score.

        @param request: HTTP request whose JSON body holds name and score
        @return: JSON confirmation; invalid bodies raise BadRequest
        """
        body = decode_body(await request.read())
        entry = parse_entry(body)

        await self.collection.insert(entry)
        logger.debug("Posted score %s for %r", entry.score, entry.name)

        return web.json_response(
            {
                "statusCode": 200,
                "message": "Your score has been posted",
            }
        )
