"""
LeaderboardServer class that wires configuration, store and HTTP server together.
"""

import asyncio
import logging
from typing import Any, Optional

from aiohttp import web, web_runner
import aiohttp_cors

from .config import LeaderboardConfig
from .database import DatabaseManager, LeaderboardCollection
from .errors import error_middleware
from .web_handlers import LeaderboardHandlers

logger = logging.getLogger(__name__)


def create_app(
    collection: LeaderboardCollection,
    config: Any,
) -> web.Application:
    """
    Build the aiohttp application.

    @param collection: Collection handle injected into the route handlers
    @param config: Configuration used for limits and CORS
    @return: Application with both leaderboard routes registered
    """
    app = web.Application(middlewares=[error_middleware])
    handlers = LeaderboardHandlers(collection, config)

    resource = app.router.add_resource("/leaderboard")
    routes = [
        resource.add_route("GET", handlers.get_leaderboard),
        resource.add_route("PUT", handlers.put_leaderboard),
    ]

    if config.get("cors", "enabled"):
        cors = aiohttp_cors.setup(
            app,
            defaults={
                "*": aiohttp_cors.ResourceOptions(
                    allow_credentials=False,
                    expose_headers="*",
                    allow_headers="*",
                    allow_methods=["GET", "PUT"],
                )
            },
        )
        for route in routes:
            cors.add(route)

    return app


class LeaderboardServer:
    """Async leaderboard service: one store connection, one HTTP listener."""

    def __init__(
        self,
        config: LeaderboardConfig,
        host: Optional[str] = None,
        port: Optional[int] = None,
    ) -> None:
        self.config = config
        self.host = host if host is not None else config.get("server", "host")
        self.port = port if port is not None else config.get("server", "port")

        self.db = DatabaseManager(
            config.database_url,
            config.get("store", "database"),
        )
        self.collection: Optional[LeaderboardCollection] = None
        self._runner: Optional[web_runner.AppRunner] = None

    async def connect(self) -> LeaderboardCollection:
        """
        Open the store connection and bind the leaderboard collection.

        @return: Collection handle shared by every request
        """
        await self.db.connect()
        self.collection = self.db.collection(self.config.get("store", "collection"))
        await self.collection.ensure_schema()
        return self.collection

    async def log_summary(self) -> None:
        """
        Log how many entries are stored and who currently leads.
        """
        if self.collection is None:
            raise RuntimeError("LeaderboardServer.connect() must be awaited first")

        total = await self.collection.count()
        if not total:
            logger.info("Leaderboard is empty")
            return

        leader = (await self.collection.top(1))[0]
        logger.info(
            "Leaderboard holds %d entries; leader is %s with %s",
            total,
            leader.name,
            leader.score,
        )

    async def start(self) -> str:
        """
        Start the web server.

        @return: Address the server is listening on
        """
        if self.collection is None:
            await self.connect()

        app = create_app(self.collection, self.config)

        self._runner = web_runner.AppRunner(app)
        await self._runner.setup()

        site = web_runner.TCPSite(self._runner, self.host, self.port)
        await site.start()

        address = f"http://{self.host}:{self.port}"
        logger.info("[ Online ] Listening on %s", address)
        return address

    async def serve_forever(self) -> None:
        """
        Start the server and block until cancelled, then shut down.
        """
        await self.start()
        try:
            await asyncio.Event().wait()
        finally:
            await self.close()

    async def close(self) -> None:
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
        await self.db.close()
        self.collection = None
