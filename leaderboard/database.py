"""
Database operations for the leaderboard service.
"""

import logging
import os
import re
from typing import List, Optional
from urllib.parse import urlparse

import aiosqlite

from .config import ConfigError
from .models import LeaderboardEntry

logger = logging.getLogger(__name__)

MEMORY = ":memory:"

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def resolve_database_path(
    url: str,
    database: str,
) -> str:
    """
    Map a connection string and database name onto an SQLite file.

    sqlite:///data is relative to the working directory, sqlite:////srv/data
    is absolute.

    @param url: Connection string, sqlite:///<directory> or sqlite:///:memory:
    @param database: Database name, stored as <directory>/<database>.db
    @return: Path passed to aiosqlite.connect
    @raise ConfigError: If the connection string is not an sqlite URL
    """
    parsed = urlparse(url)
    if parsed.scheme != "sqlite":
        raise ConfigError(f"Unsupported connection string scheme: {parsed.scheme!r}")
    if parsed.netloc:
        raise ConfigError(f"Connection string must be sqlite:///<directory>: {url!r}")

    location = parsed.path[1:]
    if location == MEMORY:
        return MEMORY
    if not location:
        raise ConfigError(f"Connection string has no location: {url!r}")

    return os.path.join(location, f"{database}.db")


class LeaderboardCollection:
    """Handle on one leaderboard table over a shared connection."""

    def __init__(
        self,
        connection: aiosqlite.Connection,
        name: str,
    ) -> None:
        if not _IDENTIFIER.match(name):
            raise ConfigError(f"Invalid collection name: {name!r}")
        self._db = connection
        self.name = name

    async def ensure_schema(self) -> None:
        """
        Create the table and its ranking index if they do not exist.
        """
        await self._db.execute(f"""
            CREATE TABLE IF NOT EXISTS {self.name} (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                score NUMERIC NOT NULL,
                submitted_at DATETIME DEFAULT CURRENT_TIMESTAMP
            )
        """)
        await self._db.execute(f"""
            CREATE INDEX IF NOT EXISTS idx_{self.name}_score_id
            ON {self.name}(score DESC, id ASC)
        """)
        await self._db.commit()

    async def top(
        self,
        limit: int = 10,
    ) -> List[LeaderboardEntry]:
        """
        Get the highest-scoring entries.

        Equal scores keep submission order, earliest first.

        @param limit: Maximum number of entries to return (default 10)
        @return: Entries ordered by score descending
        """
        cursor = await self._db.execute(
            f"""
            SELECT name, score
            FROM {self.name}
            ORDER BY score DESC, id ASC
            LIMIT ?
        """,
            (limit,),
        )
        rows = await cursor.fetchall()
        await cursor.close()

        return [LeaderboardEntry(name=name, score=score) for name, score in rows]

    async def insert(
        self,
        entry: LeaderboardEntry,
    ) -> None:
        """
        Store a new entry.

        @param entry: Validated entry, written as exactly name and score
        """
        score = entry.score
        # SQLite integers are 64-bit
        if isinstance(score, int) and not -(2**63) <= score < 2**63:
            score = float(score)

        await self._db.execute(
            f"INSERT INTO {self.name} (name, score) VALUES (?, ?)",
            (entry.name, score),
        )
        await self._db.commit()

    async def count(self) -> int:
        cursor = await self._db.execute(f"SELECT COUNT(*) FROM {self.name}")
        row = await cursor.fetchone()
        await cursor.close()
        return row[0]


class DatabaseManager:
    """Owns the single persistent store connection."""

    def __init__(
        self,
        url: str,
        database: str = "example",
    ) -> None:
        self.url = url
        self.database = database
        self.path = resolve_database_path(url, database)
        self._connection: Optional[aiosqlite.Connection] = None

    @property
    def connected(self) -> bool:
        return self._connection is not None

    async def connect(self) -> None:
        """
        Open the persistent connection.

        Errors propagate; there is no retry or timeout.
        """
        if self._connection is not None:
            return

        self._connection = await aiosqlite.connect(self.path)
        logger.info("Connected to store database %r at %s", self.database, self.path)

    def collection(
        self,
        name: str,
    ) -> LeaderboardCollection:
        """
        Bind a collection handle to the open connection.

        @param name: Collection (table) name
        @return: LeaderboardCollection sharing this manager's connection
        """
        if self._connection is None:
            raise RuntimeError("DatabaseManager.connect() must be awaited first")
        return LeaderboardCollection(self._connection, name)

    async def close(self) -> None:
        if self._connection is None:
            return

        connection, self._connection = self._connection, None
        await connection.close()
        logger.info("Closed store database %r", self.database)
