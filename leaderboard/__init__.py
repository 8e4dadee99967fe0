"""
Leaderboard Service - a minimal HTTP leaderboard for games.

This package provides:
- GET /leaderboard for the top ten scores
- PUT /leaderboard for submitting a new score
- A single persistent SQLite store connection shared by all requests
"""

from .config import ConfigError, LeaderboardConfig
from .database import DatabaseManager, LeaderboardCollection
from .errors import BadRequest, LeaderboardError
from .models import LeaderboardEntry, parse_entry
from .web_handlers import LeaderboardHandlers
from .server import LeaderboardServer, create_app

__version__ = "1.0.0"

__all__ = [
    "ConfigError",
    "LeaderboardConfig",
    "DatabaseManager",
    "LeaderboardCollection",
    "BadRequest",
    "LeaderboardError",
    "LeaderboardEntry",
    "parse_entry",
    "LeaderboardHandlers",
    "LeaderboardServer",
    "create_app",
]
