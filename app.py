#!/usr/bin/env python3
"""
Leaderboard server: fetch the top ten scores and submit new ones over HTTP.
Opens the store connection first, then starts listening.
"""

import argparse
import asyncio
import logging
import os

from leaderboard import LeaderboardConfig, LeaderboardServer


async def main():
    """Main function with command line interface."""

    parser = argparse.ArgumentParser(
        description="Leaderboard server with GET/PUT /leaderboard",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--host",
        default=None,
        help="Host to bind the server to (env: HOST, default 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="HTTP port (env: PORT, default 2000)",
    )
    parser.add_argument(
        "--config",
        default=os.getenv("CONFIG_PATH"),
        help="Optional JSON configuration file (env: CONFIG_PATH)",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Local settings file loaded into the environment",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (env: LOG_LEVEL, default INFO)",
    )

    args = parser.parse_args()

    config = LeaderboardConfig(args.config, env_file=args.env_file)

    logging.basicConfig(
        level=(args.log_level or config.get("logging", "level")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    server = LeaderboardServer(config, host=args.host, port=args.port)

    await server.connect()
    await server.log_summary()

    await server.serve_forever()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nServer interrupted")
