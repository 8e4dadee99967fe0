#!/usr/bin/env python3
"""
Seed client that fills a running leaderboard server with random scores.
Submits entries over PUT /leaderboard, then prints the resulting top ten.
"""

import argparse
import asyncio
import random

import aiohttp


FIRST_NAMES = [
    "Alice",
    "Bob",
    "Charlie",
    "Diana",
    "Eve",
    "Frank",
    "Grace",
    "Henry",
    "Ivy",
    "Jack",
    "Kate",
    "Leo",
    "Maya",
    "Noah",
    "Olivia",
    "Paul",
    "Quinn",
    "Ruby",
    "Sam",
    "Tina",
]


async def send_score(session, base_url, name, score):
    """Send a single score to the leaderboard server."""
    async with session.put(
        f"{base_url}/leaderboard", json={"name": name, "score": score}
    ) as response:
        if response.status != 200:
            payload = await response.json()
            print(f"Rejected {name}: {payload.get('message')}")
            return False
        return True


async def generate_test_data(base_url="http://localhost:2000", count=50):
    """Submit random entries and print the leaderboard afterwards."""

    async with aiohttp.ClientSession() as session:
        posted = 0
        for _ in range(count):
            name = random.choice(FIRST_NAMES)
            score = random.randint(0, 10000)
            if await send_score(session, base_url, name, score):
                posted += 1

        print(f"Posted {posted}/{count} scores")

        async with session.get(f"{base_url}/leaderboard") as response:
            response.raise_for_status()
            board = (await response.json())["result"]

    print("\nTOP 10")
    print("-" * 20)
    for position, entry in enumerate(board, 1):
        print(f"{position:2d}. {entry['name']:<15} Score: {entry['score']}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed a leaderboard server")
    parser.add_argument("--url", default="http://localhost:2000")
    parser.add_argument("--count", type=int, default=50)
    args = parser.parse_args()

    try:
        asyncio.run(generate_test_data(args.url, args.count))
    except aiohttp.ClientError as e:
        print(f"Error talking to {args.url}: {e}")
