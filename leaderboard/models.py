"""
Leaderboard entry type and submission parsing.
"""

import json
import math
from dataclasses import dataclass
from typing import Any, Dict, Union

from .errors import BadRequest

Score = Union[int, float]


@dataclass(frozen=True)
class LeaderboardEntry:
    """One submitted score. Storage identifiers never appear here."""

    name: str
    score: Score

    def to_dict(self) -> Dict[str, Any]:
        # JSON has no Infinity; non-finite scores serialize as null
        score = self.score
        if isinstance(score, float) and not math.isfinite(score):
            score = None
        return {"name": self.name, "score": score}


def _reject_constant(token: str) -> None:
    # NaN and Infinity are not JSON
    raise ValueError(f"Invalid JSON constant: {token}")


def decode_body(raw: bytes) -> Any:
    """
    Decode a raw request body as strict JSON.

    @param raw: Request body bytes
    @return: Decoded JSON value, None for an empty body
    @raise BadRequest: If the body is not valid JSON
    """
    if not raw or not raw.strip():
        return None

    try:
        return json.loads(raw, parse_constant=_reject_constant)
    except (ValueError, UnicodeDecodeError) as e:
        raise BadRequest() from e


def parse_entry(body: Any) -> LeaderboardEntry:
    """
    Validate a decoded submission body.

    Only field presence and type are checked: any string name and any
    numeric score is accepted, duplicates included.

    @param body: Decoded JSON body
    @return: Validated LeaderboardEntry
    @raise BadRequest: If the body is null, not an object or has bad fields
    """
    if not isinstance(body, dict):
        raise BadRequest()

    name = body.get("name")
    score = body.get("score")

    if not isinstance(name, str):
        raise BadRequest()

    # bool is an int subclass but not a JSON number
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        raise BadRequest()

    return LeaderboardEntry(name=name, score=score)
