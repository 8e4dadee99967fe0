"""
HTTP tests for GET and PUT /leaderboard.
"""

import json

import pytest

INVALID_BODY = {"statusCode": 400, "error": "Bad Request", "message": "Invalid body"}
POSTED = {"statusCode": 200, "message": "Your score has been posted"}


async def put(client, body):
    return await client.put("/leaderboard", json=body)


async def board(client):
    response = await client.get("/leaderboard")
    assert response.status == 200
    return (await response.json())["result"]


@pytest.mark.asyncio
async def test_empty_leaderboard(client):
    response = await client.get("/leaderboard")

    assert response.status == 200
    assert await response.json() == {"result": []}


@pytest.mark.asyncio
async def test_submit_then_fetch_in_score_order(client):
    response = await put(client, {"name": "Alice", "score": 50})
    assert response.status == 200
    assert await response.json() == POSTED

    await put(client, {"name": "Bob", "score": 90})

    assert await board(client) == [
        {"name": "Bob", "score": 90},
        {"name": "Alice", "score": 50},
    ]


@pytest.mark.asyncio
async def test_only_top_ten_returned(client):
    scores = [7, 93, 41, 12, 88, 65, 3, 150, 27, 56, 74, 19, 101, 33, 80]
    for i, score in enumerate(scores):
        await put(client, {"name": f"player{i}", "score": score})

    result = await board(client)

    assert len(result) == 10
    assert [entry["score"] for entry in result] == sorted(scores, reverse=True)[:10]
    assert all(set(entry) == {"name", "score"} for entry in result)


@pytest.mark.asyncio
async def test_results_are_sorted_descending(client):
    for score in (5, -2, 5.5, 0, 1e6, 5):
        await put(client, {"name": "p", "score": score})

    scores = [entry["score"] for entry in await board(client)]

    assert all(a >= b for a, b in zip(scores, scores[1:]))


@pytest.mark.asyncio
async def test_ties_keep_submission_order(client):
    for name in ("first", "second", "third"):
        await put(client, {"name": name, "score": 10})
    await put(client, {"name": "top", "score": 11})

    assert [entry["name"] for entry in await board(client)] == [
        "top",
        "first",
        "second",
        "third",
    ]


@pytest.mark.asyncio
async def test_get_is_idempotent(client):
    for i in range(12):
        await put(client, {"name": f"p{i}", "score": i % 4})

    assert await board(client) == await board(client)


@pytest.mark.asyncio
async def test_duplicates_and_unusual_values_accepted(client):
    await put(client, {"name": "", "score": -3.25})
    await put(client, {"name": "", "score": -3.25})

    assert await board(client) == [
        {"name": "", "score": -3.25},
        {"name": "", "score": -3.25},
    ]


@pytest.mark.asyncio
async def test_extra_fields_are_not_stored(client):
    await put(client, {"name": "Eve", "score": 1, "admin": True, "_id": "x"})

    assert await board(client) == [{"name": "Eve", "score": 1}]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        None,
        [],
        "Alice",
        42,
        {},
        {"name": "X"},
        {"score": 10},
        {"name": 5, "score": 10},
        {"name": None, "score": 10},
        {"name": "X", "score": "10"},
        {"name": "X", "score": None},
        {"name": "X", "score": True},
        {"name": "X", "score": [10]},
    ],
)
async def test_invalid_body_rejected(client, body):
    response = await put(client, body)

    assert response.status == 400
    assert await response.json() == INVALID_BODY
    assert await board(client) == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "raw",
    [b"", b"{not json", b'{"name": "X", "score": NaN}', b'{"name": "X", "score": Infinity}'],
)
async def test_malformed_json_rejected(client, raw):
    response = await client.put(
        "/leaderboard", data=raw, headers={"Content-Type": "application/json"}
    )

    assert response.status == 400
    assert await response.json() == INVALID_BODY
    assert await board(client) == []


@pytest.mark.asyncio
async def test_body_without_json_content_type_is_parsed(client):
    response = await client.put(
        "/leaderboard", data=json.dumps({"name": "Zoe", "score": 3})
    )

    assert response.status == 200
    assert await board(client) == [{"name": "Zoe", "score": 3}]


@pytest.mark.asyncio
async def test_store_failure_returns_500(client, db):
    await db.close()

    response = await client.get("/leaderboard")
    assert response.status == 500
    assert (await response.json())["statusCode"] == 500

    response = await put(client, {"name": "Alice", "score": 1})
    assert response.status == 500


@pytest.mark.asyncio
async def test_unknown_route_and_method(client):
    response = await client.get("/scores")
    assert response.status == 404
    assert (await response.json())["statusCode"] == 404

    response = await client.delete("/leaderboard")
    assert response.status == 405
    assert (await response.json())["error"] == "Method Not Allowed"


def _strict_constant(token):
    raise ValueError(f"non-JSON token {token}")


@pytest.mark.asyncio
async def test_non_finite_scores_are_returned_as_null(client):
    for raw in (
        b'{"name": "up", "score": 1e400}',
        b'{"name": "mid", "score": 5}',
        b'{"name": "down", "score": -1e400}',
    ):
        response = await client.put(
            "/leaderboard", data=raw, headers={"Content-Type": "application/json"}
        )
        assert response.status == 200

    response = await client.get("/leaderboard")
    assert response.status == 200
    body = json.loads(await response.text(), parse_constant=_strict_constant)

    assert body == {
        "result": [
            {"name": "up", "score": None},
            {"name": "mid", "score": 5},
            {"name": "down", "score": None},
        ]
    }
