# tests/v1/test_votes.py
"""Tests for vote-related endpoints."""

from fastapi import status


def _create_item(client) -> int:
    response = client.post(
        "/api/v1/news/",
        json={"summary": "X launches Y", "link": "https://ex.com/a"},
    )
    return response.json()["id"]


def _vote(client, news_item_id, vote_type="up", ip=None, **extra):
    headers = {"X-Forwarded-For": ip} if ip else {}
    return client.post(
        "/api/v1/votes/",
        json={"news_item_id": news_item_id, "vote_type": vote_type, **extra},
        headers=headers,
    )


def test_cast_upvote(client) -> None:
    news_item_id = _create_item(client)
    response = _vote(client, news_item_id, ip="1.2.3.4")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"news_item_id": news_item_id, "vote_score": 1}


def test_repeat_vote_is_rejected(client) -> None:
    news_item_id = _create_item(client)
    assert _vote(client, news_item_id, ip="1.2.3.4").status_code == status.HTTP_200_OK

    response = _vote(client, news_item_id, ip="1.2.3.4")
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["detail"] == "Vote unchanged"


def test_switching_vote_updates_score(client) -> None:
    news_item_id = _create_item(client)
    _vote(client, news_item_id, "up", ip="1.2.3.4")
    response = _vote(client, news_item_id, "down", ip="1.2.3.4")
    assert response.json()["vote_score"] == -1


def test_forwarded_for_first_entry_identifies_voter(client) -> None:
    news_item_id = _create_item(client)
    _vote(client, news_item_id, ip="1.2.3.4, 10.0.0.1")

    # Same client behind a different proxy hop is still the same voter.
    response = _vote(client, news_item_id, ip="1.2.3.4, 10.0.0.2")
    assert response.status_code == status.HTTP_409_CONFLICT

    response = _vote(client, news_item_id, ip="5.6.7.8")
    assert response.json()["vote_score"] == 2


def test_example_scenario_over_http(client) -> None:
    news_item_id = _create_item(client)
    assert _vote(client, news_item_id, "up", ip="1.2.3.4").json()["vote_score"] == 1
    assert _vote(client, news_item_id, "up", ip="1.2.3.4").status_code == status.HTTP_409_CONFLICT

    response = _vote(client, news_item_id, "down", ip="5.6.7.8", vote_source="machine")
    assert response.json()["vote_score"] == 0

    counts = client.get(f"/api/v1/news/{news_item_id}/votes").json()
    assert counts == {
        "human_upvotes": 1,
        "human_downvotes": 0,
        "machine_upvotes": 0,
        "machine_downvotes": 1,
    }


def test_vote_without_forwarded_header_uses_peer_address(client) -> None:
    news_item_id = _create_item(client)
    assert _vote(client, news_item_id).status_code == status.HTTP_200_OK
    assert _vote(client, news_item_id).status_code == status.HTTP_409_CONFLICT


def test_vote_invalid_type(client) -> None:
    news_item_id = _create_item(client)
    response = _vote(client, news_item_id, "sideways")
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_vote_invalid_source(client) -> None:
    news_item_id = _create_item(client)
    response = _vote(client, news_item_id, vote_source="alien")
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_vote_nonexistent_item(client) -> None:
    response = _vote(client, 999, ip="1.2.3.4")
    assert response.status_code == status.HTTP_404_NOT_FOUND
