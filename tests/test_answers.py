"""
Answer endpoint tests: answering with owner notification, listing,
updating, acceptance by the question owner and the chat-thread surface.

Notifications are detached; every test that posts an answer drains the
publisher before asserting on messages or touching the database again.
"""
import logging

import pytest
from httpx import AsyncClient

from rocketfuel import models

OWNER_ID = 7
HELPER_ID = 9


def _auth(user_id: int) -> dict[str, str]:
    return {"X-Auth-User-Id": str(user_id)}


async def _create_question(client: AsyncClient, title: str = "Why?", **extra) -> int:
    resp = await client.post(
        "/api/questions",
        json={"title": title, "question": "Body", **extra},
        headers=_auth(OWNER_ID),
    )
    assert resp.status_code == 201
    return resp.json()["id"]


async def _answer(client: AsyncClient, container, question_id: int, body: str = "A", **extra) -> dict:
    resp = await client.post(
        f"/api/questions/{question_id}/answers",
        json={"answer": body, **extra},
        headers=_auth(HELPER_ID),
    )
    assert resp.status_code == 201
    await container.notifications.drain()
    return resp.json()


# ---------------------------------------------------------------------------
# Answer + notify
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_answer_question_notifies_owner(async_client: AsyncClient, container, users, chat_workspace):
    question_id = await _create_question(async_client, "Deploy on Friday?")

    answer = await _answer(async_client, container, question_id, "A")
    assert isinstance(answer["id"], int)
    assert answer["questionId"] == question_id
    assert answer["userId"] == HELPER_ID
    assert answer["accepted"] is False
    assert answer["votes"] == 0

    # Owner (a@x) is looked up and gets exactly one direct message.
    assert chat_workspace.lookups == ["a@x"]
    assert len(chat_workspace.messages) == 1
    channel, blocks = chat_workspace.messages[0]
    assert channel == "U-a@x"

    texts = [b["text"]["text"] for b in blocks]
    assert "got an answer" in texts[0]
    assert "*Deploy on Friday?*" in texts[0]
    assert texts[1] == "A"
    assert f"/question/{question_id}#answer_{answer['id']}|rocket-fuel>" in texts[2]
    assert all(b["text"]["type"] == "mrkdwn" for b in blocks)


@pytest.mark.asyncio
async def test_notification_failure_is_swallowed(
    async_client: AsyncClient, container, users, chat_workspace, caplog
):
    chat_workspace.fail_with = RuntimeError("workspace down")
    question_id = await _create_question(async_client)

    with caplog.at_level(logging.WARNING, logger="rocketfuel.notifications"):
        answer = await _answer(async_client, container, question_id, "Still saved")

    assert isinstance(answer["id"], int)
    assert chat_workspace.messages == []
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert warnings, "expected a WARNING for the failed notification"


@pytest.mark.asyncio
async def test_missing_owner_does_not_fail_answer(async_client: AsyncClient, container, chat_workspace):
    """No user rows at all: the directory lookup fails, the answer still succeeds."""
    question_id = await _create_question(async_client)
    answer = await _answer(async_client, container, question_id)
    assert answer["id"] is not None
    assert chat_workspace.messages == []


@pytest.mark.asyncio
async def test_answer_requires_body(async_client: AsyncClient, users):
    question_id = await _create_question(async_client)
    for payload in ({}, {"answer": None}, {"answer": "   "}):
        resp = await async_client.post(
            f"/api/questions/{question_id}/answers", json=payload, headers=_auth(HELPER_ID)
        )
        assert resp.status_code == 400
        assert resp.json() == {"error": "answer.required"}


@pytest.mark.asyncio
async def test_answer_requires_principal(async_client: AsyncClient, users):
    question_id = await _create_question(async_client)
    resp = await async_client.post(f"/api/questions/{question_id}/answers", json={"answer": "A"})
    assert resp.status_code == 401


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_get_answers_includes_author_name(async_client: AsyncClient, container, users):
    question_id = await _create_question(async_client)
    await _answer(async_client, container, question_id, "First")
    await _answer(async_client, container, question_id, "Second")

    other_question = await _create_question(async_client, "Other")
    await _answer(async_client, container, other_question, "Elsewhere")

    resp = await async_client.get(f"/api/questions/{question_id}/answers")
    assert resp.status_code == 200
    answers = resp.json()
    assert [a["answer"] for a in answers] == ["First", "Second"]
    assert all(a["createdBy"] == "Harry Helper" for a in answers)
    assert all("question" not in a for a in answers)


@pytest.mark.asyncio
async def test_get_answers_empty(async_client: AsyncClient, users):
    question_id = await _create_question(async_client)
    resp = await async_client.get(f"/api/questions/{question_id}/answers")
    assert resp.status_code == 200
    assert resp.json() == []


# ---------------------------------------------------------------------------
# Acceptance
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_accept_by_non_owner_is_rejected(async_client: AsyncClient, container, users, fetch):
    question_id = await _create_question(async_client)
    answer = await _answer(async_client, container, question_id)

    resp = await async_client.post(f"/api/answers/{answer['id']}/accept", headers=_auth(HELPER_ID))
    assert resp.status_code == 400
    assert resp.json() == {"error": "not.owner.of.question"}

    assert (await fetch(models.Answer, answer["id"])).accepted is False
    assert (await fetch(models.Question, question_id)).answered is False


@pytest.mark.asyncio
async def test_accept_by_owner_flips_both_rows(async_client: AsyncClient, container, users, fetch):
    question_id = await _create_question(async_client)
    answer = await _answer(async_client, container, question_id)

    resp = await async_client.post(f"/api/answers/{answer['id']}/accept", headers=_auth(OWNER_ID))
    assert resp.status_code == 200
    assert resp.content == b""

    assert (await fetch(models.Answer, answer["id"])).accepted is True
    assert (await fetch(models.Question, question_id)).answered is True

    question = (await async_client.get(f"/api/questions/{question_id}")).json()
    assert question["answered"] is True


@pytest.mark.asyncio
async def test_accept_unknown_answer(async_client: AsyncClient):
    resp = await async_client.post("/api/answers/424242/accept", headers=_auth(OWNER_ID))
    assert resp.status_code == 404
    assert resp.json() == {"error": "not.found"}


@pytest.mark.asyncio
async def test_accept_requires_principal(async_client: AsyncClient):
    resp = await async_client.post("/api/answers/1/accept")
    assert resp.status_code == 401


# ---------------------------------------------------------------------------
# Update
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_author_can_update_answer(async_client: AsyncClient, container, users):
    question_id = await _create_question(async_client)
    answer = await _answer(async_client, container, question_id, "Draft")

    resp = await async_client.put(
        f"/api/questions/{question_id}/answers/{answer['id']}",
        json={"answer": "Final", "title": "Edited"},
        headers=_auth(HELPER_ID),
    )
    assert resp.status_code == 200
    assert resp.json()["answer"] == "Final"
    assert resp.json()["title"] == "Edited"


@pytest.mark.asyncio
async def test_non_author_cannot_update_answer(async_client: AsyncClient, container, users, fetch):
    question_id = await _create_question(async_client)
    answer = await _answer(async_client, container, question_id, "Original")

    resp = await async_client.put(
        f"/api/questions/{question_id}/answers/{answer['id']}",
        json={"answer": "Hijacked"},
        headers=_auth(OWNER_ID),
    )
    assert resp.status_code == 400
    assert resp.json() == {"error": "answer.not.updated"}
    assert (await fetch(models.Answer, answer["id"])).answer == "Original"


@pytest.mark.asyncio
async def test_update_to_blank_answer_is_rejected(async_client: AsyncClient, container, users):
    question_id = await _create_question(async_client)
    answer = await _answer(async_client, container, question_id)
    resp = await async_client.put(
        f"/api/questions/{question_id}/answers/{answer['id']}",
        json={"answer": ""},
        headers=_auth(HELPER_ID),
    )
    assert resp.status_code == 400
    assert resp.json() == {"error": "answer.required"}


# ---------------------------------------------------------------------------
# Chat-thread surface
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_answer_by_thread_and_votes(async_client: AsyncClient, container, users):
    question_id = await _create_question(async_client)
    created = await _answer(async_client, container, question_id, "Threaded", slackThreadId="A-1")

    resp = await async_client.get("/api/answers/thread/A-1")
    assert resp.status_code == 200
    assert resp.json()["id"] == created["id"]

    assert (await async_client.post("/api/answers/thread/A-1/downvote")).status_code == 204
    assert (await async_client.post("/api/answers/thread/A-1/downvote")).status_code == 204
    assert (await async_client.post("/api/answers/thread/A-1/upvote")).status_code == 204

    # Answer votes may go negative.
    assert (await async_client.get("/api/answers/thread/A-1")).json()["votes"] == -1


@pytest.mark.asyncio
async def test_answer_by_unknown_thread(async_client: AsyncClient):
    resp = await async_client.get("/api/answers/thread/missing")
    assert resp.status_code == 404
    assert resp.json() == {"error": "not.found"}
