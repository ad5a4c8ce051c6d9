"""
Tests for the HTTP client and the client-side task board.

The client talks to the real app in-process (ASGITransport), so these are
end-to-end tests of the request/response contract.
"""

import httpx
import pytest
from httpx import ASGITransport

from task_tracker.client import TaskBoard, TaskTrackerClient, parse_tags
from task_tracker.main import app


def test_parse_tags():
    assert parse_tags("shopping, errand,, ") == ["shopping", "errand"]
    assert parse_tags("a,b,c") == ["a", "b", "c"]
    assert parse_tags("") == []
    assert parse_tags(None) == []


# ============================================================================
# TaskTrackerClient
# ============================================================================


@pytest.mark.asyncio
async def test_client_create_and_fetch(tracker_client: TaskTrackerClient):
    created = await tracker_client.create_task(
        "Buy milk", due_date="2026-01-21", tags=["shopping", "errand"]
    )

    assert created["status"] == "pending"

    tasks = await tracker_client.fetch_tasks(tag="shopping")
    assert [t["id"] for t in tasks] == [created["id"]]

    tags = await tracker_client.list_tags()
    assert [t["name"] for t in tags] == ["errand", "shopping"]


@pytest.mark.asyncio
async def test_client_update_toggle_delete(tracker_client: TaskTrackerClient):
    created = await tracker_client.create_task("Buy milk", tags=["errand"])

    updated = await tracker_client.update_task(
        created["id"],
        title="Buy oat milk",
        description=None,
        due_date=None,
        location="Market",
        status="pending",
        tags=[],
    )
    assert updated["title"] == "Buy oat milk"
    assert updated["tags"] == []

    toggled = await tracker_client.toggle_status(created["id"])
    assert toggled["status"] == "completed"

    assert await tracker_client.delete_task(created["id"]) == {"message": "Deleted", "deleted": True}
    assert await tracker_client.fetch_tasks() == []


@pytest.mark.asyncio
async def test_client_raises_on_error(tracker_client: TaskTrackerClient):
    with pytest.raises(httpx.HTTPStatusError) as exc_info:
        await tracker_client.toggle_status(999)

    assert exc_info.value.response.status_code == 404


@pytest.mark.asyncio
async def test_client_custom_hooks(override_db):
    """Test: request/response observers are pluggable."""
    seen = []

    async def on_request(request):
        seen.append(("request", request.method, request.url.path))

    async def on_response(response):
        seen.append(("response", response.status_code))

    async with TaskTrackerClient(
        "http://test",
        transport=ASGITransport(app=app),
        request_hooks=[on_request],
        response_hooks=[on_response],
    ) as client:
        await client.fetch_tasks(q="milk")

    assert seen == [("request", "GET", "/tasks"), ("response", 200)]


# ============================================================================
# TaskBoard
# ============================================================================


@pytest.mark.asyncio
async def test_board_add_refreshes(tracker_client: TaskTrackerClient):
    board = TaskBoard(tracker_client)

    assert await board.add("Buy milk", due_date="2026-01-21", tags="shopping, errand") is True
    assert await board.add("Go running", due_date="") is True

    assert [t["title"] for t in board.tasks] == ["Buy milk", "Go running"]
    assert {t["name"] for t in board.tasks[0]["tags"]} == {"shopping", "errand"}


@pytest.mark.asyncio
async def test_board_add_requires_title(tracker_client: TaskTrackerClient):
    board = TaskBoard(tracker_client)

    assert await board.add("") is False
    assert await tracker_client.fetch_tasks() == []


@pytest.mark.asyncio
async def test_board_search_state_is_used(tracker_client: TaskTrackerClient):
    board = TaskBoard(tracker_client)
    await board.add("Buy milk", tags="errand")
    await board.add("Go running", tags="health")

    board.search_tag = "errand"
    await board.refresh()
    assert [t["title"] for t in board.tasks] == ["Buy milk"]

    # A mutation refreshes with the same filters
    await board.add("Post letter", tags="errand")
    assert [t["title"] for t in board.tasks] == ["Buy milk", "Post letter"]

    board.search_tag = ""
    board.search_query = "run"
    await board.refresh()
    assert [t["title"] for t in board.tasks] == ["Go running"]


@pytest.mark.asyncio
async def test_board_save_keeps_status(tracker_client: TaskTrackerClient):
    board = TaskBoard(tracker_client)
    await board.add("Buy milk", tags="shopping")
    await board.toggle(board.tasks[0])
    task = board.tasks[0]
    assert task["status"] == "completed"

    assert await board.save(
        task, title="Buy oat milk", description=None, due_date=None, location=None, tags="errand"
    )

    saved = board.tasks[0]
    assert saved["title"] == "Buy oat milk"
    assert saved["status"] == "completed"
    assert saved["tags"] == [{"name": "errand"}]


@pytest.mark.asyncio
async def test_board_remove(tracker_client: TaskTrackerClient):
    board = TaskBoard(tracker_client)
    await board.add("Buy milk")

    assert await board.remove(board.tasks[0]) is True
    assert board.tasks == []


@pytest.mark.asyncio
async def test_board_failure_keeps_list(tracker_client: TaskTrackerClient):
    """Test: a failed command is dropped and the current list stays as it was."""
    board = TaskBoard(tracker_client)
    await board.add("Buy milk")
    before = list(board.tasks)

    ghost = {"id": 999, "status": "pending"}
    assert await board.toggle(ghost) is False
    assert await board.save(
        ghost, title="Ghost", description=None, due_date=None, location=None, tags=""
    ) is False

    assert board.tasks == before
