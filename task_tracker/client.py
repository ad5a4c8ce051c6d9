"""
HTTP client for the Task Tracker API.

Two levels:

- TaskTrackerClient: one method per endpoint, raises httpx.HTTPError on
  failure.
- TaskBoard: the list a UI shows. It keeps the current search, re-fetches
  the whole list after every change and never lets a failed call touch
  the list it already has.

Usage:
    async with TaskTrackerClient("http://127.0.0.1:3010") as client:
        board = TaskBoard(client)
        await board.add("Buy milk", tags="shopping, errand")
        board.search_tag = "shopping"
        await board.refresh()
        print(board.tasks)
"""

from collections.abc import Callable, Iterable
from datetime import date
from typing import Any

import httpx

from .core.logging import get_logger

logger = get_logger(__name__)

RequestHook = Callable[[httpx.Request], Any]
ResponseHook = Callable[[httpx.Response], Any]


def parse_tags(text: str | None) -> list[str]:
    """
    Split a comma-separated tag input.

    Example:
        parse_tags("shopping, errand,, ") -> ["shopping", "errand"]
    """
    if not text:
        return []
    return [part.strip() for part in text.split(",") if part.strip()]


async def log_request(request: httpx.Request) -> None:
    """Default request observer."""
    logger.debug(
        "API request",
        extra={"method": request.method, "url": str(request.url)},
    )


async def log_response(response: httpx.Response) -> None:
    """Default response observer."""
    request = response.request
    log = logger.debug if response.is_success else logger.warning
    log(
        "API response",
        extra={"method": request.method, "url": str(request.url), "status": response.status_code},
    )


class TaskTrackerClient:
    """
    Thin async wrapper over the REST endpoints.

    Request/response observers are httpx event hooks; pass your own lists to
    replace the default logging ones (an empty list disables them).
    """

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:3010",
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
        request_hooks: list[RequestHook] | None = None,
        response_hooks: list[ResponseHook] | None = None,
    ):
        self._http = httpx.AsyncClient(
            base_url=base_url,
            transport=transport,
            timeout=timeout,
            event_hooks={
                "request": [log_request] if request_hooks is None else request_hooks,
                "response": [log_response] if response_hooks is None else response_hooks,
            },
        )

    async def __aenter__(self) -> "TaskTrackerClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _send(self, method: str, url: str, **kwargs) -> Any:
        response = await self._http.request(method, url, **kwargs)
        response.raise_for_status()
        return response.json()

    # --- query -----------------------------------------------------------

    async def fetch_tasks(self, q: str | None = None, tag: str | None = None) -> list[dict]:
        """GET /tasks with the non-empty filters."""
        params = {key: value for key, value in (("q", q), ("tag", tag)) if value}
        return await self._send("GET", "/tasks", params=params)

    async def list_tags(self) -> list[dict]:
        return await self._send("GET", "/tags")

    # --- commands --------------------------------------------------------

    async def create_task(
        self,
        title: str,
        description: str | None = None,
        due_date: date | str | None = None,
        location: str | None = None,
        tags: Iterable[str] = (),
    ) -> dict:
        payload = _task_payload(title, description, due_date, location, tags)
        return await self._send("POST", "/tasks", json=payload)

    async def update_task(
        self,
        task_id: int,
        *,
        title: str,
        description: str | None,
        due_date: date | str | None,
        location: str | None,
        status: str,
        tags: Iterable[str],
    ) -> dict:
        """Full replace: every field is sent."""
        payload = _task_payload(title, description, due_date, location, tags)
        payload["status"] = status
        return await self._send("PUT", f"/tasks/{task_id}", json=payload)

    async def toggle_status(self, task_id: int) -> dict:
        return await self._send("POST", f"/tasks/{task_id}/toggle")

    async def delete_task(self, task_id: int) -> dict:
        return await self._send("DELETE", f"/tasks/{task_id}")


def _task_payload(
    title: str,
    description: str | None,
    due_date: date | str | None,
    location: str | None,
    tags: Iterable[str],
) -> dict:
    return {
        "title": title,
        "description": description,
        "due_date": due_date.isoformat() if isinstance(due_date, date) else due_date,
        "location": location,
        "tags": list(tags),
    }


class TaskBoard:
    """
    Client-side view of the task list.

    - search_query / search_tag are sent with every refresh
    - every mutation is followed by a full refresh, never a local patch
    - on any HTTP error the operation is logged and dropped; `tasks` keeps
      its previous content and the method returns False
    """

    def __init__(self, client: TaskTrackerClient):
        self.client = client
        self.tasks: list[dict] = []
        self.search_query = ""
        self.search_tag = ""

    async def refresh(self) -> bool:
        try:
            self.tasks = await self.client.fetch_tasks(
                q=self.search_query or None, tag=self.search_tag or None
            )
        except httpx.HTTPError:
            logger.exception("Fetching tasks failed")
            return False
        return True

    async def add(
        self,
        title: str,
        description: str | None = None,
        due_date: date | str | None = None,
        location: str | None = None,
        tags: str = "",
    ) -> bool:
        """Create from form-like input (`tags` is comma-separated)."""
        if not title:
            logger.warning("Title required")
            return False
        return await self._mutate(
            "Create",
            self.client.create_task(title, description, due_date, location, parse_tags(tags)),
        )

    async def save(
        self,
        task: dict,
        *,
        title: str,
        description: str | None,
        due_date: date | str | None,
        location: str | None,
        tags: str,
    ) -> bool:
        """Store edited fields of `task`, keeping its current status."""
        return await self._mutate(
            "Update",
            self.client.update_task(
                task["id"],
                title=title,
                description=description,
                due_date=due_date,
                location=location,
                status=task["status"],
                tags=parse_tags(tags),
            ),
        )

    async def toggle(self, task: dict) -> bool:
        return await self._mutate("Toggle", self.client.toggle_status(task["id"]))

    async def remove(self, task: dict) -> bool:
        return await self._mutate("Delete", self.client.delete_task(task["id"]))

    async def _mutate(self, operation: str, call) -> bool:
        try:
            await call
        except httpx.HTTPError:
            logger.exception(f"{operation} failed")
            return False
        return await self.refresh()
