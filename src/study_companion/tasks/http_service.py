# src/study_companion/tasks/http_service.py

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from .task_models import UPDATABLE_FIELDS, Task, TaskServiceError

logger = logging.getLogger(__name__)


class HttpTaskService:
    """
    REST task service client.

    Endpoints (relative to base_url):
      GET    /tasks          -> [task, ...]
      POST   /tasks          {title, category} -> task
      PATCH  /tasks/{id}     {fields...} -> task
      DELETE /tasks/{id}     -> 2xx on success, 404 when already gone

    Any transport error, non-success status or unexpected JSON shape raises
    TaskServiceError.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not base_url or not base_url.strip():
            raise ValueError("base_url is required")
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=httpx.Timeout(timeout, connect=min(timeout, 5.0)),
            transport=transport,
            headers={"Accept": "application/json"},
        )
        logger.info("HttpTaskService ready base_url=%s", base_url)

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            resp = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise TaskServiceError(f"Task service unreachable ({method} {path}): {e}") from e
        return resp

    @staticmethod
    def _json(resp: httpx.Response) -> Any:
        try:
            return resp.json()
        except ValueError as e:
            raise TaskServiceError(f"Task service returned invalid JSON ({resp.status_code}).") from e

    @staticmethod
    def _check(resp: httpx.Response, what: str) -> None:
        if resp.is_success:
            return
        raise TaskServiceError(f"{what} failed: HTTP {resp.status_code}")

    def list_tasks(self) -> list[Task]:
        resp = self._request("GET", "/tasks")
        self._check(resp, "List tasks")
        data = self._json(resp)
        if not isinstance(data, list):
            raise TaskServiceError("List tasks: expected a JSON array.")
        return [Task.from_dict(item) for item in data]

    def create_task(self, title: str, category: str) -> Task:
        resp = self._request("POST", "/tasks", json={"title": title, "category": category})
        self._check(resp, "Create task")
        return Task.from_dict(self._json(resp))

    def update_task(self, task_id: str, **fields: Any) -> Task:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise TaskServiceError(f"Cannot update fields: {', '.join(sorted(unknown))}")
        resp = self._request("PATCH", f"/tasks/{quote(task_id, safe='')}", json=fields)
        self._check(resp, "Update task")
        return Task.from_dict(self._json(resp))

    def delete_task(self, task_id: str) -> bool:
        resp = self._request("DELETE", f"/tasks/{quote(task_id, safe='')}")
        if resp.status_code == 404:
            return False
        self._check(resp, "Delete task")
        return True
