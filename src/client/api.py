import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class ApiError(Exception):
    def __init__(self, status_code: int, code: str, detail: Any):
        super().__init__(f"{status_code} {code}: {detail}")
        self.status_code = status_code
        self.code = code
        self.detail = detail


class KanbanClient:
    """Thin wrapper around the HTTP API.

    Pass an existing ``httpx.Client`` (FastAPI's ``TestClient`` is one) or a ``base_url``.
    Every non-2xx answer is raised as ``ApiError`` carrying the server's machine-readable code.
    """

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        http: httpx.Client | None = None,
        timeout: float = 10.0,
    ) -> None:
        if http is None:
            if base_url is None:
                raise ValueError("Either base_url or http has to be provided")
            http = httpx.Client(base_url=base_url, timeout=timeout)
        self.http = http
        self.token = token

    def close(self) -> None:
        self.http.close()

    def request(self, method: str, url: str, **kwargs) -> Any:
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        response = self.http.request(method, url, headers=headers, **kwargs)
        if response.is_error:
            raise self.create_api_error(response)
        if response.status_code == httpx.codes.NO_CONTENT:
            return None
        return response.json()

    def create_api_error(self, response: httpx.Response) -> ApiError:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        return ApiError(
            status_code=response.status_code,
            code=body.get("code", "ERROR"),
            detail=body.get("detail", response.text),
        )

    # Auth
    def register(self, email: str, name: str, password: str) -> dict:
        data = self.request(
            "POST", "/auth/register", json={"email": email, "name": name, "password": password}
        )
        self.token = data["token"]
        return data

    def login(self, email: str, password: str) -> dict:
        data = self.request("POST", "/auth/login", json={"email": email, "password": password})
        self.token = data["token"]
        return data

    def me(self) -> dict:
        return self.request("GET", "/auth/me")

    # Boards
    def list_boards(self) -> list[dict]:
        return self.request("GET", "/boards")

    def get_board(self, board_id: str) -> dict:
        return self.request("GET", f"/boards/{board_id}")

    def create_board(self, name: str) -> dict:
        return self.request("POST", "/boards", json={"name": name})

    def delete_board(self, board_id: str) -> None:
        self.request("DELETE", f"/boards/{board_id}")

    def list_board_columns(self, board_id: str) -> list[dict]:
        return self.request("GET", f"/boards/{board_id}/columns")

    def list_board_tasks(self, board_id: str) -> list[dict]:
        return self.request("GET", f"/boards/{board_id}/tasks")

    # Columns
    def create_column(self, board_id: str, name: str) -> dict:
        return self.request("POST", f"/boards/{board_id}/columns", json={"name": name})

    def update_column(self, column_id: str, **fields) -> dict:
        return self.request("PATCH", f"/columns/{column_id}", json=fields)

    def delete_column(self, column_id: str) -> None:
        self.request("DELETE", f"/columns/{column_id}")

    def list_column_tasks(
        self,
        column_id: str,
        search: str | None = None,
        page: int = 1,
        limit: int = 20,
        sort: str = "created_at",
    ) -> dict:
        params = {"page": page, "limit": limit, "sort": sort}
        if search:
            params["search"] = search
        return self.request("GET", f"/columns/{column_id}/tasks", params=params)

    # Tasks
    def create_task(
        self,
        column_id: str,
        title: str,
        description: str | None = None,
        priority: str = "medium",
    ) -> dict:
        payload = {"title": title, "priority": priority}
        if description is not None:
            payload["description"] = description
        return self.request("POST", f"/columns/{column_id}/tasks", json=payload)

    def get_task(self, task_id: str) -> dict:
        return self.request("GET", f"/tasks/{task_id}")

    def update_task(self, task_id: str, **fields) -> dict:
        return self.request("PATCH", f"/tasks/{task_id}", json=fields)

    def move_task(self, task_id: str, column_id: str, order: int | None = None) -> dict:
        payload = {"column_id": column_id}
        if order is not None:
            payload["order"] = order
        logger.debug("Moving task %s to column %s at %s", task_id, column_id, order)
        return self.update_task(task_id, **payload)

    def delete_task(self, task_id: str) -> None:
        self.request("DELETE", f"/tasks/{task_id}")

    # Comments
    def list_comments(self, task_id: str) -> list[dict]:
        return self.request("GET", f"/tasks/{task_id}/comments")

    def create_comment(self, task_id: str, content: str) -> dict:
        return self.request("POST", f"/tasks/{task_id}/comments", json={"content": content})

    def delete_comment(self, comment_id: str) -> None:
        self.request("DELETE", f"/comments/{comment_id}")
