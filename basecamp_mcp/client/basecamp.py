"""Basecamp 3 API client.

Thin async wrapper over ``httpx.AsyncClient``.  Every endpoint method maps to
a fixed bc3 endpoint template, forwards its arguments and returns an
``ApiResponse``.  See https://github.com/basecamp/bc3-api for the endpoints.

Account-scoped paths are relative to ``{api_base}/{account_id}``.  When no
account id is configured, ``ensure_account_id`` picks the first account of
the authorization endpoint.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx
from loguru import logger

from basecamp_mcp.client.base import ApiResponse

if TYPE_CHECKING:
    from basecamp_mcp.settings import BasecampSettings


class AccountResolutionError(LookupError):
    """Raised when no Basecamp account id is configured or discoverable."""


class BasecampClient:
    """Authenticated Basecamp 3 client.

    Use as an async context manager, or call ``aclose`` when done.
    """

    def __init__(
        self,
        access_token: str,
        account_id: str | None = None,
        *,
        api_base: str = "https://3.basecampapi.com",
        launchpad_base: str = "https://launchpad.37signals.com",
        user_agent: str = "Basecamp MCP Server",
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._account_id = account_id or ""
        self._api_base = api_base.rstrip("/")
        self._launchpad_base = launchpad_base.rstrip("/")
        kwargs: dict[str, Any] = {}
        if timeout is not None:
            kwargs["timeout"] = timeout
        self._http = httpx.AsyncClient(
            headers={
                "Authorization": f"Bearer {access_token}",
                "User-Agent": user_agent,
            },
            transport=transport,
            **kwargs,
        )

    @classmethod
    def from_settings(cls, settings: BasecampSettings, **kwargs: Any) -> BasecampClient:
        return cls(
            settings.require_access_token(),
            settings.account_id,
            api_base=settings.api_base,
            launchpad_base=settings.launchpad_base,
            user_agent=settings.user_agent,
            timeout=settings.request_timeout,
            **kwargs,
        )

    async def __aenter__(self) -> BasecampClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # -- Transport -------------------------------------------------------------

    async def _send(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> ApiResponse:
        if params:
            params = {k: _query_value(v) for k, v in params.items() if v is not None}
        try:
            response = await self._http.request(method, url, json=json, params=params or None)
        except httpx.HTTPError as exc:
            logger.warning("Basecamp {} {} failed: {}", method, url, exc)
            return ApiResponse(code=0, data={}, headers={}, error=True, message=str(exc) or type(exc).__name__)

        try:
            data = response.json()
        except ValueError:
            data = {}
        logger.debug("Basecamp {} {} -> {}", method, url, response.status_code)
        return ApiResponse(code=response.status_code, data=data, headers=dict(response.headers))

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> ApiResponse:
        """Call an account-scoped endpoint, e.g. ``/projects.json``."""
        if not self._account_id:
            try:
                await self.ensure_account_id()
            except AccountResolutionError as exc:
                return ApiResponse(code=0, data={}, headers={}, error=True, message=str(exc))
        url = f"{self._api_base}/{self._account_id}{endpoint}"
        return await self._send(method, url, json=json, params=params)

    async def _get(self, endpoint: str, **params: Any) -> ApiResponse:
        return await self.request("GET", endpoint, params=params)

    async def _post(self, endpoint: str, data: Any = None) -> ApiResponse:
        return await self.request("POST", endpoint, json=data)

    async def _put(self, endpoint: str, data: Any = None) -> ApiResponse:
        return await self.request("PUT", endpoint, json=data)

    async def _delete(self, endpoint: str) -> ApiResponse:
        return await self.request("DELETE", endpoint)

    # -- Authorization & accounts ----------------------------------------------

    @property
    def account_id(self) -> str:
        return self._account_id

    async def get_authorization(self) -> ApiResponse:
        return await self._send("GET", f"{self._launchpad_base}/authorization.json")

    async def ensure_account_id(self) -> str:
        """Return the account id, discovering it on first use if not configured."""
        if self._account_id:
            return self._account_id

        auth = await self.get_authorization()
        accounts = auth.data.get("accounts") if auth.ok and isinstance(auth.data, dict) else None
        if not accounts:
            msg = f"Could not determine Basecamp account id ({auth.describe()}); set BASECAMP_ACCOUNT_ID"
            raise AccountResolutionError(msg)
        self._account_id = str(accounts[0]["id"])
        logger.info("Using Basecamp account {}", self._account_id)
        return self._account_id

    # -- Projects --------------------------------------------------------------

    async def get_projects(self, status: str | None = None, page: int = 1) -> ApiResponse:
        return await self._get("/projects.json", page=page, status=status)

    async def get_project(self, project_id: str) -> ApiResponse:
        return await self._get(f"/projects/{project_id}.json")

    async def create_project(self, name: str, description: str = "") -> ApiResponse:
        return await self._post("/projects.json", {"name": name, "description": description})

    async def update_project(
        self, project_id: str, name: str | None = None, description: str | None = None
    ) -> ApiResponse:
        return await self._put(f"/projects/{project_id}.json", _compact(name=name, description=description))

    async def trash_project(self, project_id: str) -> ApiResponse:
        return await self._delete(f"/projects/{project_id}.json")

    # -- Card tables ----------------------------------------------------------

    async def get_card_table(self, project_id: str, card_table_id: str) -> ApiResponse:
        return await self._get(f"/buckets/{project_id}/card_tables/{card_table_id}.json")

    # -- Cards -----------------------------------------------------------------

    async def get_cards(self, project_id: str, column_id: str, page: int = 1) -> ApiResponse:
        return await self._get(f"/buckets/{project_id}/card_tables/lists/{column_id}/cards.json", page=page)

    async def get_card(self, project_id: str, card_id: str) -> ApiResponse:
        return await self._get(f"/buckets/{project_id}/card_tables/cards/{card_id}.json")

    async def create_card(
        self,
        project_id: str,
        column_id: str,
        title: str,
        content: str = "",
        due_on: str | None = None,
        assignee_ids: list[int] | None = None,
    ) -> ApiResponse:
        data: dict[str, Any] = {"title": title, "content": content}
        if due_on:
            data["due_on"] = due_on
        if assignee_ids:
            data["assignee_ids"] = assignee_ids
        return await self._post(f"/buckets/{project_id}/card_tables/lists/{column_id}/cards.json", data)

    async def update_card(self, project_id: str, card_id: str, updates: dict[str, Any]) -> ApiResponse:
        return await self._put(f"/buckets/{project_id}/card_tables/cards/{card_id}.json", updates)

    async def move_card(
        self, project_id: str, card_id: str, column_id: str, position: int | None = None
    ) -> ApiResponse:
        data: dict[str, Any] = {"column_id": int(column_id) if column_id.isdigit() else column_id}
        if position is not None:
            data["position"] = position
        return await self._post(f"/buckets/{project_id}/card_tables/cards/{card_id}/moves.json", data)

    async def trash_card(self, project_id: str, card_id: str) -> ApiResponse:
        return await self._put(f"/buckets/{project_id}/recordings/{card_id}/status/trashed.json")

    # -- Card steps ------------------------------------------------------------

    async def get_steps(self, project_id: str, card_id: str) -> ApiResponse:
        # Steps are embedded in the card payload.
        response = await self.get_card(project_id, card_id)
        if response.ok and isinstance(response.data, dict):
            response.data = response.data.get("steps") or []
        return response

    async def create_step(self, project_id: str, card_id: str, title: str) -> ApiResponse:
        return await self._post(f"/buckets/{project_id}/card_tables/cards/{card_id}/steps.json", {"title": title})

    async def update_step_completion(self, project_id: str, step_id: str, completed: bool) -> ApiResponse:
        completion = "on" if completed else "off"
        return await self._put(
            f"/buckets/{project_id}/card_tables/steps/{step_id}/completions.json", {"completion": completion}
        )

    # -- Comments --------------------------------------------------------------

    async def get_comments(self, project_id: str, recording_id: str, page: int = 1) -> ApiResponse:
        return await self._get(f"/buckets/{project_id}/recordings/{recording_id}/comments.json", page=page)

    async def create_comment(self, project_id: str, recording_id: str, content: str) -> ApiResponse:
        return await self._post(f"/buckets/{project_id}/recordings/{recording_id}/comments.json", {"content": content})

    # -- To-do sets, lists and to-dos -------------------------------------------

    async def get_todoset(self, project_id: str, todoset_id: str) -> ApiResponse:
        return await self._get(f"/buckets/{project_id}/todosets/{todoset_id}.json")

    async def get_todolists(
        self, project_id: str, todoset_id: str, status: str | None = None, page: int = 1
    ) -> ApiResponse:
        return await self._get(f"/buckets/{project_id}/todosets/{todoset_id}/todolists.json", status=status, page=page)

    async def get_todolist(self, project_id: str, todolist_id: str) -> ApiResponse:
        return await self._get(f"/buckets/{project_id}/todolists/{todolist_id}.json")

    async def create_todolist(
        self, project_id: str, todoset_id: str, name: str, description: str | None = None
    ) -> ApiResponse:
        return await self._post(
            f"/buckets/{project_id}/todosets/{todoset_id}/todolists.json",
            _compact(name=name, description=description),
        )

    async def update_todolist(
        self, project_id: str, todolist_id: str, name: str | None = None, description: str | None = None
    ) -> ApiResponse:
        return await self._put(
            f"/buckets/{project_id}/todolists/{todolist_id}.json", _compact(name=name, description=description)
        )

    async def get_todos(
        self,
        project_id: str,
        todolist_id: str,
        status: str | None = None,
        completed: bool | None = None,
        page: int = 1,
    ) -> ApiResponse:
        return await self._get(
            f"/buckets/{project_id}/todolists/{todolist_id}/todos.json",
            status=status,
            completed=completed,
            page=page,
        )

    async def get_todo(self, project_id: str, todo_id: str) -> ApiResponse:
        return await self._get(f"/buckets/{project_id}/todos/{todo_id}.json")

    async def create_todo(self, project_id: str, todolist_id: str, data: dict[str, Any]) -> ApiResponse:
        return await self._post(f"/buckets/{project_id}/todolists/{todolist_id}/todos.json", data)

    async def update_todo(self, project_id: str, todo_id: str, updates: dict[str, Any]) -> ApiResponse:
        return await self._put(f"/buckets/{project_id}/todos/{todo_id}.json", updates)

    async def complete_todo(self, project_id: str, todo_id: str) -> ApiResponse:
        return await self._post(f"/buckets/{project_id}/todos/{todo_id}/completion.json")

    async def uncomplete_todo(self, project_id: str, todo_id: str) -> ApiResponse:
        return await self._delete(f"/buckets/{project_id}/todos/{todo_id}/completion.json")

    # -- People ----------------------------------------------------------------

    async def get_people(self, page: int = 1) -> ApiResponse:
        return await self._get("/people.json", page=page)

    async def get_project_people(self, project_id: str, page: int = 1) -> ApiResponse:
        return await self._get(f"/projects/{project_id}/people.json", page=page)

    async def get_person(self, person_id: str) -> ApiResponse:
        return await self._get(f"/people/{person_id}.json")

    # -- Events ----------------------------------------------------------------

    async def get_events(self, page: int = 1, since: str | None = None) -> ApiResponse:
        return await self._get("/events.json", page=page, since=since)

    async def get_project_events(self, project_id: str, page: int = 1, since: str | None = None) -> ApiResponse:
        return await self._get(f"/buckets/{project_id}/events.json", page=page, since=since)


def _compact(**fields: Any) -> dict[str, Any]:
    """Drop unset (None or empty) fields from a request body."""
    return {k: v for k, v in fields.items() if v}


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
