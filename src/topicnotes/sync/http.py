"""HTTP notes backend.

A thin async client for the notes REST API behind the Mini App.  Every
response is a JSON envelope::

    {"success": true, "data": ..., "message": "optional text"}

Expected routes
---------------
GET    /notes                      – list notes
GET    /notes/{id}                 – retrieve a note
POST   /notes                      – create a note
PATCH  /notes/{id}                 – partial update
DELETE /notes/{id}                 – delete a note
PATCH  /notes/{id}/favorite        – set the favourite flag
POST   /notes/{id}/files           – multipart upload (field ``file``)
DELETE /notes/{id}/files/{fileId}  – remove an attachment
GET    /topics                     – list topic paths
POST   /topics                     – create a topic
PATCH  /topics/{path}              – rename (path is URL-encoded, ``/`` included)
DELETE /topics/{path}              – delete a topic and its notes
GET    /search/notes?q=            – note search
GET    /search/topics?q=           – topic search

For UI testing the client can simulate a slow, flaky server: a random
500–2500 ms delay before each request and a 10% chance of a network error.

Environment variables (all optional; direct kwargs take precedence):
    NOTES_API_URL              – base URL (default ``http://localhost:8000/api``)
    NOTES_API_TOKEN            – bearer token sent as ``Authorization``
    NOTES_ENV                  – ``development`` turns on delay and errors
    NOTES_ENABLE_TEST_DELAY    – ``true`` forces the simulated delay
    NOTES_ENABLE_TEST_ERRORS   – ``true`` forces simulated errors
"""

from __future__ import annotations

import asyncio
import logging
import os
import random
from collections.abc import Awaitable, Callable
from typing import Any
from urllib.parse import quote

import httpx

from topicnotes.errors import SyncError
from topicnotes.note import Note, NoteFile

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:8000/api"
TEST_DELAY_RANGE = (0.5, 2.5)
TEST_ERROR_RATE = 0.1


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() == "true"


class NotesApiClient:
    """Async HTTP implementation of :class:`~topicnotes.sync.base.NotesBackend`."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        api_token: str | None = None,
        timeout: float = 10.0,
        test_delay: bool | None = None,
        test_errors: bool | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        rng: random.Random | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        development = os.getenv("NOTES_ENV", "") == "development"
        self.base_url = (base_url or os.getenv("NOTES_API_URL", DEFAULT_API_URL)).rstrip("/")
        self.test_delay = (
            test_delay if test_delay is not None else development or _env_flag("NOTES_ENABLE_TEST_DELAY")
        )
        self.test_errors = (
            test_errors if test_errors is not None else development or _env_flag("NOTES_ENABLE_TEST_ERRORS")
        )
        self._rng = rng or random.Random()
        self._sleep = sleep

        token = api_token or os.getenv("NOTES_API_TOKEN", "")
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _request(self, method: str, endpoint: str, **kwargs: Any) -> Any:
        """Send one request and unwrap the envelope, raising :class:`SyncError`."""
        logger.debug(
            "%s %s (test_delay=%s, test_errors=%s)", method, endpoint, self.test_delay, self.test_errors
        )
        if self.test_delay:
            delay = self._rng.uniform(*TEST_DELAY_RANGE)
            logger.debug("Simulating %.0fms delay", delay * 1000)
            await self._sleep(delay)

        try:
            if self.test_errors and self._rng.random() < TEST_ERROR_RATE:
                raise SyncError("Simulated network error for testing")
            response = await self._client.request(method, endpoint, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("API request failed for %s: %s", endpoint, exc)
            raise SyncError(str(exc) or exc.__class__.__name__) from exc
        except SyncError as exc:
            logger.warning("API request failed for %s: %s", endpoint, exc)
            raise

        if response.is_error:
            logger.warning("API request failed for %s: status %s", endpoint, response.status_code)
            raise SyncError(f"HTTP error! status: {response.status_code}", status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError as exc:
            raise SyncError(f"Invalid JSON from {endpoint}", status_code=response.status_code) from exc

        if not isinstance(payload, dict) or not payload.get("success"):
            message = payload.get("message") if isinstance(payload, dict) else None
            logger.warning("API request failed for %s: %s", endpoint, message)
            raise SyncError(message or "Unknown error occurred", status_code=response.status_code)
        return payload.get("data")

    @staticmethod
    def _decode(endpoint: str, factory: Callable[[Any], Any], data: Any) -> Any:
        """Build a record from response data, raising :class:`SyncError` when it does not fit."""
        try:
            return factory(data)
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            logger.warning("Undecodable response from %s: %s", endpoint, exc)
            raise SyncError(f"Invalid response from {endpoint}: {exc}") from exc

    def _decode_notes(self, endpoint: str, data: Any) -> list[Note]:
        return self._decode(endpoint, lambda items: [Note.from_dict(d) for d in items or []], data)

    @staticmethod
    def _topic_endpoint(path: str) -> str:
        return f"/topics/{quote(path, safe='')}"

    # ------------------------------------------------------------------
    # Notes
    # ------------------------------------------------------------------

    async def list_notes(self) -> list[Note]:
        return self._decode_notes("/notes", await self._request("GET", "/notes"))

    async def get_note(self, note_id: str) -> Note | None:
        endpoint = f"/notes/{note_id}"
        try:
            data = await self._request("GET", endpoint)
        except SyncError as exc:
            if exc.status_code == 404:
                return None
            raise
        return self._decode(endpoint, Note.from_dict, data)

    async def create_note(self, draft: dict[str, Any]) -> Note:
        body = {k: v for k, v in draft.items() if k not in {"id", "date"}}
        return self._decode("/notes", Note.from_dict, await self._request("POST", "/notes", json=body))

    async def update_note(self, note_id: str, changes: dict[str, Any]) -> Note:
        endpoint = f"/notes/{note_id}"
        return self._decode(endpoint, Note.from_dict, await self._request("PATCH", endpoint, json=changes))

    async def delete_note(self, note_id: str) -> None:
        await self._request("DELETE", f"/notes/{note_id}")

    async def set_favorite(self, note_id: str, is_favorite: bool) -> Note:
        endpoint = f"/notes/{note_id}/favorite"
        data = await self._request("PATCH", endpoint, json={"isFavorite": is_favorite})
        return self._decode(endpoint, Note.from_dict, data)

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    async def upload_file(
        self, note_id: str, name: str, data: bytes, content_type: str
    ) -> NoteFile:
        endpoint = f"/notes/{note_id}/files"
        result = await self._request(
            "POST",
            endpoint,
            files={"file": (name, data, content_type)},
        )
        return self._decode(endpoint, NoteFile.from_dict, result)

    async def delete_file(self, note_id: str, file_id: str) -> None:
        await self._request("DELETE", f"/notes/{note_id}/files/{file_id}")

    # ------------------------------------------------------------------
    # Topics
    # ------------------------------------------------------------------

    async def list_topics(self) -> list[str]:
        return list(await self._request("GET", "/topics") or [])

    async def create_topic(self, name: str) -> str:
        return await self._request("POST", "/topics", json={"name": name})

    async def rename_topic(self, old_path: str, new_name: str) -> str:
        return await self._request("PATCH", self._topic_endpoint(old_path), json={"name": new_name})

    async def delete_topic(self, path: str) -> None:
        await self._request("DELETE", self._topic_endpoint(path))

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    async def search_notes(self, query: str) -> list[Note]:
        data = await self._request("GET", "/search/notes", params={"q": query})
        return self._decode_notes("/search/notes", data)

    async def search_topics(self, query: str) -> list[str]:
        return list(await self._request("GET", "/search/topics", params={"q": query}) or [])

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "NotesApiClient":
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()
