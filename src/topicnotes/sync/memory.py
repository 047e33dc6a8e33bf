"""In-memory notes backend.

Keeps notes in a plain dict for offline use (the notebook app falls back
to it when no API URL is configured) and for tests.  Behaves like the
HTTP API: ids and dates are assigned on create, topic rename/delete
cascade, and unknown ids raise :class:`~topicnotes.errors.SyncError`.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from dataclasses import replace
from datetime import date
from typing import Any

from topicnotes import mutations
from topicnotes.errors import MutationDeclined, SyncError
from topicnotes.note import Note, NoteFile


class InMemoryBackend:
    """Dict-backed implementation of :class:`~topicnotes.sync.base.NotesBackend`."""

    def __init__(self, notes: Iterable[Note] = ()) -> None:
        self._notes: dict[str, Note] = {n.id: n for n in notes}
        #: Topics created explicitly, even while no note uses them yet
        self._topics: list[str] = []

    # ------------------------------------------------------------------
    # Notes
    # ------------------------------------------------------------------

    async def list_notes(self) -> list[Note]:
        return list(self._notes.values())

    async def get_note(self, note_id: str) -> Note | None:
        return self._notes.get(note_id)

    async def create_note(self, draft: dict[str, Any]) -> Note:
        data = dict(draft, id=uuid.uuid4().hex, date=date.today().isoformat())
        note = Note.from_dict(data)
        # Newest first, like the API
        self._notes = {note.id: note, **self._notes}
        return note

    async def update_note(self, note_id: str, changes: dict[str, Any]) -> Note:
        current = self._require(note_id)
        merged = dict(current.to_dict(), **changes)
        merged["id"] = current.id
        merged["date"] = current.date.isoformat()
        note = Note.from_dict(merged)
        self._notes[note_id] = note
        return note

    async def delete_note(self, note_id: str) -> None:
        self._require(note_id)
        del self._notes[note_id]

    async def set_favorite(self, note_id: str, is_favorite: bool) -> Note:
        note = replace(self._require(note_id), is_favorite=is_favorite)
        self._notes[note_id] = note
        return note

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    async def upload_file(
        self, note_id: str, name: str, data: bytes, content_type: str
    ) -> NoteFile:
        note = self._require(note_id)
        file_id = uuid.uuid4().hex
        attached = NoteFile(
            id=file_id,
            name=name,
            size=len(data),
            type=content_type,
            url=f"memory://{note_id}/{file_id}/{name}",
        )
        self._notes[note_id] = replace(note, files=note.files + (attached,))
        return attached

    async def delete_file(self, note_id: str, file_id: str) -> None:
        note = self._require(note_id)
        remaining = tuple(f for f in note.files if f.id != file_id)
        if len(remaining) == len(note.files):
            raise SyncError(f"File '{file_id}' not found on note '{note_id}'", status_code=404)
        self._notes[note_id] = replace(note, files=remaining)

    # ------------------------------------------------------------------
    # Topics
    # ------------------------------------------------------------------

    async def list_topics(self) -> list[str]:
        seen = dict.fromkeys(n.topic for n in self._notes.values())
        seen.update(dict.fromkeys(self._topics))
        return list(seen)

    async def create_topic(self, name: str) -> str:
        name = name.strip()
        if not name:
            raise SyncError("Topic name must not be empty", status_code=400)
        if name not in self._topics:
            self._topics.append(name)
        return name

    async def rename_topic(self, old_path: str, new_name: str) -> str:
        if not any(mutations.in_topic(t, old_path) for t in await self.list_topics()):
            raise SyncError(f"Topic '{old_path}' not found", status_code=404)
        try:
            renamed = mutations.rename_topic(self._notes.values(), old_path, new_name)
        except MutationDeclined as exc:
            raise SyncError(str(exc), status_code=400) from exc
        self._notes = {n.id: n for n in renamed}
        new_path = mutations.renamed_path(old_path, new_name.strip())
        self._topics = [
            new_path + t[len(old_path) :] if mutations.in_topic(t, old_path) else t
            for t in self._topics
        ]
        return new_path

    async def delete_topic(self, path: str) -> None:
        if not any(mutations.in_topic(t, path) for t in await self.list_topics()):
            raise SyncError(f"Topic '{path}' not found", status_code=404)
        self._notes = {n.id: n for n in mutations.delete_topic(self._notes.values(), path)}
        self._topics = [t for t in self._topics if not mutations.in_topic(t, path)]

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    async def search_notes(self, query: str) -> list[Note]:
        q = query.lower()
        return [
            n
            for n in self._notes.values()
            if q in n.title.lower() or q in n.content.lower() or q in n.topic.lower()
        ]

    async def search_topics(self, query: str) -> list[str]:
        q = query.lower()
        return [t for t in await self.list_topics() if q in t.lower()]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require(self, note_id: str) -> Note:
        note = self._notes.get(note_id)
        if note is None:
            raise SyncError(f"Note '{note_id}' not found", status_code=404)
        return note
