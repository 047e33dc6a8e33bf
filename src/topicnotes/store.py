"""NoteStore: the single owner of the note list.

The store holds the authoritative notes, derives the topic forest from
them, and keeps a navigation stack over that forest.  Every command first
awaits the backend and only then swaps in the new note list, so a failed
remote call leaves notes, forest and navigation exactly as they were.

Usage::

    store = NoteStore(NotesApiClient())
    await store.load()

    unsubscribe = store.subscribe(lambda s: render(s.forest))
    await store.rename_topic("Work/Projects", "Clients")   # awaits the API first
    store.search("meeting", topic="Work")
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable
from dataclasses import replace
from typing import Any

from topicnotes import mutations
from topicnotes.errors import InvalidNote, NoteNotFound
from topicnotes.navigation import NavigationStack
from topicnotes.note import DEFAULT_NOTE_COLOR, DEFAULT_NOTE_IMAGE, Note, changes_to_wire
from topicnotes.sync.base import NotesBackend
from topicnotes.topics import TopicForest, build_topic_forest

logger = logging.getLogger(__name__)

Listener = Callable[["NoteStore"], None]


class NoteStore:
    """Authoritative note list plus its derived forest and navigation state."""

    def __init__(self, backend: NotesBackend, notes: Iterable[Note] = ()) -> None:
        self.backend = backend
        self._notes: list[Note] = list(notes)
        self._forest: TopicForest = build_topic_forest(self._notes)
        self.navigation = NavigationStack(self._forest)
        self._listeners: list[Listener] = []
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* after every commit; returns an unsubscribe function."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _commit(self, notes: list[Note]) -> None:
        self._notes = notes
        self._forest = build_topic_forest(notes)
        self.navigation.reset(self._forest)
        for listener in list(self._listeners):
            listener(self)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def notes(self) -> list[Note]:
        return list(self._notes)

    @property
    def forest(self) -> TopicForest:
        return self._forest

    def get(self, note_id: str) -> Note:
        for note in self._notes:
            if note.id == note_id:
                return note
        raise NoteNotFound(note_id)

    def favorites(self) -> list[Note]:
        return [n for n in self._notes if n.is_favorite]

    def search(self, query: str = "", topic: str | None = None) -> list[Note]:
        """Case-insensitive match on title, content or topic, optionally within one exact topic.

        The query is matched as given; callers trim user input.
        """
        q = query.lower()
        return [
            n
            for n in self._notes
            if (not q or q in n.title.lower() or q in n.content.lower() or q in n.topic.lower())
            and (not topic or n.topic == topic)
        ]

    def topic_paths(self) -> list[str]:
        return list(dict.fromkeys(n.topic for n in self._notes))

    # ------------------------------------------------------------------
    # Note commands
    # ------------------------------------------------------------------

    async def load(self) -> None:
        """Replace the local list with the backend's notes."""
        async with self._lock:
            notes = await self.backend.list_notes()
            self._commit(list(notes))

    async def create_note(
        self,
        title: str,
        content: str,
        topic: str,
        *,
        link: str | None = None,
        files: Iterable[Any] = (),
        show_preview: bool = False,
        image: str | None = None,
        color: str = DEFAULT_NOTE_COLOR,
    ) -> Note:
        """Create a note; the backend assigns id and date, the note goes first."""
        title, topic = title.strip(), topic.strip()
        if not title or not topic:
            raise InvalidNote("A note needs a title and a topic")
        preview = show_preview and bool(image)
        draft = {
            "title": title,
            "content": content.strip(),
            "topic": topic,
            "color": color,
            "isFavorite": False,
            "image": image if preview else DEFAULT_NOTE_IMAGE,
            "showPreview": preview,
        }
        link = (link or "").strip()
        if link:
            draft["link"] = link
        files = [f.to_dict() if hasattr(f, "to_dict") else f for f in files]
        if files:
            draft["files"] = files

        async with self._lock:
            note = await self.backend.create_note(draft)
            self._commit([note, *self._notes])
        return note

    async def update_note(self, note_id: str, **changes: Any) -> Note:
        """Edit fields of a note; ``id`` and ``date`` always keep their values."""
        changes.pop("id", None)
        changes.pop("date", None)
        for key in ("title", "topic"):
            if key in changes:
                changes[key] = str(changes[key] or "").strip()
                if not changes[key]:
                    raise InvalidNote("A note needs a title and a topic")
        async with self._lock:
            self.get(note_id)
            updated = await self.backend.update_note(note_id, changes_to_wire(changes))
            self._commit(self._replace(note_id, updated))
        return updated

    async def delete_note(self, note_id: str) -> None:
        async with self._lock:
            self.get(note_id)
            await self.backend.delete_note(note_id)
            self._commit([n for n in self._notes if n.id != note_id])

    async def toggle_favorite(self, note_id: str) -> Note:
        async with self._lock:
            current = self.get(note_id)
            updated = await self.backend.set_favorite(note_id, not current.is_favorite)
            self._commit(self._replace(note_id, updated))
        return updated

    async def attach_file(self, note_id: str, name: str, data: bytes, content_type: str) -> Note:
        async with self._lock:
            current = self.get(note_id)
            attached = await self.backend.upload_file(note_id, name, data, content_type)
            updated = replace(current, files=current.files + (attached,))
            self._commit(self._replace(note_id, updated))
        return updated

    async def detach_file(self, note_id: str, file_id: str) -> Note:
        async with self._lock:
            current = self.get(note_id)
            await self.backend.delete_file(note_id, file_id)
            updated = replace(current, files=tuple(f for f in current.files if f.id != file_id))
            self._commit(self._replace(note_id, updated))
        return updated

    # ------------------------------------------------------------------
    # Topic commands
    # ------------------------------------------------------------------

    async def rename_topic(self, path: str, new_name: str) -> str:
        """Rename *path* (cascading to subtopics) once the backend confirms.

        Blank or unchanged names are declined before the backend is called.
        Returns the new full path.
        """
        name = mutations.validate_rename(path, new_name)
        async with self._lock:
            await self.backend.rename_topic(path, name)
            self._commit(mutations.rename_topic(self._notes, path, name))
        new_path = mutations.renamed_path(path, name)
        logger.info("Renamed topic %r to %r", path, new_path)
        return new_path

    async def delete_topic(self, path: str) -> int:
        """Delete *path* and every note under it once the backend confirms.

        Returns the number of notes removed.
        """
        async with self._lock:
            await self.backend.delete_topic(path)
            remaining = mutations.delete_topic(self._notes, path)
            removed = len(self._notes) - len(remaining)
            self._commit(remaining)
        logger.info("Deleted topic %r (%d notes)", path, removed)
        return removed

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _replace(self, note_id: str, note: Note) -> list[Note]:
        return [note if n.id == note_id else n for n in self._notes]
