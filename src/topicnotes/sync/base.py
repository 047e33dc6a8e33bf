"""Abstract notes backend protocol."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from topicnotes.note import Note, NoteFile


@runtime_checkable
class NotesBackend(Protocol):
    """Remote persistence capability the note store awaits before committing.

    Implementations (HTTP API, in-memory, …) signal failure by raising
    :class:`~topicnotes.errors.SyncError`.
    """

    # ------------------------------------------------------------------ notes

    async def list_notes(self) -> list[Note]:
        """Fetch every note, in display order."""
        ...

    async def get_note(self, note_id: str) -> Note | None:
        """Fetch a single note, or ``None`` when not found."""
        ...

    async def create_note(self, draft: dict[str, Any]) -> Note:
        """Create a note from a wire-form *draft*; the backend assigns id and date."""
        ...

    async def update_note(self, note_id: str, changes: dict[str, Any]) -> Note:
        """Apply a partial wire-form update and return the stored note."""
        ...

    async def delete_note(self, note_id: str) -> None: ...

    async def set_favorite(self, note_id: str, is_favorite: bool) -> Note: ...

    # ------------------------------------------------------------------ files

    async def upload_file(
        self, note_id: str, name: str, data: bytes, content_type: str
    ) -> NoteFile: ...

    async def delete_file(self, note_id: str, file_id: str) -> None: ...

    # ----------------------------------------------------------------- topics

    async def list_topics(self) -> list[str]: ...

    async def create_topic(self, name: str) -> str: ...

    async def rename_topic(self, old_path: str, new_name: str) -> str:
        """Rename the topic at *old_path* (cascading); return the new path."""
        ...

    async def delete_topic(self, path: str) -> None:
        """Delete the topic at *path* together with all notes under it."""
        ...

    # ----------------------------------------------------------------- search

    async def search_notes(self, query: str) -> list[Note]: ...

    async def search_topics(self, query: str) -> list[str]: ...
