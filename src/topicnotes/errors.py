"""Exception hierarchy shared by the store, mutations and sync backends."""

from __future__ import annotations


class NotesError(Exception):
    """Base class for every error raised by topicnotes."""


class MutationDeclined(NotesError, ValueError):
    """A mutation was refused locally; no backend call was made."""


class InvalidTopicName(MutationDeclined):
    """Rename target is empty or whitespace only."""


class TopicUnchanged(MutationDeclined):
    """Rename target equals the topic's current name.

    Callers usually treat this as a no-op close rather than an error.
    """


class InvalidNote(MutationDeclined):
    """A note draft is missing its title or topic."""


class NoteNotFound(NotesError, LookupError):
    def __init__(self, note_id: str) -> None:
        super().__init__(f"Note '{note_id}' not found")
        self.note_id = note_id


class SyncError(NotesError):
    """The remote notes service reported (or caused) a failure."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
