"""Backends the note store persists through."""

from topicnotes.sync.base import NotesBackend
from topicnotes.sync.http import NotesApiClient
from topicnotes.sync.memory import InMemoryBackend

__all__ = ["NotesBackend", "NotesApiClient", "InMemoryBackend"]
