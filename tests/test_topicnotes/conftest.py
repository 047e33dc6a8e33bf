"""Shared fixtures for topicnotes unit tests."""

from __future__ import annotations

from datetime import date
from typing import Any

import pytest

from topicnotes.errors import SyncError
from topicnotes.note import Note
from topicnotes.sync.memory import InMemoryBackend


def make_note(note_id: str, topic: str, **kwargs: Any) -> Note:
    kwargs.setdefault("title", f"Note {note_id}")
    kwargs.setdefault("content", "")
    kwargs.setdefault("date", date(2025, 1, 15))
    return Note(id=note_id, topic=topic, **kwargs)


class FlakyBackend(InMemoryBackend):
    """In-memory backend that records calls and fails the ones listed in ``fail_on``."""

    def __init__(self, notes=(), fail_on=()) -> None:
        super().__init__(notes)
        self.fail_on = set(fail_on)
        self.calls: list[tuple[str, tuple]] = []

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))
        if name in self.fail_on:
            raise SyncError(f"{name} failed", status_code=500)

    async def create_note(self, draft):
        self._record("create_note", draft)
        return await super().create_note(draft)

    async def update_note(self, note_id, changes):
        self._record("update_note", note_id, changes)
        return await super().update_note(note_id, changes)

    async def delete_note(self, note_id):
        self._record("delete_note", note_id)
        return await super().delete_note(note_id)

    async def set_favorite(self, note_id, is_favorite):
        self._record("set_favorite", note_id, is_favorite)
        return await super().set_favorite(note_id, is_favorite)

    async def upload_file(self, note_id, name, data, content_type):
        self._record("upload_file", note_id, name)
        return await super().upload_file(note_id, name, data, content_type)

    async def delete_file(self, note_id, file_id):
        self._record("delete_file", note_id, file_id)
        return await super().delete_file(note_id, file_id)

    async def rename_topic(self, old_path, new_name):
        self._record("rename_topic", old_path, new_name)
        return await super().rename_topic(old_path, new_name)

    async def delete_topic(self, path):
        self._record("delete_topic", path)
        return await super().delete_topic(path)


@pytest.fixture()
def notes() -> list[Note]:
    """Mixed hierarchy: notes at roots, nested leaves, and a shared leaf name."""
    return [
        make_note("1", "Work", title="Team Meeting Notes", content="Discussed Q4 goals", is_favorite=True),
        make_note("2", "Personal", title="Grocery List", content="Milk, eggs, bread"),
        make_note("3", "Work/Projects/Web", title="Landing page", content="New hero section"),
        make_note("4", "Work/Projects/Backend", title="Rate limits", is_favorite=True),
        make_note("5", "Work", title="Project Ideas", content="Habit tracker"),
        make_note("6", "Work/Meetings", title="Weekly sync"),
        make_note("7", "Personal/Meetings", title="Book club"),
    ]


@pytest.fixture()
def backend(notes: list[Note]) -> FlakyBackend:
    return FlakyBackend(notes)
