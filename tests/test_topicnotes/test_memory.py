"""Unit tests for topicnotes.sync.memory.InMemoryBackend."""

import asyncio

import pytest

from topicnotes.errors import SyncError
from topicnotes.sync.base import NotesBackend
from topicnotes.sync.memory import InMemoryBackend


@pytest.fixture()
def mem(notes) -> InMemoryBackend:
    return InMemoryBackend(notes)


def run(coro):
    return asyncio.run(coro)


class TestInMemoryBackend:
    def test_satisfies_protocol(self, mem: InMemoryBackend):
        assert isinstance(mem, NotesBackend)

    def test_create_assigns_id_and_puts_note_first(self, mem: InMemoryBackend):
        note = run(mem.create_note({"title": "New", "topic": "Inbox", "id": "ignored"}))
        assert note.id != "ignored"
        assert run(mem.list_notes())[0] == note

    def test_update_keeps_identity(self, mem: InMemoryBackend):
        note = run(mem.update_note("2", {"title": "Shopping", "id": "x", "date": "1999-01-01"}))
        assert note.id == "2"
        assert note.date.year == 2025
        assert note.title == "Shopping"

    def test_unknown_note_raises(self, mem: InMemoryBackend):
        with pytest.raises(SyncError) as info:
            run(mem.delete_note("missing"))
        assert info.value.status_code == 404

    def test_get_note(self, mem: InMemoryBackend):
        assert run(mem.get_note("1")).title == "Team Meeting Notes"
        assert run(mem.get_note("missing")) is None

    def test_rename_unknown_topic(self, mem: InMemoryBackend):
        with pytest.raises(SyncError, match="not found"):
            run(mem.rename_topic("Nope", "Other"))

    def test_rename_blank_is_rejected(self, mem: InMemoryBackend):
        with pytest.raises(SyncError) as info:
            run(mem.rename_topic("Work", " "))
        assert info.value.status_code == 400

    def test_rename_returns_new_path(self, mem: InMemoryBackend):
        assert run(mem.rename_topic("Work/Projects", "Clients")) == "Work/Clients"

    def test_created_topic_listed_and_renamed(self, mem: InMemoryBackend):
        run(mem.create_topic("Ideas/Later"))
        assert "Ideas/Later" in run(mem.list_topics())
        run(mem.rename_topic("Ideas", "Someday"))
        assert "Someday/Later" in run(mem.list_topics())

    def test_delete_topic_cascades(self, mem: InMemoryBackend):
        run(mem.delete_topic("Work"))
        assert all(not n.topic.startswith("Work") for n in run(mem.list_notes()))

    def test_delete_missing_file(self, mem: InMemoryBackend):
        with pytest.raises(SyncError):
            run(mem.delete_file("1", "nope"))

    def test_search(self, mem: InMemoryBackend):
        assert [n.id for n in run(mem.search_notes("grocery"))] == ["2"]
        assert run(mem.search_topics("meet")) == ["Work/Meetings", "Personal/Meetings"]
