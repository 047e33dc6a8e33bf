"""Unit tests for topicnotes.db.NotesDB."""

import asyncio

import duckdb
import polars as pl
import pytest

from topicnotes.db import NotesDB
from topicnotes.note import NoteFile
from topicnotes.store import NoteStore
from topicnotes.sync.memory import InMemoryBackend

from .conftest import make_note


@pytest.fixture()
def db(notes) -> NotesDB:
    return NotesDB(notes)


# ---------------------------------------------------------------------------
# query()
# ---------------------------------------------------------------------------


class TestNotesDBQuery:
    def test_basic_select(self, db: NotesDB):
        df = db.query("SELECT id FROM notes ORDER BY id")
        assert list(df["id"]) == ["1", "2", "3", "4", "5", "6", "7"]

    def test_parameters(self, db: NotesDB):
        df = db.query("SELECT id FROM notes WHERE topic = ? ORDER BY id", ["Work"])
        assert list(df["id"]) == ["1", "5"]

    def test_returns_polars_dataframe(self, db: NotesDB):
        assert isinstance(db.query("SELECT id FROM notes"), pl.DataFrame)

    def test_invalid_sql_raises(self, db: NotesDB):
        with pytest.raises(duckdb.Error):
            db.query("SELECT * FROM nonexistent_table")


# ---------------------------------------------------------------------------
# table_view()
# ---------------------------------------------------------------------------


class TestTableView:
    def test_returns_all_by_default(self, db: NotesDB):
        assert len(db.table_view()) == 7

    def test_topic_filter_is_exact(self, db: NotesDB):
        df = db.table_view(topic="Work", order_by="id")
        assert list(df["id"]) == ["1", "5"]

    def test_search_case_insensitive(self, db: NotesDB):
        df = db.table_view(search="GROCERY")
        assert list(df["id"]) == ["2"]

    def test_search_matches_topic(self, db: NotesDB):
        df = db.table_view(search="meetings", order_by="id")
        assert list(df["id"]) == ["6", "7"]

    def test_search_is_not_sql(self, db: NotesDB):
        assert len(db.table_view(search="' OR 1=1 --")) == 0

    def test_favorites_only(self, db: NotesDB):
        df = db.table_view(favorites_only=True, order_by="id")
        assert list(df["id"]) == ["1", "4"]

    def test_custom_columns(self, db: NotesDB):
        df = db.table_view(columns=["id", "title"])
        assert list(df.columns) == ["id", "title"]

    def test_unknown_column_rejected(self, db: NotesDB):
        with pytest.raises(ValueError, match="Unknown column"):
            db.table_view(columns=["id", "secret"])


# ---------------------------------------------------------------------------
# topic_counts() / gallery_view()
# ---------------------------------------------------------------------------


class TestTopicCounts:
    def test_exact_path_counts(self, db: NotesDB):
        df = db.topic_counts()
        work = df.filter(pl.col("topic") == "Work")
        assert work["note_count"][0] == 2

    def test_ancestors_without_notes_absent(self, db: NotesDB):
        df = db.topic_counts()
        assert "Work/Projects" not in list(df["topic"])

    def test_sorted_by_frequency_desc(self, db: NotesDB):
        counts = list(db.topic_counts()["note_count"])
        assert counts == sorted(counts, reverse=True)


class TestGalleryView:
    def test_returns_list_of_dicts(self, db: NotesDB):
        gallery = db.gallery_view()
        assert all(isinstance(item, dict) for item in gallery)
        assert len(gallery) == 7

    def test_file_count(self):
        f = NoteFile("f", "a.txt", 1, "text/plain", "/a")
        with NotesDB([make_note("1", "Work", files=(f, f))]) as d:
            assert d.gallery_view()[0]["file_count"] == 2


# ---------------------------------------------------------------------------
# refresh()
# ---------------------------------------------------------------------------


class TestRefresh:
    def test_refresh_replaces_rows(self, db: NotesDB):
        db.refresh([make_note("new", "Health")])
        assert list(db.query("SELECT id FROM notes")["id"]) == ["new"]

    def test_empty(self):
        with NotesDB() as d:
            assert len(d.table_view()) == 0
            assert len(d.topic_counts()) == 0


class TestStoreSubscription:
    def test_refresh_follows_store_commits(self, notes):
        store = NoteStore(InMemoryBackend(notes), notes)
        with NotesDB(store.notes) as d:
            store.subscribe(lambda s: d.refresh(s.notes))
            asyncio.run(store.delete_topic("Work"))
            assert sorted(d.table_view()["id"]) == ["2", "7"]
