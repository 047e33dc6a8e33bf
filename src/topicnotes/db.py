"""NotesDB: tabular views over the note list.

Uses DuckDB (in-memory) as a query engine over note metadata and returns
:mod:`polars` DataFrames for tables and charts in the notebook app.

Usage::

    db = NotesDB(store.notes)

    # Free-form SQL
    df = db.query("SELECT title FROM notes WHERE topic LIKE 'Work/%'")

    # Pre-built views
    table  = db.table_view(topic="Work", search="meeting")
    counts = db.topic_counts()          # exact-path note counts
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import duckdb
import polars as pl

from topicnotes.note import Note

_COLUMNS = (
    "id",
    "title",
    "content",
    "topic",
    "date",
    "is_favorite",
    "link",
    "color",
    "file_count",
)


class NotesDB:
    """In-memory DuckDB database over note metadata."""

    def __init__(self, notes: Iterable[Note] = ()) -> None:
        self.conn: duckdb.DuckDBPyConnection = duckdb.connect(":memory:")
        self.refresh(notes)

    # ------------------------------------------------------------------
    # Build / refresh
    # ------------------------------------------------------------------

    def refresh(self, notes: Iterable[Note]) -> None:
        """(Re-)populate the database from *notes* (call after every store commit)."""
        self._create_schema()
        self._load_notes(notes)

    def _create_schema(self) -> None:
        self.conn.execute("""
            CREATE OR REPLACE TABLE notes (
                id          VARCHAR PRIMARY KEY,
                title       VARCHAR,
                content     TEXT,
                topic       VARCHAR,
                date        DATE,
                is_favorite BOOLEAN,
                link        VARCHAR,
                color       VARCHAR,
                file_count  INTEGER
            )
        """)

    def _load_notes(self, notes: Iterable[Note]) -> None:
        rows = [
            (
                note.id,
                note.title,
                note.content,
                note.topic,
                note.date,
                note.is_favorite,
                note.link,
                note.color,
                len(note.files),
            )
            for note in notes
        ]
        if rows:
            self.conn.executemany("INSERT OR REPLACE INTO notes VALUES (?,?,?,?,?,?,?,?,?)", rows)

    # ------------------------------------------------------------------
    # Query
    # ------------------------------------------------------------------

    def query(self, sql: str, params: list[Any] | None = None) -> pl.DataFrame:
        """Run a raw SQL query and return a Polars DataFrame."""
        return self.conn.execute(sql, params or []).pl()

    # ------------------------------------------------------------------
    # Pre-built views
    # ------------------------------------------------------------------

    def table_view(
        self,
        *,
        topic: str | None = None,
        search: str | None = None,
        favorites_only: bool = False,
        columns: list[str] | None = None,
        order_by: str = "date DESC",
    ) -> pl.DataFrame:
        """Return notes as a Polars DataFrame, optionally filtered.

        Parameters
        ----------
        topic:
            Only include notes filed exactly under this topic path.
        search:
            Case-insensitive substring filter on title, content or topic.
        favorites_only:
            Only include favourite notes.
        columns:
            Which columns to include.  Defaults to ``id, title, topic, date, is_favorite``.
        order_by:
            ``ORDER BY`` clause (column name plus optional direction).
        """
        wanted = columns or ["id", "title", "topic", "date", "is_favorite"]
        unknown = [c for c in wanted if c not in _COLUMNS]
        if unknown:
            raise ValueError(f"Unknown column(s): {', '.join(unknown)}")

        where_clauses: list[str] = []
        params: list[Any] = []
        if topic:
            where_clauses.append("topic = ?")
            params.append(topic)
        if search:
            where_clauses.append("(title ILIKE ? OR content ILIKE ? OR topic ILIKE ?)")
            params.extend([f"%{search}%"] * 3)
        if favorites_only:
            where_clauses.append("is_favorite")

        where = f"WHERE {' AND '.join(where_clauses)}" if where_clauses else ""
        safe_order = order_by.replace(";", "").replace("'", "")
        sql = f"SELECT {', '.join(wanted)} FROM notes {where} ORDER BY {safe_order}"
        return self.conn.execute(sql, params).pl()

    def gallery_view(self, *, favorites_only: bool = False) -> list[dict[str, Any]]:
        """Return notes as a list of card dicts for a grid layout."""
        df = self.table_view(
            favorites_only=favorites_only,
            columns=["id", "title", "topic", "color", "file_count"],
            order_by="date DESC, title",
        )
        return df.to_dicts()

    def topic_counts(self) -> pl.DataFrame:
        """Return a topic → exact note count table sorted by frequency."""
        return self.conn.execute(
            """
            SELECT topic, COUNT(*) AS note_count
            FROM notes
            GROUP BY topic
            ORDER BY note_count DESC, topic
            """
        ).pl()

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def schema_info(self) -> pl.DataFrame:
        """Return DuckDB DESCRIBE output for the notes table."""
        return self.conn.execute("DESCRIBE notes").pl()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> "NotesDB":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()
