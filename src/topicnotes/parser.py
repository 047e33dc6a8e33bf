"""Load notes from markdown files with YAML front matter, or from YAML seed files.

A markdown note looks like::

    ---
    title: Sprint planning
    topic: Work/Meetings      # optional, defaults to the folder path
    favorite: true
    link: https://youtu.be/abc123
    ---
    Agenda for the week…

Notes without a ``topic`` key are filed under their directory relative to
the vault root (``Work/Projects/api.md`` -> ``Work/Projects``), or under
``Inbox`` when they sit at the top level.
"""

from __future__ import annotations

import re
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Any

import yaml

from topicnotes.note import Note, NoteFile

DEFAULT_TOPIC = "Inbox"

# YAML front-matter block
_FRONTMATTER_RE = re.compile(r"^---[ \t]*\n(.*?)\n?---[ \t]*\n", re.DOTALL)


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """Split YAML front-matter from body text.

    Returns ``(metadata_dict, body)``; ``metadata_dict`` is empty when there
    is no front-matter block or it does not parse to a mapping.
    """
    match = _FRONTMATTER_RE.match(content)
    if not match:
        return {}, content
    try:
        meta = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError:
        meta = {}
    if not isinstance(meta, dict):
        meta = {}
    return meta, content[match.end() :]


def _as_date(value: Any, fallback: date) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if value:
        try:
            return date.fromisoformat(str(value)[:10])
        except ValueError:
            pass
    return fallback


def parse_note(path: Path, root: Path | None = None) -> Note:
    """Read a ``.md`` file and return a :class:`Note`."""
    content = path.read_text(encoding="utf-8")
    meta, body = parse_frontmatter(content)

    relative = path.relative_to(root) if root is not None else Path(path.name)
    folder = relative.parent.as_posix()
    topic = str(meta.get("topic") or (folder if folder != "." else DEFAULT_TOPIC))

    modified = date.fromtimestamp(path.stat().st_mtime)
    files = meta.get("files") or []
    if not isinstance(files, list) or not all(isinstance(f, dict) for f in files):
        raise ValueError("front-matter `files` must be a list of mappings")

    return Note(
        id=str(meta.get("id") or relative.with_suffix("").as_posix()),
        title=str(meta.get("title") or path.stem),
        content=body.strip(),
        topic=topic.strip("/"),
        date=_as_date(meta.get("date"), modified),
        is_favorite=bool(meta.get("favorite", meta.get("isFavorite", False))),
        image=meta.get("image"),
        files=tuple(NoteFile.from_dict(f) for f in files),
        link=meta.get("link"),
        color=meta.get("color"),
        show_preview=bool(meta.get("show_preview", meta.get("showPreview", False))),
    )


def load_vault(directory: Path) -> list[Note]:
    """Parse every ``*.md`` file under *directory*, sorted by path."""
    directory = Path(directory)
    notes: list[Note] = []
    for path in sorted(directory.glob("**/*.md")):
        try:
            notes.append(parse_note(path, directory))
        except (OSError, UnicodeDecodeError, ValueError, KeyError, TypeError) as exc:
            # Keep going so one broken file doesn't hide the rest of the vault
            print(f"[warn] Failed to load note {path.name}: {exc}", file=sys.stderr)
    return notes


def load_notes_file(path: Path) -> list[Note]:
    """Load a YAML list of wire-form note dicts (see :meth:`Note.from_dict`)."""
    with open(path, encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or []
    if isinstance(data, dict):
        data = data.get("notes") or []
    return [Note.from_dict(item) for item in data]
