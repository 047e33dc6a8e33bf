"""Core Note and NoteFile dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

#: Cover image used when a note has no video preview.
DEFAULT_NOTE_IMAGE = "/business-meeting-workspace.jpg"
DEFAULT_NOTE_COLOR = "primary"


@dataclass(frozen=True)
class NoteFile:
    """A file attached to a note."""

    id: str
    name: str
    size: int
    type: str
    url: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "size": self.size,
            "type": self.type,
            "url": self.url,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NoteFile":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            size=int(data.get("size", 0)),
            type=data.get("type", ""),
            url=data.get("url", ""),
        )


@dataclass(frozen=True)
class Note:
    """A single note, filed under a slash-delimited topic path."""

    id: str
    title: str
    content: str
    topic: str
    date: date = field(default_factory=date.today)
    is_favorite: bool = False
    #: Cover image reference (URL or static path)
    image: str | None = None
    files: tuple[NoteFile, ...] = ()
    link: str | None = None
    color: str | None = None
    show_preview: bool = False

    @property
    def segments(self) -> list[str]:
        """Topic path split into its ``/``-separated segments."""
        return self.topic.split("/")

    def to_dict(self) -> dict[str, Any]:
        """Return the camelCase wire form; unset optional keys are omitted."""
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "date": self.date.isoformat(),
            "topic": self.topic,
            "isFavorite": self.is_favorite,
        }
        if self.image is not None:
            data["image"] = self.image
        if self.files:
            data["files"] = [f.to_dict() for f in self.files]
        if self.link is not None:
            data["link"] = self.link
        if self.color is not None:
            data["color"] = self.color
        if self.show_preview:
            data["showPreview"] = True
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Note":
        raw_date = data.get("date")
        if isinstance(raw_date, datetime):
            note_date = raw_date.date()
        elif isinstance(raw_date, date):
            note_date = raw_date
        elif raw_date:
            # Servers may send full ISO timestamps; only the day is kept.
            note_date = date.fromisoformat(str(raw_date)[:10])
        else:
            note_date = date.today()
        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            content=data.get("content", ""),
            topic=data.get("topic", ""),
            date=note_date,
            is_favorite=bool(data.get("isFavorite", False)),
            image=data.get("image"),
            files=tuple(NoteFile.from_dict(f) for f in data.get("files") or []),
            link=data.get("link"),
            color=data.get("color"),
            show_preview=bool(data.get("showPreview", False)),
        )


def changes_to_wire(changes: dict[str, Any]) -> dict[str, Any]:
    """Translate Python field names in *changes* to their wire keys."""
    wire: dict[str, Any] = {}
    for key, value in changes.items():
        if key == "files":
            value = [f.to_dict() if isinstance(f, NoteFile) else f for f in value]
        elif key == "date" and isinstance(value, date):
            value = value.isoformat()
        wire[_WIRE_KEYS.get(key, key)] = value
    return wire


_WIRE_KEYS = {"is_favorite": "isFavorite", "show_preview": "showPreview"}
