"""Cascading topic rename / delete as pure transformations of a note list.

Neither function talks to a backend: callers persist first and apply the
returned list only once the remote side has confirmed (see
:class:`topicnotes.store.NoteStore`).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from topicnotes.errors import InvalidTopicName, TopicUnchanged
from topicnotes.note import Note
from topicnotes.topics import SEPARATOR, join_path, leaf_name, parent_path


def in_topic(topic: str, path: str) -> bool:
    """True when *topic* is *path* itself or one of its descendants."""
    return topic == path or topic.startswith(path + SEPARATOR)


def renamed_path(path: str, new_name: str) -> str:
    """Return *path* with its final segment replaced by *new_name*."""
    return join_path(parent_path(path), new_name)


def validate_rename(path: str, new_name: str) -> str:
    """Return the stripped *new_name* or raise if the rename must be declined."""
    name = new_name.strip()
    if not name:
        raise InvalidTopicName("Topic name must not be empty")
    if name == leaf_name(path):
        raise TopicUnchanged(f"Topic '{path}' is already named '{name}'")
    return name


def rename_topic(notes: Iterable[Note], path: str, new_name: str) -> list[Note]:
    """Rename topic *path* (and every descendant) to end in *new_name*.

    Renaming ``A/B`` to ``C`` moves notes at ``A/B`` and ``A/B/D`` to
    ``A/C`` and ``A/C/D``; ``A`` and unrelated topics are left alone.
    """
    name = validate_rename(path, new_name)
    target = renamed_path(path, name)
    result: list[Note] = []
    for note in notes:
        if in_topic(note.topic, path):
            note = replace(note, topic=target + note.topic[len(path) :])
        result.append(note)
    return result


def delete_topic(notes: Iterable[Note], path: str) -> list[Note]:
    """Drop every note filed under *path* or one of its descendants."""
    return [n for n in notes if not in_topic(n.topic, path)]
