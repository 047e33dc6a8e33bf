"""Drill-down navigation through a :class:`~topicnotes.topics.TopicForest`."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

from topicnotes.topics import SEPARATOR, TopicForest, TopicNode


@dataclass(frozen=True)
class Frame:
    """One navigation level: the topics listed and the path that led here."""

    topics: tuple[TopicNode, ...]
    path: str


class NavigationChange(NamedTuple):
    #: Whether the caller should keep showing drill-down/back affordances
    has_navigation: bool
    path: str


def truncate_path(path: str) -> str:
    """Shorten long paths for display: ``a/b/c/d`` -> ``a/../d``."""
    parts = path.split(SEPARATOR)
    if len(parts) <= 2:
        return path
    return f"{parts[0]}{SEPARATOR}..{SEPARATOR}{parts[-1]}"


class NavigationStack:
    """Stack of frames from the forest roots down to the current topic.

    The stack never becomes empty: the root frame (all root topics, empty
    path) stays at the bottom.
    """

    def __init__(self, forest: TopicForest) -> None:
        self.reset(forest)

    def reset(self, forest: TopicForest) -> None:
        """Drop every frame and start over at the roots of *forest*."""
        self._forest = forest
        self._frames: list[Frame] = [Frame(tuple(forest.roots), "")]

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def enter(self, node: TopicNode, full_path: str | None = None) -> NavigationChange:
        """Descend into *node*, which must be listed in the current frame."""
        # Resolve by path so nodes from an older forest map onto the current one
        listed = next((t for t in self.current.topics if t.path == node.path), None)
        if listed is None:
            raise ValueError(f"Topic '{node.path}' is not listed at '{self.path}'")
        path = listed.path if full_path is None else full_path
        subtopics = tuple(self._forest.subtopics(listed))
        self._frames.append(Frame(subtopics, path))
        return NavigationChange(bool(subtopics), path)

    def back(self) -> NavigationChange:
        """Pop one level; at the root this only reports an empty path."""
        if len(self._frames) <= 1:
            return NavigationChange(False, "")
        self._frames.pop()
        return NavigationChange(len(self._frames) > 1, self.current.path)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def forest(self) -> TopicForest:
        return self._forest

    @property
    def frames(self) -> list[Frame]:
        return list(self._frames)

    @property
    def current(self) -> Frame:
        return self._frames[-1]

    @property
    def path(self) -> str:
        return self.current.path

    @property
    def topics(self) -> tuple[TopicNode, ...]:
        return self.current.topics

    @property
    def depth(self) -> int:
        """Number of frames above the root frame."""
        return len(self._frames) - 1

    @property
    def at_root(self) -> bool:
        return len(self._frames) == 1

    @property
    def breadcrumbs(self) -> list[str]:
        return [f.path for f in self._frames if f.path]

    @property
    def truncated_path(self) -> str:
        return truncate_path(self.path)
