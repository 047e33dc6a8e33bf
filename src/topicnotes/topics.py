"""Topic hierarchy derived from the notes' slash-delimited topic paths.

The forest is an arena: every unique path gets a stable integer index and
nodes refer to their parent and children by index.  A forest is a pure,
disposable function of the note list; rebuild it whenever the notes change.

Usage::

    forest = build_topic_forest(notes)
    for root in forest.roots:
        print(root.name, root.count, [t.name for t in forest.subtopics(root)])

    forest.get("Work/Projects").count   # notes filed exactly at that path
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

from topicnotes.note import Note

SEPARATOR = "/"


@dataclass
class TopicNode:
    """One segment of the topic hierarchy."""

    index: int
    name: str
    #: Full slash-delimited path from the root down to this node
    path: str
    #: Notes whose topic equals ``path`` exactly (descendants not included)
    count: int = 0
    parent: int | None = None
    children: list[int] = field(default_factory=list)

    @property
    def depth(self) -> int:
        return self.path.count(SEPARATOR) + 1

    @property
    def has_subtopics(self) -> bool:
        return bool(self.children)


class TopicForest:
    """Root-level topics and all of their descendants."""

    def __init__(self) -> None:
        self.nodes: list[TopicNode] = []
        self._by_path: dict[str, int] = {}
        self._roots: list[int] = []

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def _ensure(self, name: str, path: str, parent: int | None) -> TopicNode:
        idx = self._by_path.get(path)
        if idx is not None:
            return self.nodes[idx]
        node = TopicNode(index=len(self.nodes), name=name, path=path, parent=parent)
        self.nodes.append(node)
        self._by_path[path] = node.index
        return node

    def _link(self) -> None:
        # Node indexes follow discovery order, so children lists and the
        # root list come out in first-seen order as well.
        for node in self.nodes:
            if node.parent is None:
                self._roots.append(node.index)
            else:
                self.nodes[node.parent].children.append(node.index)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def roots(self) -> list[TopicNode]:
        return [self.nodes[i] for i in self._roots]

    def subtopics(self, node: TopicNode) -> list[TopicNode]:
        return [self.nodes[i] for i in node.children]

    def parent(self, node: TopicNode) -> TopicNode | None:
        return None if node.parent is None else self.nodes[node.parent]

    def get(self, path: str) -> TopicNode | None:
        idx = self._by_path.get(path)
        return None if idx is None else self.nodes[idx]

    def ancestors(self, node: TopicNode) -> list[TopicNode]:
        """Return the chain from the root down to *node*'s parent."""
        chain: list[TopicNode] = []
        current = self.parent(node)
        while current is not None:
            chain.append(current)
            current = self.parent(current)
        chain.reverse()
        return chain

    def paths(self) -> list[str]:
        return [n.path for n in self.nodes]

    def total_count(self, node: TopicNode) -> int:
        """Notes at *node* plus every descendant."""
        return node.count + sum(self.total_count(c) for c in self.subtopics(node))

    def __contains__(self, path: object) -> bool:
        return path in self._by_path

    def __iter__(self) -> Iterator[TopicNode]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    def to_dict(self) -> list[dict[str, Any]]:
        """Nested ``{name, path, count, subtopics}`` form of the forest."""

        def _node(node: TopicNode) -> dict[str, Any]:
            return {
                "name": node.name,
                "path": node.path,
                "count": node.count,
                "subtopics": [_node(c) for c in self.subtopics(node)],
            }

        return [_node(r) for r in self.roots]


def build_topic_forest(notes: Iterable[Note]) -> TopicForest:
    """Derive a :class:`TopicForest` from *notes*.

    Every prefix of every topic path becomes a node, so ancestors without
    notes of their own show up with ``count == 0``.  Counts come from a
    single grouped pass over the exact topic strings.
    """
    forest = TopicForest()
    counts: Counter[str] = Counter()

    for note in notes:
        counts[note.topic] += 1
        prefix = ""
        parent: int | None = None
        for i, segment in enumerate(note.topic.split(SEPARATOR)):
            prefix = segment if i == 0 else f"{prefix}{SEPARATOR}{segment}"
            parent = forest._ensure(segment, prefix, parent).index

    for node in forest.nodes:
        node.count = counts.get(node.path, 0)
    forest._link()
    return forest


def parent_path(path: str) -> str:
    """Return *path* without its last segment (``""`` for a root path)."""
    head, sep, _ = path.rpartition(SEPARATOR)
    return head if sep else ""


def leaf_name(path: str) -> str:
    return path.rpartition(SEPARATOR)[2]


def join_path(parent: str, name: str) -> str:
    return f"{parent}{SEPARATOR}{name}" if parent else name
