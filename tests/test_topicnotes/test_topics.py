"""Unit tests for topicnotes.topics (forest derivation)."""

from collections import Counter

import pytest

from topicnotes.topics import (
    build_topic_forest,
    join_path,
    leaf_name,
    parent_path,
)

from .conftest import make_note


# ---------------------------------------------------------------------------
# Structure
# ---------------------------------------------------------------------------


class TestForestStructure:
    def test_roots_in_first_seen_order(self, notes):
        forest = build_topic_forest(notes)
        assert [r.name for r in forest.roots] == ["Work", "Personal"]

    def test_subtopics_in_first_seen_order(self, notes):
        forest = build_topic_forest(notes)
        work = forest.get("Work")
        assert [t.name for t in forest.subtopics(work)] == ["Projects", "Meetings"]
        projects = forest.get("Work/Projects")
        assert [t.name for t in forest.subtopics(projects)] == ["Web", "Backend"]

    def test_order_is_not_alphabetical(self):
        forest = build_topic_forest([make_note("1", "Zeta"), make_note("2", "Alpha")])
        assert [r.name for r in forest.roots] == ["Zeta", "Alpha"]

    def test_same_leaf_name_under_different_parents_are_distinct(self, notes):
        forest = build_topic_forest(notes)
        assert forest.get("Work/Meetings") is not forest.get("Personal/Meetings")
        assert forest.get("Work/Meetings").count == 1
        assert forest.get("Personal/Meetings").count == 1

    def test_paths_are_unique(self, notes):
        forest = build_topic_forest(notes)
        paths = forest.paths()
        assert len(paths) == len(set(paths))

    def test_sibling_names_are_unique(self, notes):
        forest = build_topic_forest(notes)
        for node in forest:
            names = [c.name for c in forest.subtopics(node)]
            assert len(names) == len(set(names))

    def test_node_path_is_ancestor_names_joined(self, notes):
        forest = build_topic_forest(notes)
        for node in forest:
            names = [a.name for a in forest.ancestors(node)] + [node.name]
            assert "/".join(names) == node.path

    def test_parent_links(self, notes):
        forest = build_topic_forest(notes)
        web = forest.get("Work/Projects/Web")
        assert forest.parent(web).path == "Work/Projects"
        assert forest.parent(forest.get("Work")) is None

    def test_empty_note_list(self):
        forest = build_topic_forest([])
        assert forest.roots == []
        assert len(forest) == 0
        assert forest.to_dict() == []


# ---------------------------------------------------------------------------
# Counts
# ---------------------------------------------------------------------------


class TestForestCounts:
    def test_counts_are_exact_matches(self, notes):
        forest = build_topic_forest(notes)
        expected = Counter(n.topic for n in notes)
        for topic, count in expected.items():
            assert forest.get(topic).count == count

    def test_distinct_topics_all_present(self, notes):
        forest = build_topic_forest(notes)
        assert {n.topic for n in notes} <= set(forest.paths())

    def test_intermediate_ancestor_has_zero_count(self):
        forest = build_topic_forest([make_note("1", "Work/Projects/Web")])
        assert forest.get("Work").count == 0
        assert forest.get("Work/Projects").count == 0
        assert forest.get("Work/Projects/Web").count == 1

    def test_parent_count_excludes_descendants(self, notes):
        forest = build_topic_forest(notes)
        # Two notes sit directly at Work; four more live below it.
        assert forest.get("Work").count == 2

    def test_total_count_includes_descendants(self, notes):
        forest = build_topic_forest(notes)
        assert forest.total_count(forest.get("Work")) == 5

    def test_no_node_without_notes_or_descendants(self, notes):
        forest = build_topic_forest(notes)
        for node in forest:
            assert node.count > 0 or node.has_subtopics


# ---------------------------------------------------------------------------
# Queries and serialisation
# ---------------------------------------------------------------------------


class TestForestQueries:
    def test_get_unknown_path(self, notes):
        assert build_topic_forest(notes).get("Nope") is None

    def test_contains(self, notes):
        forest = build_topic_forest(notes)
        assert "Work/Projects" in forest
        assert "Projects" not in forest

    def test_depth(self, notes):
        forest = build_topic_forest(notes)
        assert forest.get("Work").depth == 1
        assert forest.get("Work/Projects/Web").depth == 3

    def test_to_dict_nested(self):
        forest = build_topic_forest([make_note("1", "A/B"), make_note("2", "A")])
        assert forest.to_dict() == [
            {
                "name": "A",
                "path": "A",
                "count": 1,
                "subtopics": [{"name": "B", "path": "A/B", "count": 1, "subtopics": []}],
            }
        ]

    def test_rebuild_is_fresh(self, notes):
        first = build_topic_forest(notes)
        second = build_topic_forest(notes[:1])
        assert len(second) == 1
        assert len(first) > 1


# ---------------------------------------------------------------------------
# Malformed paths (documented, not rejected)
# ---------------------------------------------------------------------------


class TestMalformedPaths:
    def test_empty_topic_is_single_empty_root(self):
        forest = build_topic_forest([make_note("1", "")])
        assert len(forest.roots) == 1
        root = forest.roots[0]
        assert root.name == ""
        assert root.path == ""
        assert root.count == 1

    def test_empty_inner_segment(self):
        forest = build_topic_forest([make_note("1", "A//B")])
        assert forest.paths() == ["A", "A/", "A//B"]
        assert forest.get("A/").name == ""
        assert forest.get("A//B").count == 1


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------


class TestPathHelpers:
    @pytest.mark.parametrize(
        "path, expected",
        [("A/B/C", "A/B"), ("A", ""), ("A/B", "A")],
    )
    def test_parent_path(self, path, expected):
        assert parent_path(path) == expected

    def test_leaf_name(self):
        assert leaf_name("Work/Projects/Web") == "Web"
        assert leaf_name("Work") == "Work"

    def test_join_path(self):
        assert join_path("", "Work") == "Work"
        assert join_path("Work", "Meetings") == "Work/Meetings"
