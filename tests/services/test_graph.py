"""Tests for the hierarchy graph builder."""

from __future__ import annotations

from collections import Counter

from tests._fixtures.project_builder import make_file
from vibeflow.services.graph import ROOT_ID, HierarchyGraphBuilder, build_hierarchy_graph


def _incoming(graph) -> Counter:
    return Counter(edge.target for edge in graph.edges)


def test_empty_project_has_only_root() -> None:
    graph = build_hierarchy_graph([])
    assert [(n.id, n.label) for n in graph.nodes] == [("root", "Project Root")]
    assert graph.edges == []


def test_shared_directories_collapse_into_one_node() -> None:
    graph = build_hierarchy_graph([make_file("a/b/x.js"), make_file("a/b/y.js")])

    ids = [n.id for n in graph.nodes]
    assert ids.count("dir:a") == 1
    assert ids.count("dir:a/b") == 1
    assert ids == ["root", "dir:a", "dir:a/b", "file:a/b/x.js", "file:a/b/y.js"]
    assert [e.id for e in graph.edges] == [
        "root->dir:a",
        "dir:a->dir:a/b",
        "dir:a/b->file:a/b/x.js",
        "dir:a/b->file:a/b/y.js",
    ]


def test_labels_are_bare_segment_names() -> None:
    graph = build_hierarchy_graph([make_file("src/lib/util.ts")])
    labels = {n.id: n.label for n in graph.nodes}
    assert labels["dir:src/lib"] == "lib"
    assert labels["file:src/lib/util.ts"] == "util.ts"


def test_graph_is_a_single_rooted_tree() -> None:
    paths = [
        "README.md",
        "src/main.py",
        "src/pkg/__init__.py",
        "src/pkg/core.py",
        "tests/test_core.py",
        "src/pkg/sub/deep.py",
    ]
    graph = build_hierarchy_graph([make_file(p) for p in paths])

    incoming = _incoming(graph)
    node_ids = {n.id for n in graph.nodes}
    roots = [nid for nid in node_ids if incoming[nid] == 0]
    assert roots == [ROOT_ID]
    assert all(incoming[nid] == 1 for nid in node_ids - {ROOT_ID})
    assert len(graph.edges) == len(graph.nodes) - 1
    assert len(graph.nodes) <= sum(len(p.split("/")) for p in paths) + 1


def test_file_and_directory_with_same_prefix_stay_distinct() -> None:
    graph = build_hierarchy_graph([make_file("docs"), make_file("docs/index.md")])
    ids = {n.id for n in graph.nodes}
    assert {"file:docs", "dir:docs", "file:docs/index.md"} <= ids


def test_repeated_insertion_is_idempotent() -> None:
    builder = HierarchyGraphBuilder()
    builder.add_path("a/b.py")
    builder.add_path("a/b.py")
    builder.ensure_edge("root", "dir:a")

    graph = builder.build()

    assert len(graph.nodes) == 3
    assert len(graph.edges) == 2
