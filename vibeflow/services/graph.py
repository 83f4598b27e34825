"""The project's directory tree as nodes and edges.

Every path segment becomes one node identified by its kind and cumulative
path prefix (``dir:src``, ``dir:src/lib``, ``file:src/lib/a.ts``), so files
that share ancestors share the same directory nodes. Edges run from parent to
child and are deduplicated by ``source->target``.
"""

from __future__ import annotations

from vibeflow.models.project import GraphEdge, GraphNode, HierarchyGraph, ProjectFile

ROOT_ID = "root"
ROOT_LABEL = "Project Root"


class HierarchyGraphBuilder:
    def __init__(self) -> None:
        self._nodes: dict[str, GraphNode] = {}
        self._edges: dict[str, GraphEdge] = {}
        self.ensure_node(ROOT_ID, ROOT_LABEL)

    def ensure_node(self, node_id: str, label: str) -> None:
        if node_id not in self._nodes:
            self._nodes[node_id] = GraphNode(id=node_id, label=label)

    def ensure_edge(self, source: str, target: str) -> None:
        edge_id = f"{source}->{target}"
        if edge_id not in self._edges:
            self._edges[edge_id] = GraphEdge(id=edge_id, source=source, target=target)

    def add_path(self, path: str) -> None:
        parts = path.split("/")
        parent_id = ROOT_ID
        for index, part in enumerate(parts):
            prefix = "file" if index == len(parts) - 1 else "dir"
            node_id = f"{prefix}:{'/'.join(parts[: index + 1])}"
            self.ensure_node(node_id, part)
            self.ensure_edge(parent_id, node_id)
            parent_id = node_id

    def build(self) -> HierarchyGraph:
        return HierarchyGraph(nodes=list(self._nodes.values()), edges=list(self._edges.values()))


def build_hierarchy_graph(files: list[ProjectFile]) -> HierarchyGraph:
    builder = HierarchyGraphBuilder()
    for f in files:
        builder.add_path(f.path)
    return builder.build()
