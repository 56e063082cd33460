from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
import math


# Node kinds
ENTRY = "entry"
CORE = "core"
JUNCTION = "junction"
NORMAL = "normal"

# Edge states
DORMANT = "dormant"
ACTIVE = "active"
SOLVING = "solving"
BLOCKED = "blocked"
PURSUER_PATH = "pursuer_path"
FAILED = "failed"

EDGE_STATES = (DORMANT, ACTIVE, SOLVING, BLOCKED, PURSUER_PATH, FAILED)


@dataclass
class Node:
    id: str
    pos: tuple[float, ...]
    kind: str = NORMAL
    activated: bool = False
    blocked: bool = False
    connections: list[str] = field(default_factory=list)
    decorative: bool = False


@dataclass
class Edge:
    id: str
    a: str
    b: str
    state: str = DORMANT
    difficulty: int = 1
    unlocked: bool = False
    decorative: bool = False
    gated: bool = False
    gate_open: bool = True

    def other(self, node_id: str) -> str:
        return self.b if node_id == self.a else self.a

    def touches(self, node_id: str) -> bool:
        return node_id == self.a or node_id == self.b


@dataclass
class Graph:
    nodes: dict[str, Node] = field(default_factory=dict)
    edges: dict[str, Edge] = field(default_factory=dict)
    entry_id: str | None = None
    core_id: str | None = None
    extent: tuple[float, ...] = (0.0, 0.0)
    first_edge_id: str | None = None
    pair_index: dict[frozenset, str] = field(default_factory=dict)
    node_edges: dict[str, list[str]] = field(default_factory=dict)


def add_node(graph: Graph, node: Node) -> Node:
    graph.nodes[node.id] = node
    graph.node_edges.setdefault(node.id, [])
    return node


def add_edge(graph: Graph, a: str, b: str, edge_id: str | None = None, **attrs) -> Edge | None:
    if a == b:
        return None
    key = frozenset((a, b))
    if key in graph.pair_index:
        return None
    if edge_id is None:
        edge_id = f"e_{len(graph.edges)}"
    edge = Edge(id=edge_id, a=a, b=b, **attrs)
    graph.edges[edge_id] = edge
    graph.pair_index[key] = edge_id
    graph.nodes[a].connections.append(b)
    graph.nodes[b].connections.append(a)
    graph.node_edges.setdefault(a, []).append(edge_id)
    graph.node_edges.setdefault(b, []).append(edge_id)
    return edge


def edge_between(graph: Graph, a: str, b: str) -> Edge | None:
    edge_id = graph.pair_index.get(frozenset((a, b)))
    if edge_id is None:
        return None
    return graph.edges[edge_id]


def edges_for_node(graph: Graph, node_id: str) -> list[Edge]:
    return [graph.edges[eid] for eid in graph.node_edges.get(node_id, [])]


def degree(graph: Graph, node_id: str) -> int:
    return len(graph.node_edges.get(node_id, []))


def distance(a: Node, b: Node) -> float:
    return math.dist(a.pos, b.pos)


def structural_node_ids(graph: Graph) -> list[str]:
    return [nid for nid, node in graph.nodes.items() if not node.decorative]


def is_edge_passable(edge: Edge) -> bool:
    if edge.state == BLOCKED:
        return False
    if edge.gated and not edge.gate_open:
        return False
    return True


def hop_distances(graph: Graph, start: str) -> dict[str, int]:
    """Structural hop distance from start, ignoring every mutable flag."""
    dist = {start: 0}
    q = deque([start])
    while q:
        cur = q.popleft()
        for nxt in graph.nodes[cur].connections:
            if nxt in dist:
                continue
            dist[nxt] = dist[cur] + 1
            q.append(nxt)
    return dist


def connected_components(graph: Graph, node_ids=None) -> list[list[str]]:
    if node_ids is None:
        node_ids = list(graph.nodes)
    allowed = set(node_ids)
    seen: set[str] = set()
    components = []
    for start in node_ids:
        if start in seen:
            continue
        component = []
        q = deque([start])
        seen.add(start)
        while q:
            cur = q.popleft()
            component.append(cur)
            for nxt in graph.nodes[cur].connections:
                if nxt in allowed and nxt not in seen:
                    seen.add(nxt)
                    q.append(nxt)
        components.append(component)
    return components


def block_node_flags(graph: Graph, node_id: str) -> list[str]:
    graph.nodes[node_id].blocked = True
    changed = []
    for edge in edges_for_node(graph, node_id):
        if edge.state != BLOCKED:
            edge.state = BLOCKED
            changed.append(edge.id)
    return changed


def repair_node_flags(graph: Graph, node_id: str) -> list[str]:
    graph.nodes[node_id].blocked = False
    changed = []
    for edge in edges_for_node(graph, node_id):
        if edge.state == BLOCKED:
            edge.state = DORMANT
            changed.append(edge.id)
    return changed


def reset_flags(graph: Graph) -> None:
    for node in graph.nodes.values():
        node.activated = node.id == graph.entry_id
        node.blocked = False
    for edge in graph.edges.values():
        edge.state = DORMANT
        edge.unlocked = edge.id == graph.first_edge_id or edge.decorative
        if edge.gated:
            edge.gate_open = False


def flag_snapshot(graph: Graph) -> tuple[dict, dict]:
    nodes = {nid: (n.activated, n.blocked) for nid, n in graph.nodes.items()}
    edges = {eid: (e.state, e.unlocked, e.gate_open) for eid, e in graph.edges.items()}
    return nodes, edges
