from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
import logging

from config import Config
from events import VISIBILITY_CHANGED
from graph import Graph, edge_between, is_edge_passable

logger = logging.getLogger(__name__)


@dataclass
class Vision:
    observer: str | None = None
    nodes: set[str] = field(default_factory=set)
    edges: set[str] = field(default_factory=set)


def visible_nodes(graph: Graph, observer: str, radius: int) -> set[str]:
    if observer not in graph.nodes:
        return set()
    seen = {observer}
    q = deque([(observer, 0)])
    while q:
        cur, depth = q.popleft()
        if depth >= radius:
            continue
        for nxt in graph.nodes[cur].connections:
            if nxt in seen:
                continue
            edge = edge_between(graph, cur, nxt)
            if edge is None or not is_edge_passable(edge):
                continue
            seen.add(nxt)
            q.append((nxt, depth + 1))
    return seen


def visible_edges(graph: Graph, nodes: set[str]) -> set[str]:
    return {
        eid
        for eid, edge in graph.edges.items()
        if edge.a in nodes and edge.b in nodes
    }


def diff_visibility(before: set[str], after: set[str]) -> tuple[list[str], list[str]]:
    shown = sorted(after - before)
    hidden = sorted(before - after)
    return shown, hidden


def update_visibility(cfg: Config, state) -> list[tuple[str, bool]]:
    vision = state.vision
    observer = state.explorer_path[-1] if state.explorer_path else None
    if observer is None:
        nodes: set[str] = set()
    else:
        nodes = visible_nodes(state.graph, observer, cfg.vision_radius)
    edges = visible_edges(state.graph, nodes)

    changes: list[tuple[str, bool]] = []
    for element, before, after in (("node", vision.nodes, nodes), ("edge", vision.edges, edges)):
        shown, hidden = diff_visibility(before, after)
        for element_id in shown:
            changes.append((element_id, True))
            state.bus.emit(VISIBILITY_CHANGED, id=element_id, visible=True, element=element)
        for element_id in hidden:
            changes.append((element_id, False))
            state.bus.emit(VISIBILITY_CHANGED, id=element_id, visible=False, element=element)

    vision.observer = observer
    vision.nodes = nodes
    vision.edges = edges
    if changes:
        logger.debug("visibility from %s: %d nodes, %d changes", observer, len(nodes), len(changes))
    return changes
