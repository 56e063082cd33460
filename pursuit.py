from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
import logging

from config import Config
from events import (
    PURSUER_CAUGHT_EXPLORER,
    PURSUER_HACKING_COMPLETED,
    PURSUER_HACKING_STARTED,
    PURSUER_POSITION_CHANGED,
)
from graph import (
    BLOCKED,
    CORE,
    DORMANT,
    ENTRY,
    PURSUER_PATH,
    Graph,
    distance,
    edge_between,
    repair_node_flags,
)
from visibility import update_visibility

logger = logging.getLogger(__name__)

PURSUING = "pursuing"
HACKING = "hacking"
CAUGHT = "caught"
PAUSED = "paused"


@dataclass
class Pursuer:
    node_id: str
    base_speed: float
    speed: float
    plan: list[str] = field(default_factory=list)
    elapsed: float = 0.0
    progress: float = 0.0
    mode: str = PURSUING
    paused: bool = False
    hack_target: str | None = None
    hack_progress: float = 0.0
    route_found: bool = True
    hack_search_armed: bool = False

    @property
    def status(self) -> str:
        return PAUSED if self.paused else self.mode

    @property
    def caught(self) -> bool:
        return self.mode == CAUGHT


def can_traverse(graph: Graph, cur: str, nxt: str, unblocked: str | None = None) -> bool:
    node = graph.nodes[nxt]
    if node.blocked and nxt != unblocked:
        return False
    edge = edge_between(graph, cur, nxt)
    if edge is not None and edge.state == BLOCKED:
        # a hypothetical repair also clears the edges touching the repaired node
        if unblocked is None or not edge.touches(unblocked):
            return False
    return True


def bfs_parents(graph: Graph, start: str, targets=None, unblocked: str | None = None):
    parent: dict[str, str | None] = {start: None}
    q = deque([start])
    while q:
        cur = q.popleft()
        if targets is not None and cur in targets:
            return parent, cur
        for nxt in graph.nodes[cur].connections:
            if nxt in parent:
                continue
            if not can_traverse(graph, cur, nxt, unblocked):
                continue
            parent[nxt] = cur
            q.append(nxt)
    return parent, None


def reconstruct_path(parent, goal) -> list[str]:
    path = [goal]
    cur = parent[goal]
    while cur is not None:
        path.append(cur)
        cur = parent[cur]
    path.reverse()
    return path


def find_path(graph: Graph, start: str, targets, unblocked: str | None = None) -> list[str]:
    target_set = set(targets)
    if start not in graph.nodes or not target_set:
        return []
    parent, goal = bfs_parents(graph, start, target_set, unblocked)
    if goal is None:
        return []
    return reconstruct_path(parent, goal)


def reachable_from(graph: Graph, start: str) -> set[str]:
    parent, _ = bfs_parents(graph, start)
    return set(parent)


def find_hack_target(graph: Graph, node_id: str, explorer_path) -> str | None:
    current = graph.nodes.get(node_id)
    if current is None or not explorer_path:
        return None
    blocked = [nid for nid, n in graph.nodes.items() if n.blocked and not n.decorative]
    if not blocked:
        return None
    if current.blocked:
        return node_id

    for nid in current.connections:
        if graph.nodes[nid].blocked and find_path(graph, node_id, explorer_path, unblocked=nid):
            return nid

    reachable = reachable_from(graph, node_id)
    best = None
    best_dist = None
    for bid in blocked:
        node = graph.nodes[bid]
        d = distance(current, node)
        if best_dist is not None and d >= best_dist:
            continue
        if any(n in reachable and not graph.nodes[n].blocked for n in node.connections):
            best = bid
            best_dist = d
    return best


def speed_multiplier(cfg: Config, pursuer: Pursuer) -> float:
    return 1.0 + pursuer.elapsed * cfg.pursuer_speed_ramp


def current_speed(cfg: Config, pursuer: Pursuer) -> float:
    return min(pursuer.base_speed * speed_multiplier(cfg, pursuer), cfg.pursuer_max_speed)


def spawn_node(graph: Graph) -> str:
    entry = graph.nodes[graph.entry_id]
    best = graph.core_id
    best_dist = 0.0
    for node in graph.nodes.values():
        if node.decorative or node.kind in (ENTRY, CORE):
            continue
        d = distance(node, entry)
        if d > best_dist:
            best_dist = d
            best = node.id
    return best


def spawn_pursuer(cfg: Config, graph: Graph) -> Pursuer:
    return Pursuer(
        node_id=spawn_node(graph),
        base_speed=cfg.pursuer_base_speed,
        speed=cfg.pursuer_base_speed,
    )


def clear_path_marks(graph: Graph) -> None:
    for edge in graph.edges.values():
        if edge.state == PURSUER_PATH:
            edge.state = DORMANT


def mark_pursuer_path(graph: Graph, pursuer: Pursuer) -> None:
    clear_path_marks(graph)
    prev = pursuer.node_id
    for nid in pursuer.plan:
        edge = edge_between(graph, prev, nid)
        if edge is not None and edge.state == DORMANT:
            edge.state = PURSUER_PATH
        prev = nid


def abandon_hack(pursuer: Pursuer) -> None:
    logger.debug("pursuer abandons hack of %s", pursuer.hack_target)
    pursuer.mode = PURSUING
    pursuer.hack_target = None
    pursuer.hack_progress = 0.0


def replan(cfg: Config, state) -> list[str]:
    p = state.pursuer
    graph = state.graph
    if p.mode == CAUGHT:
        return p.plan

    if not state.explorer_path:
        p.plan = []
        p.route_found = True
    else:
        path = find_path(graph, p.node_id, state.explorer_path)
        p.plan = path[1:]
        p.route_found = bool(path)
        if not path:
            p.hack_search_armed = True

    if p.mode == HACKING:
        target = graph.nodes.get(p.hack_target)
        if p.route_found or target is None or not target.blocked:
            abandon_hack(p)

    if not p.plan:
        p.progress = 0.0
    if cfg.show_pursuer_path:
        mark_pursuer_path(graph, p)
    logger.debug("replan from %s: %s", p.node_id, p.plan)
    return p.plan


def catch_explorer(state) -> None:
    p = state.pursuer
    p.mode = CAUGHT
    p.plan = []
    p.progress = 0.0
    logger.info("pursuer caught the explorer at %s", p.node_id)
    state.bus.emit(PURSUER_CAUGHT_EXPLORER, node_id=p.node_id)


def start_hacking(cfg: Config, state, target: str) -> None:
    p = state.pursuer
    p.mode = HACKING
    p.hack_target = target
    p.hack_progress = 0.0
    p.plan = []
    p.progress = 0.0
    logger.info("pursuer at %s starts hacking %s", p.node_id, target)
    state.bus.emit(PURSUER_HACKING_STARTED, node_id=target)


def complete_hacking(cfg: Config, state) -> None:
    p = state.pursuer
    target = p.hack_target
    p.mode = PURSUING
    p.hack_target = None
    p.hack_progress = 0.0
    repair_node_flags(state.graph, target)
    logger.info("pursuer repaired %s", target)
    state.bus.emit(PURSUER_HACKING_COMPLETED, node_id=target)
    replan(cfg, state)
    update_visibility(cfg, state)


def advance_hop(cfg: Config, state) -> None:
    p = state.pursuer
    p.node_id = p.plan.pop(0)
    state.bus.emit(PURSUER_POSITION_CHANGED, node_id=p.node_id, plan=list(p.plan))
    if p.node_id in state.explorer_path:
        catch_explorer(state)
        return
    replan(cfg, state)


def update_pursuer(cfg: Config, state, dt: float) -> None:
    p = state.pursuer
    if p.paused or dt <= 0.0:
        return

    # the ramp keeps running through an encounter
    p.elapsed += dt
    p.speed = current_speed(cfg, p)
    if p.mode == CAUGHT:
        return

    if p.mode == HACKING:
        p.hack_progress += dt
        if p.hack_progress >= cfg.pursuer_hack_sec:
            complete_hacking(cfg, state)
        return

    if state.explorer_path and p.node_id in state.explorer_path:
        catch_explorer(state)
        return

    if not p.route_found:
        if p.hack_search_armed and state.explorer_path:
            p.hack_search_armed = False
            target = find_hack_target(state.graph, p.node_id, state.explorer_path)
            if target is not None:
                start_hacking(cfg, state, target)
            else:
                logger.info("pursuer at %s has no route and nothing to hack", p.node_id)
        return

    if not p.plan:
        return

    p.progress += p.speed * dt
    if p.progress >= 1.0:
        p.progress -= 1.0
        advance_hop(cfg, state)


def resolve_encounter(cfg: Config, state) -> bool:
    p = state.pursuer
    if p.mode != CAUGHT:
        return False
    graph = state.graph
    on_path = set(state.explorer_path)
    cur = p.node_id
    for _ in range(cfg.pursuer_pushback_hops):
        candidates = [
            nid
            for nid in graph.nodes[cur].connections
            if nid not in on_path and can_traverse(graph, cur, nid)
        ]
        if not candidates:
            break
        cur = state.rng.choice(candidates)

    p.node_id = cur
    p.mode = PURSUING
    p.plan = []
    p.progress = 0.0
    logger.info("pursuer pushed back to %s", cur)
    state.bus.emit(PURSUER_POSITION_CHANGED, node_id=cur, plan=[])
    replan(cfg, state)
    return True


def reset_to_spawn(cfg: Config, state) -> None:
    p = state.pursuer
    p.node_id = spawn_node(state.graph)
    p.plan = []
    p.progress = 0.0
    p.mode = PURSUING
    p.hack_target = None
    p.hack_progress = 0.0
    p.route_found = True
    p.hack_search_armed = False

    multiplier = max(1.0, speed_multiplier(cfg, p) * cfg.pursuer_reset_speed_decay)
    if cfg.pursuer_speed_ramp > 0.0:
        p.elapsed = (multiplier - 1.0) / cfg.pursuer_speed_ramp
    else:
        p.elapsed = 0.0
    p.speed = current_speed(cfg, p)
    state.bus.emit(PURSUER_POSITION_CHANGED, node_id=p.node_id, plan=[])
