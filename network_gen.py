from __future__ import annotations

import logging
import math
import random

from config import Config
from graph import (
    CORE,
    ENTRY,
    JUNCTION,
    NORMAL,
    Graph,
    Node,
    add_edge,
    add_node,
    connected_components,
    degree,
    distance,
    edge_between,
    hop_distances,
    reset_flags,
)

logger = logging.getLogger(__name__)

# R2 low-discrepancy sequence (plastic number)
R2_G = 1.32471795724474602596
R2_A1 = 1.0 / R2_G
R2_A2 = 1.0 / (R2_G * R2_G)
GOLDEN_RATIO = (1.0 + math.sqrt(5.0)) / 2.0

# (theta, phi) in units of pi for each hop of the simplified main path
MAIN_PATH_ANGLES = ((0.3, 0.4), (0.7, 0.6), (1.2, 0.5), (1.8, 0.3))


def r2_point(i: int) -> tuple[float, float]:
    return (0.5 + R2_A1 * i) % 1.0, (0.5 + R2_A2 * i) % 1.0


def nearest_clearance(pos, placed) -> float:
    if not placed:
        return math.inf
    return min(math.dist(pos, p) for p in placed)


def place_nodes(cfg: Config, rng: random.Random) -> list[tuple[float, float]]:
    pad = cfg.placement_padding
    inner_w = max(1.0, cfg.network_width - 2 * pad)
    inner_h = max(1.0, cfg.network_height - 2 * pad)
    spacing = math.sqrt(inner_w * inner_h / max(1, cfg.node_count))
    jitter = spacing * cfg.placement_jitter
    half_budget = max(1, cfg.placement_attempts // 2)

    placed: list[tuple[float, float]] = []
    crowded = 0
    for i in range(cfg.node_count):
        u, v = r2_point(i)
        best = None
        best_clear = -1.0
        for attempt in range(max(1, cfg.placement_attempts)):
            if attempt < half_budget:
                x = pad + u * inner_w + rng.uniform(-jitter, jitter)
                y = pad + v * inner_h + rng.uniform(-jitter, jitter)
            else:
                # the lattice spot is crowded, fall back to anywhere in bounds
                x = pad + rng.random() * inner_w
                y = pad + rng.random() * inner_h
            x = min(max(x, pad), pad + inner_w)
            y = min(max(y, pad), pad + inner_h)
            clear = nearest_clearance((x, y), placed)
            if clear > best_clear:
                best_clear = clear
                best = (x, y)
            if clear >= cfg.min_node_distance:
                break
        if best_clear < cfg.min_node_distance:
            crowded += 1
        placed.append(best)
    if crowded:
        logger.debug("placement accepted %d crowded nodes", crowded)
    return placed


def crowded_direction(graph: Graph, node: Node, other: Node, max_angle: float) -> bool:
    vec = [b - a for a, b in zip(node.pos, other.pos)]
    vlen = math.hypot(*vec)
    if vlen <= 1e-9:
        return True
    for nid in node.connections:
        n = graph.nodes[nid]
        evec = [b - a for a, b in zip(node.pos, n.pos)]
        elen = math.hypot(*evec)
        if elen <= 1e-9:
            continue
        cos = sum(p * q for p, q in zip(vec, evec)) / (vlen * elen)
        if math.acos(max(-1.0, min(1.0, cos))) < max_angle:
            return True
    return False


def create_edges(cfg: Config, graph: Graph, ids: list[str], rng: random.Random) -> None:
    max_dist = cfg.min_node_distance * cfg.edge_distance_mult
    max_angle = math.radians(cfg.edge_crowded_deg)
    span = max(1, cfg.max_connections - cfg.min_connections)

    for nid in ids:
        node = graph.nodes[nid]
        target = min(cfg.max_connections, cfg.min_connections + rng.randrange(span))
        nearby = []
        for oid in ids:
            if oid == nid:
                continue
            d = distance(node, graph.nodes[oid])
            if d < max_dist:
                nearby.append((d, oid))
        nearby.sort()

        while degree(graph, nid) < target:
            best = None
            best_cost = None
            for d, oid in nearby:
                if degree(graph, oid) >= cfg.max_connections:
                    continue
                if edge_between(graph, nid, oid) is not None:
                    continue
                cost = d
                if crowded_direction(graph, node, graph.nodes[oid], max_angle):
                    cost *= 1.0 + cfg.edge_angle_penalty
                if best_cost is None or cost < best_cost:
                    best_cost = cost
                    best = oid
            if best is None:
                break
            add_edge(graph, nid, best)


def top_up_degrees(cfg: Config, graph: Graph, ids: list[str]) -> None:
    for nid in ids:
        if degree(graph, nid) >= cfg.min_connections:
            continue
        node = graph.nodes[nid]
        candidates = sorted(
            (distance(node, graph.nodes[oid]), oid)
            for oid in ids
            if oid != nid and degree(graph, oid) < cfg.max_connections
        )
        for _, oid in candidates:
            if degree(graph, nid) >= cfg.min_connections:
                break
            add_edge(graph, nid, oid)
        if degree(graph, nid) < cfg.min_connections:
            logger.warning("node %s left with degree %d", nid, degree(graph, nid))


def nearest_pair(cfg: Config, graph: Graph, first: list[str], second: list[str]):
    best = None
    best_dist = None
    best_spare = None
    best_spare_dist = None
    for aid in first:
        a = graph.nodes[aid]
        a_spare = degree(graph, aid) < cfg.max_connections
        for bid in second:
            d = distance(a, graph.nodes[bid])
            if best_dist is None or d < best_dist:
                best_dist = d
                best = (aid, bid)
            if a_spare and degree(graph, bid) < cfg.max_connections:
                if best_spare_dist is None or d < best_spare_dist:
                    best_spare_dist = d
                    best_spare = (aid, bid)
    if best_spare is not None:
        return best_spare
    logger.warning("no spare-degree pair between components, exceeding max_connections")
    return best


def connect_components(cfg: Config, graph: Graph, ids: list[str]) -> int:
    merges = 0
    while True:
        components = connected_components(graph, ids)
        if len(components) <= 1:
            return merges
        components.sort(key=len, reverse=True)
        aid, bid = nearest_pair(cfg, graph, components[0], components[1])
        add_edge(graph, aid, bid)
        merges += 1


def assign_special_nodes(graph: Graph, ids: list[str]) -> tuple[str, str]:
    dims = len(graph.nodes[ids[0]].pos)
    centroid = tuple(sum(graph.nodes[nid].pos[k] for nid in ids) / len(ids) for k in range(dims))
    entry_id = max(ids, key=lambda nid: math.dist(graph.nodes[nid].pos, centroid))

    hops = hop_distances(graph, entry_id)
    entry = graph.nodes[entry_id]
    core_id = max(
        (nid for nid in ids if nid != entry_id),
        key=lambda nid: (hops.get(nid, -1), distance(entry, graph.nodes[nid])),
    )

    entry.kind = ENTRY
    graph.nodes[core_id].kind = CORE
    graph.entry_id = entry_id
    graph.core_id = core_id
    return entry_id, core_id


def enforce_separation(cfg: Config, graph: Graph, ids: list[str]) -> None:
    pad = cfg.placement_padding
    lo_x, hi_x = pad, cfg.network_width - pad
    lo_y, hi_y = pad, cfg.network_height - pad
    min_dist = cfg.min_node_distance

    for _ in range(cfg.separation_passes):
        moved = False
        for i, aid in enumerate(ids):
            for bid in ids[i + 1:]:
                a = graph.nodes[aid]
                b = graph.nodes[bid]
                dx = b.pos[0] - a.pos[0]
                dy = b.pos[1] - a.pos[1]
                d = math.hypot(dx, dy)
                if d >= min_dist:
                    continue
                if d <= 1e-6:
                    dx, dy, d = 1.0, 0.0, 1.0
                push = (min_dist - d + cfg.separation_epsilon) / 2.0
                ux, uy = dx / d, dy / d
                a.pos = (
                    min(max(a.pos[0] - ux * push, lo_x), hi_x),
                    min(max(a.pos[1] - uy * push, lo_y), hi_y),
                )
                b.pos = (
                    min(max(b.pos[0] + ux * push, lo_x), hi_x),
                    min(max(b.pos[1] + uy * push, lo_y), hi_y),
                )
                moved = True
        if not moved:
            return
    logger.warning("separation pass budget exhausted, some pairs closer than %.1f", min_dist)


def relax_layout(cfg: Config, graph: Graph, ids: list[str]) -> None:
    if cfg.force_iterations <= 0:
        return
    pad = cfg.placement_padding
    lo_x, hi_x = pad, cfg.network_width - pad
    lo_y, hi_y = pad, cfg.network_height - pad
    vel = {nid: [0.0, 0.0] for nid in ids}

    for _ in range(cfg.force_iterations):
        for nid in ids:
            node = graph.nodes[nid]
            x, y = node.pos
            fx = 0.0
            fy = 0.0
            for oid in ids:
                if oid == nid:
                    continue
                ox, oy = graph.nodes[oid].pos
                dx = x - ox
                dy = y - oy
                d = max(1.0, math.hypot(dx, dy))
                force = cfg.force_repulsion / (d * d)
                fx += dx / d * force
                fy += dy / d * force
            for oid in node.connections:
                ox, oy = graph.nodes[oid].pos
                fx += (ox - x) * cfg.force_attraction
                fy += (oy - y) * cfg.force_attraction
            v = vel[nid]
            v[0] = (v[0] + fx) * cfg.force_damping
            v[1] = (v[1] + fy) * cfg.force_damping

        total = 0.0
        for nid in ids:
            node = graph.nodes[nid]
            v = vel[nid]
            node.pos = (
                min(max(node.pos[0] + v[0], lo_x), hi_x),
                min(max(node.pos[1] + v[1], lo_y), hi_y),
            )
            total += abs(v[0]) + abs(v[1])
        if total / len(ids) < cfg.force_min_movement:
            break

    enforce_separation(cfg, graph, ids)


def mark_junctions(graph: Graph) -> None:
    for node in graph.nodes.values():
        if node.kind == NORMAL and not node.decorative and len(node.connections) >= 3:
            node.kind = JUNCTION


def difficulty_tier(relative: float) -> int:
    if relative < 0.33:
        return 1
    if relative < 0.66:
        return 2
    return 3


def assign_difficulty(graph: Graph, entry_id: str) -> None:
    hops = hop_distances(graph, entry_id)
    max_hops = max(hops.values()) if hops else 0
    for edge in graph.edges.values():
        if edge.decorative:
            continue
        avg = (hops.get(edge.a, 0) + hops.get(edge.b, 0)) / 2.0
        relative = avg / max_hops if max_hops > 0 else 0.0
        edge.difficulty = difficulty_tier(relative)


def generate_network(cfg: Config, seed: int) -> Graph:
    rng = random.Random(seed)
    graph = Graph(extent=(cfg.network_width, cfg.network_height))

    for idx, pos in enumerate(place_nodes(cfg, rng)):
        add_node(graph, Node(id=f"n_{idx}", pos=pos))
    ids = list(graph.nodes)

    create_edges(cfg, graph, ids, rng)
    top_up_degrees(cfg, graph, ids)
    merges = connect_components(cfg, graph, ids)
    entry_id, core_id = assign_special_nodes(graph, ids)
    relax_layout(cfg, graph, ids)
    mark_junctions(graph)
    assign_difficulty(graph, entry_id)

    entry_edges = graph.node_edges.get(entry_id, [])
    graph.first_edge_id = entry_edges[0] if entry_edges else None
    reset_flags(graph)

    logger.info(
        "network seed=%s nodes=%d edges=%d merges=%d entry=%s core=%s",
        seed, len(graph.nodes), len(graph.edges), merges, entry_id, core_id,
    )
    return graph


def spherical(theta: float, phi: float, radius: float) -> tuple[float, float, float]:
    return (
        math.sin(phi) * math.cos(theta) * radius,
        math.sin(phi) * math.sin(theta) * radius,
        math.cos(phi) * radius,
    )


def create_main_path(cfg: Config, graph: Graph) -> list[str]:
    path = [add_node(graph, Node(id="n_entry", pos=(0.0, 0.0, 0.0), kind=ENTRY)).id]
    for i in range(cfg.main_path_hops):
        theta, phi = MAIN_PATH_ANGLES[i % len(MAIN_PATH_ANGLES)]
        pos = spherical(theta * math.pi, phi * math.pi, cfg.path_spacing * (i + 1))
        is_core = i == cfg.main_path_hops - 1
        node = Node(
            id="n_core" if is_core else f"n_path_{i + 1}",
            pos=pos,
            kind=CORE if is_core else JUNCTION,
        )
        add_node(graph, node)
        add_edge(graph, path[-1], node.id, edge_id=f"e_{i}", difficulty=min(i + 1, 3))
        path.append(node.id)
    graph.entry_id = path[0]
    graph.core_id = path[-1]
    graph.first_edge_id = "e_0"
    return path


def scatter_decorative(
    cfg: Config,
    graph: Graph,
    rng: random.Random,
    count: int,
    prefix: str,
    radius_range: tuple[float, float],
    noise: float,
    path_clearance: float,
    anchors: list[tuple[float, ...]],
) -> list[str]:
    placed: list[tuple[float, ...]] = []
    ids = []
    angle_inc = 2.0 * math.pi * GOLDEN_RATIO
    for i in range(count):
        t = (i + 0.5) / count
        inclination = math.acos(1.0 - 2.0 * t)
        azimuth = angle_inc * i
        best = None
        best_score = -1.0
        for _ in range(max(1, cfg.decorative_attempts)):
            radius = cfg.sphere_radius * rng.uniform(*radius_range)
            base = spherical(azimuth, inclination, radius)
            pos = tuple(c + rng.uniform(-noise, noise) for c in base)
            from_path = nearest_clearance(pos, anchors)
            from_deco = nearest_clearance(pos, placed)
            if from_path >= path_clearance and from_deco >= cfg.decorative_min_distance:
                best = pos
                break
            score = min(from_path / max(1e-6, path_clearance), from_deco / cfg.decorative_min_distance)
            if score > best_score:
                best_score = score
                best = pos
        placed.append(best)
        node = add_node(graph, Node(id=f"{prefix}{i}", pos=best, decorative=True))
        ids.append(node.id)
    return ids


def create_decorative_edges(cfg: Config, graph: Graph, deco_ids: list[str], rng: random.Random) -> int:
    order = deco_ids[:]
    rng.shuffle(order)
    count = 0
    for nid in order:
        if count >= cfg.decorative_edge_count:
            break
        node = graph.nodes[nid]
        nearby = [
            oid
            for oid in deco_ids
            if oid != nid
            and cfg.decorative_edge_min_distance < distance(node, graph.nodes[oid]) < cfg.decorative_edge_max_distance
        ]
        if not nearby:
            continue
        rng.shuffle(nearby)
        for oid in nearby[: rng.randint(1, 3)]:
            if count >= cfg.decorative_edge_count:
                break
            edge = add_edge(
                graph,
                nid,
                oid,
                edge_id=f"e_deco_{count}",
                difficulty=0,
                unlocked=True,
                decorative=True,
            )
            if edge is not None:
                count += 1
    return count


def generate_simple_network(cfg: Config, seed: int) -> Graph:
    rng = random.Random(seed)
    diameter = cfg.sphere_radius * 2.0
    graph = Graph(extent=(diameter, diameter, diameter))

    path = create_main_path(cfg, graph)
    anchors = [graph.nodes[nid].pos for nid in path]
    outer = scatter_decorative(
        cfg, graph, rng, cfg.decorative_node_count, "n_deco_", (0.8, 1.25), 10.0,
        cfg.decorative_min_distance * 2.0, anchors,
    )
    inner = scatter_decorative(
        cfg, graph, rng, cfg.inner_node_count, "n_inner_", (0.0, 0.8), 7.5,
        cfg.decorative_min_distance * 3.0, anchors,
    )
    deco_edges = create_decorative_edges(cfg, graph, outer + inner, rng)
    reset_flags(graph)

    logger.info(
        "simple network seed=%s path=%d decorative=%d decorative_edges=%d",
        seed, len(path), len(outer) + len(inner), deco_edges,
    )
    return graph
