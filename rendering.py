from __future__ import annotations

import math
import pygame

from config import Config
from graph import ACTIVE, BLOCKED, CORE, ENTRY, FAILED, PURSUER_PATH, SOLVING, Graph
from pursuit import HACKING

MARGIN = 40


def view_transform(cfg: Config, graph: Graph):
    """Scale and offset that fit the graph extent into the window."""
    xs = [n.pos[0] for n in graph.nodes.values()]
    ys = [n.pos[1] for n in graph.nodes.values()]
    if not xs:
        return 1.0, 0.0, 0.0
    min_x, max_x = min(xs), max(xs)
    min_y, max_y = min(ys), max(ys)
    span_x = max(1.0, max_x - min_x)
    span_y = max(1.0, max_y - min_y)
    scale = min((cfg.width - 2 * MARGIN) / span_x, (cfg.height - 2 * MARGIN) / span_y)
    off_x = MARGIN - min_x * scale + (cfg.width - 2 * MARGIN - span_x * scale) / 2.0
    off_y = MARGIN - min_y * scale + (cfg.height - 2 * MARGIN - span_y * scale) / 2.0
    return scale, off_x, off_y


def to_screen(view, pos) -> tuple[int, int]:
    scale, off_x, off_y = view
    return int(pos[0] * scale + off_x), int(pos[1] * scale + off_y)


def pick_node(cfg: Config, graph: Graph, view, mouse) -> str | None:
    best = None
    best_d = cfg.node_radius * 1.5
    for node in graph.nodes.values():
        sx, sy = to_screen(view, node.pos)
        d = math.hypot(sx - mouse[0], sy - mouse[1])
        if d < best_d:
            best_d = d
            best = node.id
    return best


def edge_color(cfg: Config, state: str):
    if state == ACTIVE:
        return cfg.edge_active_color
    if state == SOLVING:
        return cfg.edge_solving_color
    if state == BLOCKED:
        return cfg.edge_blocked_color
    if state == PURSUER_PATH:
        return cfg.edge_pursuer_color
    if state == FAILED:
        return cfg.edge_failed_color
    return cfg.edge_dormant_color


def node_color(cfg: Config, node):
    if node.blocked:
        return cfg.node_blocked_color
    if node.kind == ENTRY:
        return cfg.node_entry_color
    if node.kind == CORE:
        return cfg.node_core_color
    if node.activated:
        return cfg.node_activated_color
    return cfg.node_normal_color


def draw_network(cfg: Config, state, screen, view, fog: bool):
    graph = state.graph
    for edge in graph.edges.values():
        if fog and edge.id not in state.vision.edges:
            continue
        a = to_screen(view, graph.nodes[edge.a].pos)
        b = to_screen(view, graph.nodes[edge.b].pos)
        width = 1 if edge.decorative else 3
        pygame.draw.line(screen, edge_color(cfg, edge.state), a, b, width)
        if not edge.unlocked and not edge.decorative:
            mx = (a[0] + b[0]) // 2
            my = (a[1] + b[1]) // 2
            pygame.draw.rect(screen, cfg.text_color, pygame.Rect(mx - 3, my - 3, 6, 6), 1)

    for node in graph.nodes.values():
        sx, sy = to_screen(view, node.pos)
        if node.decorative:
            pygame.draw.circle(screen, cfg.edge_dormant_color, (sx, sy), 2)
            continue
        radius = cfg.core_radius if node.kind == CORE else cfg.node_radius
        if fog and node.id not in state.vision.nodes:
            pygame.draw.circle(screen, cfg.fog_color, (sx, sy), radius)
            continue
        pygame.draw.circle(screen, node_color(cfg, node), (sx, sy), radius)


def draw_explorer(cfg: Config, state, screen, view):
    if not state.explorer_path:
        return
    graph = state.graph
    trail = [to_screen(view, graph.nodes[nid].pos) for nid in state.explorer_path]
    if len(trail) > 1:
        pygame.draw.lines(screen, cfg.explorer_color, False, trail, 1)
    pygame.draw.circle(screen, cfg.explorer_color, trail[-1], cfg.node_radius // 2 + 2)


def draw_pursuer(cfg: Config, state, screen, view, fog: bool):
    p = state.pursuer
    if fog and p.node_id not in state.vision.nodes:
        return
    graph = state.graph
    pos = graph.nodes[p.node_id].pos
    if p.plan:
        # interpolate towards the next hop
        nxt = graph.nodes[p.plan[0]].pos
        t = min(1.0, p.progress)
        pos = (pos[0] + (nxt[0] - pos[0]) * t, pos[1] + (nxt[1] - pos[1]) * t)
    sx, sy = to_screen(view, pos)
    pygame.draw.circle(screen, cfg.pursuer_color, (sx, sy), cfg.node_radius // 2 + 3)

    if p.mode == HACKING and p.hack_target in graph.nodes:
        tx, ty = to_screen(view, graph.nodes[p.hack_target].pos)
        frac = min(1.0, p.hack_progress / cfg.pursuer_hack_sec)
        rect = pygame.Rect(tx - cfg.node_radius - 4, ty - cfg.node_radius - 4,
                           2 * cfg.node_radius + 8, 2 * cfg.node_radius + 8)
        pygame.draw.arc(screen, cfg.pursuer_color, rect, 0.0, frac * 2.0 * math.pi, 3)


def draw_hud(cfg: Config, state, screen, font, lines):
    status = (
        f"seed {state.seed}  round {state.round_index}/{cfg.max_rounds}  "
        f"pursuer {state.pursuer.status} @ {state.pursuer.node_id}  "
        f"speed {state.pursuer.speed:.2f}  resources {state.resources}"
    )
    y = 6
    for text in [status] + lines:
        surface = font.render(text, True, cfg.text_color)
        screen.blit(surface, (8, y))
        y += surface.get_height() + 2
