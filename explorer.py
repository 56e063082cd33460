from __future__ import annotations

import logging

from config import Config
from graph import ACTIVE, BLOCKED, DORMANT, FAILED, SOLVING, edge_between, is_edge_passable
from puzzle_gen import check_solution, generate_puzzle
from state import GameState, edge_state_changed, explorer_moved, explorer_node

logger = logging.getLogger(__name__)

# Move results
MOVED = "moved"
CORE_REACHED = "core"
PUZZLE = "puzzle"
NOT_ADJACENT = "not_adjacent"
BLOCKED_MOVE = "blocked"
LOCKED = "locked"
BUSY = "busy"
CAUGHT = "caught"
UNKNOWN = "unknown"
FAILED_CHECK = "failed"


def arrive(cfg: Config, state: GameState, node_id: str) -> str:
    explorer_moved(cfg, state, node_id)
    if node_id == state.graph.core_id:
        logger.info("explorer reached the core")
        return CORE_REACHED
    return MOVED


def request_move(cfg: Config, state: GameState, node_id: str) -> str:
    graph = state.graph
    target = graph.nodes.get(node_id)
    if target is None:
        logger.warning("move to unknown node %s", node_id)
        return UNKNOWN
    if state.puzzle is not None:
        return BUSY
    if state.pursuer.caught:
        return CAUGHT

    edge = edge_between(graph, explorer_node(state), node_id)
    if edge is None:
        return NOT_ADJACENT
    if target.blocked or not is_edge_passable(edge):
        return BLOCKED_MOVE

    if target.activated or edge.state == ACTIVE:
        return arrive(cfg, state, node_id)
    if not edge.unlocked:
        return LOCKED

    edge_state_changed(cfg, state, edge.id, SOLVING)
    state.puzzle = generate_puzzle(cfg, edge.id, edge.difficulty, state.rng)
    logger.debug("explorer attempts %s towards %s", edge.id, node_id)
    return PUZZLE


def complete_crossing(cfg: Config, state: GameState, cells) -> str:
    puzzle = state.puzzle
    if puzzle is None:
        return UNKNOWN
    edge = state.graph.edges[puzzle.edge_id]
    if edge.state == BLOCKED:
        # the protector cut the edge mid-puzzle
        state.puzzle = None
        return BLOCKED_MOVE
    if not check_solution(puzzle, cells):
        state.puzzle = None
        edge_state_changed(cfg, state, edge.id, FAILED)
        logger.info("puzzle on %s failed", edge.id)
        return FAILED_CHECK

    state.puzzle = None
    target_id = edge.other(explorer_node(state))
    edge_state_changed(cfg, state, edge.id, ACTIVE)
    return arrive(cfg, state, target_id)


def cancel_crossing(cfg: Config, state: GameState) -> None:
    puzzle = state.puzzle
    if puzzle is None:
        return
    state.puzzle = None
    edge = state.graph.edges[puzzle.edge_id]
    if edge.state == SOLVING:
        edge_state_changed(cfg, state, edge.id, DORMANT)
