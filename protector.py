from __future__ import annotations

import logging

from config import Config
from graph import CORE, ENTRY
from state import GameState, edge_unlocked, explorer_node, node_blocked

logger = logging.getLogger(__name__)

# Block results
BLOCKED_OK = "blocked"
REFUSED = "refused"
ALREADY_BLOCKED = "already_blocked"
NO_RESOURCES = "no_resources"
UNKNOWN = "unknown"


def spend(state: GameState, amount: int) -> bool:
    if state.resources < amount:
        logger.debug("protector short of resources: %d < %d", state.resources, amount)
        return False
    state.resources -= amount
    return True


def can_block(state: GameState, node_id: str) -> bool:
    node = state.graph.nodes.get(node_id)
    if node is None or node.decorative:
        return False
    if node.kind in (ENTRY, CORE):
        return False
    return node_id != explorer_node(state)


def block_node(cfg: Config, state: GameState, node_id: str) -> str:
    node = state.graph.nodes.get(node_id)
    if node is None:
        logger.warning("block of unknown node %s", node_id)
        return UNKNOWN
    if node.blocked:
        return ALREADY_BLOCKED
    if not can_block(state, node_id):
        return REFUSED
    if not spend(state, cfg.block_cost):
        return NO_RESOURCES
    node_blocked(cfg, state, node_id)
    return BLOCKED_OK


def unlock_edge(cfg: Config, state: GameState, edge_id: str) -> bool:
    edge = state.graph.edges.get(edge_id)
    if edge is None or edge.decorative or edge.unlocked:
        return False
    edge_unlocked(cfg, state, edge_id)
    logger.info("protector unlocked %s", edge_id)
    return True


def unlock_around_explorer(cfg: Config, state: GameState) -> list[str]:
    unlocked = []
    for edge_id in state.graph.node_edges.get(explorer_node(state), []):
        if unlock_edge(cfg, state, edge_id):
            unlocked.append(edge_id)
    return unlocked
