from __future__ import annotations

from dataclasses import dataclass, field
import logging
import random

from config import Config
from events import (
    EDGE_STATE_CHANGED,
    EDGE_UNLOCKED,
    EXPLORER_MOVED,
    GATE_CHANGED,
    NODE_BLOCKED,
    NODE_REPAIRED,
    PAUSE,
    RESOLVE_ENCOUNTER,
    RESUME,
    ROUND_RESET,
    ROUND_STARTED,
    Event,
    EventBus,
)
from graph import (
    ACTIVE,
    BLOCKED,
    EDGE_STATES,
    Graph,
    block_node_flags,
    repair_node_flags,
    reset_flags,
)
from network_gen import generate_network, generate_simple_network
from puzzle_gen import PathPuzzle
import pursuit
from pursuit import Pursuer, spawn_pursuer, update_pursuer
from visibility import Vision, update_visibility

logger = logging.getLogger(__name__)


@dataclass
class GameState:
    # World
    graph: Graph
    seed: int
    simplified: bool

    # Actors
    explorer_path: list[str]
    pursuer: Pursuer
    vision: Vision

    # Protector
    resources: int

    # Plumbing
    bus: EventBus
    rng: random.Random

    round_index: int = 1
    game_time: float = 0.0
    puzzle: PathPuzzle | None = None
    listeners: list = field(default_factory=list)


def build_graph(cfg: Config, seed: int, simplified: bool) -> Graph:
    if simplified:
        return generate_simple_network(cfg, seed)
    return generate_network(cfg, seed)


def init_state(cfg: Config, seed: int, simplified: bool = False, bus: EventBus | None = None) -> GameState:
    graph = build_graph(cfg, seed, simplified)
    state = GameState(
        graph=graph,
        seed=seed,
        simplified=simplified,
        explorer_path=[graph.entry_id],
        pursuer=spawn_pursuer(cfg, graph),
        vision=Vision(),
        resources=cfg.initial_resources,
        bus=bus if bus is not None else EventBus(),
        rng=random.Random(seed + 6969),
    )
    pursuit.replan(cfg, state)
    update_visibility(cfg, state)
    return state


def grant_resources(cfg: Config, state: GameState, amount: int) -> int:
    state.resources = min(cfg.max_resources, state.resources + max(0, amount))
    return state.resources


def round_reward(cfg: Config, round_index: int) -> int:
    return cfg.firewall_base_reward * round_index * cfg.firewall_round_multiplier


def is_final_round(cfg: Config, state: GameState) -> bool:
    return state.round_index >= cfg.max_rounds


def explorer_node(state: GameState) -> str | None:
    return state.explorer_path[-1] if state.explorer_path else None


# Inbound transitions. Each re-derives paths and visibility after mutating.

def explorer_moved(cfg: Config, state: GameState, node_id: str) -> GameState:
    node = state.graph.nodes.get(node_id)
    if node is None or node.decorative:
        logger.warning("explorer-moved: unknown or decorative node %s", node_id)
        return state
    if explorer_node(state) != node_id:
        state.explorer_path.append(node_id)
    pursuit.replan(cfg, state)
    update_visibility(cfg, state)
    return state


def edge_unlocked(cfg: Config, state: GameState, edge_id: str) -> GameState:
    edge = state.graph.edges.get(edge_id)
    if edge is None:
        logger.warning("edge-unlocked: unknown edge %s", edge_id)
        return state
    edge.unlocked = True
    return state


def edge_state_changed(cfg: Config, state: GameState, edge_id: str, new_state: str) -> GameState:
    edge = state.graph.edges.get(edge_id)
    if edge is None:
        logger.warning("edge-state-changed: unknown edge %s", edge_id)
        return state
    if new_state not in EDGE_STATES:
        logger.warning("edge-state-changed: unknown state %r for %s", new_state, edge_id)
        return state

    old_state = edge.state
    edge.state = new_state
    if new_state == ACTIVE:
        state.graph.nodes[edge.a].activated = True
        state.graph.nodes[edge.b].activated = True
    if BLOCKED in (old_state, new_state):
        pursuit.replan(cfg, state)
    update_visibility(cfg, state)
    return state


def set_gate(cfg: Config, state: GameState, edge_id: str, open: bool) -> GameState:
    edge = state.graph.edges.get(edge_id)
    if edge is None:
        logger.warning("gate-changed: unknown edge %s", edge_id)
        return state
    edge.gated = True
    edge.gate_open = open
    update_visibility(cfg, state)
    return state


def node_blocked(cfg: Config, state: GameState, node_id: str) -> GameState:
    if node_id not in state.graph.nodes:
        logger.warning("node-blocked: unknown node %s", node_id)
        return state
    changed = block_node_flags(state.graph, node_id)
    logger.info("node %s blocked (%d edges)", node_id, len(changed))
    pursuit.replan(cfg, state)
    update_visibility(cfg, state)
    return state


def node_repaired(cfg: Config, state: GameState, node_id: str) -> GameState:
    if node_id not in state.graph.nodes:
        logger.warning("node-repaired: unknown node %s", node_id)
        return state
    changed = repair_node_flags(state.graph, node_id)
    logger.info("node %s repaired (%d edges)", node_id, len(changed))
    pursuit.replan(cfg, state)
    update_visibility(cfg, state)
    return state


def round_reset(cfg: Config, state: GameState) -> GameState:
    reset_flags(state.graph)
    state.explorer_path = [state.graph.entry_id]
    state.puzzle = None
    reward = round_reward(cfg, state.round_index)
    grant_resources(cfg, state, reward)
    logger.info("round %d completed, protector earns %d (now %d)", state.round_index, reward, state.resources)
    state.round_index = min(state.round_index + 1, cfg.max_rounds)
    pursuit.reset_to_spawn(cfg, state)
    pursuit.replan(cfg, state)
    update_visibility(cfg, state)
    logger.info("round %d started, pursuer at %s", state.round_index, state.pursuer.node_id)
    state.bus.emit(ROUND_STARTED, round=state.round_index, pursuer=state.pursuer.node_id)
    return state


def pause(cfg: Config, state: GameState) -> GameState:
    state.pursuer.paused = True
    return state


def resume(cfg: Config, state: GameState) -> GameState:
    state.pursuer.paused = False
    return state


def resolve_encounter(cfg: Config, state: GameState) -> GameState:
    if not pursuit.resolve_encounter(cfg, state):
        logger.debug("resolve-encounter ignored, pursuer is %s", state.pursuer.status)
    return state


INBOUND = {
    EXPLORER_MOVED: lambda cfg, state, p: explorer_moved(cfg, state, p["node_id"]),
    EDGE_UNLOCKED: lambda cfg, state, p: edge_unlocked(cfg, state, p["edge_id"]),
    EDGE_STATE_CHANGED: lambda cfg, state, p: edge_state_changed(cfg, state, p["edge_id"], p["state"]),
    GATE_CHANGED: lambda cfg, state, p: set_gate(cfg, state, p["edge_id"], p["open"]),
    NODE_BLOCKED: lambda cfg, state, p: node_blocked(cfg, state, p["node_id"]),
    NODE_REPAIRED: lambda cfg, state, p: node_repaired(cfg, state, p["node_id"]),
    ROUND_RESET: lambda cfg, state, p: round_reset(cfg, state),
    PAUSE: lambda cfg, state, p: pause(cfg, state),
    RESUME: lambda cfg, state, p: resume(cfg, state),
    RESOLVE_ENCOUNTER: lambda cfg, state, p: resolve_encounter(cfg, state),
}


def handle_event(cfg: Config, state: GameState, event: Event) -> GameState:
    handler = INBOUND.get(event.kind)
    if handler is None:
        logger.warning("ignoring event %s", event.kind)
        return state
    return handler(cfg, state, event.payload)


def listen(cfg: Config, state: GameState) -> None:
    """Route inbound events emitted on the state's bus to the transitions."""
    sub = state.bus.subscribe(lambda ev: handle_event(cfg, state, ev), *INBOUND)
    state.listeners.append(sub)


def tick(cfg: Config, state: GameState, dt: float) -> GameState:
    if not state.pursuer.paused:
        state.game_time += dt
    update_pursuer(cfg, state, dt)
    return state
