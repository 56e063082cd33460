import random
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from config import load_config
from events import EventBus
from graph import CORE, ENTRY, NORMAL, Graph, Node, add_edge, add_node, reset_flags
from pursuit import Pursuer, replan, spawn_node
from state import GameState
from visibility import Vision


def build_graph(positions, pairs, entry, core):
    """Hand-built graph; edges are named e_0, e_1, ... in the given order."""
    graph = Graph(extent=(1000.0, 1000.0))
    for nid, pos in positions.items():
        kind = ENTRY if nid == entry else CORE if nid == core else NORMAL
        add_node(graph, Node(id=nid, pos=pos, kind=kind))
    for a, b in pairs:
        add_edge(graph, a, b)
    graph.entry_id = entry
    graph.core_id = core
    graph.first_edge_id = graph.node_edges[entry][0]
    reset_flags(graph)
    return graph


def line_graph(n=5):
    positions = {f"n{i}": (i * 100.0, 0.0) for i in range(n)}
    pairs = [(f"n{i}", f"n{i + 1}") for i in range(n - 1)]
    return build_graph(positions, pairs, "n0", f"n{n - 1}")


def make_state(cfg, graph, explorer_path=None, pursuer_at=None, seed=0):
    state = GameState(
        graph=graph,
        seed=seed,
        simplified=False,
        explorer_path=list(explorer_path) if explorer_path is not None else [graph.entry_id],
        pursuer=Pursuer(
            node_id=pursuer_at if pursuer_at is not None else spawn_node(graph),
            base_speed=cfg.pursuer_base_speed,
            speed=cfg.pursuer_base_speed,
        ),
        vision=Vision(),
        resources=cfg.initial_resources,
        bus=EventBus(),
        rng=random.Random(seed),
    )
    replan(cfg, state)
    return state


@pytest.fixture
def cfg():
    return load_config()


@pytest.fixture
def small_cfg():
    return load_config(node_count=30, decorative_node_count=40, inner_node_count=20, decorative_edge_count=20)


@pytest.fixture
def line5():
    return line_graph(5)
