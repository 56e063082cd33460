import pytest

from conftest import make_state

from events import (
    EDGE_STATE_CHANGED,
    EXPLORER_MOVED,
    NODE_BLOCKED,
    PAUSE,
    ROUND_STARTED,
    Event,
    EventRecorder,
)
from graph import ACTIVE, BLOCKED, CORE, DORMANT, ENTRY, flag_snapshot
from pursuit import PAUSED
from state import (
    edge_state_changed,
    edge_unlocked,
    explorer_moved,
    grant_resources,
    handle_event,
    init_state,
    is_final_round,
    listen,
    node_blocked,
    node_repaired,
    round_reset,
)


@pytest.fixture
def state(small_cfg):
    return init_state(small_cfg, 21)


class TestInit:
    def test_explorer_starts_at_entry(self, small_cfg, state):
        g = state.graph
        assert state.explorer_path == [g.entry_id]
        assert g.entry_id in state.vision.nodes
        assert state.pursuer.node_id not in (g.entry_id, g.core_id)
        assert state.resources == small_cfg.initial_resources
        assert state.round_index == 1

    def test_simplified_network(self, small_cfg):
        state = init_state(small_cfg, 3, simplified=True)
        assert state.graph.entry_id == "n_entry"
        assert state.graph.nodes[state.pursuer.node_id].kind not in (ENTRY, CORE)
        assert not state.graph.nodes[state.pursuer.node_id].decorative


class TestRoundReset:
    def test_reset_is_idempotent(self, small_cfg, state):
        g = state.graph
        first = g.first_edge_id
        edge_state_changed(small_cfg, state, first, ACTIVE)
        blockable = next(nid for nid in g.nodes if nid not in (g.entry_id, g.core_id))
        node_blocked(small_cfg, state, blockable)

        round_reset(small_cfg, state)
        once = flag_snapshot(g)
        round_reset(small_cfg, state)
        assert flag_snapshot(g) == once

        assert g.nodes[g.entry_id].activated
        assert g.edges[first].unlocked
        assert all(e.state == DORMANT for e in g.edges.values())
        assert not any(n.blocked for n in g.nodes.values())
        assert state.explorer_path == [g.entry_id]

    def test_round_progression(self, small_cfg, state):
        rec = EventRecorder(state.bus, ROUND_STARTED)
        for _ in range(small_cfg.max_rounds + 1):
            round_reset(small_cfg, state)
        assert state.round_index == small_cfg.max_rounds
        assert is_final_round(small_cfg, state)
        assert len(rec.events) == small_cfg.max_rounds + 1


class TestRoundReward:
    def test_reward_grows_with_completed_rounds(self, small_cfg, state):
        round_reset(small_cfg, state)
        assert state.resources == small_cfg.initial_resources + 10
        round_reset(small_cfg, state)
        assert state.resources == small_cfg.initial_resources + 10 + 20

    def test_leftover_resources_carry_over(self, small_cfg, state):
        state.resources = 5
        round_reset(small_cfg, state)
        assert state.resources == 5 + small_cfg.firewall_base_reward

    def test_reward_capped_at_max(self, small_cfg, state):
        state.resources = small_cfg.max_resources - 5
        round_reset(small_cfg, state)
        assert state.resources == small_cfg.max_resources

    def test_negative_grant_ignored(self, small_cfg, state):
        assert grant_resources(small_cfg, state, -10) == small_cfg.initial_resources
        assert grant_resources(small_cfg, state, 500) == small_cfg.max_resources


class TestInboundTransitions:
    def test_node_block_and_repair_edges(self, small_cfg, state):
        g = state.graph
        nid = next(n for n in g.nodes if n not in (g.entry_id, g.core_id))
        node_blocked(small_cfg, state, nid)
        assert g.nodes[nid].blocked
        assert all(e.state == BLOCKED for e in g.edges.values() if e.touches(nid))

        node_repaired(small_cfg, state, nid)
        assert not g.nodes[nid].blocked
        assert all(e.state == DORMANT for e in g.edges.values() if e.touches(nid))

    def test_unknown_ids_are_ignored(self, small_cfg, state):
        before = flag_snapshot(state.graph)
        path = list(state.explorer_path)
        assert explorer_moved(small_cfg, state, "nope") is state
        assert edge_unlocked(small_cfg, state, "nope") is state
        assert node_blocked(small_cfg, state, "nope") is state
        assert edge_state_changed(small_cfg, state, state.graph.first_edge_id, "melted") is state
        assert flag_snapshot(state.graph) == before
        assert state.explorer_path == path

    def test_decorative_move_ignored(self, small_cfg):
        state = init_state(small_cfg, 3, simplified=True)
        deco = next(nid for nid, n in state.graph.nodes.items() if n.decorative)
        explorer_moved(small_cfg, state, deco)
        assert state.explorer_path == [state.graph.entry_id]

    def test_explorer_path_is_append_only(self, small_cfg, state):
        g = state.graph
        nxt = g.nodes[g.entry_id].connections[0]
        explorer_moved(small_cfg, state, nxt)
        explorer_moved(small_cfg, state, nxt)
        explorer_moved(small_cfg, state, g.entry_id)
        assert state.explorer_path == [g.entry_id, nxt, g.entry_id]

    def test_active_edge_activates_endpoints(self, small_cfg, state):
        g = state.graph
        edge = g.edges[g.first_edge_id]
        edge_state_changed(small_cfg, state, edge.id, ACTIVE)
        assert g.nodes[edge.a].activated and g.nodes[edge.b].activated


class TestDispatch:
    def test_handle_event(self, small_cfg, state):
        g = state.graph
        nxt = g.nodes[g.entry_id].connections[0]
        handle_event(small_cfg, state, Event(EXPLORER_MOVED, {"node_id": nxt}))
        assert state.explorer_path[-1] == nxt
        handle_event(small_cfg, state, Event(EDGE_STATE_CHANGED, {"edge_id": g.first_edge_id, "state": ACTIVE}))
        assert g.edges[g.first_edge_id].state == ACTIVE
        handle_event(small_cfg, state, Event(PAUSE))
        assert state.pursuer.status == PAUSED

    def test_unknown_event_kind(self, small_cfg, state):
        assert handle_event(small_cfg, state, Event("teleport", {"node_id": "x"})) is state

    def test_bus_routing(self, small_cfg, state):
        g = state.graph
        listen(small_cfg, state)
        nid = next(n for n in g.nodes if n not in (g.entry_id, g.core_id))
        state.bus.emit(NODE_BLOCKED, node_id=nid)
        assert g.nodes[nid].blocked


class TestHandBuiltState:
    def test_blocking_the_only_route_triggers_replan(self, cfg, line5):
        state = make_state(cfg, line5, ["n0"], pursuer_at="n4")
        node_blocked(cfg, state, "n2")
        assert state.pursuer.plan == []
        assert not state.pursuer.route_found
        node_repaired(cfg, state, "n2")
        assert state.pursuer.plan == ["n3", "n2", "n1", "n0"]
