from dataclasses import replace

from conftest import line_graph, make_state

from events import VISIBILITY_CHANGED, EventRecorder
from graph import BLOCKED
from state import explorer_moved, node_blocked, set_gate
from visibility import diff_visibility, update_visibility, visible_edges, visible_nodes


class TestVisibleNodes:
    def test_radius_on_five_hop_path(self):
        g = line_graph(6)
        assert visible_nodes(g, "n0", 2) == {"n0", "n1", "n2"}
        assert visible_nodes(g, "n0", 5) == set(g.nodes)
        assert visible_nodes(g, "n0", 0) == {"n0"}

    def test_blocked_edge_stops_the_flood(self):
        g = line_graph(6)
        g.edges["e_1"].state = BLOCKED
        assert visible_nodes(g, "n0", 3) == {"n0", "n1"}

    def test_closed_gate_stops_the_flood(self):
        g = line_graph(6)
        g.edges["e_0"].gated = True
        g.edges["e_0"].gate_open = False
        assert visible_nodes(g, "n0", 3) == {"n0"}
        g.edges["e_0"].gate_open = True
        assert visible_nodes(g, "n0", 3) == {"n0", "n1", "n2", "n3"}

    def test_unknown_observer(self):
        assert visible_nodes(line_graph(3), "nope", 3) == set()

    def test_edges_need_both_endpoints(self):
        g = line_graph(4)
        assert visible_edges(g, {"n0", "n1", "n2"}) == {"e_0", "e_1"}

    def test_diff(self):
        assert diff_visibility({"a", "b"}, {"b", "c"}) == (["c"], ["a"])


class TestUpdateVisibility:
    def test_changes_emitted_once(self, cfg):
        cfg = replace(cfg, vision_radius=2)
        state = make_state(cfg, line_graph(6), ["n0"], pursuer_at="n5")
        rec = EventRecorder(state.bus, VISIBILITY_CHANGED)

        changes = update_visibility(cfg, state)
        assert sorted(changes) == [("e_0", True), ("e_1", True), ("n0", True), ("n1", True), ("n2", True)]
        assert len(rec.events) == 5
        assert {ev["element"] for ev in rec.events} == {"node", "edge"}

        rec.clear()
        assert update_visibility(cfg, state) == []
        assert rec.events == []

    def test_explorer_move_shifts_the_window(self, cfg):
        cfg = replace(cfg, vision_radius=2)
        state = make_state(cfg, line_graph(6), ["n0"], pursuer_at="n5")
        update_visibility(cfg, state)
        rec = EventRecorder(state.bus, VISIBILITY_CHANGED)

        explorer_moved(cfg, state, "n1")
        shown = {(ev["id"], ev["visible"]) for ev in rec.events}
        assert shown == {("n3", True), ("e_2", True)}
        assert state.vision.observer == "n1"

    def test_blocking_hides_the_far_side(self, cfg):
        cfg = replace(cfg, vision_radius=3)
        state = make_state(cfg, line_graph(6), ["n0"], pursuer_at="n5")
        update_visibility(cfg, state)
        rec = EventRecorder(state.bus, VISIBILITY_CHANGED)

        node_blocked(cfg, state, "n2")
        hidden = {ev["id"] for ev in rec.events if not ev["visible"]}
        assert hidden == {"n2", "n3", "e_1", "e_2"}
        assert state.vision.nodes == {"n0", "n1"}

    def test_gate_change_recomputes(self, cfg):
        state = make_state(cfg, line_graph(4), ["n0"], pursuer_at="n3")
        update_visibility(cfg, state)
        set_gate(cfg, state, "e_0", False)
        assert state.vision.nodes == {"n0"}
        set_gate(cfg, state, "e_0", True)
        assert "n1" in state.vision.nodes
