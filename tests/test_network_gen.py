import itertools
import math
from dataclasses import replace

import pytest

from config import load_config
from graph import CORE, DORMANT, ENTRY, connected_components, degree, hop_distances, structural_node_ids
from network_gen import difficulty_tier, generate_network, generate_simple_network

SEEDS = [1, 7, 42]


@pytest.fixture
def gen_cfg():
    return load_config(node_count=40)


class TestGenerateNetwork:
    @pytest.mark.parametrize("seed", SEEDS)
    def test_structurally_connected(self, gen_cfg, seed):
        g = generate_network(gen_cfg, seed)
        assert len(g.nodes) == 40
        assert len(connected_components(g)) == 1

    @pytest.mark.parametrize("seed", SEEDS)
    def test_single_entry_and_core_at_max_hops(self, gen_cfg, seed):
        g = generate_network(gen_cfg, seed)
        entries = [n for n in g.nodes.values() if n.kind == ENTRY]
        cores = [n for n in g.nodes.values() if n.kind == CORE]
        assert [n.id for n in entries] == [g.entry_id]
        assert [n.id for n in cores] == [g.core_id]

        hops = hop_distances(g, g.entry_id)
        assert hops[g.core_id] == max(hops.values())

    @pytest.mark.parametrize("seed", SEEDS)
    def test_degree_bounds(self, gen_cfg, seed):
        g = generate_network(gen_cfg, seed)
        for nid in g.nodes:
            assert gen_cfg.min_connections <= degree(g, nid) <= gen_cfg.max_connections

    def test_min_separation_without_relaxation(self, gen_cfg):
        cfg = replace(gen_cfg, force_iterations=0)
        g = generate_network(cfg, 3)
        for a, b in itertools.combinations(g.nodes.values(), 2):
            assert math.dist(a.pos, b.pos) >= cfg.min_node_distance - 1e-6

    def test_min_separation_after_relaxation(self):
        cfg = load_config()
        g = generate_network(cfg, 1)
        for a, b in itertools.combinations(g.nodes.values(), 2):
            assert math.dist(a.pos, b.pos) >= cfg.min_node_distance

    def test_relaxation_keeps_topology(self, gen_cfg):
        relaxed = generate_network(gen_cfg, 5)
        raw = generate_network(replace(gen_cfg, force_iterations=0), 5)
        assert set(relaxed.pair_index) == set(raw.pair_index)
        assert relaxed.entry_id == raw.entry_id
        assert relaxed.core_id == raw.core_id

    def test_same_seed_same_network(self, gen_cfg):
        a = generate_network(gen_cfg, 11)
        b = generate_network(gen_cfg, 11)
        assert {k: n.pos for k, n in a.nodes.items()} == {k: n.pos for k, n in b.nodes.items()}
        assert set(a.pair_index) == set(b.pair_index)

    def test_round_start_flags(self, gen_cfg):
        g = generate_network(gen_cfg, 2)
        assert g.first_edge_id in g.node_edges[g.entry_id]
        assert g.nodes[g.entry_id].activated
        assert all(e.state == DORMANT for e in g.edges.values())
        assert [e.id for e in g.edges.values() if e.unlocked] == [g.first_edge_id]

    def test_difficulty_tiers(self, gen_cfg):
        g = generate_network(gen_cfg, 9)
        assert {e.difficulty for e in g.edges.values()} <= {1, 2, 3}
        assert difficulty_tier(0.0) == 1
        assert difficulty_tier(0.5) == 2
        assert difficulty_tier(1.0) == 3


class TestSimpleNetwork:
    def test_main_path(self, small_cfg):
        g = generate_simple_network(small_cfg, 4)
        assert g.entry_id == "n_entry"
        assert g.core_id == "n_core"
        main = structural_node_ids(g)
        assert main == ["n_entry", "n_path_1", "n_path_2", "n_path_3", "n_core"]
        assert len(connected_components(g, main)) == 1
        assert [g.edges[f"e_{i}"].difficulty for i in range(4)] == [1, 2, 3, 3]
        assert len(g.nodes[g.entry_id].pos) == 3

    def test_only_first_and_decorative_edges_unlocked(self, small_cfg):
        g = generate_simple_network(small_cfg, 4)
        for edge in g.edges.values():
            assert edge.unlocked == (edge.id == "e_0" or edge.decorative)

    def test_decorative_edges_stay_off_the_main_path(self, small_cfg):
        g = generate_simple_network(small_cfg, 8)
        deco_nodes = [n for n in g.nodes.values() if n.decorative]
        assert len(deco_nodes) == small_cfg.decorative_node_count + small_cfg.inner_node_count
        for edge in g.edges.values():
            if edge.decorative:
                assert edge.id.startswith("e_deco_")
                assert g.nodes[edge.a].decorative and g.nodes[edge.b].decorative
                assert edge.difficulty == 0
        assert sum(1 for e in g.edges.values() if e.decorative) <= small_cfg.decorative_edge_count


class TestConfigValidation:
    def test_min_above_max_connections_raises(self):
        with pytest.raises(ValueError):
            load_config(min_connections=6, max_connections=3)

    def test_impossible_checkpoint_count_raises(self):
        with pytest.raises(ValueError):
            load_config(puzzle_checkpoints={1: 40, 2: 4, 3: 6})
