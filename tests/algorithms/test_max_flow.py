import logging
import random

import networkx as nx
import pytest

from flowcut.algorithms.base import PathSearch
from flowcut.algorithms.max_flow import FlowEngine, FlowState, calc_max_flow
from flowcut.algorithms.min_cut import cut_capacity
from flowcut.algorithms.types import FlowSummary
from flowcut.config import FLOW_CONFIG
from flowcut.errors import (
    DisconnectedError,
    NetworkBusyError,
    UnknownNodeError,
)
from flowcut.graph.residual import ResidualNetwork

SEARCHES = [PathSearch.DEPTH_FIRST, PathSearch.BREADTH_FIRST]


def _residual_table(net):
    return {(u, v): net.residual(u, v) for u in net.nodes for v in net.nodes}


def _random_network(seed, n_nodes=8, density=0.35, max_cap=20):
    rng = random.Random(seed)
    net = ResidualNetwork(range(n_nodes))
    nxg = nx.DiGraph()
    nxg.add_nodes_from(range(n_nodes))
    for u in range(n_nodes):
        for v in range(n_nodes):
            if u != v and rng.random() < density:
                cap = rng.randint(0, max_cap)
                net.add_edge(u, v, cap)
                nxg.add_edge(u, v, capacity=cap)
    return net, nxg


class TestMaxFlowBasic:
    @pytest.mark.parametrize("search", SEARCHES)
    def test_classic5(self, classic5, search):
        engine = FlowEngine(classic5, search)
        assert engine.construct(1, 5) == 7
        assert engine.flow_value == 7
        assert engine.state == FlowState.DONE

    @pytest.mark.parametrize("search", SEARCHES)
    def test_line3(self, line3, search):
        assert FlowEngine(line3, search).construct("A", "C") == 3

    def test_default_search_is_breadth_first(self, line3):
        assert FlowEngine(line3).search == PathSearch.BREADTH_FIRST

    def test_search_from_string(self, line3):
        assert FlowEngine(line3, "dfs").search == PathSearch.DEPTH_FIRST

    def test_disconnected_gives_zero(self, disconnected):
        engine = FlowEngine(disconnected)
        assert engine.construct("A", "D") == 0
        assert engine.state == FlowState.DONE
        assert engine.stages == 0

    def test_disconnected_with_required_flow(self, disconnected):
        with pytest.raises(DisconnectedError):
            FlowEngine(disconnected).construct("A", "D", require_flow=True)

    def test_required_flow_satisfied(self, line3):
        assert FlowEngine(line3).construct("A", "C", require_flow=True) == 3

    def test_source_equals_sink(self, line3):
        engine = FlowEngine(line3)
        assert engine.construct("A", "A") == 0
        assert engine.state == FlowState.DONE

    def test_unknown_terminals(self, line3):
        engine = FlowEngine(line3)
        with pytest.raises(UnknownNodeError):
            engine.construct("A", "Z")
        with pytest.raises(UnknownNodeError):
            engine.construct("Z", "A")
        assert engine.state == FlowState.IDLE

    def test_string_and_tuple_node_ids(self):
        net = ResidualNetwork([("r", 1), "mid", frozenset({"t"})])
        net.add_edge(("r", 1), "mid", 2)
        net.add_edge("mid", frozenset({"t"}), 9)
        assert FlowEngine(net).construct(("r", 1), frozenset({"t"})) == 2

    def test_antiparallel_edges(self):
        net = ResidualNetwork(["s", "a", "b", "t"])
        net.add_edge("s", "a", 3)
        net.add_edge("s", "b", 3)
        net.add_edge("a", "b", 2)
        net.add_edge("b", "a", 2)
        net.add_edge("a", "t", 1)
        net.add_edge("b", "t", 5)
        assert FlowEngine(net).construct("s", "t") == 6


class TestStrategyComparison:
    @pytest.mark.parametrize("z", [1, 10, 1000])
    def test_breadth_first_needs_two_stages(self, diamond, z):
        engine = FlowEngine(diamond(z), PathSearch.BREADTH_FIRST)
        assert engine.construct(1, 4) == 2 * z
        assert engine.stages == 2

    @pytest.mark.parametrize("z", [1, 10, 1000])
    def test_depth_first_reaches_same_flow(self, diamond, z):
        engine = FlowEngine(diamond(z), PathSearch.DEPTH_FIRST)
        assert engine.construct(1, 4) == 2 * z
        assert engine.stages >= 2

    def test_poor_path_choice_needs_2z_stages(self, diamond):
        # Always prefer the paths through the cross edge while they have
        # capacity; each stage then pushes a single unit.
        candidates = [[1, 2, 3, 4], [1, 3, 2, 4], [1, 2, 4], [1, 3, 4]]

        def adversarial(network, source, sink):
            for path in candidates:
                if network.bottleneck(path) > 0:
                    return list(path)
            return None

        z = 50
        engine = FlowEngine(diamond(z), adversarial)
        assert engine.construct(1, 4) == 2 * z
        assert engine.stages == 2 * z

    @pytest.mark.parametrize("seed", range(25))
    def test_strategies_agree_with_networkx(self, seed):
        net, nxg = _random_network(seed)
        expected = nx.maximum_flow_value(nxg, 0, 7)
        dfs_flow = FlowEngine(net.copy(), PathSearch.DEPTH_FIRST).construct(0, 7)
        bfs_flow = FlowEngine(net.copy(), PathSearch.BREADTH_FIRST).construct(0, 7)
        assert dfs_flow == bfs_flow == expected


class TestConservation:
    @pytest.mark.parametrize("search", SEARCHES)
    @pytest.mark.parametrize("seed", range(10))
    def test_conservation_after_every_stage(self, search, seed):
        net, _ = _random_network(seed, n_nodes=7, density=0.5)
        checks = []

        def stop(total, stages):
            checks.append(net.check_conservation())
            return False

        FlowEngine(net, search).construct(0, 6, stop=stop)
        assert checks and all(checks)
        assert net.check_conservation()


class TestRepeatedConstruction:
    @pytest.mark.parametrize("search", SEARCHES)
    def test_second_run_adds_nothing(self, classic5, search):
        engine = FlowEngine(classic5, search)
        assert engine.construct(1, 5) == 7
        before = _residual_table(classic5)

        assert engine.construct(1, 5) == 0
        assert engine.flow_value == 7
        assert engine.state == FlowState.DONE
        assert _residual_table(classic5) == before

    def test_fresh_engine_on_saturated_network(self, classic5):
        FlowEngine(classic5).construct(1, 5)
        assert FlowEngine(classic5).construct(1, 5) == 0

    def test_flow_continues_after_new_edges(self, line3):
        engine = FlowEngine(line3)
        assert engine.construct("A", "C") == 3
        line3.add_edge("B", "C", 4)
        assert engine.construct("A", "C") == 2
        assert engine.flow_value == 5


class TestStopping:
    def test_stop_predicate(self, classic5):
        engine = FlowEngine(classic5, PathSearch.BREADTH_FIRST)
        flow = engine.construct(1, 5, stop=lambda total, stages: stages >= 1)
        assert engine.state == FlowState.STOPPED
        assert engine.stages == 1
        assert 0 < flow < 7
        # Resuming finishes the job
        assert engine.construct(1, 5) == 7 - flow
        assert engine.flow_value == 7
        assert engine.state == FlowState.DONE

    def test_stop_before_first_stage(self, line3):
        engine = FlowEngine(line3)
        assert engine.construct("A", "C", stop=lambda total, stages: True) == 0
        assert engine.state == FlowState.STOPPED
        assert line3.residual("A", "B") == 5

    def test_flow_cap_predicate(self, diamond):
        engine = FlowEngine(diamond(100), PathSearch.BREADTH_FIRST)
        flow = engine.construct(1, 4, stop=lambda total, stages: total >= 50)
        assert flow == 100
        assert engine.state == FlowState.STOPPED

    def test_max_stages_config(self, classic5, monkeypatch):
        monkeypatch.setattr(FLOW_CONFIG, "max_stages", 1)
        engine = FlowEngine(classic5)
        engine.construct(1, 5)
        assert engine.stages == 1
        assert engine.state == FlowState.STOPPED

    def test_mutation_during_construction_rejected(self, line3):
        def stop(total, stages):
            line3.add_edge("A", "C", 1)
            return False

        engine = FlowEngine(line3)
        with pytest.raises(NetworkBusyError):
            engine.construct("A", "C", stop=stop)
        # Ownership is released even when construction fails
        line3.add_edge("A", "C", 1)

    def test_nested_construction_rejected(self, line3):
        inner = FlowEngine(line3)

        def stop(total, stages):
            inner.construct("A", "C")
            return False

        with pytest.raises(NetworkBusyError):
            FlowEngine(line3).construct("A", "C", stop=stop)

    def test_rejected_construction_keeps_previous_result(self, classic5):
        finished = FlowEngine(classic5)
        assert finished.construct(1, 5) == 7

        def stop(total, stages):
            finished.construct(1, 3)
            return False

        with pytest.raises(NetworkBusyError):
            FlowEngine(classic5).construct(1, 5, stop=stop)
        assert finished.flow_value == 7
        assert (finished.source, finished.sink) == (1, 5)
        assert finished.state == FlowState.DONE

    def test_failing_stop_predicate_ends_run(self, classic5):
        engine = FlowEngine(classic5, PathSearch.BREADTH_FIRST)

        def stop(total, stages):
            if stages == 1:
                raise RuntimeError("boom")
            return False

        with pytest.raises(RuntimeError, match="boom"):
            engine.construct(1, 5, stop=stop)
        assert engine.state == FlowState.STOPPED
        assert engine.stages == 1
        assert classic5.check_conservation()
        pushed = engine.flow_value
        assert 0 < pushed < 7
        # Network released; the run can be resumed
        assert engine.construct(1, 5) == 7 - pushed
        assert engine.state == FlowState.DONE

    def test_failing_path_finder_ends_run(self, line3):
        def finder(network, source, sink):
            raise LookupError("no finder")

        engine = FlowEngine(line3, finder)
        with pytest.raises(LookupError):
            engine.construct("A", "C")
        assert engine.state == FlowState.STOPPED
        line3.add_edge("A", "C", 1)


class TestCutFromEngine:
    def test_extract_cut_after_done(self, classic5):
        engine = FlowEngine(classic5)
        engine.construct(1, 5)
        assert engine.extract_cut() == {(2, 4), (3, 5)}

    def test_extract_cut_before_done_warns(self, classic5, caplog):
        engine = FlowEngine(classic5)
        engine.construct(1, 5, stop=lambda total, stages: stages >= 1)
        with caplog.at_level(logging.WARNING, logger="flowcut"):
            engine.extract_cut()
        assert "not a minimum cut" in caplog.text

    def test_extract_cut_without_construction(self, classic5):
        with pytest.raises(ValueError):
            FlowEngine(classic5).extract_cut()
        # An explicit source works without a run
        assert FlowEngine(classic5).extract_cut(5) == set()

    @pytest.mark.parametrize("search", SEARCHES)
    @pytest.mark.parametrize("seed", range(25))
    def test_flow_equals_cut_capacity(self, search, seed):
        net, _ = _random_network(seed)
        engine = FlowEngine(net, search)
        flow = engine.construct(0, 7)
        assert cut_capacity(net, engine.extract_cut()) == flow


class TestCalcMaxFlow:
    def test_scalar_return_and_copy(self, classic5):
        assert calc_max_flow(classic5, 1, 5) == 7
        # Original network untouched by default
        assert classic5.residual(2, 4) == 3

    def test_in_place(self, classic5):
        assert calc_max_flow(classic5, 1, 5, copy_network=False) == 7
        assert classic5.residual(2, 4) == 0
        assert calc_max_flow(classic5, 1, 5, copy_network=False) == 0

    def test_summary(self, classic5):
        flow, summary = calc_max_flow(classic5, 1, 5, return_summary=True)
        assert isinstance(summary, FlowSummary)
        assert flow == summary.total_flow == 7
        assert summary.min_cut == {(2, 4), (3, 5)}
        assert summary.cut_capacity == 7
        assert summary.reachable == {1, 2, 3}
        assert summary.stages >= 1
        assert summary.edge_flow[(2, 4)] == 3
        assert summary.edge_flow[(3, 5)] == 4
        assert summary.residual_cap[(2, 4)] == 0
        assert set(summary.edge_flow) == {(u, v) for u, v, _ in classic5.edges()}
        # Conservation of flow at internal nodes
        for node in (2, 3, 4):
            inflow = sum(f for (u, v), f in summary.edge_flow.items() if v == node)
            outflow = sum(f for (u, v), f in summary.edge_flow.items() if u == node)
            assert inflow == outflow

    def test_summary_is_frozen(self, line3):
        _, summary = calc_max_flow(line3, "A", "C", return_summary=True)
        with pytest.raises(AttributeError):
            summary.total_flow = 0  # type: ignore[misc]

    @pytest.mark.parametrize("search", ["dfs", "bfs"])
    def test_search_strings(self, classic5, search):
        assert calc_max_flow(classic5, 1, 5, search=search) == 7

    def test_required_flow(self, disconnected, line3):
        with pytest.raises(DisconnectedError):
            calc_max_flow(disconnected, "A", "D", require_flow=True)
        assert calc_max_flow(line3, "A", "C", require_flow=True) == 3
