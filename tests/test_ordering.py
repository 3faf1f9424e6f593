from __future__ import annotations

import random

import pytest

from tsortkit.errors import NodeNotFoundError
from tsortkit.graph import Graph
from tsortkit.ordering import (
    OrderingResult,
    find_cycle,
    non_roots_of,
    order_nodes,
    roots_of,
    topological_ordering,
)
from tsortkit.parsing import parse_into
from tsortkit.stringset import StringSet


def _graph(*edges: tuple[str, str], nodes: tuple[str, ...] = ()) -> Graph:
    g = Graph()
    for n in nodes:
        g.add_node(n)
    for src, dst in edges:
        g.put_edge(src, dst)
    return g


def _assert_respects(order: list[str] | tuple[str, ...], edges) -> None:
    pos = {node: i for i, node in enumerate(order)}
    for src, dst in edges:
        assert pos[src] < pos[dst], f"{src} must come before {dst} in {order}"


def _drain_checking_cycles(g: Graph) -> list[OrderingResult]:
    """Consume the ordering, checking each cycle against the live graph."""
    results = []
    before = set(g.edges())
    for result in topological_ordering(g):
        if result.cycle is not None:
            cycle = list(result.cycle)
            assert len(set(cycle)) == len(cycle), "cycle must be simple"
            for src, dst in zip(cycle, cycle[1:] + cycle[:1]):
                assert (src, dst) in before
            assert not g.has_edge(cycle[-1], cycle[0])
            before = set(g.edges())
        results.append(result)
    return results


# ── roots / non-roots ────────────────────────────────────────────────


def test_roots_and_non_roots():
    g = _graph(("a", "b"), ("c", "b"), ("b", "d"), nodes=("z",))
    roots = roots_of(g)
    assert [roots.dequeue() for _ in range(len(roots))] == ["z", "a", "c"]
    non_roots = non_roots_of(g)
    assert list(non_roots.all_unique()) == ["b", "d"]
    assert non_roots.count("b") == 2
    assert non_roots.count("d") == 1


# ── acyclic input ────────────────────────────────────────────────────


def test_acyclic_example_single_batch():
    g = parse_into("a b c c f g e f h h", Graph())
    results = list(topological_ordering(g))
    assert len(results) == 1
    (result,) = results
    assert result.cycle is None
    assert not result.has_cycle
    assert sorted(result.nodes) == ["a", "b", "c", "e", "f", "g", "h"]
    _assert_respects(result.nodes, [("a", "b"), ("e", "f"), ("f", "g")])


def test_acyclic_order_is_fifo_over_insertion_order():
    g = parse_into("a b c c f g e f h h", Graph())
    (result,) = topological_ordering(g)
    assert result.nodes == ("a", "c", "e", "h", "b", "f", "g")


def test_acyclic_diamond():
    edges = [("a", "b"), ("a", "c"), ("b", "d"), ("c", "d"), ("e", "c")]
    g = _graph(*edges)
    nodes, cycles = order_nodes(g)
    assert cycles == []
    assert sorted(nodes) == ["a", "b", "c", "d", "e"]
    _assert_respects(nodes, edges)


def test_acyclic_ordering_does_not_mutate_graph():
    edges = [("a", "b"), ("b", "c")]
    g = _graph(*edges)
    list(topological_ordering(g))
    assert list(g.edges()) == edges


def test_empty_graph_yields_nothing():
    assert list(topological_ordering(Graph())) == []


def test_isolated_nodes():
    g = _graph(nodes=("x", "y"))
    assert list(topological_ordering(g)) == [OrderingResult(nodes=("x", "y"))]


# ── cyclic input ─────────────────────────────────────────────────────


def test_three_cycle():
    g = _graph(("a", "b"), ("b", "c"), ("c", "a"))
    results = _drain_checking_cycles(g)
    assert len(results) == 2
    assert results[0] == OrderingResult(nodes=(), cycle=("a", "b", "c"))
    assert results[1].cycle is None
    assert sorted(results[1].nodes) == ["a", "b", "c"]
    assert not g.has_edge("c", "a")


def test_two_disjoint_cycles_reported_separately():
    g = _graph(("a", "b"), ("b", "a"), ("x", "y"), ("y", "z"), ("z", "x"))
    results = _drain_checking_cycles(g)
    cycles = [set(r.cycle) for r in results if r.cycle is not None]
    assert cycles == [{"a", "b"}, {"x", "y", "z"}]
    final = results[-1]
    assert final.cycle is None
    assert sorted(final.nodes) == ["a", "b", "x", "y", "z"]


def test_nested_cycles_all_broken():
    edges = [("a", "b"), ("b", "c"), ("c", "a"), ("b", "a"), ("c", "b")]
    g = _graph(*edges)
    results = _drain_checking_cycles(g)
    assert sum(r.has_cycle for r in results) >= 2
    assert sorted(results[-1].nodes) == ["a", "b", "c"]


def test_cycle_with_acyclic_prefix_and_suffix():
    g = parse_into("start a a b b c c a c end", Graph())
    nodes, cycles = order_nodes(g)
    assert len(cycles) == 1
    assert set(cycles[0]) == {"a", "b", "c"}
    assert sorted(nodes) == ["a", "b", "c", "end", "start"]
    assert nodes[0] == "start"
    assert nodes.index("c") < nodes.index("end")


def test_sink_candidate_without_cycle_is_skipped():
    g = Graph()
    g.add_node("s")
    g.put_edge("x", "s")
    g.put_edge("x", "y")
    g.put_edge("y", "x")
    assert list(non_roots_of(g).all_unique())[0] == "s"

    results = _drain_checking_cycles(g)
    assert set(results[0].cycle) == {"x", "y"}
    assert sorted(results[-1].nodes) == ["s", "x", "y"]


def test_self_loop_is_a_cycle():
    g = _graph(("a", "a"), ("a", "b"))
    results = list(topological_ordering(g))
    assert results[0].cycle == ("a",)
    assert results[1].nodes == ("a", "b")


def test_batches_never_mix_with_cycles():
    g = _graph(("a", "b"), ("b", "a"), ("c", "d"))
    for result in topological_ordering(g):
        assert bool(result.nodes) != (result.cycle is not None)


def test_sequence_mode_duplicate_edge_cycle():
    g = Graph(dedupe_edges=False)
    parse_into("a b a b b a", g)
    nodes, cycles = order_nodes(g)
    assert all(set(c) == {"a", "b"} for c in cycles)
    assert len(cycles) >= 1
    assert sorted(nodes) == ["a", "b"]


def test_sequence_mode_duplicate_edge_acyclic():
    g = Graph(dedupe_edges=False)
    parse_into("a b a b", g)
    assert order_nodes(g) == (["a", "b"], [])


# ── cancellation ─────────────────────────────────────────────────────


def test_stopping_early_stops_mutation():
    g = _graph(("a", "b"), ("b", "a"), ("x", "y"), ("y", "x"))
    edges_before = len(list(g.edges()))
    ordering = topological_ordering(g)
    first = next(ordering)
    assert first.has_cycle
    assert len(list(g.edges())) == edges_before - 1

    ordering.close()
    assert len(list(g.edges())) == edges_before - 1
    with pytest.raises(StopIteration):
        next(ordering)


def test_nothing_happens_before_first_request():
    g = _graph(("a", "b"), ("b", "a"))
    topological_ordering(g)
    assert g.has_edge("b", "a")
    assert g.has_edge("a", "b")


# ── cycle discovery ──────────────────────────────────────────────────


def test_find_cycle_edge_order():
    g = _graph(("a", "b"), ("b", "c"), ("c", "d"), ("d", "b"))
    assert find_cycle(g, "a") == ["b", "c", "d"]


def test_find_cycle_none_reachable():
    g = _graph(("a", "b"), ("c", "b"), ("x", "y"), ("y", "x"))
    assert find_cycle(g, "a") == []
    assert find_cycle(g, "c") == []


def test_find_cycle_does_not_conflate_branches():
    # b is reached twice on different paths; that is not a cycle.
    g = _graph(("a", "b"), ("a", "c"), ("c", "b"), ("b", "d"))
    assert find_cycle(g, "a") == []


def test_find_cycle_unknown_start_raises():
    with pytest.raises(NodeNotFoundError):
        find_cycle(Graph(), "nope")


def test_find_cycle_long_ring_without_recursion_limit():
    size = 5000
    g = Graph()
    for i in range(size):
        g.put_edge(f"n{i}", f"n{(i + 1) % size}")
    cycle = find_cycle(g, "n0")
    assert len(cycle) == size
    assert cycle[0] == "n0"

    nodes, cycles = order_nodes(g)
    assert len(cycles) == 1
    assert len(nodes) == size


# ── randomized properties ────────────────────────────────────────────


@pytest.mark.parametrize("seed", range(25))
def test_random_graphs_order_every_node_once(seed):
    rng = random.Random(seed)
    names = [f"v{i}" for i in range(rng.randint(1, 30))]
    g = Graph()
    for name in names:
        g.add_node(name)
    for _ in range(rng.randint(0, 60)):
        src, dst = rng.choice(names), rng.choice(names)
        if src != dst:
            g.put_edge(src, dst)
    edge_count = len(list(g.edges()))

    results = _drain_checking_cycles(g)
    cycles = [r for r in results if r.has_cycle]
    batches = [r for r in results if not r.has_cycle]
    assert len(batches) == 1
    assert results[-1] is batches[0]
    assert sorted(batches[0].nodes) == sorted(names)
    assert len(cycles) <= edge_count
    _assert_respects(batches[0].nodes, list(g.edges()))


@pytest.mark.parametrize("seed", range(10))
def test_random_dags_have_no_cycles(seed):
    rng = random.Random(seed)
    names = [f"v{i}" for i in range(20)]
    edges = []
    for _ in range(40):
        i, j = sorted(rng.sample(range(len(names)), 2))
        edges.append((names[i], names[j]))
    g = _graph(*edges)
    nodes, cycles = order_nodes(g)
    assert cycles == []
    _assert_respects(nodes, edges)


# ── cost of cycle search ─────────────────────────────────────────────


def test_find_cycle_skips_explored_start():
    g = _graph(("a", "b"), ("x", "y"), ("y", "x"))
    explored = StringSet()
    assert find_cycle(g, "a", explored) == []
    assert sorted(explored) == ["a", "b"]
    assert find_cycle(g, "b", explored) == []
    assert find_cycle(g, "x", explored) == ["x", "y"]


def test_candidate_scan_is_linear(monkeypatch):
    size = 2000
    g = Graph()
    for i in range(size - 1):
        g.put_edge(f"n{i}", f"n{i + 1}")
    g.put_edge("x", "n0")
    g.put_edge("x", "y")
    g.put_edge("y", "x")
    work = len(g) + len(list(g.edges()))

    calls = 0
    successors = g.successors

    def counting_successors(node):
        nonlocal calls
        calls += 1
        return successors(node)

    monkeypatch.setattr(g, "successors", counting_successors)
    nodes, cycles = order_nodes(g)
    assert cycles == [["x", "y"]]
    assert len(nodes) == size + 2
    assert calls < 3 * work
