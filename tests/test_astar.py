import heapq
import math

import pytest

from algorithms import SearchParams, StepKind, make_heuristic
from algorithms import astar
from algorithms.base import path_cost
from graph import Graph, InvalidInputError


def run_all(graph, start, goal, heuristic):
    state = astar.init(graph, SearchParams(start=start, goal=goal, heuristic=heuristic))
    steps = []
    while True:
        transition = astar.advance(state, graph)
        if transition is None:
            return steps
        state = transition.state
        steps.append(transition.step)


def dijkstra_cost(graph, start, goal):
    dist = {start: 0.0}
    heap = [(0.0, start)]
    done = set()
    while heap:
        d, node = heapq.heappop(heap)
        if node in done:
            continue
        if node == goal:
            return d
        done.add(node)
        for nbr, w in graph.neighbours(node):
            if d + w < dist.get(nbr, math.inf):
                dist[nbr] = d + w
                heapq.heappush(heap, (d + w, nbr))
    return None


def zero(_node):
    return 0.0


def test_fixture_path_and_first_steps(graph):
    steps = run_all(graph, "A", "I", make_heuristic("euclidean", graph, "I"))
    assert steps[0].kind is StepKind.EXPAND and steps[0].node == "A"
    assert [(s.kind, s.node) for s in steps[1:3]] == [(StepKind.RELAX, "B"), (StepKind.RELAX, "C")]
    assert steps[1].superseded is None
    assert steps[1].entry.key == pytest.approx(steps[1].snapshot.f_score["B"])

    final = steps[-1]
    assert final.kind is StepKind.SOLVED and final.node == "I"
    assert final.path[0] == "A" and final.path[-1] == "I"
    assert final.snapshot.g_score["I"] == pytest.approx(dijkstra_cost(graph, "A", "I"))


@pytest.mark.parametrize("seed", range(8))
@pytest.mark.parametrize("heuristic", ["zero", "euclidean"])
def test_cost_matches_dijkstra(seed, heuristic):
    g = Graph()
    g.generate_random_graph(14, seed=seed)
    goal = g.node_ids()[-1]
    steps = run_all(g, "A", goal, make_heuristic(heuristic, g, goal))
    final = steps[-1]
    assert final.kind is StepKind.SOLVED
    assert path_cost(g, final.path) == pytest.approx(dijkstra_cost(g, "A", goal))


def test_relax_carries_superseded_entry():
    g = Graph()
    for x in range(3):
        g.add_node(x, 0)
    g.add_edge("A", "C", 10.0)
    g.add_edge("A", "B", 1.0)
    g.add_edge("B", "C", 1.0)

    steps = run_all(g, "A", "C", zero)
    kinds = [(s.kind, s.node) for s in steps]
    assert kinds == [
        (StepKind.EXPAND, "A"),
        (StepKind.RELAX, "C"),
        (StepKind.RELAX, "B"),
        (StepKind.EXPAND, "B"),
        (StepKind.RELAX, "C"),
        (StepKind.SOLVED, "C"),
    ]
    improved = steps[4]
    assert improved.superseded.key == pytest.approx(10.0)
    assert improved.entry.key == pytest.approx(2.0)
    assert improved.entry.seq == improved.superseded.seq
    assert improved.snapshot.parent_map["C"] == "B"
    assert steps[-1].path == ("A", "B", "C")


def test_closed_and_non_improving_neighbours_emit_nothing():
    g = Graph()
    for x in range(3):
        g.add_node(x, 0)
    g.add_edge("A", "B", 1.0)
    g.add_edge("A", "C", 1.0)
    g.add_edge("B", "C", 5.0)
    steps = run_all(g, "A", "C", zero)
    relaxed = [s.node for s in steps if s.kind is StepKind.RELAX]
    # B→A is closed and B→C (cost 6) does not beat A→C (cost 1)
    assert relaxed == ["B", "C"]


def test_equal_f_prefers_smaller_h():
    g = Graph()
    for x in range(4):
        g.add_node(x, 0)
    g.add_edge("A", "B", 1.0)
    g.add_edge("A", "C", 2.0)
    g.add_edge("B", "D", 5.0)
    g.add_edge("C", "D", 5.0)
    h = {"A": 0.0, "B": 1.0, "C": 0.0, "D": 0.0}
    steps = run_all(g, "A", "D", h.__getitem__)
    expanded = [s.node for s in steps if s.kind is StepKind.EXPAND]
    # B and C both have f = 2; C wins on h
    assert expanded[:3] == ["A", "C", "B"]


def test_unreachable_goal_fails(graph):
    lonely = graph.add_node(590, 590)
    steps = run_all(graph, "A", lonely.id, zero)
    assert steps[-1].kind is StepKind.FAILED
    assert steps[-1].path is None
    assert len(steps[-1].snapshot.order) == 9


@pytest.mark.parametrize("bad", [-1.0, float("nan"), float("inf"), "far", None, True])
def test_bad_heuristic_values_rejected_before_first_step(graph, bad):
    def h(node):
        return bad if node == "E" else 0.0

    with pytest.raises(InvalidInputError):
        astar.init(graph, SearchParams(start="A", goal="I", heuristic=h))


def test_requires_goal_and_heuristic(graph):
    with pytest.raises(InvalidInputError):
        astar.init(graph, SearchParams(start="A", heuristic=zero))
    with pytest.raises(InvalidInputError):
        astar.init(graph, SearchParams(start="A", goal="A", heuristic=zero))
    with pytest.raises(InvalidInputError):
        astar.init(graph, SearchParams(start="A", goal="I"))


def test_heuristic_evaluated_once_per_node(graph):
    calls = []

    def h(node):
        calls.append(node)
        return 0.0

    run_all(graph, "A", "I", h)
    assert sorted(calls) == sorted(graph.node_ids())


def test_unknown_heuristic_name(graph):
    with pytest.raises(InvalidInputError):
        make_heuristic("chebyshev", graph, "I")


def test_euclidean_never_overestimates_on_fixture(graph):
    h = make_heuristic("euclidean", graph, "I")
    for nid in graph.node_ids():
        assert h(nid) <= dijkstra_cost(graph, nid, "I") + 1e-9
