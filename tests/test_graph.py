import math

import pytest

from graph import (
    DuplicateEdgeError,
    Graph,
    IllegalStateError,
    InvalidInputError,
    SelfLoopError,
    UnknownNodeError,
    scaled_distance,
)


def _ids(pairs):
    return [n for n, _ in pairs]


def test_default_fixture_shape(graph):
    assert graph.node_ids() == list("ABCDEFGHI")
    assert graph.edge_count() == 10
    assert _ids(graph.neighbours("A")) == ["B", "C"]
    assert _ids(graph.neighbours("B")) == ["A", "D", "E"]
    assert _ids(graph.neighbours("H")) == ["D", "E"]


def test_fixture_weights_are_rounded_up_distances(graph):
    for edge in graph.edges.values():
        a, b = graph.nodes[edge.source], graph.nodes[edge.target]
        assert edge.weight >= a.distance_to(b) / 10.0
        assert edge.weight == pytest.approx(math.ceil(a.distance_to(b) / 10.0 * 10) / 10)


def test_add_node_assigns_fresh_ids():
    g = Graph()
    a = g.add_node(0, 0)
    b = g.add_node(10, 0, label="second")
    assert (a.id, b.id) == ("A", "B")
    assert b.label == "second"
    g.remove_node("A")
    assert g.add_node(5, 5).id == "A"


def test_ids_continue_past_the_alphabet():
    g = Graph()
    for i in range(27):
        g.add_node(i, i)
    assert "N27" in g.nodes


@pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf, "5", None, True])
def test_node_coordinates_must_be_finite_numbers(graph, bad):
    before = graph.to_dict()
    with pytest.raises(InvalidInputError):
        graph.add_node(bad, 0)
    with pytest.raises(InvalidInputError):
        graph.add_node(0, bad)
    with pytest.raises(InvalidInputError):
        graph.update_node_position("A", bad, 0)
    assert graph.to_dict() == before
    # the default edge weight is still computable for every node
    graph.add_edge("A", "I", scaled_distance(graph.nodes["A"], graph.nodes["I"]))


def test_add_edge_rejections_leave_graph_unchanged(graph):
    before = graph.to_dict()
    with pytest.raises(UnknownNodeError):
        graph.add_edge("A", "Z")
    with pytest.raises(SelfLoopError):
        graph.add_edge("A", "A")
    with pytest.raises(DuplicateEdgeError):
        graph.add_edge("A", "B")
    with pytest.raises(DuplicateEdgeError):
        graph.add_edge("B", "A")          # undirected: same connection
    for bad in (-1.0, float("nan"), float("inf"), "3"):
        with pytest.raises(InvalidInputError):
            graph.add_edge("A", "I", bad)
    assert graph.to_dict() == before


def test_directed_graph_keeps_both_orientations():
    g = Graph(directed=True)
    g.add_node(0, 0)
    g.add_node(1, 0)
    g.add_edge("A", "B")
    g.add_edge("B", "A")
    assert _ids(g.neighbours("A")) == ["B"]
    assert _ids(g.neighbours("B")) == ["A"]
    with pytest.raises(DuplicateEdgeError):
        g.add_edge("A", "B")


def test_remove_node_cascades_edges(graph):
    graph.remove_node("B")
    assert "B" not in graph.nodes
    assert all(not e.touches("B") for e in graph.edges.values())
    assert _ids(graph.neighbours("A")) == ["C"]
    with pytest.raises(UnknownNodeError):
        graph.remove_node("B")


def test_remove_edge(graph):
    graph.remove_edge("B", "A")
    assert graph.edge_between("A", "B") is None
    assert _ids(graph.neighbours("A")) == ["C"]
    with pytest.raises(InvalidInputError):
        graph.remove_edge("A", "B")
    with pytest.raises(UnknownNodeError):
        graph.remove_edge("A", "Z")


def test_adjacency_follows_edge_insertion_order():
    g = Graph()
    for _ in range(4):
        g.add_node(0, 0)
    g.add_edge("A", "D")
    g.add_edge("A", "B")
    g.add_edge("C", "A")
    assert _ids(g.neighbours("A")) == ["D", "B", "C"]


def test_frozen_graph_refuses_every_mutation(graph):
    graph.freeze()
    before = graph.to_dict()
    mutations = [
        lambda: graph.add_node(1, 1),
        lambda: graph.remove_node("A"),
        lambda: graph.add_edge("A", "I"),
        lambda: graph.remove_edge("A", "B"),
        lambda: graph.update_node_position("A", 0, 0),
        lambda: graph.clear(),
        lambda: graph.reset_to_default(),
        lambda: graph.generate_random_graph(5, seed=1),
    ]
    for mutate in mutations:
        with pytest.raises(IllegalStateError):
            mutate()
    assert graph.to_dict() == before
    graph.thaw()
    graph.add_edge("A", "I")


def test_listeners_fire_on_structural_change(graph):
    calls = []
    unsubscribe = graph.subscribe(calls.append)
    graph.add_edge("A", "I")
    graph.remove_node("D")
    assert calls == [graph, graph]
    unsubscribe()
    graph.clear()
    assert len(calls) == 2


def test_random_graph_is_connected_and_seeded():
    g = Graph()
    g.generate_random_graph(12, seed=7)
    assert g.node_count() == 12

    seen, stack = {"A"}, ["A"]
    while stack:
        for nbr, _ in g.neighbours(stack.pop()):
            if nbr not in seen:
                seen.add(nbr)
                stack.append(nbr)
    assert seen == set(g.nodes)

    again = Graph()
    again.generate_random_graph(12, seed=7)
    assert again.to_dict() == g.to_dict()


def test_random_graph_weights_never_undercut_distance():
    g = Graph()
    g.generate_random_graph(15, seed=3)
    for edge in g.edges.values():
        a, b = g.nodes[edge.source], g.nodes[edge.target]
        assert edge.weight >= a.distance_to(b) / 10.0 - 1e-9


@pytest.mark.parametrize("bad", [0, -3, 2.5, True, "4"])
def test_random_graph_rejects_bad_sizes(bad):
    with pytest.raises(InvalidInputError):
        Graph().generate_random_graph(bad)


def test_reset_to_default_and_clear(graph):
    graph.generate_random_graph(4, seed=1)
    graph.reset_to_default()
    assert graph.to_dict() == Graph.default().to_dict()
    graph.clear()
    assert graph.node_count() == 0 and graph.edge_count() == 0


def test_dict_round_trip(graph):
    copy = Graph.from_dict(graph.to_dict())
    assert copy.to_dict() == graph.to_dict()
    assert copy.neighbours("E") == graph.neighbours("E")
