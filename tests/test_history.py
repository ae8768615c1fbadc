import json

import pytest

from algorithms import SearchParams, StepKind, get_algorithm, make_heuristic
from engine import History, SearchRun


def _history(graph, key="bfs", start="A", goal=None, heuristic=None):
    params = SearchParams(start=start, goal=goal, heuristic=heuristic)
    return History(SearchRun(get_algorithm(key), graph, params))


def _exposed(history):
    snap = history.current_snapshot
    return json.dumps(snap.to_dict(), sort_keys=True)


def test_starts_before_the_first_step(graph):
    history = _history(graph)
    assert history.cursor == -1
    assert len(history) == 0
    assert history.current_step is None
    assert history.current_snapshot.step_index == -1
    assert list(history.current_snapshot.frontier) == ["A"]


def test_step_forward_produces_and_records(graph):
    history = _history(graph)
    step = history.step_forward()
    assert step.kind is StepKind.DEQUEUE and step.node == "A"
    assert history.cursor == 0 and len(history) == 1
    assert history.at_tail


def test_backward_then_forward_reexposes_same_steps(graph):
    history = _history(graph, "astar", "A", "I", make_heuristic("euclidean", graph, "I"))
    for _ in range(7):
        history.step_forward()
    before = _exposed(history)
    recorded = len(history)

    for _ in range(4):
        assert history.step_backward()
    assert history.cursor == 2
    for _ in range(4):
        history.step_forward()

    assert _exposed(history) == before
    assert len(history) == recorded


@pytest.mark.parametrize("k", [1, 2, 5])
def test_forward_past_the_tail_then_back_from_mid_run(graph, k):
    history = _history(graph, "dfs", "A")
    assert history.goto(5)
    assert history.goto(3)
    before = _exposed(history)
    recorded = history.steps

    for _ in range(k):
        assert history.step_forward() is not None
    assert len(history) == max(6, 4 + k)
    for _ in range(k):
        assert history.step_backward()

    assert history.cursor == 3
    assert _exposed(history) == before
    assert history.steps[:6] == recorded


def test_step_backward_stops_at_pre_start(graph):
    history = _history(graph)
    history.step_forward()
    assert history.step_backward()
    assert not history.step_backward()
    assert history.cursor == -1
    assert len(history) == 1


def test_forward_at_exhausted_tail_returns_none(graph):
    history = _history(graph, "dfs")
    last = history.run_to_completion()
    assert last.kind is StepKind.SOLVED
    assert history.is_complete
    total = len(history)
    assert history.step_forward() is None
    assert len(history) == total and history.cursor == total - 1


def test_goto_fetches_forward_and_moves_back(graph):
    history = _history(graph)
    assert history.goto(5)
    assert history.cursor == 5 and len(history) == 6
    assert history.goto(1)
    assert history.cursor == 1 and len(history) == 6
    assert history.goto(-1)
    assert not history.goto(-2)
    assert not history.goto(500)
    assert history.is_complete


def test_record_rejects_out_of_order_steps(graph):
    source = _history(graph)
    source.goto(2)
    target = History()
    target.record(source[0])
    with pytest.raises(ValueError):
        target.record(source[2])


def test_clear_and_detach(graph):
    history = _history(graph)
    history.goto(3)
    history.clear()
    assert len(history) == 0 and history.cursor == -1
    history.detach()
    assert history.run is None
    assert history.step_forward() is None
    assert history.current_snapshot is None


def test_same_inputs_give_identical_logs(graph):
    def log():
        history = _history(graph, "astar", "A", "I", make_heuristic("euclidean", graph, "I"))
        history.run_to_completion()
        return json.dumps([s.to_dict() for s in history.steps], sort_keys=True)

    assert log() == log()
