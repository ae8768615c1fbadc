"""
main.py — Graph Search Lab Flask App
=====================================
JSON API over one shared graph and one AnimationScheduler.

Routes:
  GET    /api/graph                – graph as JSON (+ frozen flag)
  POST   /api/graph/nodes          – add a node            {x, y, label?}
  PATCH  /api/graph/nodes/<id>     – move a node           {x, y}
  DELETE /api/graph/nodes/<id>     – remove a node and its edges
  POST   /api/graph/edges          – add an edge           {source, target, weight?}
  DELETE /api/graph/edges          – remove an edge        {source, target}
  POST   /api/graph/generate       – random graph          {nodes, seed?}
  POST   /api/graph/default        – load the 9-node fixture
  POST   /api/graph/clear          – empty the graph
  GET    /api/algorithms           – registry + heuristic names
  POST   /api/run                  – start a run           {algorithm, start, goal?, heuristic?, speed?, autoplay?}
  POST   /api/play | /api/pause | /api/resume | /api/reset
  POST   /api/speed                – set speed multiplier  {speed}
  POST   /api/step/next            – manual step forward
  POST   /api/step/prev            – manual step backward
  POST   /api/step/goto            – jump to a step        {index}   (-1 = before the first)
  POST   /api/step/rewind          – back before the first step
  POST   /api/step/end             – run the rest and show the last step
  GET    /api/state                – scheduler view at the cursor
  GET    /api/metrics              – analytics for the current run

Running:
  python main.py                 (port 5000)
  flask --app main run           (create_app is picked up as the factory)

Playback clock:
  The scheduler runs on a PollingTimer.  Every request polls it first,
  so a client that polls /api/state at any rate sees every tick that has
  become due since its last request.

Errors:
  GraphSearchError subclasses become {"error", "type"} JSON with status
  404 (unknown node), 409 (illegal state) or 400 (anything else).
"""

import logging
import math
import os
import sys

from flask import Flask, current_app, jsonify, request

# add project root to path so imports work
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from algorithms import list_algorithms
from algorithms.heuristics import heuristic_names
from config import Config
from engine import AnimationScheduler, PollingTimer
from graph import (
    Graph,
    GraphSearchError,
    IllegalStateError,
    InvalidInputError,
    UnknownNodeError,
    scaled_distance,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------
def create_app(config_file=None) -> Flask:
    if config_file:
        Config.load_from_file(config_file)
    else:
        Config.load_from_env()

    app = Flask(__name__)
    timer = PollingTimer()
    graph = Graph.default()
    app.config["LAB_TIMER"] = timer
    app.config["LAB_GRAPH"] = graph
    app.config["LAB_SCHEDULER"] = AnimationScheduler(graph, timer=timer)

    @app.before_request
    def _poll_timer():
        timer.poll()

    app.register_error_handler(GraphSearchError, _handle_lab_error)
    _register_routes(app)
    return app


def get_graph() -> Graph:
    return current_app.config["LAB_GRAPH"]


def get_scheduler() -> AnimationScheduler:
    return current_app.config["LAB_SCHEDULER"]


def _handle_lab_error(err: GraphSearchError):
    if isinstance(err, UnknownNodeError):
        status = 404
    elif isinstance(err, IllegalStateError):
        status = 409
    else:
        status = 400
    logger.info("%s: %s", type(err).__name__, err)
    return jsonify({"error": str(err), "type": type(err).__name__}), status


# ---------------------------------------------------------------------------
# Request helpers
# ---------------------------------------------------------------------------
def _body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _required(data: dict, key: str):
    if data.get(key) is None:
        raise InvalidInputError(f"Missing field {key!r}")
    return data[key]


def _number(data: dict, key: str, default=None) -> float:
    value = data.get(key, default)
    if value is None:
        raise InvalidInputError(f"Missing field {key!r}")
    if isinstance(value, bool):
        raise InvalidInputError(f"Field {key!r} must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"Field {key!r} must be a number, got {value!r}") from None
    if math.isnan(number) or math.isinf(number):
        raise InvalidInputError(f"Field {key!r} must be finite, got {value!r}")
    return number


def _graph_payload(graph: Graph) -> dict:
    data = graph.to_dict()
    data["frozen"] = graph.is_frozen
    return data


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------
def _register_routes(app: Flask) -> None:

    # -- graph ---------------------------------------------------------------
    @app.route("/api/graph", methods=["GET"])
    def api_graph():
        return jsonify(_graph_payload(get_graph()))

    @app.route("/api/graph/nodes", methods=["POST"])
    def api_add_node():
        data = _body()
        node = get_graph().add_node(_number(data, "x"), _number(data, "y"), data.get("label"))
        return jsonify(node.to_dict()), 201

    @app.route("/api/graph/nodes/<node_id>", methods=["PATCH"])
    def api_move_node(node_id):
        data = _body()
        node = get_graph().update_node_position(node_id, _number(data, "x"), _number(data, "y"))
        return jsonify(node.to_dict())

    @app.route("/api/graph/nodes/<node_id>", methods=["DELETE"])
    def api_remove_node(node_id):
        get_graph().remove_node(node_id)
        return jsonify(_graph_payload(get_graph()))

    @app.route("/api/graph/edges", methods=["POST"])
    def api_add_edge():
        graph = get_graph()
        data = _body()
        source = _required(data, "source")
        target = _required(data, "target")
        if data.get("weight") is None:
            # default weight = scaled straight-line distance, like generated graphs
            weight = scaled_distance(graph.require_node(source), graph.require_node(target))
        else:
            weight = _number(data, "weight")
        edge = graph.add_edge(source, target, weight)
        return jsonify(edge.to_dict()), 201

    @app.route("/api/graph/edges", methods=["DELETE"])
    def api_remove_edge():
        data = _body()
        get_graph().remove_edge(_required(data, "source"), _required(data, "target"))
        return jsonify(_graph_payload(get_graph()))

    @app.route("/api/graph/generate", methods=["POST"])
    def api_graph_generate():
        data = _body()
        num_nodes = data.get("nodes", 10)
        if isinstance(num_nodes, bool) or not isinstance(num_nodes, int):
            raise InvalidInputError(f"Field 'nodes' must be an integer, got {num_nodes!r}")
        get_graph().generate_random_graph(num_nodes, seed=data.get("seed"))
        return jsonify(_graph_payload(get_graph()))

    @app.route("/api/graph/default", methods=["POST"])
    def api_graph_default():
        get_graph().reset_to_default()
        return jsonify(_graph_payload(get_graph()))

    @app.route("/api/graph/clear", methods=["POST"])
    def api_graph_clear():
        get_graph().clear()
        return jsonify(_graph_payload(get_graph()))

    # -- algorithms ----------------------------------------------------------
    @app.route("/api/algorithms", methods=["GET"])
    def api_algorithms():
        return jsonify({
            "algorithms": [info.to_dict() for info in list_algorithms()],
            "heuristics": heuristic_names(),
        })

    # -- run lifecycle -------------------------------------------------------
    @app.route("/api/run", methods=["POST"])
    def api_run():
        data = _body()
        heuristic = data.get("heuristic")
        if heuristic is not None and not isinstance(heuristic, str):
            raise InvalidInputError("Field 'heuristic' must be the name of a built-in heuristic")
        speed = data.get("speed")
        get_scheduler().start(
            _required(data, "algorithm"),
            _required(data, "start"),
            goal=data.get("goal"),
            heuristic=heuristic,
            speed=_number(data, "speed") if speed is not None else None,
            autoplay=bool(data.get("autoplay", True)),
        )
        return jsonify(get_scheduler().view())

    @app.route("/api/play", methods=["POST"])
    def api_play():
        get_scheduler().play()
        return jsonify(get_scheduler().view())

    @app.route("/api/pause", methods=["POST"])
    def api_pause():
        get_scheduler().pause()
        return jsonify(get_scheduler().view())

    @app.route("/api/resume", methods=["POST"])
    def api_resume():
        get_scheduler().resume()
        return jsonify(get_scheduler().view())

    @app.route("/api/reset", methods=["POST"])
    def api_reset():
        get_scheduler().reset()
        return jsonify(get_scheduler().view())

    @app.route("/api/speed", methods=["POST"])
    def api_speed():
        get_scheduler().set_speed(_number(_body(), "speed"))
        return jsonify(get_scheduler().view())

    # -- manual stepping -----------------------------------------------------
    @app.route("/api/step/next", methods=["POST"])
    def api_step_next():
        get_scheduler().step_forward_once()
        return jsonify(get_scheduler().view())

    @app.route("/api/step/prev", methods=["POST"])
    def api_step_prev():
        get_scheduler().step_backward_once()
        return jsonify(get_scheduler().view())

    @app.route("/api/step/goto", methods=["POST"])
    def api_step_goto():
        get_scheduler().jump_to(_required(_body(), "index"))
        return jsonify(get_scheduler().view())

    @app.route("/api/step/rewind", methods=["POST"])
    def api_step_rewind():
        get_scheduler().rewind()
        return jsonify(get_scheduler().view())

    @app.route("/api/step/end", methods=["POST"])
    def api_step_end():
        get_scheduler().jump_to_end()
        return jsonify(get_scheduler().view())

    # -- observation ---------------------------------------------------------
    @app.route("/api/state", methods=["GET"])
    def api_state():
        return jsonify(get_scheduler().view())

    @app.route("/api/metrics", methods=["GET"])
    def api_metrics():
        metrics = get_scheduler().metrics()
        return jsonify(metrics.to_dict() if metrics else None)

# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    logging.basicConfig(
        level=Config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = create_app()
    logger.info("Graph Search Lab listening on http://localhost:5000")
    app.run(host="0.0.0.0", port=5000)
