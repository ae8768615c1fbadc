"""
config.py — Search Lab Settings
================================
Process-wide settings as class attributes, optionally overridden from a
JSON file:

    Config.load_from_file("lab.json")

Only keys that already exist on Config are applied; anything else in the
file is ignored with a warning.
"""

import json
import logging
import os

logger = logging.getLogger(__name__)


class Config:
    """
    Attributes:
        base_interval       : Seconds between playback ticks at speed 1.0.
        default_speed       : Speed multiplier used when start() gets none.
        min_speed/max_speed : set_speed() clamps into this range.
        distance_scale      : Canvas pixels per unit of edge weight.  Random
                              and fixture graphs derive weights from node
                              distance / distance_scale, and the euclidean
                              heuristic uses the same scale so it stays
                              admissible.
        canvas_width/height : Area random graphs are laid out in.
        canvas_padding      : Margin kept free around the canvas edge.
        min_node_distance   : Minimum spacing between random nodes.
        placement_attempts  : Tries per node before accepting an overlap.
        log_level           : Level handed to logging.basicConfig by main.py.
    """

    base_interval      = 1.0
    default_speed      = 1.0
    min_speed          = 0.5
    max_speed          = 3.0

    distance_scale     = 10.0
    canvas_width       = 600.0
    canvas_height      = 500.0
    canvas_padding     = 50.0
    min_node_distance  = 84.0
    placement_attempts = 100

    log_level          = "INFO"

    ENV_VAR = "SEARCH_LAB_CONFIG"

    @classmethod
    def load_from_file(cls, path: str) -> None:
        """Apply the JSON object stored at ``path`` on top of the defaults."""
        with open(path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a JSON object, got {type(data).__name__}")
        cls.apply(data)
        logger.info("Loaded configuration from %s", path)

    @classmethod
    def apply(cls, values: dict) -> None:
        for key, value in values.items():
            if not key.islower() or not hasattr(cls, key) or callable(getattr(cls, key)):
                logger.warning("Ignoring unknown config key %r", key)
                continue
            setattr(cls, key, value)

    @classmethod
    def load_from_env(cls) -> bool:
        """Load the file named by $SEARCH_LAB_CONFIG, if set."""
        path = os.environ.get(cls.ENV_VAR)
        if not path:
            return False
        cls.load_from_file(path)
        return True

    @classmethod
    def snapshot(cls) -> dict:
        return {
            k: v for k, v in vars(cls).items()
            if k.islower() and not k.startswith("_")
            and not isinstance(v, (classmethod, staticmethod))
        }
