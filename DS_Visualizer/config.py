# config.py

import logging
import os

import yaml


class Config:
    """Global configuration optionally loaded from ``input/config.json``.

    Attributes
    ----------
    tick_interval_ms:
        Milliseconds between delivered steps for graph traversals.
    tree_tick_interval_ms:
        Milliseconds between delivered steps for tree traversals.
    run_seed:
        Seed for the random generator that places nodes added without an
        explicit position.
    layout:
        Spawn bounds for new nodes. ``spawn_min`` and ``spawn_max`` apply to
        both axes; ``spring_scale`` sizes :meth:`GraphModel.apply_spring_layout`.
    library_file:
        Path of the JSON file used by :class:`StructureLibrary` when no path
        is supplied.
    log_level:
        Name of the level passed to :func:`configure_logging`.
    """

    # Base directories for package resources
    base_dir = os.path.abspath(os.path.dirname(__file__))
    input_dir = os.path.join(base_dir, "input")
    config_file = os.path.join(input_dir, "config.json")
    library_file = os.path.join(input_dir, "structures.json")

    @staticmethod
    def input_path(*parts: str) -> str:
        """Return absolute path under the ``input`` directory."""
        return os.path.join(Config.input_dir, *parts)

    tick_interval_ms = 800  # graph views animate faster than tree views
    tree_tick_interval_ms = 1000
    run_seed = 0

    layout = {
        "spawn_min": 50.0,
        "spawn_max": 350.0,
        "spring_scale": 150.0,
    }

    log_level = "INFO"
    log_file: str | None = None

    @classmethod
    def load_from_file(cls, path: str) -> None:
        """Load configuration values from a JSON or YAML file.

        Only keys that already exist as attributes on ``Config`` will be
        assigned. Nested dictionaries are merged when the existing attribute is
        also a ``dict``. A relative ``library_file`` is resolved against the
        directory containing ``path``.

        Parameters
        ----------
        path:
            Path to a ``.json``, ``.yaml`` or ``.yml`` configuration file.
        """

        if not os.path.exists(path):
            raise FileNotFoundError(path)
        data = _read_mapping(path)
        cls.config_file = os.path.abspath(path)
        base_dir = os.path.dirname(cls.config_file)

        for key, value in data.items():
            if not hasattr(cls, key) or callable(getattr(cls, key)):
                continue
            if key == "library_file" and not os.path.isabs(value):
                value = os.path.join(base_dir, value)
            current = getattr(cls, key)
            if isinstance(current, dict) and isinstance(value, dict):
                current.update(value)
            else:
                setattr(cls, key, value)


def _read_mapping(path: str) -> dict:
    with open(path) as f:
        if path.endswith((".yaml", ".yml")):
            data = yaml.safe_load(f) or {}
        else:
            import json

            data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"configuration file {path} must contain a mapping")
    return data


def load_config(path: str | None = None) -> dict:
    """Load configuration from ``path`` and return the data."""
    if path is None:
        path = Config.input_path("config.json")
    Config.load_from_file(path)
    return _read_mapping(path)


def configure_logging(level: str | int | None = None, filename: str | None = None) -> None:
    """Configure package logging using ``Config`` defaults."""

    logging.basicConfig(
        level=level if level is not None else Config.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        filename=filename if filename is not None else Config.log_file,
        filemode="a",
    )
