import json
import logging

from DS_Visualizer.config import Config, configure_logging, load_config


def test_load_from_file_resolves_library_file(tmp_path):
    cfg = tmp_path / "config.json"
    cfg.write_text(json.dumps({"library_file": "lib.json", "tick_interval_ms": 250}))
    Config.load_from_file(str(cfg))
    assert Config.library_file == str(tmp_path / "lib.json")
    assert Config.tick_interval_ms == 250


def test_load_yaml_merges_layout(tmp_path):
    cfg = tmp_path / "config.yaml"
    cfg.write_text("layout:\n  spawn_max: 500.0\nrun_seed: 7\n")
    data = load_config(str(cfg))
    assert data["run_seed"] == 7
    assert Config.run_seed == 7
    assert Config.layout["spawn_max"] == 500.0
    assert Config.layout["spawn_min"] == 50.0


def test_unknown_and_callable_keys_ignored(tmp_path):
    cfg = tmp_path / "config.json"
    cfg.write_text(json.dumps({"not_a_setting": 1, "input_path": "x"}))
    Config.load_from_file(str(cfg))
    assert not hasattr(Config, "not_a_setting")
    assert callable(Config.input_path)


def test_configure_logging_uses_config_defaults(monkeypatch, tmp_path):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))
    Config.log_level = "DEBUG"
    Config.log_file = str(tmp_path / "visualizer.log")
    configure_logging()
    configure_logging("WARNING", filename=str(tmp_path / "other.log"))
    assert calls[0]["level"] == "DEBUG"
    assert calls[0]["filename"] == str(tmp_path / "visualizer.log")
    assert calls[0]["format"] == "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    assert calls[1]["level"] == "WARNING"
    assert calls[1]["filename"] == str(tmp_path / "other.log")
