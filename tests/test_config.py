import json
from pathlib import Path

import pytest

from rainbowtree import config as config_module
from rainbowtree.config import (
    AppConfig,
    default_config,
    load_config,
    map_path,
    validate_config,
)
from rainbowtree.errors import ConfigError


def _write(tmp_path, payload, name="config.json"):
    path = tmp_path / name
    path.write_text(
        payload if isinstance(payload, str) else json.dumps(payload),
        encoding="utf-8",
    )
    return path


class TestDefaults:
    def test_default_values(self):
        config = default_config()
        assert config.tree_command == ["tree"]
        assert config.color_interval_ms == 3000
        assert config.color_interval_sec == 3.0
        assert config.pacing_threshold == 100
        assert config.prompt == "> "
        assert config.log_file is None

    def test_tree_command_not_shared(self):
        first, second = AppConfig(), AppConfig()
        first.tree_command.append("-a")
        assert second.tree_command == ["tree"]


class TestMapPath:
    def test_home_prefix(self):
        assert map_path("~/logs/app.log") == str((Path.home() / "logs" / "app.log").resolve())

    def test_app_root_prefix(self):
        root = Path(config_module.__file__).resolve().parent
        assert map_path("@") == str(root)
        assert map_path("@/data/x.json") == str(root / "data" / "x.json")

    def test_absolute_path_kept(self, tmp_path):
        target = tmp_path / "a.log"
        assert map_path(str(target)) == str(target.resolve())

    def test_relative_needs_base(self):
        with pytest.raises(ConfigError, match="Relative paths"):
            map_path("logs/app.log")

    def test_relative_with_base(self, tmp_path):
        assert map_path("logs/app.log", str(tmp_path)) == str(
            (tmp_path / "logs" / "app.log").resolve()
        )

    def test_nul_rejected(self):
        with pytest.raises(ConfigError, match="NUL"):
            map_path("~/bad\0name")


class TestValidateConfig:
    def test_empty_object_is_valid(self):
        validate_config({})

    def test_not_an_object(self):
        with pytest.raises(ConfigError, match="JSON object"):
            validate_config(["tree"])

    def test_unknown_fields_listed(self):
        with pytest.raises(ConfigError, match="Unknown config fields: colour, zzz"):
            validate_config({"zzz": 1, "colour": "red"})

    @pytest.mark.parametrize(
        "value", [[], "tree", ["tree", ""], ["tree", 3]]
    )
    def test_bad_tree_command(self, value):
        with pytest.raises(ConfigError, match="tree_command"):
            validate_config({"tree_command": value})

    @pytest.mark.parametrize("value", [0, -5, True, 2.5, "100"])
    def test_bad_color_interval(self, value):
        with pytest.raises(ConfigError, match="color_interval_ms"):
            validate_config({"color_interval_ms": value})

    @pytest.mark.parametrize("value", [-1, 1000, False])
    def test_bad_pacing_threshold(self, value):
        with pytest.raises(ConfigError, match="pacing_threshold"):
            validate_config({"pacing_threshold": value})

    @pytest.mark.parametrize("name", ["prompt", "rickroll_url", "log_file"])
    def test_empty_strings_rejected(self, name):
        with pytest.raises(ConfigError, match=name):
            validate_config({name: ""})

    def test_null_log_file_allowed(self):
        validate_config({"log_file": None})


class TestLoadConfig:
    def test_loads_fields(self, tmp_path):
        path = _write(
            tmp_path,
            {
                "tree_command": ["tree", "-a"],
                "color_interval_ms": 500,
                "pacing_threshold": 0,
                "prompt": "$ ",
                "log_file": "logs/rt.log",
            },
        )

        config = load_config(str(path))

        assert config.tree_command == ["tree", "-a"]
        assert config.color_interval_sec == 0.5
        assert config.pacing_threshold == 0
        assert config.prompt == "$ "
        assert config.rickroll_url == default_config().rickroll_url
        assert config.log_file == str((tmp_path / "logs" / "rt.log").resolve())

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Config not found"):
            load_config(str(tmp_path / "nope.json"))

    def test_invalid_json(self, tmp_path):
        path = _write(tmp_path, "{not json")
        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_config(str(path))

    def test_invalid_field_value(self, tmp_path):
        path = _write(tmp_path, {"pacing_threshold": 5000})
        with pytest.raises(ConfigError, match="between 0 and 999"):
            load_config(str(path))
