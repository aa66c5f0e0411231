"""Tests for the configuration file and tweak state store."""

import json

from tweak_launcher.config import DEFAULT_TWEAKS_DIR, Config, load_config, save_config


class TestConfig:
    def test_defaults(self):
        config = Config()
        assert config.tweaks_dir == str(DEFAULT_TWEAKS_DIR)
        assert config.target_path == ""
        assert config.language == "en"
        assert config.tweak_states == {}

    def test_get_and_set_enabled(self):
        config = Config()
        assert config.get_enabled("Sample") is None

        config.set_enabled("Sample", False)

        assert config.get_enabled("Sample") is False
        assert config.get_enabled("sample") is None

    def test_from_dict_ignores_unknown_keys(self):
        config = Config.from_dict({"target_path": "/bin/true", "providers": []})
        assert config.target_path == "/bin/true"

    def test_from_dict_drops_non_boolean_states(self):
        config = Config.from_dict({"tweak_states": {"a": True, "b": "yes", "c": 0}})
        assert config.tweak_states == {"a": True}

    def test_from_dict_tolerates_bad_states_type(self):
        config = Config.from_dict({"tweak_states": ["a"]})
        assert config.tweak_states == {}


class TestLoadSave:
    def test_round_trip(self, tmp_path):
        path = tmp_path / "config.json"
        config = Config(tweaks_dir="/tweaks", target_path="/apps/server", language="de")
        config.set_enabled("Sample", False)

        save_config(config, path)
        loaded = load_config(path)

        assert loaded == config

    def test_save_creates_directory(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "config.json"

        save_config(Config(), path)

        assert json.loads(path.read_text(encoding="utf-8"))["tweak_states"] == {}

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config(tmp_path / "absent.json") == Config()

    def test_invalid_json_gives_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{oops", encoding="utf-8")
        assert load_config(path) == Config()

    def test_non_object_gives_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("[]", encoding="utf-8")
        assert load_config(path) == Config()
