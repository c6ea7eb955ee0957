"""Tests for JsonFileConfigStore and load_config."""

import json
import os

import pytest

from sgfedit.common.config_store import JsonFileConfigStore, load_config


class TestJsonFileConfigStore:
    @pytest.fixture
    def temp_config(self, tmp_path):
        """Create a temporary config file path."""
        return str(tmp_path / "config.json")

    def test_put_and_get(self, temp_config):
        store = JsonFileConfigStore(temp_config)
        store.put("board", default_size=13, pass_normalization_max=19)

        assert store.get("board") == {"default_size": 13, "pass_normalization_max": 19}

    def test_get_nonexistent(self, temp_config):
        store = JsonFileConfigStore(temp_config)
        assert store.get("nonexistent") is None

    def test_get_returns_copy(self, temp_config):
        store = JsonFileConfigStore(temp_config)
        store.put("files", default_encoding="UTF-8")

        section = store.get("files")
        section["default_encoding"] = "Latin-1"

        assert store.get("files") == {"default_encoding": "UTF-8"}

    def test_exists(self, temp_config):
        store = JsonFileConfigStore(temp_config)
        store.put("board", default_size=9)

        assert store.exists("board") is True
        assert store.exists("files") is False

    def test_delete(self, temp_config):
        store = JsonFileConfigStore(temp_config)
        store.put("board", default_size=9)

        assert store.delete("board") is True
        assert store.exists("board") is False
        assert store.delete("board") is False

    def test_put_replaces_section(self, temp_config):
        store = JsonFileConfigStore(temp_config)
        store.put("board", default_size=9, pass_normalization_max=19)
        store.put("board", default_size=13)

        assert store.get("board") == {"default_size": 13}

    def test_persistence(self, temp_config):
        JsonFileConfigStore(temp_config).put("board", default_size=9)

        assert JsonFileConfigStore(temp_config).get("board") == {"default_size": 9}

    def test_dict_conversion_works(self, temp_config):
        store = JsonFileConfigStore(temp_config)
        store.put("board", default_size=9)
        store.put("files", detect_encoding=False)

        assert dict(store) == {"board": {"default_size": 9}, "files": {"detect_encoding": False}}
        assert len(store) == 2
        assert "board" in store
        assert 42 not in store

    def test_saved_file_is_json(self, temp_config):
        store = JsonFileConfigStore(temp_config, indent=2)
        store.put("files", default_encoding="日本語")

        with open(temp_config, encoding="utf-8") as f:
            text = f.read()
        assert json.loads(text) == {"files": {"default_encoding": "日本語"}}
        assert "日本語" in text

    def test_no_temp_files_left(self, tmp_path):
        path = str(tmp_path / "config.json")
        store = JsonFileConfigStore(path)
        store.put("board", default_size=9)
        store.put("board", default_size=13)

        assert sorted(os.listdir(tmp_path)) == ["config.json"]

    def test_unserializable_value_keeps_old_file(self, temp_config):
        store = JsonFileConfigStore(temp_config)
        store.put("board", default_size=9)

        with pytest.raises(TypeError):
            store.put("board", default_size=object())

        with open(temp_config, encoding="utf-8") as f:
            assert json.load(f) == {"board": {"default_size": 9}}

    def test_creates_missing_directory(self, tmp_path):
        path = str(tmp_path / "nested" / "dir" / "config.json")
        JsonFileConfigStore(path).put("board", default_size=9)

        assert os.path.exists(path)

    def test_repr(self, temp_config):
        assert repr(JsonFileConfigStore(temp_config)) == f"JsonFileConfigStore({temp_config!r})"


class TestCorruptFiles:
    def test_corrupt_file_is_preserved(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json", encoding="utf-8")

        store = JsonFileConfigStore(str(path))

        assert dict(store) == {}
        backups = [name for name in os.listdir(tmp_path) if name.startswith("config.json.corrupt.")]
        assert len(backups) == 1
        assert (tmp_path / backups[0]).read_text(encoding="utf-8") == "{not json"

    def test_non_object_file_ignored(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")

        assert dict(JsonFileConfigStore(str(path))) == {}

    def test_non_dict_sections_removed(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"board": {"default_size": 9}, "files": "oops"}), encoding="utf-8")

        store = JsonFileConfigStore(str(path))

        assert dict(store) == {"board": {"default_size": 9}}


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        reader = load_config(str(tmp_path / "missing.json"))

        assert reader.get_board().default_size == 19
        assert reader.get_files().default_encoding == "UTF-8"
        assert reader.get_files().detect_encoding is True

    def test_reads_sections(self, tmp_path):
        path = str(tmp_path / "config.json")
        store = JsonFileConfigStore(path)
        store.put("board", default_size=13, pass_normalization_max=21)
        store.put("files", default_encoding="GBK", detect_encoding="no")

        reader = load_config(path)

        assert reader.get_board().default_size == 13
        assert reader.get_board().pass_normalization_max == 21
        assert reader.get_files().default_encoding == "GBK"
        assert reader.get_files().detect_encoding is False

    def test_invalid_values_fall_back(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"board": {"default_size": 99}}), encoding="utf-8")

        assert load_config(str(path)).get_board().default_size == 19
