"""Tests for config – board options, YAML loading, translations."""

import pytest

from config import (
    DEFAULTS,
    BoardConfig,
    ConfigError,
    board_configs,
    load_config,
    translate,
)


class TestBoardConfig:
    def test_defaults(self):
        cfg = BoardConfig()
        assert cfg.reload_interval == DEFAULTS["reloadInterval"] == 300_000
        assert cfg.update_interval == DEFAULTS["updateInterval"] == 10_000
        assert cfg.animation_speed == 2500
        assert cfg.show_title and cfg.show_due_date and cfg.show_checklists
        assert not cfg.show_checklist_title
        assert not cfg.whole_list

    def test_from_dict_camel_case(self, monkeypatch):
        monkeypatch.delenv("TRELLO_API_KEY", raising=False)
        monkeypatch.delenv("TRELLO_TOKEN", raising=False)
        cfg = BoardConfig.from_dict({
            "id": "groceries",
            "list": "abc",
            "api_key": "k",
            "token": "t",
            "updateInterval": 5000,
            "showChecklistTitle": True,
            "language": "sv",
        })
        assert cfg.board_id == "groceries"
        assert cfg.list_id == "abc"
        assert (cfg.api_key, cfg.token) == ("k", "t")
        assert cfg.update_interval == 5000
        assert cfg.show_checklist_title
        assert cfg.language == "sv"

    def test_credentials_from_environment(self, monkeypatch):
        monkeypatch.setenv("TRELLO_API_KEY", "env-key")
        monkeypatch.setenv("TRELLO_TOKEN", "env-token")
        cfg = BoardConfig.from_dict({"list": "abc"})
        assert (cfg.api_key, cfg.token) == ("env-key", "env-token")

    def test_explicit_credentials_win(self, monkeypatch):
        monkeypatch.setenv("TRELLO_API_KEY", "env-key")
        cfg = BoardConfig.from_dict({"api_key": "file-key"})
        assert cfg.api_key == "file-key"

    def test_unknown_keys_ignored(self, caplog):
        cfg = BoardConfig.from_dict({"list": "abc", "colour": "red"})
        assert cfg.list_id == "abc"
        assert "colour" in caplog.text

    def test_whole_list_forces_update_interval(self):
        cfg = BoardConfig.from_dict({"wholeList": True, "reloadInterval": 90_000})
        assert cfg.update_interval == 90_000

    @pytest.mark.parametrize("option", ["reloadInterval", "updateInterval"])
    def test_non_positive_interval_rejected(self, option):
        with pytest.raises(ConfigError):
            BoardConfig.from_dict({option: 0})

    def test_source_options(self):
        cfg = BoardConfig.from_dict({"source": "demo", "options": {"checklist_delay": 0}})
        assert cfg.options == {"checklist_delay": 0}
        assert BoardConfig.from_dict({"options": None}).options == {}
        with pytest.raises(ConfigError):
            BoardConfig.from_dict({"options": ["checklist_delay"]})

    def test_translate(self):
        assert BoardConfig(language="pl").translate("NO_CARDS") == "Brak kart na tej liście"


class TestTranslate:
    def test_unknown_language_falls_back_to_english(self):
        assert translate("NO_CARDS", "xx") == "No cards in this list"

    def test_unknown_key_returns_key(self):
        assert translate("MISSING", "de") == "MISSING"


class TestBoardConfigs:
    def test_single_board(self):
        configs = board_configs({"list": "abc"})
        assert [c.list_id for c in configs] == ["abc"]

    def test_boards_list(self):
        configs = board_configs({"boards": [
            {"id": "a", "list": "1"},
            {"id": "b", "list": "2", "source": "demo"},
        ]})
        assert [(c.board_id, c.source) for c in configs] == [("a", "trello"), ("b", "demo")]

    def test_empty(self):
        assert board_configs({}) == []
        assert board_configs({"boards": None}) == []

    def test_duplicate_ids(self):
        with pytest.raises(ConfigError):
            board_configs({"boards": [{"id": "a"}, {"id": "a"}]})

    def test_bad_entries(self):
        with pytest.raises(ConfigError):
            board_configs({"boards": "nope"})
        with pytest.raises(ConfigError):
            board_configs({"boards": ["nope"]})


class TestLoadConfig:
    def test_reads_yaml(self, tmp_path):
        path = tmp_path / "board.yaml"
        path.write_text("boards:\n  - id: a\n    list: '123'\n    wholeList: true\n")
        (cfg,) = board_configs(load_config(str(path)))
        assert cfg.board_id == "a"
        assert cfg.list_id == "123"
        assert cfg.whole_list

    def test_missing_file(self, tmp_path):
        assert load_config(str(tmp_path / "nope.yaml")) == {}

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "board.yaml"
        path.write_text("boards: [unclosed\n")
        with pytest.raises(ConfigError):
            load_config(str(path))
