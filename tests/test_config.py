"""
Tests for engine configuration, dialect presets and the CLI file helpers.
"""

import pytest

from sexpedit.cli.common import atomic_write, detect_line_ending, normalize_line_endings, read_source
from sexpedit.cli.config import CLIConfig
from sexpedit.config import EngineConfig, get_engine_config, reset_engine_config
from sexpedit.dialects import CLOJURE, EMACS_LISP, SCHEME, dialect_for_path, get_dialect
from sexpedit.exceptions import ConfigError, DialectError


class TestEngineConfig:
    """Defaults and SEXPEDIT_* overrides."""

    def test_defaults(self, monkeypatch):
        for key in ("SEXPEDIT_FILL_COLUMN", "SEXPEDIT_MAX_SCAN_LENGTH", "SEXPEDIT_SAFE_ACTIONS"):
            monkeypatch.delenv(key, raising=False)
        config = EngineConfig()
        assert config.fill_column == 80
        assert config.max_scan_length == 1500
        assert config.safe_actions is True

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("SEXPEDIT_FILL_COLUMN", "100")
        monkeypatch.setenv("SEXPEDIT_SAFE_ACTIONS", "false")
        monkeypatch.setenv("SEXPEDIT_REINDENT_MODE", "pretty")
        config = EngineConfig()
        assert config.fill_column == 100
        assert config.safe_actions is False
        assert config.reindent_mode == "pretty"

    def test_bad_int_falls_back(self, monkeypatch):
        monkeypatch.setenv("SEXPEDIT_MAX_SCAN_LENGTH", "lots")
        assert EngineConfig().max_scan_length == 1500

    def test_invalid_reindent_mode(self):
        with pytest.raises(ConfigError):
            EngineConfig(reindent_mode="sideways")

    def test_replace_returns_copy(self, config):
        wide = config.replace(fill_column=120)
        assert wide.fill_column == 120
        assert config.fill_column == 80

    def test_global_instance_is_cached(self, monkeypatch):
        first = get_engine_config()
        assert get_engine_config() is first
        monkeypatch.setenv("SEXPEDIT_FILL_COLUMN", "60")
        reset_engine_config()
        assert get_engine_config().fill_column == 60


class TestDialects:
    """Presets, aliases and extension lookup."""

    def test_lookup_by_name_and_alias(self):
        assert get_dialect("clojure") is CLOJURE
        assert get_dialect("elisp") is EMACS_LISP
        assert get_dialect("Racket") is SCHEME

    def test_unknown_name(self):
        with pytest.raises(DialectError) as exc:
            get_dialect("cobol")
        assert "emacs-lisp" in exc.value.known

    def test_extension_lookup(self, temp_dir):
        assert dialect_for_path(temp_dir / "init.el") is EMACS_LISP
        assert dialect_for_path("core.cljs") is CLOJURE
        with pytest.raises(DialectError):
            dialect_for_path("notes.txt")

    def test_delimiter_pairs(self):
        assert EMACS_LISP.closer_for("[") == "]"
        assert CLOJURE.opener_for("}") == "{"
        with pytest.raises(KeyError):
            EMACS_LISP.closer_for("<")

    def test_layout_rules(self):
        assert EMACS_LISP.layout_rule("defun").first_line == 3
        assert EMACS_LISP.layout_rule("let").bindings
        assert EMACS_LISP.layout_rule("frobnicate") is None


class TestMachineMode:
    """Machine mode is the default."""

    def test_default_is_machine(self, monkeypatch):
        monkeypatch.delenv("SEXPEDIT_HUMAN_MODE", raising=False)
        assert CLIConfig.is_machine_mode()

    def test_env_opts_into_human(self, monkeypatch):
        monkeypatch.setenv("SEXPEDIT_HUMAN_MODE", "1")
        assert not CLIConfig.is_machine_mode()

    def test_explicit_setting_wins(self, monkeypatch):
        monkeypatch.setenv("SEXPEDIT_HUMAN_MODE", "1")
        CLIConfig.set_machine_mode(True)
        assert CLIConfig.is_machine_mode()


class TestFileHelpers:
    """Line endings survive a read/write cycle."""

    def test_detect_line_ending(self):
        assert detect_line_ending("a\r\nb") == "\r\n"
        assert detect_line_ending("a\nb") == "\n"
        assert detect_line_ending("") == "\n"

    def test_normalize_line_endings(self):
        assert normalize_line_endings("a\r\nb\nc", "\n") == "a\nb\nc"
        assert normalize_line_endings("a\nb", "\r\n") == "a\r\nb"

    def test_read_source_converts_to_lf(self, lisp_file):
        text, line_ending = read_source(lisp_file("(a\r\n b)\r\n"))
        assert text == "(a\n b)\n"
        assert line_ending == "\r\n"

    def test_atomic_write_restores_crlf(self, temp_dir):
        path = temp_dir / "out.el"
        atomic_write(path, "(a\n b)\n", "\r\n")
        assert path.read_bytes() == b"(a\r\n b)\r\n"
        assert [p.name for p in temp_dir.iterdir()] == ["out.el"]
