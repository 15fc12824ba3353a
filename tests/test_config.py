"""Tests for configuration helpers."""

import os

import pytest

from fitlab import config


class TestDefaultSeed:
    def test_unset(self, monkeypatch):
        monkeypatch.delenv("FITLAB_SEED", raising=False)
        assert config.default_seed() is None

    def test_blank(self, monkeypatch):
        monkeypatch.setenv("FITLAB_SEED", "  ")
        assert config.default_seed() is None

    def test_integer(self, monkeypatch):
        monkeypatch.setenv("FITLAB_SEED", "42")
        assert config.default_seed() == 42

    def test_invalid(self, monkeypatch):
        monkeypatch.setenv("FITLAB_SEED", "forty-two")
        with pytest.raises(ValueError, match="FITLAB_SEED"):
            config.default_seed()


def test_search_defaults():
    assert config.DEFAULT_ITERS == 100
    assert config.DEFAULT_GAMMA_BETTER == 1.1
    assert config.DEFAULT_GAMMA_WORSE == 0.9
    assert config.DEFAULT_ALPHA_TOL == 1e-3


def test_env_file_does_not_override(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text("# comment\nFITLAB_SEED=7\nFITLAB_OTHER = x\n")
    monkeypatch.setattr(config, "PROJECT_ROOT", tmp_path)
    monkeypatch.setenv("FITLAB_SEED", "3")
    monkeypatch.delenv("FITLAB_OTHER", raising=False)
    config._load_env()
    assert os.environ["FITLAB_SEED"] == "3"
    assert os.environ["FITLAB_OTHER"] == "x"
    monkeypatch.delenv("FITLAB_OTHER")
