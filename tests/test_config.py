"""Tests for taskdeps.config.Config defaults and limits."""

from __future__ import annotations

import pytest

from taskdeps.config import (
    DEFAULT_MAX_DEPENDENCIES,
    DEFAULT_MAX_NODES,
    MAX_NODES_ENV,
    Config,
    resolve_config,
)


@pytest.fixture(autouse=True)
def _no_env(monkeypatch):
    monkeypatch.delenv(MAX_NODES_ENV, raising=False)


def test_defaults():
    """Config() uses the documented limits."""
    cfg = Config()
    assert cfg.max_nodes == DEFAULT_MAX_NODES == 10_000
    assert cfg.max_dependencies == DEFAULT_MAX_DEPENDENCIES == 50
    assert cfg.bottleneck_threshold == 3
    assert cfg.verbose is False


def test_max_nodes_from_env(monkeypatch):
    """TASKDEPS_MAX_NODES overrides the default ceiling."""
    monkeypatch.setenv(MAX_NODES_ENV, "250")
    assert Config().max_nodes == 250


def test_explicit_max_nodes_wins_over_env(monkeypatch):
    monkeypatch.setenv(MAX_NODES_ENV, "250")
    assert Config(max_nodes=7).max_nodes == 7


def test_blank_env_uses_default(monkeypatch):
    monkeypatch.setenv(MAX_NODES_ENV, "  ")
    assert Config().max_nodes == DEFAULT_MAX_NODES


def test_non_integer_env_rejected(monkeypatch):
    monkeypatch.setenv(MAX_NODES_ENV, "lots")
    with pytest.raises(ValueError, match=MAX_NODES_ENV):
        Config()


@pytest.mark.parametrize("kwargs", [{"max_nodes": -1}, {"max_dependencies": 0}])
def test_non_positive_limits_rejected(kwargs):
    with pytest.raises(ValueError, match="must be positive"):
        Config(**kwargs)


def test_resolve_config():
    """None resolves to defaults; an explicit Config passes through."""
    cfg = Config(max_dependencies=5)
    assert resolve_config(cfg) is cfg
    assert resolve_config(None).max_dependencies == DEFAULT_MAX_DEPENDENCIES
