"""Tests for the strategy registry and the exploration engine."""

import logging
import threading

import pytest

from whatsnext.exploration import (
    ExplorationEngine,
    ExplorationStrategy,
    ExplorationTimeout,
    NotADirectory,
    PathNotFound,
    StrategyRegistry,
    build_default_registry,
)
from whatsnext.lib.config import ExplorationConfig
from whatsnext.lib.types import Finding, FindingKind


class StubStrategy(ExplorationStrategy):
    """Strategy returning one fixed finding."""

    def __init__(self, strategy_id, applies=True):
        self.id = strategy_id
        self.name = f"Stub {strategy_id}"
        self.description = "stub"
        self.applies = applies
        self.calls = 0

    def can_explore(self, path):
        return self.applies

    def explore(self, path, config):
        self.calls += 1
        finding = Finding(kind=FindingKind.OTHER, title=self.id, description="stub finding")
        return self.make_result(path, [finding], f"summary of {self.id}")


class FailingStrategy(StubStrategy):
    def explore(self, path, config):
        raise RuntimeError("boom")


class BlockingStrategy(StubStrategy):
    """Blocks until released, to exercise the deadline."""

    def __init__(self, strategy_id):
        super().__init__(strategy_id)
        self.release = threading.Event()

    def explore(self, path, config):
        self.release.wait(5)
        return super().explore(path, config)


def _config(*ids, timeout=30):
    return ExplorationConfig(enabled_strategies=list(ids), timeout_seconds=timeout)


class TestStrategyRegistry:
    """Test registry lookups."""

    def test_default_registry_has_builtins(self):
        registry = build_default_registry()
        assert sorted(registry.ids()) == [
            "git-status", "project-structure", "recent-changes", "todo-scanner",
        ]

    def test_enabled_ignores_unknown_ids(self):
        registry = StrategyRegistry([StubStrategy("a"), StubStrategy("b")])
        enabled = registry.enabled(["b", "nope", "a"])
        assert [s.id for s in enabled] == ["b", "a"]

    def test_enabled_ignores_repeats(self):
        registry = StrategyRegistry([StubStrategy("a")])
        assert len(registry.enabled(["a", "a"])) == 1

    def test_register_replaces_same_id(self):
        registry = StrategyRegistry([StubStrategy("a")])
        replacement = StubStrategy("a")
        registry.register(replacement)
        assert registry.get("a") is replacement
        assert len(registry.all()) == 1

    def test_unregister(self):
        registry = StrategyRegistry([StubStrategy("a")])
        registry.unregister("a")
        registry.unregister("missing")
        assert registry.get("a") is None

    def test_info(self):
        registry = build_default_registry()
        name, description = registry.info("todo-scanner")
        assert name == "TODO Scanner"
        assert "TODO" in description
        assert registry.info("missing") is None


class TestExplorationEngine:
    """Test concurrent orchestration."""

    def test_not_a_directory_for_file(self, tmp_path):
        target = tmp_path / "file.txt"
        target.write_text("x")
        engine = ExplorationEngine(StrategyRegistry([StubStrategy("a")]))
        with pytest.raises(NotADirectory):
            engine.explore(target, _config("a"))

    def test_not_a_directory_for_missing_path(self, tmp_path):
        engine = ExplorationEngine(StrategyRegistry([StubStrategy("a")]))
        with pytest.raises(NotADirectory):
            engine.explore(tmp_path / "missing", _config("a"))

    def test_no_enabled_strategies_returns_empty(self, tmp_path):
        engine = ExplorationEngine(StrategyRegistry([StubStrategy("a")]))
        assert engine.explore(tmp_path, _config()) == []

    def test_unknown_ids_only_returns_empty(self, tmp_path):
        engine = ExplorationEngine(StrategyRegistry([StubStrategy("a")]))
        assert engine.explore(tmp_path, _config("nope")) == []

    def test_collects_results_from_all_strategies(self, tmp_path):
        engine = ExplorationEngine(StrategyRegistry([StubStrategy("a"), StubStrategy("b")]))
        results = engine.explore(tmp_path, _config("a", "b"))
        assert sorted(r.strategy_id for r in results) == ["a", "b"]
        assert all(r.source_path == tmp_path for r in results)

    def test_inapplicable_strategy_not_invoked(self, tmp_path):
        skipped = StubStrategy("skip", applies=False)
        engine = ExplorationEngine(StrategyRegistry([skipped, StubStrategy("a")]))
        results = engine.explore(tmp_path, _config("skip", "a"))
        assert [r.strategy_id for r in results] == ["a"]
        assert skipped.calls == 0

    def test_failing_strategy_absorbed(self, tmp_path, caplog):
        caplog.set_level(logging.WARNING)
        engine = ExplorationEngine(StrategyRegistry([FailingStrategy("bad"), StubStrategy("a")]))
        results = engine.explore(tmp_path, _config("bad", "a"))
        assert [r.strategy_id for r in results] == ["a"]
        assert "Strategy bad failed: boom" in caplog.text

    def test_slow_strategy_dropped_at_deadline(self, tmp_path, caplog):
        caplog.set_level(logging.WARNING)
        slow = BlockingStrategy("slow")
        engine = ExplorationEngine(StrategyRegistry([slow, StubStrategy("a")]))
        try:
            results = engine.explore(tmp_path, _config("slow", "a", timeout=0.2))
        finally:
            slow.release.set()
        assert [r.strategy_id for r in results] == ["a"]
        assert "Strategy slow failed" in caplog.text
        assert "timed out" in caplog.text

    def test_timeout_beyond_platform_limit(self, tmp_path):
        engine = ExplorationEngine(StrategyRegistry([StubStrategy("a")]))
        results = engine.explore(tmp_path, _config("a", timeout=1e12))
        assert [r.strategy_id for r in results] == ["a"]

    def test_findings_keep_strategy_order(self, tmp_path):
        (tmp_path / "a.md").write_text("NOTE: later\nBUG: first\n")
        engine = ExplorationEngine(build_default_registry())
        config = ExplorationConfig(enabled_strategies=["todo-scanner"], file_patterns=["*.md"])
        [result] = engine.explore(tmp_path, config)
        assert [f.kind for f in result.findings] == [FindingKind.FIXME, FindingKind.NOTE]

    def test_run_strategy(self, tmp_path):
        engine = ExplorationEngine(StrategyRegistry([StubStrategy("a"), StubStrategy("no", applies=False)]))
        assert engine.run_strategy("a", tmp_path, _config()).strategy_id == "a"
        assert engine.run_strategy("no", tmp_path, _config()) is None
        assert engine.run_strategy("missing", tmp_path, _config()) is None

    def test_available_strategy_ids(self):
        engine = ExplorationEngine(StrategyRegistry([StubStrategy("a")]))
        assert engine.available_strategy_ids() == ["a"]
        assert engine.strategy_info("a") == ("Stub a", "stub")


class TestExplorationErrors:
    """Test the error types."""

    def test_errors_are_hashable(self):
        errors = {NotADirectory("/a"), ExplorationTimeout("slow", 1.5), PathNotFound("/b")}
        assert len(errors) == 3

    def test_messages(self):
        assert str(NotADirectory("/a")) == "Not a directory: /a"
        assert str(ExplorationTimeout("slow", 1.5)) == "Exploration timed out: slow after 1.5s"
