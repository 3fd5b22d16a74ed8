"""Tests for whatsnext.lib.config module."""

from pathlib import Path

from whatsnext.lib.config import (
    DEFAULT_ENABLED_STRATEGIES,
    ExplorationConfig,
    default_data_dir,
    load_config,
    parse_exploration,
)


class TestExplorationDefaults:
    """Test ExplorationConfig defaults."""

    def test_defaults(self):
        config = ExplorationConfig()
        assert config.enabled_strategies == ["git-status", "todo-scanner", "recent-changes"]
        assert config.max_depth == 3
        assert config.file_patterns == ["*.swift", "*.md", "*.txt", "*.json"]
        assert ".git" in config.exclude_patterns
        assert "node_modules" in config.exclude_patterns
        assert config.max_files_to_analyze == 50
        assert config.timeout_seconds == 30

    def test_instances_do_not_share_lists(self):
        a = ExplorationConfig()
        a.enabled_strategies.append("project-structure")
        assert ExplorationConfig().enabled_strategies == DEFAULT_ENABLED_STRATEGIES


class TestParseExploration:
    """Test per-key parsing and fallback."""

    def test_overrides(self):
        config = parse_exploration({
            "enabled_strategies": ["todo-scanner"],
            "max_depth": 1,
            "timeout_seconds": 5,
        })
        assert config.enabled_strategies == ["todo-scanner"]
        assert config.max_depth == 1
        assert config.timeout_seconds == 5.0
        assert config.max_files_to_analyze == 50

    def test_wrong_types_fall_back(self, caplog):
        config = parse_exploration({
            "max_depth": "deep",
            "file_patterns": "*.md",
            "max_files_to_analyze": True,
        })
        assert config.max_depth == 3
        assert config.file_patterns == ["*.swift", "*.md", "*.txt", "*.json"]
        assert config.max_files_to_analyze == 50
        assert "Config 'max_depth' must be a number" in caplog.text
        assert "Config 'file_patterns' must be a list of strings" in caplog.text

    def test_inherits_from_base(self):
        base = ExplorationConfig(max_depth=7)
        config = parse_exploration({"max_files_to_analyze": 10}, base)
        assert config.max_depth == 7
        assert config.max_files_to_analyze == 10


class TestLoadConfig:
    """Test config.yaml loading."""

    def test_missing_file_returns_defaults(self, tmp_path):
        config = load_config(tmp_path / "config.yaml")
        assert config.exploration == ExplorationConfig()
        assert config.folders == []

    def test_none_returns_defaults(self):
        assert load_config(None).folders == []

    def test_loads_exploration_and_folders(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "exploration:\n"
            "  enabled_strategies: [git-status, project-structure]\n"
            "  max_depth: 2\n"
            "folders:\n"
            "  - name: app\n"
            "    path: /src/app\n"
            "  - path: /src/site\n"
            "    enabled: false\n"
            "    exploration:\n"
            "      file_patterns: ['*.html']\n"
            "  - name: broken\n"
        )

        config = load_config(path)

        assert config.exploration.enabled_strategies == ["git-status", "project-structure"]
        assert config.exploration.max_depth == 2
        assert [f.name for f in config.folders] == ["app", "site"]
        app, site = config.folders
        assert app.path == Path("/src/app")
        assert app.enabled
        assert app.exploration.max_depth == 2
        assert not site.enabled
        assert site.exploration.file_patterns == ["*.html"]
        assert site.exploration.enabled_strategies == ["git-status", "project-structure"]

    def test_invalid_yaml_returns_defaults(self, tmp_path, caplog):
        path = tmp_path / "config.yaml"
        path.write_text("exploration: [unclosed\n")
        config = load_config(path)
        assert config.exploration == ExplorationConfig()
        assert "Failed to load" in caplog.text

    def test_non_mapping_returns_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n")
        assert load_config(path).folders == []


class TestDefaultDataDir:
    """Test data directory resolution."""

    def test_env_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("WHATSNEXT_HOME", str(tmp_path))
        assert default_data_dir() == tmp_path

    def test_home_default(self, monkeypatch):
        monkeypatch.delenv("WHATSNEXT_HOME", raising=False)
        assert default_data_dir() == Path.home() / ".whatsnext"
