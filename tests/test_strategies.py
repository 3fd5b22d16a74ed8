"""Tests for the built-in exploration strategies."""

import json
import os
import shutil
import subprocess
import time
from pathlib import Path

import pytest

from whatsnext.exploration.errors import ExecutionFailed, PathNotFound
from whatsnext.exploration.strategies.git_status import GitStatusStrategy
from whatsnext.exploration.strategies.project_structure import ProjectStructureStrategy
from whatsnext.exploration.strategies.recent_changes import RecentChangesStrategy
from whatsnext.exploration.strategies.todo_scanner import TodoScannerStrategy, scan_text
from whatsnext.lib.config import ExplorationConfig
from whatsnext.lib.types import FindingKind, Severity

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


def _git(repo: Path, *args: str):
    subprocess.run(
        ["git", "-C", str(repo), "-c", "user.name=Test", "-c", "user.email=test@example.com",
         "-c", "commit.gpgsign=false", *args],
        check=True, capture_output=True,
    )


@pytest.fixture
def repo(tmp_path):
    _git(tmp_path, "init", "-q")
    (tmp_path / "a.md").write_text("one\n")
    (tmp_path / "b.md").write_text("two\n")
    _git(tmp_path, "add", "a.md", "b.md")
    _git(tmp_path, "commit", "-q", "-m", "initial")
    return tmp_path


class TestGitStatusStrategy:
    """Test the git-status strategy against a real repository."""

    def test_can_explore_requires_git_dir(self, tmp_path):
        assert not GitStatusStrategy().can_explore(tmp_path)
        (tmp_path / ".git").mkdir()
        assert GitStatusStrategy().can_explore(tmp_path)

    @requires_git
    def test_clean_repository(self, repo):
        result = GitStatusStrategy().explore(repo, ExplorationConfig())
        assert result.findings == []
        assert "Recent commits: 1" in result.summary
        assert "Modified" not in result.summary

    @requires_git
    def test_modified_and_untracked(self, repo):
        (repo / "a.md").write_text("one changed\n")
        (repo / "b.md").write_text("two changed\n")
        (repo / "new.txt").write_text("new\n")

        result = GitStatusStrategy().explore(repo, ExplorationConfig())

        by_title = {f.title: f for f in result.findings}
        modified = by_title["Modified files"]
        assert modified.kind == FindingKind.GIT_UNCOMMITTED
        assert modified.severity == Severity.WARNING
        assert "a.md" in modified.description
        assert "b.md" in modified.description

        untracked = by_title["Untracked files"]
        assert untracked.kind == FindingKind.GIT_UNTRACKED
        assert "new.txt" in untracked.description
        assert untracked.metadata["count"] == "1"

        assert "Modified: 2" in result.summary
        assert "Untracked: 1" in result.summary

    @requires_git
    def test_staged_changes(self, repo):
        (repo / "a.md").write_text("staged\n")
        _git(repo, "add", "a.md")

        result = GitStatusStrategy().explore(repo, ExplorationConfig())

        titles = [f.title for f in result.findings]
        assert "Staged changes" in titles
        assert "Modified files" not in titles
        assert "Staged: 1" in result.summary

    def test_missing_git_raises(self, tmp_path, monkeypatch):
        monkeypatch.setattr(
            "whatsnext.exploration.strategies.git_status.git_available", lambda: False
        )
        with pytest.raises(ExecutionFailed):
            GitStatusStrategy().explore(tmp_path, ExplorationConfig())


class TestScanText:
    """Test marker detection in file content."""

    def test_todo_with_colon(self):
        findings = scan_text("x = 1\n// TODO: fix race\n", "main.swift")
        assert len(findings) == 1
        finding = findings[0]
        assert finding.kind == FindingKind.TODO
        assert finding.severity == Severity.INFO
        assert finding.description == "fix race"
        assert finding.title == "TODO: fix race"
        assert finding.line_number == 2
        assert finding.file_path == "main.swift"

    def test_case_insensitive(self):
        findings = scan_text("# fixme: handle None\n", "a.py")
        assert len(findings) == 1
        assert findings[0].kind == FindingKind.FIXME
        assert findings[0].severity == Severity.WARNING

    def test_whole_word_only(self):
        assert scan_text("debugging the notebook\n", "a.txt") == []

    def test_block_comment_closer_removed(self):
        findings = scan_text("/* HACK - temporary workaround */\n", "a.c")
        assert findings[0].description == "temporary workaround"

    def test_bug_is_critical(self):
        findings = scan_text("// BUG: crashes on empty input\n", "a.swift")
        assert findings[0].severity == Severity.CRITICAL
        assert findings[0].kind == FindingKind.FIXME

    def test_long_text_truncated_in_title(self):
        text = "x" * 80
        findings = scan_text(f"# TODO: {text}\n", "a.md")
        assert findings[0].title == f"TODO: {'x' * 60}..."
        assert findings[0].description == text


class TestTodoScannerStrategy:
    """Test the todo-scanner strategy over a directory."""

    def test_findings_sorted_by_severity(self, tmp_path):
        (tmp_path / "a.md").write_text("NOTE: remember\n")
        (tmp_path / "b.md").write_text("FIXME: broken\n")

        result = TodoScannerStrategy().explore(tmp_path, ExplorationConfig())

        assert [f.kind for f in result.findings] == [FindingKind.FIXME, FindingKind.NOTE]
        assert result.findings[0].file_path == "b.md"

    def test_no_markers(self, tmp_path):
        (tmp_path / "a.md").write_text("nothing here\n")
        result = TodoScannerStrategy().explore(tmp_path, ExplorationConfig())
        assert result.findings == []
        assert result.summary == "No action items found"

    def test_skips_undecodable_file(self, tmp_path):
        (tmp_path / "bad.txt").write_bytes(b"\xff\xfe TODO: \x80\x81")
        (tmp_path / "good.txt").write_text("TODO: ok\n")

        result = TodoScannerStrategy().explore(tmp_path, ExplorationConfig())

        assert [f.file_path for f in result.findings] == ["good.txt"]

    def test_respects_file_patterns(self, tmp_path):
        (tmp_path / "a.py").write_text("# TODO: python\n")
        (tmp_path / "a.md").write_text("TODO: docs\n")

        result = TodoScannerStrategy().explore(tmp_path, ExplorationConfig(file_patterns=["*.py"]))

        assert [f.file_path for f in result.findings] == ["a.py"]
        assert result.summary == "TODO: 1"


class TestRecentChangesStrategy:
    """Test the recent-changes strategy."""

    def _age(self, path: Path, seconds: float):
        stamp = time.time() - seconds
        os.utime(path, (stamp, stamp))

    def test_buckets(self, tmp_path):
        fresh = tmp_path / "fresh.md"
        week = tmp_path / "week.md"
        old = tmp_path / "old.md"
        for f in (fresh, week, old):
            f.write_text("x")
        self._age(fresh, 2 * 3600)
        self._age(week, 3 * 86400)
        self._age(old, 30 * 86400)

        result = RecentChangesStrategy().explore(tmp_path, ExplorationConfig())

        titles = [f.title for f in result.findings]
        assert titles == ["Recently modified: fresh.md", "Modified this week: week.md"]
        assert result.findings[0].severity == Severity.INFO
        assert result.findings[1].severity == Severity.DEBUG
        assert result.findings[0].description == "Modified 2 hours ago"
        assert result.findings[1].description == "Modified 3 days ago"
        assert result.summary == "1 files modified in last 24h, 1 files modified this week"

    def test_newest_first(self, tmp_path):
        older = tmp_path / "older.md"
        newer = tmp_path / "newer.md"
        older.write_text("x")
        newer.write_text("x")
        self._age(older, 5 * 3600)
        self._age(newer, 3600)

        result = RecentChangesStrategy().explore(tmp_path, ExplorationConfig())

        assert [f.file_path for f in result.findings] == ["newer.md", "older.md"]

    def test_no_recent_changes(self, tmp_path):
        old = tmp_path / "old.md"
        old.write_text("x")
        self._age(old, 60 * 86400)

        result = RecentChangesStrategy().explore(tmp_path, ExplorationConfig())

        assert result.findings == []
        assert result.summary == "No recent changes"


class TestProjectStructureStrategy:
    """Test project-structure detection."""

    def test_detects_type_entry_point_and_config(self, tmp_path):
        (tmp_path / "package.json").write_text(json.dumps({
            "dependencies": {"react": "^18", "lodash": "^4"},
            "devDependencies": {"jest": "^29"},
        }))
        (tmp_path / "index.js").write_text("")
        (tmp_path / "tsconfig.json").write_text("{}")
        (tmp_path / "src").mkdir()

        result = ProjectStructureStrategy().explore(tmp_path, ExplorationConfig())

        kinds = {f.kind for f in result.findings}
        assert FindingKind.ENTRY_POINT in kinds
        assert FindingKind.CONFIG_FILE in kinds
        deps = [f for f in result.findings if f.kind == FindingKind.DEPENDENCY]
        assert deps[0].description == "2 dependencies, 1 dev dependencies"
        dirs = [f for f in result.findings if f.title == "Project directories"]
        assert dirs[0].description == "Found: src"
        assert result.summary == "Type: Node.js | Entry points: 1 | Config files: 1"

    def test_xcodeproj_suffix(self, tmp_path):
        (tmp_path / "MyApp.xcodeproj").mkdir()
        result = ProjectStructureStrategy().explore(tmp_path, ExplorationConfig())
        assert "Xcode Project project detected" in [f.title for f in result.findings]

    def test_requirements_count(self, tmp_path):
        (tmp_path / "requirements.txt").write_text("# deps\nrequests\n\nPyYAML>=6\n-r dev.txt\n")
        result = ProjectStructureStrategy().explore(tmp_path, ExplorationConfig())
        deps = [f for f in result.findings if f.kind == FindingKind.DEPENDENCY]
        assert deps[0].description == "Found 2 package dependencies"

    def test_cargo_count(self, tmp_path):
        (tmp_path / "Cargo.toml").write_text(
            '[package]\nname = "x"\n\n[dependencies]\nserde = "1"\ntokio = "1"\n\n'
            '[dev-dependencies]\ninsta = "1"\n'
        )
        result = ProjectStructureStrategy().explore(tmp_path, ExplorationConfig())
        deps = [f for f in result.findings if f.kind == FindingKind.DEPENDENCY]
        assert deps[0].description == "Found 3 package dependencies"

    def test_unknown_project(self, tmp_path):
        result = ProjectStructureStrategy().explore(tmp_path, ExplorationConfig())
        assert result.findings == []
        assert result.summary == "Unknown project structure"

    def test_missing_path_raises(self, tmp_path):
        with pytest.raises(PathNotFound):
            ProjectStructureStrategy().explore(tmp_path / "missing", ExplorationConfig())
