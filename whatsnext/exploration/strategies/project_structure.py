"""Project-Structure strategy: project type, entry points, config files, dependencies."""

import json
import logging
import os
import re
from pathlib import Path

from whatsnext.exploration.errors import NotADirectory, PathNotFound, PermissionDenied
from whatsnext.exploration.strategy import ExplorationStrategy
from whatsnext.lib.config import ExplorationConfig
from whatsnext.lib.types import ExplorationResult, Finding, FindingKind, Severity

logger = logging.getLogger(__name__)

# Manifests, lockfiles and workspace files. Names starting with "." match
# as suffixes (MyApp.xcodeproj).
PROJECT_INDICATORS = [
    ("Package.swift", "Swift Package"),
    ("Podfile", "CocoaPods"),
    ("Cartfile", "Carthage"),
    ("package.json", "Node.js"),
    ("package-lock.json", "npm lockfile"),
    ("yarn.lock", "Yarn lockfile"),
    ("pnpm-workspace.yaml", "pnpm Workspace"),
    ("Cargo.toml", "Rust"),
    ("Cargo.lock", "Cargo lockfile"),
    ("go.mod", "Go"),
    ("build.gradle", "Gradle"),
    ("pom.xml", "Maven"),
    ("requirements.txt", "Python"),
    ("pyproject.toml", "Python"),
    ("poetry.lock", "Poetry lockfile"),
    ("Gemfile", "Ruby"),
    ("CMakeLists.txt", "CMake"),
    ("Makefile", "Make"),
    ("docker-compose.yml", "Docker Compose"),
    ("Dockerfile", "Docker"),
    (".xcodeproj", "Xcode Project"),
    (".xcworkspace", "Xcode Workspace"),
]

ENTRY_POINTS = {
    "main.swift": "Swift entry point",
    "AppDelegate.swift": "iOS/macOS app delegate",
    "App.swift": "SwiftUI app entry",
    "index.js": "Node.js entry point",
    "index.ts": "TypeScript entry point",
    "main.py": "Python entry point",
    "__main__.py": "Python package entry point",
    "main.go": "Go entry point",
    "main.rs": "Rust entry point",
    "Main.java": "Java entry point",
}

CONFIG_FILES = {
    ".env",
    ".env.local",
    "config.json",
    "config.yaml",
    "config.yml",
    "settings.json",
    ".eslintrc",
    ".prettierrc",
    "tsconfig.json",
    "babel.config.js",
    "webpack.config.js",
    ".swiftlint.yml",
}

KNOWN_DIRECTORIES = {
    "src", "lib", "Sources", "Tests", "test", "tests", "spec", "docs", "public",
    "assets", "components", "services", "models", "views", "controllers",
}

STRUCTURE_MAX_DEPTH = 2


def _indicator_matches(name: str, indicator: str) -> bool:
    if indicator.startswith("."):
        return name.endswith(indicator)
    return name == indicator


def _count_package_swift(content: str) -> int:
    return content.count(".package(")


def _count_requirements(content: str) -> int:
    return sum(
        1 for line in content.splitlines()
        if line.strip() and not line.strip().startswith(("#", "-"))
    )


def _count_cargo(content: str) -> int:
    """Count `name = ...` lines under [dependencies]-style sections."""
    count = 0
    in_deps = False
    for line in content.splitlines():
        stripped = line.strip()
        if stripped.startswith("["):
            in_deps = bool(re.match(r"\[(.+\.)?(dev-|build-)?dependencies\]$", stripped))
            continue
        if in_deps and "=" in stripped and not stripped.startswith("#"):
            count += 1
    return count


# manifest -> (title, marker counter)
TEXT_MANIFESTS = {
    "Package.swift": ("Swift Package dependencies", _count_package_swift),
    "requirements.txt": ("Python requirements", _count_requirements),
    "Cargo.toml": ("Rust crate dependencies", _count_cargo),
}


class ProjectStructureStrategy(ExplorationStrategy):
    id = "project-structure"
    name = "Project Structure"
    description = "Analyze project layout, find entry points, dependencies, and config files"

    def explore(self, path: Path, config: ExplorationConfig) -> ExplorationResult:
        names = self._list_root(path)

        findings: list[Finding] = []
        project_types: list[str] = []

        for name in names:
            for indicator, project_type in PROJECT_INDICATORS:
                if _indicator_matches(name, indicator):
                    project_types.append(project_type)
                    findings.append(Finding(
                        kind=FindingKind.PROJECT_STRUCTURE,
                        title=f"{project_type} project detected",
                        description=f"Found {name}",
                        file_path=name,
                        severity=Severity.INFO,
                    ))

            if name in ENTRY_POINTS:
                findings.append(Finding(
                    kind=FindingKind.ENTRY_POINT,
                    title=ENTRY_POINTS[name],
                    description=f"Entry point found: {name}",
                    file_path=name,
                    severity=Severity.INFO,
                ))

            if name in CONFIG_FILES:
                findings.append(Finding(
                    kind=FindingKind.CONFIG_FILE,
                    title=f"Config file: {name}",
                    description="Configuration file found",
                    file_path=name,
                    severity=Severity.DEBUG,
                ))

        findings.extend(self._directory_findings(path, min(STRUCTURE_MAX_DEPTH, config.max_depth)))
        findings.extend(self._dependency_findings(path))

        summary_parts = []
        if project_types:
            summary_parts.append(f"Type: {', '.join(dict.fromkeys(project_types))}")
        entry_points = sum(1 for f in findings if f.kind == FindingKind.ENTRY_POINT)
        if entry_points:
            summary_parts.append(f"Entry points: {entry_points}")
        config_files = sum(1 for f in findings if f.kind == FindingKind.CONFIG_FILE)
        if config_files:
            summary_parts.append(f"Config files: {config_files}")
        summary = " | ".join(summary_parts) if summary_parts else "Unknown project structure"

        return self.make_result(path, findings, summary)

    def _list_root(self, path: Path) -> list[str]:
        try:
            return sorted(os.listdir(path))
        except FileNotFoundError:
            raise PathNotFound(str(path)) from None
        except NotADirectoryError:
            raise NotADirectory(str(path)) from None
        except PermissionError:
            raise PermissionDenied(str(path)) from None

    def _directory_findings(self, root: Path, max_depth: int) -> list[Finding]:
        """Conventionally-named directories up to max_depth below root."""
        found: list[str] = []
        for dirpath, dirnames, _ in os.walk(root):
            depth = len(Path(dirpath).relative_to(root).parts) + 1
            dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
            if depth > max_depth:
                dirnames[:] = []
                continue
            for d in dirnames:
                if d in KNOWN_DIRECTORIES and d not in found:
                    found.append(d)
            if depth >= max_depth:
                dirnames[:] = []

        if not found:
            return []
        return [Finding(
            kind=FindingKind.PROJECT_STRUCTURE,
            title="Project directories",
            description=f"Found: {', '.join(found)}",
            severity=Severity.DEBUG,
        )]

    def _dependency_findings(self, root: Path) -> list[Finding]:
        findings = []

        package_json = root / "package.json"
        if package_json.is_file():
            try:
                data = json.loads(package_json.read_text(encoding="utf-8"))
            except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
                logger.debug(f"Skipping {package_json}: {e}")
                data = None
            if isinstance(data, dict):
                deps = data.get("dependencies")
                dev_deps = data.get("devDependencies")
                n_deps = len(deps) if isinstance(deps, dict) else 0
                n_dev = len(dev_deps) if isinstance(dev_deps, dict) else 0
                if n_deps + n_dev > 0:
                    findings.append(Finding(
                        kind=FindingKind.DEPENDENCY,
                        title="Node.js dependencies",
                        description=f"{n_deps} dependencies, {n_dev} dev dependencies",
                        file_path="package.json",
                        severity=Severity.INFO,
                    ))

        for manifest, (title, counter) in TEXT_MANIFESTS.items():
            manifest_path = root / manifest
            if not manifest_path.is_file():
                continue
            try:
                content = manifest_path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.debug(f"Skipping {manifest_path}: {e}")
                continue
            count = counter(content)
            if count > 0:
                findings.append(Finding(
                    kind=FindingKind.DEPENDENCY,
                    title=title,
                    description=f"Found {count} package dependencies",
                    file_path=manifest,
                    severity=Severity.INFO,
                ))

        return findings
