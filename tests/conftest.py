"""
Pytest configuration and shared fixtures.

Provides a recording reporter, project trees with build output, and real git
repositories in temporary directories.
"""

import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

import pytest

# ==============================================================================
# Reporter Fixtures
# ==============================================================================


@dataclass
class RecordingReporter:
    """Reporter that keeps every message for assertions."""

    infos: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def info(self, message: str) -> None:
        self.infos.append(message)

    def warning(self, message: str) -> None:
        self.warnings.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)


@pytest.fixture
def reporter():
    """Provide a fresh RecordingReporter."""
    return RecordingReporter()


# ==============================================================================
# Directory Fixtures
# ==============================================================================


def write_files(root: Path, *relative_paths: str) -> None:
    """Create files (and their parent directories) below root."""
    for relative in relative_paths:
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"content of {relative}")


def list_files(root: Path) -> set[str]:
    """All files below root, as POSIX-style relative paths."""
    return {p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file()}


@pytest.fixture
def solution_dir(tmp_path):
    """
    Provide a small .NET-style solution tree.

    Creates:
    - proj/bin/Debug/app.exe
    - proj/obj/x.o
    - proj/src/main.cs
    """
    root = tmp_path / "solution"
    root.mkdir()
    write_files(root, "proj/bin/Debug/app.exe", "proj/obj/x.o", "proj/src/main.cs")
    return root


# ==============================================================================
# Git Fixtures
# ==============================================================================


def git(cwd: Path, *args: str) -> str:
    """Run git synchronously and return stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout


@pytest.fixture
def git_project(tmp_path):
    """
    Provide a git repository with one commit.

    Contains a tracked README.md and src/main.cs; bin/ and obj/ are ignored.
    """
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    project = tmp_path / "project"
    project.mkdir()

    git(project, "init")
    git(project, "config", "user.email", "test@example.com")
    git(project, "config", "user.name", "Test User")
    git(project, "config", "commit.gpgsign", "false")

    (project / "README.md").write_text("# Test Project\n")
    write_files(project, "src/main.cs")
    (project / ".gitignore").write_text("bin/\nobj/\n")
    git(project, "add", ".")
    git(project, "commit", "-m", "Initial commit")

    return project


@pytest.fixture
def unborn_repo(tmp_path):
    """
    Provide a freshly initialized repository with no commits.

    Contains an untracked src/main.cs and .NET build output.
    """
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    project = tmp_path / "unborn"
    project.mkdir()
    git(project, "init")
    write_files(project, "proj/bin/Debug/app.exe", "proj/obj/x.o", "proj/src/main.cs")
    return project
