"""Shared test fixtures and utilities."""

import pytest
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

from ..package_manager import PackageManager
from ..utils.commands import CommandResult


class FakeCommandRunner:
    """Scripted stand-in for git and the build tool.

    Remote tag listings are looked up by URL, local tag listings by working
    directory. Unknown commands fail.
    """

    def __init__(self) -> None:
        self.remote_tags: Dict[str, List[str]] = {}
        self.local_tags: Dict[str, List[str]] = {}
        self.build_succeeds = True
        self.calls: List[Tuple[List[str], Optional[str]]] = []

    def set_remote_tags(self, url: str, *tags: str) -> None:
        self.remote_tags[url] = list(tags)

    def set_local_tags(self, path: Union[str, Path], *tags: str) -> None:
        self.local_tags[str(Path(path))] = list(tags)

    def commands(self, program: str) -> List[List[str]]:
        return [command for command, _ in self.calls if command[0] == program]

    def run(
        self, command: Sequence[str], cwd: Optional[Union[str, Path]] = None
    ) -> CommandResult:
        command = list(command)
        self.calls.append((command, str(cwd) if cwd is not None else None))

        if command[:3] == ["git", "ls-remote", "--tags"]:
            tags = self.remote_tags.get(command[3])
            if tags is None:
                return CommandResult(False, "", "repository not found")
            lines = [f"{i:040x}\trefs/tags/{tag}" for i, tag in enumerate(tags)]
            return CommandResult(True, "\n".join(lines))

        if command == ["git", "tag"]:
            tags = self.local_tags.get(str(Path(cwd)))
            if tags is None:
                return CommandResult(False, "", "not a git repository")
            return CommandResult(True, "\n".join(tags))

        if command[0] == "swift":
            return CommandResult(self.build_succeeds, "", "")

        return CommandResult(False, "", f"unknown command {command}")


@pytest.fixture
def runner() -> FakeCommandRunner:
    return FakeCommandRunner()


@pytest.fixture
def registry_folder(tmp_path: Path) -> Path:
    return tmp_path / "packages"


@pytest.fixture
def generated_folder(tmp_path: Path) -> Path:
    return tmp_path / "generated"


@pytest.fixture
def manager(
    registry_folder: Path, generated_folder: Path, runner: FakeCommandRunner
) -> PackageManager:
    return PackageManager(registry_folder, generated_folder, runner=runner)
