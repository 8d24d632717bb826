import logging
from pathlib import Path
from typing import List, Union

from pydantic import BaseModel, Field

from .commands import CommandRunner

logger = logging.getLogger(__name__)


class BuildSettings(BaseModel):
    """Settings for the external build tool that consumes the generated manifest."""

    command: List[str] = Field(default_factory=lambda: ["swift", "package", "update"])
    manifest_name: str = "Package.swift"
    cache_dir: str = "Packages"
    aggregate_name: str = "SCRIPTDEPS_PACKAGES"


class BuildInvoker:
    def __init__(self, runner: CommandRunner, command: List[str]):
        self.runner = runner
        self.command = list(command)

    def update_dependencies(self, folder: Union[str, Path]) -> bool:
        """Run the build tool's dependency update inside ``folder``.

        Returns:
            True if the build tool reported success
        """
        logger.info(f"Updating dependencies in {folder}")
        result = self.runner.run(self.command, cwd=folder)
        if not result.success:
            logger.error(
                f"Build command {' '.join(self.command)!r} failed in {folder}: "
                f"{result.error or result.output}"
            )
        return result.success
