"""Latest major version lookup through version control tags."""

import logging
from pathlib import Path
from typing import Optional

from ..errors import VersionResolutionFailed
from .commands import CommandRunner
from .names import is_remote_location

logger = logging.getLogger(__name__)

TAG_REF_PREFIX = "refs/tags/"


def major_version_from(tag: str) -> Optional[int]:
    """Parse the leading dot-separated component of a tag as an integer.

    Args:
        tag: Tag name such as ``2.1.0``

    Returns:
        The major version, or None if the component is not a plain number
    """
    component = tag.split(".")[0]
    if not component.isascii() or not component.isdigit():
        return None
    return int(component)


class VersionResolver:
    """Determines the latest major version of a package from its tags.

    "Latest" is the last line of the tag listing as emitted by git, not the
    numerically largest tag. Repositories whose tags do not sort that way
    resolve to whatever git lists last.
    """

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def resolve_latest_major_version(self, location: str) -> int:
        """Resolve the latest major version for a remote URL or local checkout.

        Raises:
            VersionResolutionFailed: If git fails or the last tag has no
                numeric major component
        """
        if is_remote_location(location):
            tag = self._latest_remote_tag(location)
        else:
            tag = self._latest_local_tag(location)

        major_version = major_version_from(tag)
        if major_version is None:
            logger.warning(f"Could not parse a major version from tag {tag!r}")
            raise VersionResolutionFailed(location)

        logger.debug(f"Resolved {location} to major version {major_version}")
        return major_version

    def _latest_remote_tag(self, url: str) -> str:
        result = self.runner.run(["git", "ls-remote", "--tags", url])
        if not result.success:
            raise VersionResolutionFailed(url)
        latest_line = result.output.rstrip("\n").split("\n")[-1]
        return latest_line.split(TAG_REF_PREFIX)[-1]

    def _latest_local_tag(self, path: str) -> str:
        result = self.runner.run(["git", "tag"], cwd=Path(path).expanduser())
        if not result.success:
            raise VersionResolutionFailed(path)
        return result.output.rstrip("\n").split("\n")[-1]
