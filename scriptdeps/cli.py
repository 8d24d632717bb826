import fire
import logging
import sys
from typing import Any, Callable

from .errors import PackageManagerError
from .package_manager import PackageManager

logger = logging.getLogger(__name__)


def setup_logging(log_level: str) -> None:
    """Configure logging with the specified level."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _report_errors(func: Callable[..., Any]) -> Any:
    """Run ``func``, reporting package manager and filesystem errors with exit status 1."""
    try:
        return func()
    except PackageManagerError as e:
        logger.error(e.message)
        if e.hint:
            logger.error(e.hint)
        sys.exit(1)
    except OSError as e:
        logger.error(str(e))
        sys.exit(1)


class PackagesCLI:
    def __init__(self, log_level: str = "INFO") -> None:
        setup_logging(log_level)
        self._manager: PackageManager | None = None

    @property
    def manager(self) -> PackageManager:
        if self._manager is None:
            self._manager = PackageManager.from_config()
        return self._manager

    def add(self, location: str) -> str:
        """
        Add a package at its latest major version.

        Args:
            location: Git repository URL ending in .git, or a path to a local checkout
        """
        package = _report_errors(lambda: self.manager.add(location))
        return f"Added {package.name} at major version {package.major_version}"

    def import_file(self, path: str) -> str:
        """
        Add all packages listed in a file, one URL or path per line.

        Packages that have already been added are re-resolved instead of rejected.

        Args:
            path: File listing package locations
        """
        packages = _report_errors(
            lambda: self.manager.add_all_from(path, progress=True)
        )
        return f"{len(packages)} packages available"

    def remove(self, name: str) -> str:
        """
        Remove a package.

        Args:
            name: Name of the package, as shown by 'list'
        """
        package = _report_errors(lambda: self.manager.remove(name))
        return f"Removed {package.name}"

    def update(self) -> str:
        """Update all packages to their latest major versions."""
        updated = _report_errors(
            lambda: self.manager.update_all_to_latest_major(progress=True)
        )
        if not updated:
            return "All packages are up to date"
        return "\n".join(
            f"Updated {package.name} to major version {package.major_version}"
            for package in updated
        )

    def list(self) -> str:
        """List all added packages."""
        packages = _report_errors(lambda: self.manager.added_packages)
        if not packages:
            return "No packages added"
        return "\n".join(
            f"{package.name} ({package.url}) {package.major_version}"
            for package in sorted(packages, key=lambda p: p.name.lower())
        )

    def manifest(self, script_name: str) -> str:
        """
        Print the package manifest for a script.

        Args:
            script_name: Target name to use in the manifest
        """
        return _report_errors(lambda: self.manager.description_for_script(script_name))

    def link(self, folder: str) -> str:
        """
        Symlink the shared build cache into a folder.

        Args:
            folder: Folder that should see the shared build cache
        """
        path = _report_errors(lambda: self.manager.expose_build_cache(folder))
        return str(path)


def main() -> None:
    fire.Fire(PackagesCLI)


if __name__ == "__main__":
    main()
