import logging
import shutil
from pathlib import Path
from typing import Iterator, Set, Union

from .errors import (
    PackageFileNotSaved,
    PackageFileUnreadable,
    PackageNotRemoved,
    UnknownPackage,
)
from .models import Package, PackageDecodeError

logger = logging.getLogger(__name__)


class PackageStore:
    """Package records persisted as one file per package, named after the package."""

    def __init__(
        self,
        registry_folder: Union[str, Path],
        build_cache_folder: Union[str, Path],
    ):
        self.registry_folder = Path(registry_folder)
        self.registry_folder.mkdir(parents=True, exist_ok=True)
        self.build_cache_folder = Path(build_cache_folder)

        logger.debug(f"Initialized package store at {self.registry_folder}")

    def get_path_for_package(self, name: str) -> Path:
        return self.registry_folder / name

    def iter_packages(self) -> Iterator[Package]:
        """Yield every valid record in directory enumeration order.

        Subfolders and files that do not decode as a package record are
        skipped; a listing is defined as all currently valid records.
        """
        for path in self.registry_folder.iterdir():
            if not path.is_file():
                continue
            try:
                yield Package.decode(path.read_text())
            except (OSError, UnicodeDecodeError, PackageDecodeError) as e:
                logger.debug(f"Skipping {path}: {e}")

    def list(self) -> Set[Package]:
        return set(self.iter_packages())

    def exists(self, name: str) -> bool:
        return self.get_path_for_package(name).is_file()

    def get(self, name: str) -> Package:
        """Load a single package record.

        Raises:
            PackageFileUnreadable: If the file is missing or malformed
        """
        path = self.get_path_for_package(name)
        try:
            return Package.decode(path.read_text())
        except (OSError, UnicodeDecodeError, PackageDecodeError) as e:
            raise PackageFileUnreadable(name) from e

    def save(self, package: Package) -> Path:
        """Create or replace the record file for ``package``.

        Raises:
            PackageFileNotSaved: If the file cannot be written
        """
        path = self.get_path_for_package(package.name)
        try:
            logger.info(f"Storing package '{package.name}' at {path}")
            path.write_text(package.encode())
            return path
        except OSError as e:
            logger.exception(f"Failed to store package '{package.name}'")
            raise PackageFileNotSaved(package.name, self.registry_folder) from e

    def delete(self, name: str) -> Package:
        """Delete a package record and its build cache folder, if any.

        The first build cache subfolder whose name starts with
        ``<name>-<majorVersion>`` (case-insensitive) is removed along with the
        record file.

        Returns:
            The removed package

        Raises:
            UnknownPackage: If no record exists for ``name``
            PackageFileUnreadable: If the record exists but is malformed
            PackageNotRemoved: If deleting files fails
        """
        path = self.get_path_for_package(name)
        if not path.is_file():
            raise UnknownPackage(name)

        package = self.get(name)

        try:
            self._delete_build_cache(package)
            path.unlink()
            logger.info(f"Removed package '{name}'")
        except OSError as e:
            logger.exception(f"Failed to remove package '{name}'")
            raise PackageNotRemoved(name, self.registry_folder) from e

        return package

    def _delete_build_cache(self, package: Package) -> None:
        if not self.build_cache_folder.is_dir():
            return

        prefix = f"{package.name}-{package.major_version}".lower()
        for folder in sorted(self.build_cache_folder.iterdir()):
            if not folder.is_dir() or not folder.name.lower().startswith(prefix):
                continue

            logger.info(f"Removing build cache folder {folder}")
            if folder.is_symlink():
                folder.unlink()
            else:
                shutil.rmtree(folder)
            break
