import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from tqdm import tqdm

from .config import get_build_params, get_config, get_storage_params
from .errors import MalformedRegistryFile, PackageAlreadyAdded, VersionResolutionFailed
from .models import Package
from .storage import PackageStore
from .utils.build import BuildInvoker, BuildSettings
from .utils.commands import CommandRunner, GitCommandRunner
from .utils.manifest import ManifestGenerator
from .utils.names import get_package_name, parse_location
from .utils.versions import VersionResolver

logger = logging.getLogger(__name__)


class PackageManager:
    """
    Registry of the packages available to scripts.

    Mutating operations persist records and regenerate the aggregate manifest.
    Read-only operations regenerate lazily when generated artifacts are absent.
    Callers must not run overlapping operations against the same folders.
    """

    def __init__(
        self,
        registry_folder: Union[str, Path],
        generated_folder: Union[str, Path],
        runner: Optional[CommandRunner] = None,
        build: Optional[BuildSettings] = None,
    ):
        """
        Initialize the package manager.

        Args:
            registry_folder: Folder holding one record file per package
            generated_folder: Folder for the generated manifest and build cache
            runner: Command runner for git and the build tool
            build: Build tool settings
        """
        runner = runner or GitCommandRunner()
        build = build or BuildSettings()
        generated_folder = Path(generated_folder)

        self.store = PackageStore(registry_folder, generated_folder / build.cache_dir)
        self.resolver = VersionResolver(runner)
        self.generator = ManifestGenerator(
            self.store,
            generated_folder,
            BuildInvoker(runner, build.command),
            manifest_name=build.manifest_name,
            build_cache_name=build.cache_dir,
            aggregate_name=build.aggregate_name,
        )

    @classmethod
    def from_config(
        cls,
        config: Optional[Dict[str, Any]] = None,
        runner: Optional[CommandRunner] = None,
    ) -> "PackageManager":
        config = config if config is not None else get_config()
        storage_params = get_storage_params(config)
        return cls(
            storage_params["registry_folder"],
            storage_params["generated_folder"],
            runner=runner,
            build=get_build_params(config),
        )

    @property
    def added_packages(self) -> List[Package]:
        return list(self.store.iter_packages())

    def add(self, location: str, skip_if_already_added: bool = False) -> Package:
        """
        Add the package at ``location`` at its latest major version.

        Args:
            location: Repository URL ending in ``.git`` or a local checkout path
            skip_if_already_added: Re-resolve and overwrite an existing package
                with the same name instead of failing

        Returns:
            The stored package

        Raises:
            PackageAlreadyAdded: If the name is taken and skipping is off
            VersionResolutionFailed: If the location is invalid or has no usable tags
        """
        try:
            parse_location(location)
        except ValueError as e:
            raise VersionResolutionFailed(location) from e

        name = get_package_name(location)

        if not skip_if_already_added and self.store.exists(name):
            raise PackageAlreadyAdded(name)

        major_version = self.resolver.resolve_latest_major_version(location)
        package = Package(name=name, url=location, major_version=major_version)
        self.store.save(package)
        self.generator.regenerate()

        logger.info(f"Added package '{name}' at major version {major_version}")
        return package

    def add_all_from(
        self, list_file: Union[str, Path], progress: bool = False
    ) -> List[Package]:
        """
        Add every package listed in a file, one location per line.

        Blank lines are ignored and packages that are already added are
        re-resolved rather than rejected, so importing the same file twice is
        harmless. All lines are validated before anything is added.

        Raises:
            MalformedRegistryFile: If the file cannot be read or a line is not
                a valid location
        """
        list_file = Path(list_file)
        try:
            lines = list_file.read_text().splitlines()
        except (OSError, UnicodeDecodeError) as e:
            raise MalformedRegistryFile(list_file) from e

        locations = []
        for line in lines:
            line = line.strip()
            if not line:
                continue
            try:
                locations.append(parse_location(line))
            except ValueError as e:
                logger.error(f"Invalid package location in {list_file}: {e}")
                raise MalformedRegistryFile(list_file) from e

        return [
            self.add(location, skip_if_already_added=True)
            for location in tqdm(locations, desc="Adding packages", disable=not progress)
        ]

    def remove(self, name: str) -> Package:
        """
        Remove a package and its build cache folder.

        The manifest is not regenerated here and keeps listing the package
        until the next regeneration.
        """
        return self.store.delete(name)

    def update_all_to_latest_major(self, progress: bool = False) -> List[Package]:
        """
        Bump every package whose latest major version is higher than the stored one.

        The manifest is regenerated once after all packages are checked. A
        failure partway leaves earlier bumps persisted.

        Returns:
            The packages that were bumped, with their new versions
        """
        updated = []
        packages = self.added_packages
        for package in tqdm(packages, desc="Resolving versions", disable=not progress):
            latest = self.resolver.resolve_latest_major_version(package.url)
            if latest <= package.major_version:
                continue

            logger.info(
                f"Updating '{package.name}' from {package.major_version} to {latest}"
            )
            bumped = package.with_major_version(latest)
            self.store.save(bumped)
            updated.append(bumped)

        self.generator.regenerate()
        return updated

    def description_for_script(self, script_name: str) -> str:
        return self.generator.description_for_script(script_name)

    def expose_build_cache(self, into_folder: Union[str, Path]) -> Path:
        return self.generator.expose_build_cache(into_folder)
