import logging
from pathlib import Path
from typing import Iterable, Union

from ..errors import PackagesUpdateFailed
from ..models import Package
from ..storage import PackageStore
from .build import BuildInvoker

logger = logging.getLogger(__name__)


class ManifestGenerator:
    def __init__(
        self,
        store: PackageStore,
        generated_folder: Union[str, Path],
        build_invoker: BuildInvoker,
        manifest_name: str = "Package.swift",
        build_cache_name: str = "Packages",
        aggregate_name: str = "SCRIPTDEPS_PACKAGES",
    ):
        """Initialize the manifest generator.

        Args:
            store: Package records to declare as dependencies
            generated_folder: Folder receiving the manifest and the build cache
            build_invoker: Runs the build tool after the manifest is written
            manifest_name: File name of the generated manifest
            build_cache_name: Name of the build cache subfolder
            aggregate_name: Reserved target name replaced per script
        """
        self.store = store
        self.generated_folder = Path(generated_folder)
        self.build_invoker = build_invoker
        self.manifest_name = manifest_name
        self.build_cache_name = build_cache_name
        self.aggregate_name = aggregate_name

    @property
    def manifest_path(self) -> Path:
        return self.generated_folder / self.manifest_name

    @property
    def build_cache_folder(self) -> Path:
        return self.generated_folder / self.build_cache_name

    def render(self, packages: Iterable[Package]) -> str:
        """Render the aggregate manifest declaring ``packages`` as dependencies."""
        entries = ",\n".join(
            "        " + package.dependency_string for package in packages
        )
        return (
            "import PackageDescription\n\n"
            "let package = Package(\n"
            f'    name: "{self.aggregate_name}",\n'
            "    dependencies: [\n"
            f"{entries}\n"
            "    ]\n"
            ")"
        )

    def regenerate(self) -> None:
        """Write the manifest, let the build tool refresh it and ensure the build cache exists.

        Raises:
            PackagesUpdateFailed: If any step fails
        """
        try:
            self.generated_folder.mkdir(parents=True, exist_ok=True)
            description = self.render(self.store.iter_packages())

            logger.info(f"Writing manifest to {self.manifest_path}")
            self.manifest_path.write_text(description)

            if not self.build_invoker.update_dependencies(self.generated_folder):
                raise PackagesUpdateFailed(self.store.registry_folder)

            self.build_cache_folder.mkdir(exist_ok=True)
        except PackagesUpdateFailed:
            raise
        except OSError as e:
            logger.exception("Failed to regenerate package manifest")
            raise PackagesUpdateFailed(self.store.registry_folder) from e

    def description_for_script(self, script_name: str) -> str:
        """Return the manifest with the aggregate target renamed to ``script_name``.

        A missing manifest is regenerated once before reading.
        """
        try:
            description = self.manifest_path.read_text()
        except FileNotFoundError:
            logger.info("No manifest found, regenerating")
            self.regenerate()
            try:
                description = self.manifest_path.read_text()
            except OSError as e:
                raise PackagesUpdateFailed(self.store.registry_folder) from e

        return description.replace(self.aggregate_name, script_name)

    def expose_build_cache(self, into_folder: Union[str, Path]) -> Path:
        """Symlink the shared build cache into ``into_folder``.

        Does nothing if ``into_folder`` already holds an entry with the build
        cache name.

        Returns:
            Path of the entry in ``into_folder``

        Raises:
            NotADirectoryError: If ``into_folder`` is not an existing folder
        """
        into_folder = Path(into_folder)
        if not into_folder.is_dir():
            raise NotADirectoryError(f"No such folder: {into_folder}")

        if not self.build_cache_folder.is_dir():
            logger.info("No build cache found, regenerating")
            self.regenerate()

        link_path = into_folder / self.build_cache_name
        if link_path.exists() or link_path.is_symlink():
            return link_path

        logger.debug(f"Linking {link_path} to {self.build_cache_folder}")
        link_path.symlink_to(self.build_cache_folder.resolve(), target_is_directory=True)
        return link_path
