"""Errors raised by package registry operations.

Every error carries a human-facing ``message`` and an optional ``hint``
suggesting how to fix the problem.
"""

from pathlib import Path
from typing import Optional, Union

from .utils.names import is_remote_location


class PackageManagerError(Exception):
    """Base exception for all package registry errors."""

    def __init__(self, message: str = "") -> None:
        self.message = message
        super().__init__(message)

    @property
    def hint(self) -> Optional[str]:
        return None


class VersionResolutionFailed(PackageManagerError):
    def __init__(self, location: str) -> None:
        self.location = location
        super().__init__(
            f"Could not resolve the latest version for package at '{location}'"
        )

    @property
    def hint(self) -> Optional[str]:
        hint = (
            "Make sure that the package you're trying to add is reachable, "
            "and has at least one tagged release"
        )
        if not is_remote_location(self.location):
            hint += (
                "\nYou can make a release by using 'git tag <version>' "
                "in your package's repository"
            )
        return hint


class PackageAlreadyAdded(PackageManagerError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"A package named '{name}' has already been added")

    @property
    def hint(self) -> Optional[str]:
        return (
            "Did you mean to update it? If so, run 'scriptdeps update'\n"
            f"You can also remove the existing package using 'scriptdeps remove {self.name}', "
            "and then run 'add' again"
        )


class PackageFileNotSaved(PackageManagerError):
    def __init__(self, name: str, folder: Union[str, Path]) -> None:
        self.name = name
        self.folder = Path(folder)
        super().__init__(f"Could not save file for package '{name}'")

    @property
    def hint(self) -> Optional[str]:
        return f"Make sure you have write permissions to the folder '{self.folder}'"


class PackageFileUnreadable(PackageManagerError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Could not read file for package '{name}'")

    @property
    def hint(self) -> Optional[str]:
        return (
            "The file may have become corrupted. Try removing the package using "
            f"'scriptdeps remove {self.name}' and then add it back again"
        )


class PackagesUpdateFailed(PackageManagerError):
    def __init__(self, folder: Union[str, Path]) -> None:
        self.folder = Path(folder)
        super().__init__("Failed to update packages")

    @property
    def hint(self) -> Optional[str]:
        return f"Make sure you have write permissions to the folder '{self.folder}'"


class UnknownPackage(PackageManagerError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"Cannot remove package '{name}' - no such package has been added"
        )

    @property
    def hint(self) -> Optional[str]:
        return "To list all added packages run 'scriptdeps list'"


class PackageNotRemoved(PackageManagerError):
    def __init__(self, name: str, folder: Union[str, Path]) -> None:
        self.name = name
        self.folder = Path(folder)
        super().__init__(f"Could not remove package '{name}'")

    @property
    def hint(self) -> Optional[str]:
        return f"Make sure you have write permissions to the folder '{self.folder}'"


class MalformedRegistryFile(PackageManagerError):
    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        super().__init__(f"Incorrectly formatted package list file at '{self.path}'")

    @property
    def hint(self) -> Optional[str]:
        return "Ensure that the file contains one package URL or path per line"
