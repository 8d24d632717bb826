"""Package record model and its on-disk encoding."""

import json

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .utils.names import is_remote_location

RECORD_FORMAT_VERSION = 1


class PackageDecodeError(ValueError):
    """Raised when a registry file does not hold a valid package record."""


class Package(BaseModel):
    """A tracked dependency: its name, source location and latest known major version."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    name: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    major_version: int = Field(..., ge=0, alias="majorVersion")

    @property
    def is_remote(self) -> bool:
        return is_remote_location(self.url)

    @property
    def dependency_string(self) -> str:
        """Manifest entry declaring this package as a dependency."""
        return f'.Package(url: "{self.url}", majorVersion: {self.major_version})'

    def with_major_version(self, major_version: int) -> "Package":
        return self.model_copy(update={"major_version": major_version})

    def encode(self) -> str:
        """Serialize to the versioned JSON record stored in the registry folder."""
        data = {"formatVersion": RECORD_FORMAT_VERSION}
        data.update(self.model_dump(by_alias=True))
        return json.dumps(data, indent=2)

    @classmethod
    def decode(cls, text: str) -> "Package":
        """Parse a versioned JSON record.

        Args:
            text: Contents of a registry file

        Returns:
            The decoded package

        Raises:
            PackageDecodeError: If the text is not a complete record in a
                supported format version
        """
        try:
            data = json.loads(text)
        except (json.JSONDecodeError, TypeError) as e:
            raise PackageDecodeError(f"Invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise PackageDecodeError("Record is not a JSON object")

        version = data.pop("formatVersion", None)
        if type(version) is not int or version != RECORD_FORMAT_VERSION:
            raise PackageDecodeError(f"Unsupported record format version: {version!r}")

        try:
            return _RecordSchema.model_validate(data).to_package()
        except ValidationError as e:
            raise PackageDecodeError(str(e)) from e


class _RecordSchema(BaseModel):
    """Strict view of a stored record; no coercion between JSON types."""

    model_config = ConfigDict(strict=True, extra="forbid")

    name: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    majorVersion: int = Field(..., ge=0)

    def to_package(self) -> Package:
        return Package(name=self.name, url=self.url, major_version=self.majorVersion)
