import pytest
from pathlib import Path

from ..errors import PackagesUpdateFailed
from ..models import Package
from ..storage import PackageStore
from ..utils.build import BuildInvoker
from ..utils.manifest import ManifestGenerator
from .conftest import FakeCommandRunner


@pytest.fixture
def store(registry_folder: Path, generated_folder: Path) -> PackageStore:
    return PackageStore(registry_folder, generated_folder / "Packages")


@pytest.fixture
def generator(
    store: PackageStore, generated_folder: Path, runner: FakeCommandRunner
) -> ManifestGenerator:
    return ManifestGenerator(
        store, generated_folder, BuildInvoker(runner, ["swift", "package", "update"])
    )


def test_render(generator: ManifestGenerator) -> None:
    packages = [
        Package(name="a", url="https://example.com/a.git", major_version=1),
        Package(name="b", url="/src/b", major_version=0),
    ]
    assert generator.render(packages) == (
        "import PackageDescription\n\n"
        "let package = Package(\n"
        '    name: "SCRIPTDEPS_PACKAGES",\n'
        "    dependencies: [\n"
        '        .Package(url: "https://example.com/a.git", majorVersion: 1),\n'
        '        .Package(url: "/src/b", majorVersion: 0)\n'
        "    ]\n"
        ")"
    )


def test_regenerate(
    generator: ManifestGenerator,
    store: PackageStore,
    generated_folder: Path,
    runner: FakeCommandRunner,
) -> None:
    """Test that regeneration writes the manifest, runs the build tool and creates the cache."""
    store.save(Package(name="foo", url="https://example.com/foo.git", major_version=2))

    generator.regenerate()

    manifest = (generated_folder / "Package.swift").read_text()
    assert manifest.count(".Package(") == 1
    assert '.Package(url: "https://example.com/foo.git", majorVersion: 2)' in manifest
    assert (generated_folder / "Packages").is_dir()
    assert runner.calls == [(["swift", "package", "update"], str(generated_folder))]


def test_regenerate_build_failure(
    generator: ManifestGenerator, runner: FakeCommandRunner, registry_folder: Path
) -> None:
    runner.build_succeeds = False
    with pytest.raises(PackagesUpdateFailed) as exc_info:
        generator.regenerate()
    assert exc_info.value.folder == registry_folder
    assert not generator.build_cache_folder.exists()


def test_regenerate_write_failure(generator: ManifestGenerator) -> None:
    generator.manifest_path.mkdir(parents=True)
    with pytest.raises(PackagesUpdateFailed):
        generator.regenerate()


def test_description_for_script_regenerates_once(
    generator: ManifestGenerator, runner: FakeCommandRunner
) -> None:
    description = generator.description_for_script("myscript")

    assert 'name: "myscript"' in description
    assert "SCRIPTDEPS_PACKAGES" not in description
    assert len(runner.commands("swift")) == 1

    # The manifest now exists, so no further regeneration happens
    generator.description_for_script("other")
    assert len(runner.commands("swift")) == 1


def test_description_for_script_uses_existing_manifest(
    generator: ManifestGenerator, runner: FakeCommandRunner
) -> None:
    generator.generated_folder.mkdir(parents=True)
    generator.manifest_path.write_text('name: "SCRIPTDEPS_PACKAGES"')

    assert generator.description_for_script("tool") == 'name: "tool"'
    assert runner.calls == []


def test_description_for_script_propagates_failure(
    generator: ManifestGenerator, runner: FakeCommandRunner
) -> None:
    runner.build_succeeds = False
    with pytest.raises(PackagesUpdateFailed):
        generator.description_for_script("myscript")


def test_expose_build_cache(generator: ManifestGenerator, tmp_path: Path) -> None:
    script_folder = tmp_path / "script"
    script_folder.mkdir()

    link = generator.expose_build_cache(script_folder)

    assert link == script_folder / "Packages"
    assert link.is_symlink()
    assert link.resolve() == generator.build_cache_folder.resolve()


def test_expose_build_cache_is_idempotent(
    generator: ManifestGenerator, runner: FakeCommandRunner, tmp_path: Path
) -> None:
    first, second = tmp_path / "first", tmp_path / "second"
    first.mkdir()
    second.mkdir()
    (second / "Packages").mkdir()

    generator.expose_build_cache(first)
    generator.expose_build_cache(first)
    generator.expose_build_cache(second)

    assert len(runner.commands("swift")) == 1
    assert not (second / "Packages").is_symlink()


def test_expose_build_cache_missing_folder(
    generator: ManifestGenerator, runner: FakeCommandRunner, tmp_path: Path
) -> None:
    with pytest.raises(NotADirectoryError):
        generator.expose_build_cache(tmp_path / "missing")
    assert runner.calls == []
