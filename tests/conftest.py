"""Shared fixtures for gamefinder tests."""

import pathlib

import pytest

from gamefinder.core.models import BinaryMetadata

from tests.core.helpers import FakeMetadataReader, make_exe


@pytest.fixture
def library_root(tmp_path: pathlib.Path) -> pathlib.Path:
    """Create a neutral directory to act as a search root."""
    root = tmp_path / "library"
    root.mkdir()
    return root


@pytest.fixture
def hades_install(library_root: pathlib.Path) -> pathlib.Path:
    """Create a Hades install with a companion and an uninstaller.

    Layout::

        library/alpha/Hades.exe
        library/alpha/Launcher.exe
        library/alpha/unins000.exe
        library/alpha/readme.txt
    """
    install = library_root / "alpha"
    make_exe(install, "Hades.exe")
    make_exe(install, "Launcher.exe")
    make_exe(install, "unins000.exe")
    (install / "readme.txt").write_text("not an executable")
    return install


@pytest.fixture
def fake_reader() -> FakeMetadataReader:
    """Metadata reader that knows Hades.exe's version resource."""
    return FakeMetadataReader({
        "Hades.exe": BinaryMetadata(
            product_name="Hades",
            company_name="Supergiant Games",
            product_version="1.38",
            file_description="Hades",
        ),
    })
