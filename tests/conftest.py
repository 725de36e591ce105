"""
Shared test fixtures and configuration.
"""

import shutil
from pathlib import Path

import pytest


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def bundle_dir(tmp_path: Path, fixtures_dir: Path) -> Path:
    """A writable copy of the valid etcd bundle."""
    dest = tmp_path / "bundle"
    shutil.copytree(fixtures_dir / "valid_bundle", dest)
    return dest


@pytest.fixture
def manifests_dir(bundle_dir: Path) -> Path:
    """The manifests directory of ``bundle_dir``."""
    return bundle_dir / "manifests"
