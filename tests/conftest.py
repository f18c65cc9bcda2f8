"""
Test fixtures and utilities for the buildstamp test suite.

Provides sample archives, configurations, and a patched git client
used across multiple test modules.
"""

import zipfile
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from buildstamp.config import StampConfig
from buildstamp.core.stamper import ManifestStamper


SAMPLE_REVISION = "abcdef0123456789abcdef0123456789abcdef01"

SAMPLE_MANIFEST = (
    b"Manifest-Version: 1.0\r\n"
    b"Main-Class: com.example.Main\r\n"
    b"Created-By: test\r\n"
    b"\r\n"
)


def create_test_jar(path: Path, manifest: bytes = SAMPLE_MANIFEST,
                    extra_entries: dict = None) -> Path:
    """Helper function to create a jar with a manifest and a few classes."""
    entries = {
        "com/example/Main.class": b"\xca\xfe\xba\xbe main",
        "config/app.properties": b"key=value\n",
    }
    entries.update(extra_entries or {})

    with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as archive:
        archive.writestr("META-INF/", b"")
        if manifest is not None:
            archive.writestr("META-INF/MANIFEST.MF", manifest)
        for name, data in entries.items():
            archive.writestr(name, data)
    return path


def read_entry(path: Path, name: str) -> bytes:
    """Read a single entry from a zip archive."""
    with zipfile.ZipFile(path) as archive:
        return archive.read(name)


@pytest.fixture
def sample_jar(tmp_path):
    """Create a jar with a basic manifest."""
    return create_test_jar(tmp_path / "app-2.1-SNAPSHOT.jar")


@pytest.fixture
def exploded_dir(tmp_path):
    """Create an unpacked archive directory."""
    root = tmp_path / "app.war"
    (root / "META-INF").mkdir(parents=True)
    (root / "META-INF" / "MANIFEST.MF").write_bytes(SAMPLE_MANIFEST)
    (root / "index.html").write_text("<html></html>")
    return root


@pytest.fixture
def mock_git():
    """Patch the git client to report SAMPLE_REVISION."""
    with patch("buildstamp.vcs.git.subprocess.run") as mock_run:
        mock_run.return_value = Mock(returncode=0, stdout=f"{SAMPLE_REVISION}\n", stderr="")
        yield mock_run


@pytest.fixture
def snapshot_config(tmp_path):
    """Create a configuration for a pre-release project."""
    return StampConfig(
        project_version="2.1-SNAPSHOT",
        artifacts=["build/libs/*.jar"],
        root=tmp_path
    )


@pytest.fixture
def stamper(snapshot_config, mock_git, monkeypatch):
    """Create a stamper with git patched and no CI build number."""
    monkeypatch.delenv("BUILD_NUMBER", raising=False)
    return ManifestStamper(snapshot_config)
