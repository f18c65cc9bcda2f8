"""
Base archive interface for manifest stamping.

Defines the common interface that all archive layouts must implement.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

from ..core.models import ArchiveKind
from .manifest import Manifest


class BaseArchive(ABC):
    """
    Abstract base class for archives carrying a manifest.

    Subclasses only know how to load and store the manifest; attribute
    handling is shared.
    """

    kind: ArchiveKind

    def __init__(self, path: Union[str, Path]):
        """
        Initialize archive handler.

        Args:
            path: Location of the archive on disk
        """
        self.path = Path(path)

    @abstractmethod
    def read_manifest(self) -> Manifest:
        """
        Load the archive manifest.

        Returns:
            Manifest: Parsed manifest, empty if the archive has none

        Raises:
            FileNotFoundError: If the archive doesn't exist
            ManifestError: If the manifest is malformed
        """
        pass

    @abstractmethod
    def write_manifest(self, manifest: Manifest) -> None:
        """
        Replace the archive manifest.

        Args:
            manifest: Manifest to store
        """
        pass

    def get_attribute(self, name: str) -> Optional[str]:
        """Read a main-section manifest attribute."""
        return self.read_manifest().get(name)

    def set_attribute(self, name: str, value: str) -> Optional[str]:
        """
        Set a main-section manifest attribute.

        The archive is left untouched when the attribute already holds
        ``value``.

        Returns:
            Optional[str]: Previous attribute value
        """
        manifest = self.read_manifest()
        previous = manifest.get(name)
        if previous == value:
            logging.debug(f"{self.path}: {name} already set to '{value}'")
            return previous

        manifest.set(name, value)
        self.write_manifest(manifest)
        logging.info(f"{self.path}: set {name} to '{value}'")
        return previous

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self.path)!r})"
