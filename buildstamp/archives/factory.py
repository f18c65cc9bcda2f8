"""
Archive factory for creating layout-specific manifest handlers.

Maps a path on disk to the handler that knows how to read and rewrite
its manifest.
"""

from pathlib import Path
from typing import Dict, List, Type, Union

from .base import BaseArchive
from .exploded import ExplodedArchive
from .zip_archive import ZipArchive


class ArchiveFactory:
    """
    Factory class for creating archive handlers.

    Directories are treated as exploded archives; files are matched on
    their suffix.
    """

    _archives: Dict[str, Type[BaseArchive]] = {
        ".jar": ZipArchive,
        ".war": ZipArchive,
        ".ear": ZipArchive,
        ".zip": ZipArchive,
    }

    @classmethod
    def get_archive(cls, path: Union[str, Path]) -> BaseArchive:
        """
        Get archive handler for the given path.

        Args:
            path: Archive file or exploded archive directory

        Returns:
            BaseArchive: Handler instance bound to ``path``

        Raises:
            ValueError: If the archive type is not supported
        """
        path = Path(path)
        if path.is_dir():
            return ExplodedArchive(path)

        suffix = path.suffix.lower()
        if suffix not in cls._archives:
            raise ValueError(f"Unsupported archive: {path}")

        return cls._archives[suffix](path)

    @classmethod
    def get_supported_suffixes(cls) -> List[str]:
        """
        Get list of supported archive file suffixes.

        Returns:
            List[str]: Suffixes including the leading dot
        """
        return list(cls._archives.keys())

    @classmethod
    def register_archive(cls, suffix: str, archive_class: Type[BaseArchive]) -> None:
        """
        Register a handler for a file suffix.

        Args:
            suffix: File suffix, with or without the leading dot
            archive_class: Archive handler class
        """
        if not suffix.startswith("."):
            suffix = f".{suffix}"
        cls._archives[suffix.lower()] = archive_class
