"""
Manifest handling for unpacked archive directories.
"""

import os
import tempfile

from ..core.models import ArchiveKind
from .base import BaseArchive
from .manifest import MANIFEST_PATH, Manifest


class ExplodedArchive(BaseArchive):
    """Directory laid out like an archive, e.g. an exploded war."""

    kind = ArchiveKind.EXPLODED

    @property
    def manifest_path(self):
        return self.path / MANIFEST_PATH

    def read_manifest(self) -> Manifest:
        if not self.path.is_dir():
            raise FileNotFoundError(f"Archive directory not found: {self.path}")

        if not self.manifest_path.exists():
            return Manifest()

        return Manifest.parse(self.manifest_path.read_bytes())

    def write_manifest(self, manifest: Manifest) -> None:
        target = self.manifest_path
        target.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(prefix=".MANIFEST.", dir=str(target.parent))
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(manifest.to_bytes())
            os.replace(tmp_name, target)
        finally:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
