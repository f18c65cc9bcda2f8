"""
Manifest handling for zip-based archives (jar, war, ear, zip).
"""

import os
import shutil
import tempfile
import zipfile

from ..core.errors import ManifestError
from ..core.models import ArchiveKind
from .base import BaseArchive
from .manifest import MANIFEST_PATH, Manifest


META_INF_DIR = "META-INF/"


class ZipArchive(BaseArchive):
    """
    Zip archive with a ``META-INF/MANIFEST.MF`` entry.

    Writing rebuilds the archive in a temporary file next to the original
    and swaps it in with ``os.replace``. Entries other than the manifest are
    copied unchanged; the manifest is stored right after ``META-INF/`` so
    jar readers that only look at the first entries still find it.
    """

    kind = ArchiveKind.ZIP

    def read_manifest(self) -> Manifest:
        if not self.path.is_file():
            raise FileNotFoundError(f"Archive not found: {self.path}")

        try:
            with zipfile.ZipFile(self.path) as archive:
                try:
                    data = archive.read(MANIFEST_PATH)
                except KeyError:
                    return Manifest()
        except zipfile.BadZipFile as e:
            raise ManifestError(f"{self.path} is not a valid zip archive: {e}") from e

        return Manifest.parse(data)

    def write_manifest(self, manifest: Manifest) -> None:
        data = manifest.to_bytes()

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
        )
        os.close(fd)

        try:
            with zipfile.ZipFile(self.path) as source, \
                    zipfile.ZipFile(tmp_name, "w") as target:
                entries = [i for i in source.infolist() if i.filename != MANIFEST_PATH]
                target.comment = source.comment

                manifest_info = zipfile.ZipInfo(MANIFEST_PATH)
                manifest_info.compress_type = zipfile.ZIP_DEFLATED
                original = _find_entry(source, MANIFEST_PATH)
                if original is not None:
                    manifest_info.date_time = original.date_time
                    manifest_info.external_attr = original.external_attr

                dir_entry = _find_entry(source, META_INF_DIR)
                if dir_entry is not None:
                    target.writestr(dir_entry, source.read(dir_entry))
                    entries.remove(dir_entry)
                target.writestr(manifest_info, data)

                for info in entries:
                    if info.is_dir():
                        target.writestr(info, b"")
                        continue
                    with source.open(info) as src, target.open(info, "w") as dst:
                        shutil.copyfileobj(src, dst)

            shutil.copymode(self.path, tmp_name)
            os.replace(tmp_name, self.path)
        except zipfile.BadZipFile as e:
            raise ManifestError(f"{self.path} is not a valid zip archive: {e}") from e
        finally:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)


def _find_entry(archive: zipfile.ZipFile, name: str):
    try:
        return archive.getinfo(name)
    except KeyError:
        return None
