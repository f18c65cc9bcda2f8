"""
Reader and writer for JAR-style ``META-INF/MANIFEST.MF`` files.

A manifest is a main section followed by optional named sections, each a
block of ``Name: value`` lines separated by a blank line. Lines longer than
72 bytes are continued on the next line after a single leading space.
"""

import re
from typing import Dict, Iterator, List, Optional, Tuple

from ..core.errors import ManifestError


MANIFEST_PATH = "META-INF/MANIFEST.MF"
MANIFEST_VERSION = "Manifest-Version"
SECTION_NAME = "Name"
MAX_LINE_BYTES = 72

_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,70}$")


class Attributes:
    """
    Ordered attribute block with case-insensitive names.

    The spelling used when an attribute is first added is kept on output.
    """

    def __init__(self, items: Optional[List[Tuple[str, str]]] = None):
        self._items: Dict[str, Tuple[str, str]] = {}
        for name, value in items or []:
            self[name] = value

    def __getitem__(self, name: str) -> str:
        return self._items[name.lower()][1]

    def __setitem__(self, name: str, value: str) -> None:
        if not _NAME_PATTERN.match(name):
            raise ManifestError(f"Invalid attribute name: {name!r}")
        if "\n" in value or "\r" in value:
            raise ManifestError(f"Attribute {name} contains a line break")
        key = name.lower()
        if key in self._items:
            name = self._items[key][0]
        self._items[key] = (name, value)

    def __delitem__(self, name: str) -> None:
        del self._items[name.lower()]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self._items.values())

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        entry = self._items.get(name.lower())
        return entry[1] if entry else default

    def items(self) -> List[Tuple[str, str]]:
        return list(self._items.values())

    def _append(self, name: str, continuation: str) -> None:
        original, value = self._items[name.lower()]
        self._items[name.lower()] = (original, value + continuation)


class Manifest:
    """
    In-memory manifest.

    Example:
        manifest = Manifest.parse(data)
        manifest.set("Implementation-Version", "2.1-SNAPSHOT (git-abcdef01)")
        data = manifest.to_bytes()
    """

    def __init__(self, main: Optional[Attributes] = None,
                 sections: Optional[List[Attributes]] = None):
        self.main = main if main is not None else Attributes()
        self.sections = sections if sections is not None else []

    @classmethod
    def parse(cls, data: bytes) -> "Manifest":
        """
        Parse manifest bytes.

        Raises:
            ManifestError: If the content is not valid UTF-8 or a line is malformed
        """
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ManifestError(f"Manifest is not valid UTF-8: {e}") from e

        if text.startswith("\ufeff"):
            text = text[1:]
        lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")

        blocks: List[Attributes] = []
        current: Optional[Attributes] = None
        last_name: Optional[str] = None
        leading_blank = False

        for lineno, line in enumerate(lines, 1):
            if not line:
                if current is not None:
                    blocks.append(current)
                elif not blocks:
                    leading_blank = True
                current = None
                last_name = None
                continue

            if line.startswith(" "):
                if current is None or last_name is None:
                    raise ManifestError(f"Line {lineno}: continuation without an attribute")
                current._append(last_name, line[1:])
                continue

            name, sep, value = line.partition(": ")
            if not sep:
                if line.endswith(":"):
                    name, value = line[:-1], ""
                else:
                    raise ManifestError(f"Line {lineno}: missing ': ' separator")

            if current is None:
                current = Attributes()
            try:
                current[name] = value
            except ManifestError as e:
                raise ManifestError(f"Line {lineno}: {e}") from e
            last_name = name

        if current is not None:
            blocks.append(current)

        # An empty main section is written as a single blank line
        if leading_blank or (blocks and next(iter(blocks[0])).lower() == SECTION_NAME.lower()):
            blocks.insert(0, Attributes())

        if not blocks:
            return cls()
        return cls(main=blocks[0], sections=blocks[1:])

    def get(self, name: str, section: Optional[str] = None) -> Optional[str]:
        """Get an attribute from the main section or from a named section."""
        if section is None:
            return self.main.get(name)
        for attrs in self.sections:
            if attrs.get(SECTION_NAME) == section:
                return attrs.get(name)
        return None

    def set(self, name: str, value: str) -> Optional[str]:
        """
        Set a main-section attribute.

        Returns:
            Optional[str]: The previous value, or None if the attribute was absent
        """
        previous = self.main.get(name)
        self.main[name] = value
        return previous

    def remove(self, name: str) -> Optional[str]:
        """Remove a main-section attribute, returning its old value."""
        previous = self.main.get(name)
        if previous is not None:
            del self.main[name]
        return previous

    def to_bytes(self) -> bytes:
        """Serialize with CRLF line endings and 72-byte line wrapping."""
        out = bytearray()

        version = self.main.get(MANIFEST_VERSION) or "1.0"
        out += _encode_line(_display_name(self.main, MANIFEST_VERSION), version)
        for name, value in self.main.items():
            if name.lower() != MANIFEST_VERSION.lower():
                out += _encode_line(name, value)
        out += b"\r\n"

        for attrs in self.sections:
            if SECTION_NAME in attrs:
                out += _encode_line(SECTION_NAME, attrs[SECTION_NAME])
            for name, value in attrs.items():
                if name.lower() != SECTION_NAME.lower():
                    out += _encode_line(name, value)
            out += b"\r\n"

        return bytes(out)


def _display_name(attrs: Attributes, name: str) -> str:
    for existing in attrs:
        if existing.lower() == name.lower():
            return existing
    return name


def _encode_line(name: str, value: str) -> bytes:
    """Encode one attribute, wrapping at 72 bytes without splitting characters."""
    chunks: List[bytes] = []
    current = bytearray()

    for char in f"{name}: {value}":
        encoded = char.encode("utf-8")
        if len(current) + len(encoded) > MAX_LINE_BYTES:
            chunks.append(bytes(current))
            current = bytearray(b" ")
        current += encoded
    chunks.append(bytes(current))

    return b"".join(chunk + b"\r\n" for chunk in chunks)
