"""
Human-readable version string formatting.

Release versions pass through untouched; pre-release versions are
decorated with the short git revision and, on CI, the build number.
"""

from typing import Optional

from .models import DEFAULT_REVISION_LENGTH, DEFAULT_SNAPSHOT_SUFFIX, VersionInputs


def short_revision(full_hash: str, length: int = DEFAULT_REVISION_LENGTH) -> str:
    """
    Truncate a revision hash to its short prefix.

    Args:
        full_hash: Full revision hash as printed by the VCS client
        length: Number of leading characters to keep

    Returns:
        str: The first ``length`` characters of the hash

    Raises:
        ValueError: If the hash is shorter than ``length``
    """
    revision = full_hash.strip()
    if len(revision) < length:
        raise ValueError(
            f"Revision '{revision}' is shorter than {length} characters"
        )
    return revision[:length]


def format_version(project_version: str, revision_prefix: str,
                   build_number: Optional[str] = None,
                   snapshot_suffix: str = DEFAULT_SNAPSHOT_SUFFIX) -> str:
    """
    Build the human-readable version string.

    Args:
        project_version: Configured project version
        revision_prefix: Short source revision
        build_number: CI build number, or None outside CI
        snapshot_suffix: Marker identifying pre-release versions

    Returns:
        str: ``project_version`` for releases, otherwise the version
        followed by ``(git-<rev>)`` or ``(git-<rev>-b<build>)``
    """
    if not project_version.endswith(snapshot_suffix):
        return project_version

    if build_number is None:
        return f"{project_version} (git-{revision_prefix})"

    return f"{project_version} (git-{revision_prefix}-b{build_number})"


def format_from_inputs(inputs: VersionInputs) -> str:
    """Format a version string from validated inputs."""
    return format_version(
        inputs.project_version,
        inputs.revision_prefix,
        inputs.build_number,
        inputs.snapshot_suffix,
    )
