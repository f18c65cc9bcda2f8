"""
Git revision lookup.

Reads the current revision of a working tree through the git client.
Failures are not retried: a build without a resolvable revision aborts.
"""

import logging
import subprocess
from pathlib import Path
from typing import Optional, Union

from ..core.errors import RevisionLookupError
from ..core.models import DEFAULT_REVISION_LENGTH
from ..core.version import short_revision


GIT_EXECUTABLE = "git"


def get_current_revision(repo_dir: Optional[Union[str, Path]] = None,
                         timeout: int = 30) -> str:
    """
    Get the full hash of the commit currently checked out.

    Args:
        repo_dir: Working tree to inspect (current directory if None)
        timeout: Seconds to wait for the git client

    Returns:
        str: Full revision hash

    Raises:
        RevisionLookupError: If git is missing, the directory is not a
            repository, or the repository has no commits
    """
    cwd = str(repo_dir) if repo_dir is not None else None
    logging.debug(f"Resolving git revision in {cwd or Path.cwd()}")

    try:
        result = subprocess.run(
            [GIT_EXECUTABLE, "rev-parse", "HEAD"],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=True
        )
    except FileNotFoundError as e:
        raise RevisionLookupError(f"git executable not found: {e}") from e
    except subprocess.TimeoutExpired as e:
        raise RevisionLookupError(f"git rev-parse timed out after {timeout}s") from e
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or "").strip()
        raise RevisionLookupError(
            f"git rev-parse HEAD failed (exit {e.returncode}): {stderr}"
        ) from e

    revision = result.stdout.strip()
    if not revision:
        raise RevisionLookupError("git rev-parse HEAD returned no revision")

    logging.debug(f"Current revision: {revision}")
    return revision


def get_short_revision(repo_dir: Optional[Union[str, Path]] = None,
                       length: int = DEFAULT_REVISION_LENGTH) -> str:
    """Get the current revision truncated to ``length`` characters."""
    revision = get_current_revision(repo_dir)
    try:
        return short_revision(revision, length)
    except ValueError as e:
        raise RevisionLookupError(str(e)) from e
