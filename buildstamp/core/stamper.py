"""
Core orchestrator for the build stamping tool.

The ManifestStamper class computes the human-readable version for the
current checkout and writes it into the manifest of each artifact.
"""

import logging
import os
import uuid
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ..archives.factory import ArchiveFactory
from ..config import StampConfig
from ..vcs.git import get_current_revision
from .errors import ConfigError
from .models import StampOutcome, StampResult, StampRun, StampStatus, VersionInputs
from .version import format_from_inputs


class ManifestStamper:
    """
    Main orchestrator class for version stamping.

    The git revision is resolved once per stamper and reused for every
    artifact, so all archives of one build carry the same version.
    """

    def __init__(self, config: Optional[StampConfig] = None):
        """
        Initialize the stamper.

        Args:
            config: Stamping configuration (defaults if None)
        """
        self.config = config or StampConfig()
        self.archive_factory = ArchiveFactory()
        self._revision: Optional[str] = None

    @property
    def revision(self) -> str:
        """Full revision hash of the configured working tree."""
        if self._revision is None:
            self._revision = get_current_revision(self.config.root)
        return self._revision

    def resolve_inputs(self, project_version: Optional[str] = None,
                       build_number: Optional[str] = None) -> VersionInputs:
        """
        Collect version inputs from arguments, config and environment.

        Args:
            project_version: Overrides the configured project version
            build_number: Overrides the build number environment variable

        Returns:
            VersionInputs: Validated inputs

        Raises:
            ConfigError: If no project version is available
            RevisionLookupError: If the git revision cannot be read
        """
        version = project_version or self.config.project_version
        if not version:
            raise ConfigError("No project version configured")

        if build_number is None:
            build_number = os.environ.get(self.config.build_number_env)

        return VersionInputs(
            project_version=version,
            revision=self.revision,
            build_number=build_number,
            snapshot_suffix=self.config.snapshot_suffix,
            revision_length=self.config.revision_length
        )

    def compute_version(self, project_version: Optional[str] = None,
                        build_number: Optional[str] = None) -> str:
        """Compute the human-readable version string."""
        return format_from_inputs(self.resolve_inputs(project_version, build_number))

    def collect_artifacts(self) -> List[Path]:
        """
        Expand the configured artifact patterns.

        Returns:
            List[Path]: Matching paths relative to the config root, sorted

        Raises:
            ConfigError: If a pattern cannot be matched below the root
        """
        found = set()
        for pattern in self.config.artifacts:
            try:
                found.update(self.config.root.glob(pattern))
            except (NotImplementedError, ValueError) as e:
                raise ConfigError(f"Invalid artifact pattern {pattern!r}: {e}") from e
        return sorted(found)

    def stamp(self, paths: Optional[Iterable[Union[str, Path]]] = None,
              project_version: Optional[str] = None,
              build_number: Optional[str] = None) -> StampOutcome:
        """
        Write the version into every artifact's manifest.

        Args:
            paths: Archives to stamp (configured patterns if None)
            project_version: Overrides the configured project version
            build_number: Overrides the build number environment variable

        Returns:
            StampOutcome: Results for every artifact
        """
        inputs = self.resolve_inputs(project_version, build_number)
        version = format_from_inputs(inputs)

        run = StampRun(
            run_id=str(uuid.uuid4()),
            version=version,
            inputs=inputs
        )

        targets = list(paths) if paths is not None else self.collect_artifacts()
        if not targets:
            logging.warning("No artifacts to stamp")

        for path in targets:
            run.results.append(self._stamp_one(Path(path), version))

        run.completed_at = datetime.utcnow()
        run.calculate_summary()

        logging.info(
            f"Stamped {run.stamped_artifacts}/{run.total_artifacts} artifacts "
            f"with '{version}'"
        )
        return StampOutcome(run=run)

    def read_version(self, path: Union[str, Path]) -> Optional[str]:
        """Read the stamped attribute of one artifact."""
        archive = self.archive_factory.get_archive(path)
        return archive.get_attribute(self.config.attribute)

    def _stamp_one(self, path: Path, version: str) -> StampResult:
        attribute = self.config.attribute
        try:
            archive = self.archive_factory.get_archive(path)
            previous = archive.set_attribute(attribute, version)
        except Exception as e:
            logging.error(f"Failed to stamp {path}: {e}")
            return StampResult(
                path=str(path),
                status=StampStatus.ERROR,
                attribute=attribute,
                new_value=version,
                message=str(e)
            )

        status = StampStatus.UNCHANGED if previous == version else StampStatus.STAMPED
        return StampResult(
            path=str(path),
            kind=archive.kind,
            status=status,
            attribute=attribute,
            previous_value=previous,
            new_value=version,
            message="Already up to date" if status == StampStatus.UNCHANGED else None
        )
