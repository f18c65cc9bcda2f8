"""
Data models for the build stamping tool using Pydantic for validation.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


DEFAULT_SNAPSHOT_SUFFIX = "-SNAPSHOT"
DEFAULT_REVISION_LENGTH = 8
DEFAULT_ATTRIBUTE = "Implementation-Version"


class ArchiveKind(str, Enum):
    """Supported archive layouts."""
    ZIP = "zip"
    EXPLODED = "exploded"


class StampStatus(str, Enum):
    """Outcome of stamping a single artifact."""
    STAMPED = "stamped"
    UNCHANGED = "unchanged"
    ERROR = "error"


class VersionInputs(BaseModel):
    """Everything the version string is derived from."""
    project_version: str = Field(..., description="Configured project version")
    revision: str = Field(..., description="Full source revision hash")
    build_number: Optional[str] = Field(None, description="CI build number, if any")
    snapshot_suffix: str = DEFAULT_SNAPSHOT_SUFFIX
    revision_length: int = Field(DEFAULT_REVISION_LENGTH, gt=0)

    @field_validator('project_version')
    @classmethod
    def validate_version(cls, v):
        """Reject blank versions; the value is otherwise used verbatim."""
        if not v.strip():
            raise ValueError("Project version must not be empty")
        return v

    @field_validator('revision')
    @classmethod
    def validate_revision(cls, v):
        """Strip git's trailing newline and reject empty hashes."""
        if not v.strip():
            raise ValueError("Revision must not be empty")
        return v.strip()

    @property
    def revision_prefix(self) -> str:
        """Revision hash truncated to the configured length."""
        from .version import short_revision
        return short_revision(self.revision, self.revision_length)

    @property
    def is_prerelease(self) -> bool:
        """Whether the project version carries the pre-release marker."""
        return self.project_version.endswith(self.snapshot_suffix)


class StampResult(BaseModel):
    """Result of stamping one archive artifact."""
    path: str
    kind: Optional[ArchiveKind] = None
    status: StampStatus
    attribute: str = DEFAULT_ATTRIBUTE
    previous_value: Optional[str] = None
    new_value: Optional[str] = None
    message: Optional[str] = None
    stamped_at: datetime = Field(default_factory=datetime.utcnow)


class StampRun(BaseModel):
    """Complete stamping invocation."""
    run_id: str = Field(..., description="Unique run identifier")
    version: str = Field(..., description="Computed human-readable version")
    inputs: VersionInputs
    started_at: datetime = Field(default_factory=datetime.utcnow)
    completed_at: Optional[datetime] = None

    results: List[StampResult] = Field(default_factory=list)

    # Summary statistics
    total_artifacts: int = 0
    stamped_artifacts: int = 0
    unchanged_artifacts: int = 0
    error_artifacts: int = 0

    success: bool = False

    def calculate_summary(self) -> None:
        """Calculate summary statistics from artifact results."""
        self.total_artifacts = len(self.results)
        self.stamped_artifacts = sum(1 for r in self.results if r.status == StampStatus.STAMPED)
        self.unchanged_artifacts = sum(1 for r in self.results if r.status == StampStatus.UNCHANGED)
        self.error_artifacts = sum(1 for r in self.results if r.status == StampStatus.ERROR)
        self.success = self.error_artifacts == 0


class StampOutcome(BaseModel):
    """Main result object for stamping operations."""
    run: StampRun

    @property
    def passed(self) -> bool:
        """Whether every artifact was stamped or already up to date."""
        return self.run.success

    @property
    def stamped(self) -> List[StampResult]:
        """Artifacts whose manifest was rewritten."""
        return [r for r in self.run.results if r.status == StampStatus.STAMPED]

    @property
    def errors(self) -> List[StampResult]:
        """Artifacts that could not be stamped."""
        return [r for r in self.run.results if r.status == StampStatus.ERROR]
