"""
buildstamp

Stamps packaged archives with a human-readable version that carries the
git revision and CI build number of pre-release builds.
"""

__version__ = "1.0.0"

from .core.stamper import ManifestStamper
from .core.models import StampOutcome, StampResult
from .core.version import format_version

__all__ = ["ManifestStamper", "StampOutcome", "StampResult", "format_version"]
