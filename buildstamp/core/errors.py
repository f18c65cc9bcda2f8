"""
Exception types raised by the build stamping tool.
"""


class BuildStampError(Exception):
    """Base class for all buildstamp failures."""


class RevisionLookupError(BuildStampError):
    """The current source revision could not be determined."""


class ManifestError(BuildStampError):
    """An archive manifest is malformed or could not be updated."""


class ConfigError(BuildStampError):
    """The stamping configuration is invalid."""
