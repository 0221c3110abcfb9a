"""Exception types raised by repocheck."""


class RepoCheckError(Exception):
    """Base class for repocheck failures."""


class ConfigError(RepoCheckError):
    """Raised when a YAML configuration file is malformed."""
