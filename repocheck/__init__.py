"""Repository convention checks: source-tree rule scanner and commit linting."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("repocheck")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.1.0-dev"

__all__ = ["__version__"]
