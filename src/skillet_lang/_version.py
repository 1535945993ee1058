"""Version of the installed skillet-lang distribution."""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version

DISTRIBUTION = "skillet-lang"


def get_version() -> str:
    """Read the version from package metadata; ``0.0.0`` when not installed."""
    try:
        return _metadata_version(DISTRIBUTION)
    except PackageNotFoundError:
        return "0.0.0"
