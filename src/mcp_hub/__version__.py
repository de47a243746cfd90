"""Version information for mcp-hub."""

from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

DISTRIBUTION_NAME = "mcp-hub"


def _get_version() -> str:
    """Installed distribution version, else the source checkout's VERSION file."""
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        pass

    # Running from a checkout (src layout)
    root_version = Path(__file__).resolve().parents[2] / "VERSION"
    if root_version.exists():
        return root_version.read_text().strip()
    return "0.0.0"


__version__ = _get_version()
