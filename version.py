"""Zotodo version, from the VERSION file in a checkout or package metadata."""

from importlib import metadata
from pathlib import Path

_VERSION_FILE = Path(__file__).parent / "VERSION"


def get_version() -> str:
    if _VERSION_FILE.exists():
        return _VERSION_FILE.read_text().strip()
    try:
        return metadata.version("zotodo")
    except metadata.PackageNotFoundError:
        return "unknown"


VERSION = get_version()
