"""Version of the Bulwark API, as reported by /docs and the app metadata."""

import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

DISTRIBUTION = "bulwark-api"

# src/api/infrastructure/version.py -> repository root
PYPROJECT_PATH = Path(__file__).resolve().parents[3] / "pyproject.toml"


def read_pyproject_version(path: Path) -> str:
    with open(path, "rb") as f:
        return tomllib.load(f)["project"]["version"]


def get_version() -> str:
    """Installed distribution version, or pyproject's in a source checkout."""
    try:
        return version(DISTRIBUTION)
    except PackageNotFoundError:
        return read_pyproject_version(PYPROJECT_PATH)


__version__ = get_version()
