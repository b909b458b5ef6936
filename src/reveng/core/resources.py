"""Locating named override resources.

A resource name is resolved by asking each configured loader in turn; the
first loader that can open it wins.
"""

from __future__ import annotations

import os
from importlib import resources
from pathlib import Path
from typing import BinaryIO, Protocol

SEARCH_PATH_ENV = "REVENG_OVERRIDES_PATH"


class ResourceLoader(Protocol):
    """Interface for opening override resources by name."""

    def open(self, name: str) -> BinaryIO | None:
        """Return an open binary stream, or None when the resource is unknown."""
        ...


class DirectoryResourceLoader:
    """Loads resources relative to a directory on disk."""

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def open(self, name: str) -> BinaryIO | None:
        path = self.root / name
        if not path.is_file():
            return None
        return path.open("rb")

    def __repr__(self) -> str:
        return f"DirectoryResourceLoader({str(self.root)!r})"


class PackageResourceLoader:
    """Loads resources shipped inside an importable package."""

    def __init__(self, package: str):
        self.package = package

    def open(self, name: str) -> BinaryIO | None:
        try:
            resource = resources.files(self.package).joinpath(name)
        except ModuleNotFoundError:
            return None
        if not resource.is_file():
            return None
        return resource.open("rb")

    def __repr__(self) -> str:
        return f"PackageResourceLoader({self.package!r})"


def split_search_path(raw: str | None) -> list[Path]:
    """Split an ``os.pathsep`` separated list of directories."""
    return [Path(p) for p in (raw or "").split(os.pathsep) if p.strip()]


def default_loaders(search_path: str | None = None) -> list[ResourceLoader]:
    """
    Build the default loader list.

    Directories from ``search_path`` (or the ``REVENG_OVERRIDES_PATH``
    environment variable when not given) come first, then the current
    working directory.
    """
    if search_path is None:
        search_path = os.environ.get(SEARCH_PATH_ENV)
    loaders: list[ResourceLoader] = [
        DirectoryResourceLoader(root) for root in split_search_path(search_path)
    ]
    loaders.append(DirectoryResourceLoader(Path.cwd()))
    return loaders
