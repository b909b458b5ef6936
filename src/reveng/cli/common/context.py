"""Application context management for the CLI."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from rich.logging import RichHandler

from reveng.cli.common.exits import exit_from_exc
from reveng.cli.common.output import console
from reveng.core.errors import ConfigurationError
from reveng.core.repository import OverrideRepository
from reveng.core.resources import default_loaders


@dataclass
class OverridesAppContext:
    """Application context holding the resource search path and verbosity."""

    search_path: str | None
    verbose: bool

    def new_repository(self) -> OverrideRepository:
        """Create an empty repository using this context's resource loaders."""
        return OverrideRepository(loaders=default_loaders(self.search_path))


def configure_logging(verbose: bool) -> None:
    """Route library logging through Rich; DEBUG when verbose, warnings otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def build_overrides_context(search_path: str | None, verbose: bool) -> OverridesAppContext:
    """Build and return the application context for override commands.

    Args:
        search_path: Optional PATH-style list of resource directories.
        verbose: Whether to log loading and resolution details.

    Returns:
        OverridesAppContext: Application context for the invocation.
    """
    configure_logging(verbose)
    return OverridesAppContext(search_path=search_path, verbose=verbose)


def load_documents(
    repository: OverrideRepository,
    files: Iterable[Path],
    resources: Iterable[str],
) -> OverrideRepository:
    """Load files then named resources into ``repository``; exit on the first failure."""
    try:
        for path in files:
            repository.add_overrides_from_file(path)
        for name in resources:
            repository.add_overrides_from_resource(name)
    except ConfigurationError as exc:
        exit_from_exc(exc, message=str(exc), code=1)
    return repository
