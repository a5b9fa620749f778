"""
Repository resolution for guilty.

Maps (group, name) to ``<root>/<group>/<name>.<bare-suffix>`` and
classifies what is found there.
"""

from pathlib import Path
from typing import List
import logging
import os

from ..config import StoreConfig
from ..domain import Repository, RepoKind
from ..exit_codes import (
    CatalogUnavailableError,
    GroupNotFoundError,
    MalformedPathError,
    NotInitializedError,
    RepositoryNotFoundError,
)
from .group_catalog import GroupCatalog

logger = logging.getLogger(__name__)


def classify(path: Path) -> RepoKind:
    """
    Classify the layout at path.

    A ``.git`` entry means a worktree repository; otherwise a ``HEAD``
    file means a bare one. Anything else is not a repository.
    """
    if (path / ".git").exists():
        return RepoKind.WORKTREE
    if (path / "HEAD").is_file():
        return RepoKind.BARE
    return RepoKind.INVALID


class RepositoryLocator:
    """
    Resolves repositories by group and name.

    Example:
        locator = RepositoryLocator(config, GroupCatalog(config))
        repo = locator.locate("git", "proj")
        print(repo.kind, repo.clone_url)
    """

    def __init__(self, config: StoreConfig, catalog: GroupCatalog):
        self.config = config
        self.catalog = catalog

    def normalize_name(self, name: str) -> str:
        """Strip a trailing bare suffix and reject unusable names."""
        suffix = f".{self.config.bare_suffix}"
        if name.endswith(suffix) and len(name) > len(suffix):
            name = name[:-len(suffix)]
        if not name or name in ('.', '..') or '/' in name or '\0' in name:
            raise MalformedPathError(f"Invalid repository name: {name!r}")
        return name

    def locate(self, group: str, name: str) -> Repository:
        """
        Resolve a repository.

        Raises:
            MalformedPathError: invalid group or name
            RepositoryNotFoundError: nothing at the candidate path
            NotInitializedError: the path holds no repository layout
        """
        self.catalog.validate_group(group)
        name = self.normalize_name(name)
        path = self.config.repository_path(group, name)

        if not path.exists():
            raise RepositoryNotFoundError(group, name)

        kind = classify(path)
        if not kind.is_repository:
            raise NotInitializedError(str(path))

        return self._build(group, name, path, kind)

    def exists(self, repo: Repository) -> bool:
        """Whether a previously located repository is still in place."""
        return classify(Path(repo.path)) is repo.kind

    def scan_group(self, group: str) -> List[Repository]:
        """
        Active repositories in a group, unsorted and without commit info.

        Quarantined repositories never match because their directory
        names end with the quarantine suffix.

        Raises:
            GroupNotFoundError: a non-default group directory is missing
            CatalogUnavailableError: the group directory cannot be read
        """
        self.catalog.validate_group(group)
        group_dir = self.config.group_path(group)

        if not group_dir.is_dir():
            if group == self.config.default_group:
                return []
            raise GroupNotFoundError(group)

        suffix = f".{self.config.bare_suffix}"
        repos = []
        try:
            entries = list(os.scandir(group_dir))
        except OSError as e:
            raise CatalogUnavailableError(f"Cannot read group {group}: {e}") from e

        for entry in entries:
            if not entry.name.endswith(suffix) or len(entry.name) == len(suffix):
                continue
            try:
                if not entry.is_dir():
                    continue
                if entry.stat().st_mode & 0o444 == 0:
                    continue
            except OSError:
                logger.debug(f"Skipping unreadable entry {entry.path}")
                continue

            path = Path(entry.path)
            kind = classify(path)
            if not kind.is_repository:
                logger.debug(f"Skipping {path}: not a repository")
                continue
            repos.append(self._build(group, entry.name[:-len(suffix)], path, kind))

        return repos

    def _build(self, group: str, name: str, path: Path, kind: RepoKind) -> Repository:
        return Repository(
            group=group,
            name=name,
            path=str(path),
            kind=kind,
            clone_url=self.config.clone_url(group, name),
        )
