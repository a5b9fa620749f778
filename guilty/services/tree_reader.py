"""
Directory listings at HEAD.

Cost model: listing a directory with N entries, F of them files, runs one
commit-count query (plus an unborn-HEAD check when the count
fails), one ``ls-tree``, F ``cat-file -s`` size queries and N
``log -1`` last-modified queries, one after another. Latency grows
linearly with the number of entries.
"""

from pathlib import Path
from typing import List, Optional
import logging
import os
import posixpath

from ..domain import EntryKind, Repository, TreeEntry, sort_entries
from ..exit_codes import (
    ContentUnavailableError,
    PathEscapeError,
    PathNotFoundError,
    RepositoryNotFoundError,
)
from ..infra import GitClient
from .commit_reader import CommitMetadataReader
from .locator import RepositoryLocator

logger = logging.getLogger(__name__)


def resolve_inside(repo: Repository, relative_path: str) -> str:
    """
    Normalize a caller-supplied path, refusing anything outside the repository.

    Both the repository root and the candidate are made absolute and
    canonical; the candidate must be the root or lie beneath it.

    Returns:
        The path relative to the repository root ("" for the root)

    Raises:
        PathEscapeError: the candidate leaves the repository
    """
    if '\0' in relative_path:
        raise PathEscapeError(relative_path)

    root = Path(repo.path).resolve()
    candidate = (root / relative_path).resolve()
    if candidate != root and root not in candidate.parents:
        raise PathEscapeError(relative_path)

    normalized = posixpath.normpath(relative_path.replace(os.sep, '/')).strip('/')
    return "" if normalized == "." else normalized


class TreeReader:
    """
    Lists one level of the HEAD tree.

    Example:
        reader = TreeReader(git, CommitMetadataReader(git), locator)
        for entry in reader.list(repo, "src"):
            print(entry.name, entry.size)
    """

    def __init__(
        self,
        git: GitClient,
        commits: CommitMetadataReader,
        locator: Optional[RepositoryLocator] = None
    ):
        self.git = git
        self.commits = commits
        self.locator = locator

    def list(self, repo: Repository, relative_path: str = "") -> List[TreeEntry]:
        """
        List entries at relative_path, directories first.

        Raises:
            PathEscapeError: the path leaves the repository (checked
                before any git command runs)
            PathNotFoundError: no tree at that path in HEAD
            RepositoryNotFoundError: the repository disappeared mid-listing
            ContentUnavailableError: git could not read the repository
        """
        path = resolve_inside(repo, relative_path)

        # An unborn HEAD would make ls-tree fail with an ambiguous revision
        count = self.git.commit_count(repo)
        if count is None:
            self._raise_count_failure(repo)
        if count == 0:
            return []

        records = self.git.ls_tree(repo, path)
        if records is None:
            self._raise_listing_failure(repo, path)

        entries = []
        for record in records:
            entry_path = f"{path}/{record.name}" if path else record.name
            kind = EntryKind.DIRECTORY if record.type == "tree" else EntryKind.FILE

            size = 0
            if kind is EntryKind.FILE:
                size = self.git.object_size(repo, record.object_id)

            commit = self.commits.last_commit(repo, entry_path)
            entries.append(TreeEntry(
                name=record.name,
                path=entry_path,
                kind=kind,
                size=size,
                last_modified=commit.date if commit else None,
            ))

        return sort_entries(entries)

    def _raise_listing_failure(self, repo: Repository, path: str):
        # A concurrent quarantine renames the repository away mid-read
        if self.locator is not None and not self.locator.exists(repo):
            raise RepositoryNotFoundError(repo.group, repo.name)
        if path:
            raise PathNotFoundError(path)
        raise ContentUnavailableError(f"Failed to list files of {repo.full_name}")

    def _raise_count_failure(self, repo: Repository):
        if self.locator is not None and not self.locator.exists(repo):
            raise RepositoryNotFoundError(repo.group, repo.name)
        raise ContentUnavailableError(f"Failed to read HEAD of {repo.full_name}")

    def branches(self, repo: Repository) -> List[str]:
        return self.git.refs(repo, "refs/heads") or []

    def tags(self, repo: Repository) -> List[str]:
        return self.git.refs(repo, "refs/tags") or []
