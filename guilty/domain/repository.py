"""
Repository domain objects for guilty.

Repository represents one git repository in the store, identified by
its group and name. It's immutable and serializable for JSON output.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Dict, Any, List


class RepoKind(Enum):
    """On-disk layout of a repository path."""
    BARE = "bare"
    WORKTREE = "worktree"
    INVALID = "invalid"

    @property
    def is_repository(self) -> bool:
        return self is not RepoKind.INVALID


@dataclass(frozen=True)
class CommitInfo:
    """Author, date and subject of a single commit."""
    author: str
    date: datetime
    message: str

    @classmethod
    def from_epoch(cls, author: str, epoch: int, message: str) -> 'CommitInfo':
        return cls(
            author=author,
            date=datetime.fromtimestamp(epoch, tz=timezone.utc),
            message=message,
        )

    @property
    def timestamp(self) -> int:
        return int(self.date.timestamp())

    def to_dict(self) -> Dict[str, Any]:
        return {
            'author': self.author,
            'date': self.date.isoformat(),
            'message': self.message,
        }


@dataclass(frozen=True)
class Repository:
    """
    Immutable representation of a repository in the store.

    kind is computed once by RepositoryLocator.classify() and carried
    along, so readers pick the git invocation form without probing
    the filesystem again.

    Example:
        repo = locator.locate("git", "proj")
        repo_with_commit = repo.with_last_commit(commit)
    """

    group: str
    name: str
    path: str
    kind: RepoKind
    clone_url: str
    last_commit: Optional[CommitInfo] = None

    @property
    def is_bare(self) -> bool:
        return self.kind is RepoKind.BARE

    @property
    def full_name(self) -> str:
        return f"{self.group}/{self.name}"

    def with_last_commit(self, commit: Optional[CommitInfo]) -> 'Repository':
        """Create a new Repository with commit information attached."""
        return replace(self, last_commit=commit)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'group': self.group,
            'name': self.name,
            'path': self.path,
            'type': self.kind.value,
            'cloneUrl': self.clone_url,
            'lastCommit': self.last_commit.to_dict() if self.last_commit else None,
        }

    def __str__(self) -> str:
        return f"{self.full_name} ({self.path})"


def sort_by_last_commit(repos: List[Repository]) -> List[Repository]:
    """Newest last commit first; repositories without commits go last."""
    with_commit = [r for r in repos if r.last_commit is not None]
    without_commit = [r for r in repos if r.last_commit is None]
    with_commit.sort(key=lambda r: r.name)
    with_commit.sort(key=lambda r: r.last_commit.date, reverse=True)
    without_commit.sort(key=lambda r: r.name)
    return with_commit + without_commit
