"""
Domain layer for guilty.

Contains pure domain objects with no I/O or side effects:
- Repository: A repository in the store with its layout kind
- CommitInfo: Author/date/subject of a commit
- TreeEntry: A file or directory at HEAD
- BlobResult: Text content or a binary marker
- RepositoryDetails: Repository plus root listing and refs

These objects are immutable and provide to_dict() for JSON output.
"""

from .repository import Repository, RepoKind, CommitInfo, sort_by_last_commit
from .tree import TreeEntry, EntryKind, BlobResult, RepositoryDetails, sort_entries

__all__ = [
    'Repository',
    'RepoKind',
    'CommitInfo',
    'sort_by_last_commit',
    'TreeEntry',
    'EntryKind',
    'BlobResult',
    'RepositoryDetails',
    'sort_entries',
]
