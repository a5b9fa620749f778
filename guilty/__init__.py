"""
guilty - Browse a store of git repositories as groups, trees and files.

The store is a directory of groups, each holding repositories laid out as
``<group>/<name>.git``. guilty resolves encoded request paths to a
repository and a path inside it, lists trees and reads files at HEAD by
running git, and creates or quarantines repositories.

Quick Start:
    import guilty

    store = guilty.GitStore(root="/mnt/git")
    for group in store.list_groups():
        print(group, [r.name for r in store.list_repositories(group)])

    entries = store.list_directory("git", "proj", "src")
    blob = store.read_file("git", "proj", "README.md")

Surfaces:
    guilty.cli     - click command line (``guilty ls git/proj``)
    guilty.server  - FastAPI JSON API (``guilty serve``)
"""

__version__ = "0.3.0"

from .api import GitStore, create

from .domain import (
    Repository,
    RepoKind,
    CommitInfo,
    TreeEntry,
    EntryKind,
    BlobResult,
    RepositoryDetails,
)

from .config import StoreConfig, load_config

__all__ = [
    "__version__",
    "GitStore",
    "create",
    "Repository",
    "RepoKind",
    "CommitInfo",
    "TreeEntry",
    "EntryKind",
    "BlobResult",
    "RepositoryDetails",
    "StoreConfig",
    "load_config",
]
