"""
High-level Python API for guilty.

GitStore is the engine facade: it wires the configuration, the git client
and the services together and exposes the operations the HTTP layer and
the CLI consume.

Example:
    import guilty

    # Create instance (uses config defaults)
    store = guilty.GitStore()

    # Or with an explicit store root
    store = guilty.GitStore(root="/srv/git")

    for group in store.list_groups():
        for repo in store.list_repositories(group):
            print(repo.full_name, repo.last_commit)

    details = store.get_repository_details("git", "proj")
    for entry in store.list_directory("git", "proj", "src"):
        print(entry.path, entry.size)

    blob = store.read_file("git", "proj", "README.md")
    if not blob.is_binary:
        print(blob.content)

    store.create_repository("git", "new-project")
    store.delete_repository("git", "old-project")
"""

from dataclasses import replace
from typing import List, Optional, Dict, Any, Union
from pathlib import Path
import logging

from .config import StoreConfig, load_config
from .domain import (
    BlobResult,
    Repository,
    RepositoryDetails,
    TreeEntry,
    sort_by_last_commit,
)
from .infra import GitClient
from .services import (
    BlobReader,
    CommitMetadataReader,
    GroupCatalog,
    ParsedPath,
    RepositoryLifecycle,
    RepositoryLocator,
    TreeReader,
    split_encoded_path,
)

logger = logging.getLogger(__name__)


class GitStore:
    """
    Engine facade over one repository store.

    Holds no state besides its configuration and collaborators; every
    call goes back to the filesystem and git.

    Example:
        store = GitStore(root="/mnt/git")
        repo = store.locate("git", "proj")
        print(repo.kind.value, repo.clone_url)
    """

    def __init__(
        self,
        store_config: Optional[StoreConfig] = None,
        root: Optional[Union[str, Path]] = None,
        config: Optional[Dict[str, Any]] = None,
        git_client: Optional[GitClient] = None
    ):
        """
        Initialize GitStore.

        Args:
            store_config: Ready-made StoreConfig (takes precedence)
            root: Store root overriding the configured one
            config: Full config dict (loads from file if None)
            git_client: Git client instance (creates default if None)
        """
        if store_config is None:
            config = config if config is not None else load_config()
            store_config = StoreConfig.from_config(config)
        if root is not None:
            store_config = replace(store_config, root=Path(root))

        self._config = store_config
        self._git = git_client or GitClient(
            binary=store_config.git_binary,
            timeout=store_config.git_timeout
        )

        self._catalog = GroupCatalog(store_config)
        self._locator = RepositoryLocator(store_config, self._catalog)
        self._commits = CommitMetadataReader(self._git)
        self._trees = TreeReader(self._git, self._commits, self._locator)
        self._blobs = BlobReader(self._git, self._locator)
        self._lifecycle = RepositoryLifecycle(
            store_config, self._git, self._catalog, self._locator
        )

    @property
    def config(self) -> StoreConfig:
        """Access the store configuration."""
        return self._config

    @property
    def locator(self) -> RepositoryLocator:
        return self._locator

    # =========================================================================
    # DISCOVERY
    # =========================================================================

    def list_groups(self) -> List[str]:
        """Valid groups, ascending; the default group is always present."""
        return self._catalog.list_groups()

    def list_repositories(self, group: Optional[str] = None) -> List[Repository]:
        """
        Repositories of a group with their last commit.

        Sorted newest commit first; repositories without commits last.
        """
        group = group or self._config.default_group
        repos = [
            repo.with_last_commit(self._commits.last_commit(repo))
            for repo in self._locator.scan_group(group)
        ]
        return sort_by_last_commit(repos)

    def locate(self, group: str, name: str) -> Repository:
        return self._locator.locate(group, name)

    # =========================================================================
    # BROWSING
    # =========================================================================

    def get_repository_details(self, group: str, name: str) -> RepositoryDetails:
        """Repository, its root listing, branches and tags."""
        repo = self._locator.locate(group, name)
        repo = repo.with_last_commit(self._commits.last_commit(repo))
        return RepositoryDetails(
            repository=repo,
            files=self._trees.list(repo, ""),
            branches=self._trees.branches(repo),
            tags=self._trees.tags(repo),
        )

    def list_directory(self, group: str, name: str, path: str = "") -> List[TreeEntry]:
        repo = self._locator.locate(group, name)
        return self._trees.list(repo, path)

    def read_file(self, group: str, name: str, path: str) -> BlobResult:
        repo = self._locator.locate(group, name)
        return self._blobs.read(repo, path)

    def last_commit(self, group: str, name: str, path: str = ""):
        repo = self._locator.locate(group, name)
        return self._commits.last_commit(repo, path)

    def parse_path(self, raw: str, require_path: bool = False) -> ParsedPath:
        """Split an encoded ``group/name[/path]`` request tail."""
        return split_encoded_path(raw, require_path=require_path)

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def create_repository(self, group: str, name: str) -> Repository:
        return self._lifecycle.create(group, name)

    def delete_repository(self, group: str, name: str) -> None:
        """Quarantine a repository; it disappears from discovery."""
        self._lifecycle.quarantine(group, name)


# Convenience function for quick access
def create(root: Optional[Union[str, Path]] = None, **kwargs) -> GitStore:
    """
    Create a GitStore instance.

    Convenience function for:
        store = guilty.create(root="/srv/git")
    """
    return GitStore(root=root, **kwargs)
