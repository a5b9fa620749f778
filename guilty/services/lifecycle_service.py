"""
Repository lifecycle for guilty: creation and quarantine.

Repositories are never hard-deleted. Quarantine renames
``<name>.<bare-suffix>`` to ``<name>.<bare-suffix>.<quarantine-suffix>``
and revokes every permission on it. There is no way back.
"""

from pathlib import Path
import logging
import os
import shutil

from ..config import StoreConfig
from ..domain import Repository, RepoKind
from ..exit_codes import (
    GroupNotFoundError,
    LifecycleError,
    RepositoryNotFoundError,
    ValidationError,
)
from ..infra import GitClient
from .group_catalog import GroupCatalog, NAME_PATTERN
from .locator import RepositoryLocator

logger = logging.getLogger(__name__)


def _restore_permissions(path: Path) -> None:
    """Give the owner full access throughout a tree so it can be removed."""
    os.chmod(path, 0o700)
    for dirpath, dirnames, filenames in os.walk(path):
        for d in dirnames:
            full = os.path.join(dirpath, d)
            if not os.path.islink(full):
                os.chmod(full, 0o700)
        for f in filenames:
            full = os.path.join(dirpath, f)
            if not os.path.islink(full):
                os.chmod(full, 0o600)


class RepositoryLifecycle:
    """
    Creates bare repositories and moves repositories into quarantine.

    Example:
        lifecycle = RepositoryLifecycle(config, git, catalog, locator)
        repo = lifecycle.create("git", "proj")
        lifecycle.quarantine("git", "proj")
    """

    def __init__(
        self,
        config: StoreConfig,
        git: GitClient,
        catalog: GroupCatalog,
        locator: RepositoryLocator
    ):
        self.config = config
        self.git = git
        self.catalog = catalog
        self.locator = locator

    def validate_name(self, group: str, name: str) -> Path:
        """
        Check a new repository name and return its target path.

        Raises:
            ValidationError: empty, invalid or already taken name
            GroupNotFoundError: a non-default group that does not exist
        """
        if not name:
            raise ValidationError("Repository name is required")
        if not NAME_PATTERN.match(name):
            raise ValidationError(
                "Repository names may only contain letters, digits, '-' and '_'"
            )
        if not self.catalog.is_valid_name(group):
            raise ValidationError(f"Invalid group name: {group!r}")

        if group != self.config.default_group and not self.config.group_path(group).is_dir():
            raise GroupNotFoundError(group)

        path = self.config.repository_path(group, name)
        if os.path.lexists(path):
            raise ValidationError(f"Repository '{group}/{name}' already exists")
        return path

    def create(self, group: str, name: str) -> Repository:
        """
        Create an empty bare repository.

        If initialization fails the new directory is removed on a
        best-effort basis before the error is raised.

        Raises:
            ValidationError, GroupNotFoundError: see validate_name
            LifecycleError: the directory or repository could not be created
        """
        path = self.validate_name(group, name)

        try:
            path.mkdir(parents=True, mode=0o755)
        except OSError as e:
            raise LifecycleError(f"Failed to create directory {path}: {e}") from e

        ok, message = self.git.init_bare(path)
        if not ok:
            shutil.rmtree(path, ignore_errors=True)
            if path.exists():
                logger.warning(f"Could not clean up partially created repository {path}")
            raise LifecycleError(f"Failed to initialize repository '{group}/{name}': {message}")

        logger.info(f"Created repository {group}/{name} at {path}")
        return Repository(
            group=group,
            name=name,
            path=str(path),
            kind=RepoKind.BARE,
            clone_url=self.config.clone_url(group, name),
        )

    def quarantine(self, group: str, name: str) -> Path:
        """
        Soft-delete a repository.

        A repeated delete of a name that is already quarantined and has
        not been recreated is a no-op. An older quarantined copy in the
        way of a new quarantine is removed first.

        Returns:
            The quarantine path

        Raises:
            RepositoryNotFoundError: neither an active nor a quarantined
                repository exists under that name
            LifecycleError: removing the old copy or renaming failed
        """
        self.catalog.validate_group(group)
        name = self.locator.normalize_name(name)
        path = self.config.repository_path(group, name)
        target = self.config.quarantine_path(path)

        if not os.path.lexists(path):
            if os.path.lexists(target):
                logger.info(f"Repository {group}/{name} is already quarantined")
                return target
            raise RepositoryNotFoundError(group, name)

        if os.path.lexists(target):
            logger.info(f"Removing previously quarantined copy {target}")
            try:
                if target.is_symlink() or not target.is_dir():
                    target.unlink()
                else:
                    _restore_permissions(target)
                    shutil.rmtree(target)
            except OSError as e:
                raise LifecycleError(f"Failed to remove old quarantined repository {target}: {e}") from e

        try:
            os.rename(path, target)
        except OSError as e:
            raise LifecycleError(f"Failed to quarantine repository '{group}/{name}': {e}") from e

        try:
            os.chmod(target, 0)
        except OSError as e:
            # the rename already took the repository out of service
            logger.warning(f"Failed to revoke permissions on {target}: {e}")

        logger.info(f"Quarantined repository {group}/{name} as {target}")
        return target
