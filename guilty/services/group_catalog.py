"""
Group discovery for guilty.

A group is a directory directly under the store root. Groups are
rediscovered on every call; nothing is cached.
"""

from typing import List
import logging
import os
import re
import stat

from ..config import StoreConfig
from ..exit_codes import CatalogUnavailableError, MalformedPathError

logger = logging.getLogger(__name__)

# Shared by group and repository names
NAME_PATTERN = re.compile(r'^[A-Za-z0-9_-]+$')


class GroupCatalog:
    """
    Enumerates the valid top-level groups of the store.

    Example:
        catalog = GroupCatalog(StoreConfig(root=Path("/mnt/git")))
        for group in catalog.list_groups():
            print(group)
    """

    def __init__(self, config: StoreConfig):
        self.config = config

    def is_valid_name(self, group: str) -> bool:
        """Check a group name against the allow-pattern and denylist."""
        if not group or not NAME_PATTERN.match(group):
            return False
        if group in self.config.excluded_groups:
            return False
        return not group.endswith(f".{self.config.quarantine_suffix}")

    def validate_group(self, group: str) -> str:
        """Return group unchanged, or raise MalformedPathError."""
        if not self.is_valid_name(group):
            raise MalformedPathError(f"Invalid group name: {group!r}")
        return group

    def list_groups(self) -> List[str]:
        """
        List groups in ascending order.

        The default group is always included, even when its directory
        does not exist yet.

        Raises:
            CatalogUnavailableError: if the store root cannot be read
        """
        groups = {self.config.default_group}

        try:
            entries = list(os.scandir(self.config.root))
        except OSError as e:
            raise CatalogUnavailableError(
                f"Cannot read repository store {self.config.root}: {e}"
            ) from e

        for entry in entries:
            if not self.is_valid_name(entry.name):
                continue
            if self._is_readable_dir(entry):
                groups.add(entry.name)

        return sorted(groups)

    def _is_readable_dir(self, entry: os.DirEntry) -> bool:
        """Directory (or link to one) that the process may read."""
        try:
            if entry.is_symlink():
                # one level only: a link to a link is not a directory here
                target = os.path.join(os.path.dirname(entry.path), os.readlink(entry.path))
                st = os.lstat(target)
            else:
                st = entry.stat(follow_symlinks=False)
        except OSError:
            logger.debug(f"Skipping unreadable entry {entry.path}")
            return False

        if not stat.S_ISDIR(st.st_mode):
            return False
        if st.st_mode & 0o444 == 0:
            return False
        return os.access(entry.path, os.R_OK)
