"""File content at HEAD, with binary files reported instead of read."""

from typing import Optional
import logging

from ..domain import BlobResult, Repository
from ..exit_codes import ContentUnavailableError, RepositoryNotFoundError
from ..infra import GitClient
from .locator import RepositoryLocator
from .tree_reader import resolve_inside

logger = logging.getLogger(__name__)


class BlobReader:
    """
    Reads blobs from HEAD.

    The ``binary`` attribute is checked before any content is fetched;
    a binary file is a normal result, not an error.
    """

    def __init__(self, git: GitClient, locator: Optional[RepositoryLocator] = None):
        self.git = git
        self.locator = locator

    def read(self, repo: Repository, file_path: str) -> BlobResult:
        """
        Read a file at HEAD.

        Raises:
            PathEscapeError: the path leaves the repository
            ContentUnavailableError: the path is not a file at HEAD, or
                its attributes or content cannot be read
        """
        path = resolve_inside(repo, file_path)
        if not path:
            raise ContentUnavailableError("No file path given")

        if self.git.object_type(repo, f"HEAD:{path}") != "blob":
            self._check_still_present(repo)
            raise ContentUnavailableError(f"'{path}' is not a file at HEAD")

        is_binary = self.git.binary_attribute(repo, path)
        if is_binary is None:
            raise ContentUnavailableError(f"Failed to check attributes of '{path}'")
        if is_binary:
            return BlobResult.binary()

        content = self.git.read_blob(repo, path)
        if content is None:
            self._check_still_present(repo)
            raise ContentUnavailableError(f"Failed to read '{path}'")

        return BlobResult(is_binary=False, content=content.decode('utf-8', errors='replace'))

    def _check_still_present(self, repo: Repository):
        if self.locator is not None and not self.locator.exists(repo):
            raise RepositoryNotFoundError(repo.group, repo.name)
