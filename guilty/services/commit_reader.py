"""Last-commit lookups for repositories and paths."""

from typing import Optional
import logging

from ..domain import CommitInfo, Repository
from ..infra import GitClient

logger = logging.getLogger(__name__)

# NUL cannot occur in author names or subjects
LOG_FORMAT = "%an%x00%at%x00%s"


def parse_commit_record(record: str) -> Optional[CommitInfo]:
    """Parse ``author NUL epoch NUL subject``."""
    parts = record.strip().split('\0', 2)
    if len(parts) != 3:
        return None
    try:
        epoch = int(parts[1])
    except ValueError:
        return None
    return CommitInfo.from_epoch(parts[0], epoch, parts[2])


class CommitMetadataReader:
    """
    Reads the last commit at HEAD, overall or for one path.

    Missing commit information is a normal state, so every failure
    (empty repository, untouched path, git error) yields None.
    """

    def __init__(self, git: GitClient):
        self.git = git

    def last_commit(self, repo: Repository, path: str = "") -> Optional[CommitInfo]:
        record = self.git.last_commit_record(repo, LOG_FORMAT, path)
        if record is None:
            return None
        commit = parse_commit_record(record)
        if commit is None:
            logger.debug(f"Unparsable log record for {repo.full_name}:{path}: {record!r}")
        return commit
