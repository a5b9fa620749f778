"""
Git client infrastructure for guilty.

Provides a clean abstraction over git command execution.
All git operations go through this client, making them:
- Easy to mock for testing
- Consistent in error handling
- Isolated from business logic

Commands against a repository are built from its kind: bare repositories
use ``git --git-dir=<path>``, worktree repositories ``git -C <path>``.
Arguments are passed as a list, never through a shell.
"""

import os
import subprocess
import tempfile
from dataclasses import dataclass
from typing import Dict, Optional, List, Tuple, Union
from pathlib import Path
import logging

from ..domain import Repository

logger = logging.getLogger(__name__)

Output = Union[str, bytes, None]


@dataclass(frozen=True)
class LsTreeRecord:
    """One record of ``git ls-tree`` output."""
    mode: str
    type: str
    object_id: str
    name: str


def parse_ls_tree(output: str) -> List[LsTreeRecord]:
    """
    Parse NUL-terminated ``git ls-tree -z`` output.

    Each record is ``<mode> SP <type> SP <object> TAB <name>``. Everything
    after the tab is the name, so names containing spaces or tabs survive.
    """
    records = []
    for raw in output.split('\0'):
        if not raw:
            continue
        meta, sep, name = raw.partition('\t')
        parts = meta.split()
        if not sep or len(parts) != 3 or not name:
            logger.debug(f"Skipping unparsable ls-tree record: {raw!r}")
            continue
        records.append(LsTreeRecord(mode=parts[0], type=parts[1], object_id=parts[2], name=name))
    return records


class GitClient:
    """
    Abstraction over git commands.

    Provides methods for the read and init operations the engine needs,
    with consistent error handling and return types. Failed commands never
    raise; callers decide whether a failure is benign.

    Example:
        client = GitClient()
        if client.commit_count(repo) == 0:
            print("Repository is empty")
    """

    def __init__(self, binary: str = "git", timeout: Optional[float] = None):
        """
        Initialize GitClient.

        Args:
            binary: git executable to run
            timeout: Command timeout in seconds (None waits indefinitely)
        """
        self.binary = binary
        self.timeout = timeout

    def _run(
        self,
        args: List[str],
        cwd: Optional[str] = None,
        strip: bool = True,
        raw: bool = False,
        env: Optional[Dict[str, str]] = None,
    ) -> Tuple[Output, int]:
        """
        Run a git command.

        Args:
            args: Arguments after the git executable
            cwd: Working directory
            strip: Strip surrounding whitespace from text output
            raw: Return stdout as bytes instead of text
            env: Extra environment variables for this command

        Returns:
            Tuple of (stdout, returncode); returncode is -1 when git could
            not be launched or timed out
        """
        cmd = [self.binary] + list(args)
        try:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                timeout=self.timeout,
                env={**os.environ, **env} if env else None
            )
        except subprocess.TimeoutExpired:
            logger.warning(f"Git command timed out: {' '.join(cmd)}")
            return None, -1
        except OSError as e:
            logger.error(f"Git command failed: {' '.join(cmd)} - {e}")
            return None, -1

        if result.returncode != 0:
            stderr = result.stderr.decode('utf-8', errors='replace').strip()
            logger.debug(f"Git command exited {result.returncode}: {' '.join(cmd)}: {stderr}")

        if raw:
            return result.stdout, result.returncode

        output = result.stdout.decode('utf-8', errors='replace')
        return (output.strip() if strip else output), result.returncode

    def repo_args(self, repo: Repository) -> List[str]:
        """Invocation prefix for a repository of the given kind."""
        if repo.is_bare:
            return [f"--git-dir={repo.path}"]
        return ["-C", repo.path]

    def run(self, repo: Repository, *args: str, **kwargs) -> Tuple[Output, int]:
        """Run a git subcommand against a repository."""
        return self._run(self.repo_args(repo) + list(args), **kwargs)

    def commit_count(self, repo: Repository) -> Optional[int]:
        """
        Number of commits reachable from HEAD.

        Returns:
            0 when HEAD is unborn, None when the count could not be taken
            (git missing or timed out, repository gone or corrupt)
        """
        output, code = self.run(repo, "rev-list", "--count", "HEAD")
        if code == 0 and output:
            try:
                return int(output)
            except ValueError:
                return None
        if self.head_is_unborn(repo):
            return 0
        return None

    def head_is_unborn(self, repo: Repository) -> bool:
        """True only when git positively reports that HEAD names no commit."""
        # exit 1 is "no such revision"; 128 and -1 are failures
        _, code = self.run(repo, "rev-parse", "-q", "--verify", "HEAD^{commit}")
        return code == 1

    def ls_tree(self, repo: Repository, path: str = "") -> Optional[List[LsTreeRecord]]:
        """
        Single-level listing of a tree at HEAD.

        Returns:
            Parsed records, or None if the listing failed
        """
        treeish = f"HEAD:{path}" if path else "HEAD"
        output, code = self.run(repo, "ls-tree", "-z", treeish, strip=False)
        if code != 0 or output is None:
            return None
        return parse_ls_tree(output)

    def object_size(self, repo: Repository, object_id: str) -> int:
        """Size in bytes of an object; 0 when it cannot be read."""
        output, code = self.run(repo, "cat-file", "-s", object_id)
        if code != 0 or not output:
            return 0
        try:
            return int(output)
        except ValueError:
            return 0

    def object_type(self, repo: Repository, spec: str) -> Optional[str]:
        """Type of the object named by spec (blob, tree, commit, tag)."""
        output, code = self.run(repo, "cat-file", "-t", spec)
        if code != 0 or not output:
            return None
        return output

    def binary_attribute(self, repo: Repository, path: str) -> Optional[bool]:
        """
        Whether the ``binary`` attribute is set for path.

        Attributes are read from the HEAD tree. Where git rejects
        ``--source`` (before 2.40), HEAD is loaded into a throwaway index
        and checked with ``--cached``, so a bare repository still sees its
        committed .gitattributes. info/attributes applies either way.

        Returns:
            True/False, or None if the attribute check itself failed
        """
        output, code = self.run(repo, "check-attr", "-z", "--source=HEAD", "binary", "--", path, strip=False)
        if code != 0:
            output, code = self._check_attr_from_head_index(repo, path)
        if code != 0 or output is None:
            return None
        # <path> NUL <attribute> NUL <info> NUL
        parts = output.split('\0')
        if len(parts) < 3:
            return None
        return parts[2] == "set"

    def _check_attr_from_head_index(self, repo: Repository, path: str) -> Tuple[Output, int]:
        with tempfile.TemporaryDirectory(prefix="guilty-index-") as tmp:
            env = {"GIT_INDEX_FILE": os.path.join(tmp, "index")}
            _, code = self.run(repo, "read-tree", "HEAD", env=env)
            if code != 0:
                return None, code
            return self.run(repo, "check-attr", "-z", "--cached", "binary", "--", path, strip=False, env=env)

    def read_blob(self, repo: Repository, path: str) -> Optional[bytes]:
        """Raw content of the blob at HEAD:path."""
        output, code = self.run(repo, "cat-file", "blob", f"HEAD:{path}", raw=True)
        if code != 0:
            return None
        return output

    def last_commit_record(self, repo: Repository, fmt: str, path: str = "") -> Optional[str]:
        """``git log -1 --format=<fmt>`` at HEAD, optionally limited to path."""
        args = ["log", "-1", f"--format={fmt}", "HEAD"]
        if path:
            args += ["--", path]
        output, code = self.run(repo, *args)
        if code != 0 or not output:
            return None
        return output

    def refs(self, repo: Repository, namespace: str) -> Optional[List[str]]:
        """Short names of refs under a namespace such as refs/heads."""
        output, code = self.run(repo, "for-each-ref", "--format=%(refname:short)", namespace)
        if code != 0 or output is None:
            return None
        return [line.strip() for line in output.split('\n') if line.strip()]

    def init_bare(self, path: Path) -> Tuple[bool, str]:
        """
        Initialize a bare repository at path.

        Returns:
            Tuple of (success, message)
        """
        output, code = self._run(["init", "--bare", str(path)])
        if code == 0:
            return True, output or ""
        return False, f"git init --bare exited with {code}"
