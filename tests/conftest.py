"""
Shared fixtures: temporary repository stores and helpers that commit
into bare or worktree repositories with a real git binary.
"""

import os
import shutil
import subprocess
from pathlib import Path
from typing import Dict, Optional, Union

import pytest

from guilty.api import GitStore
from guilty.config import StoreConfig

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")

AUTHOR = "Test Author"


def git_env(epoch: Optional[int] = None) -> Dict[str, str]:
    env = os.environ.copy()
    env.update({
        "GIT_AUTHOR_NAME": AUTHOR,
        "GIT_AUTHOR_EMAIL": "author@example.com",
        "GIT_COMMITTER_NAME": AUTHOR,
        "GIT_COMMITTER_EMAIL": "author@example.com",
        "GIT_CONFIG_NOSYSTEM": "1",
    })
    if epoch is not None:
        env["GIT_AUTHOR_DATE"] = f"@{epoch} +0000"
        env["GIT_COMMITTER_DATE"] = f"@{epoch} +0000"
    return env


def run_git(*args: str, epoch: Optional[int] = None, cwd: Optional[Path] = None) -> str:
    result = subprocess.run(
        ["git", *args],
        capture_output=True,
        text=True,
        env=git_env(epoch),
        cwd=cwd,
        check=True,
    )
    return result.stdout


def init_bare(path: Path) -> Path:
    path.mkdir(parents=True)
    run_git("init", "--bare", "-q", str(path))
    return path


def init_worktree(path: Path) -> Path:
    path.mkdir(parents=True)
    run_git("init", "-q", str(path))
    return path


def commit_files(
    repo_path: Path,
    files: Dict[str, Union[str, bytes]],
    message: str = "Add files",
    bare: bool = True,
    epoch: Optional[int] = None,
    scratch: Optional[Path] = None,
) -> None:
    """
    Write files and commit them at the repository's HEAD branch.

    Bare repositories are committed to through a scratch work tree.
    """
    if bare:
        work = scratch or repo_path.parent / f".work-{repo_path.name}"
        work.mkdir(exist_ok=True)
        prefix = [f"--git-dir={repo_path}", f"--work-tree={work}"]
    else:
        work = repo_path
        prefix = ["-C", str(repo_path)]

    for name, content in files.items():
        target = work / name
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            target.write_bytes(content)
        else:
            target.write_text(content)

    # explicit names: the scratch tree of a bare repository lacks earlier files
    run_git(*prefix, "add", "--", *files.keys(), epoch=epoch, cwd=work)
    run_git(*prefix, "commit", "-q", "-m", message, epoch=epoch, cwd=work)

    if bare:
        shutil.rmtree(work)


@pytest.fixture
def store_root(tmp_path):
    root = tmp_path / "store"
    (root / "git").mkdir(parents=True)
    return root


@pytest.fixture
def store_config(store_root):
    return StoreConfig(root=store_root, host_name="git.example.com")


@pytest.fixture
def store(store_config):
    return GitStore(store_config=store_config)
