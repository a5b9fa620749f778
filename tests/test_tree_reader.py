"""Tests for directory listings at HEAD."""

from datetime import datetime, timezone
import os
from unittest.mock import MagicMock

import pytest

from guilty.domain import EntryKind, Repository, RepoKind
from guilty.exit_codes import (
    ContentUnavailableError,
    PathEscapeError,
    PathNotFoundError,
    RepositoryNotFoundError,
)
from guilty.infra import GitClient, LsTreeRecord
from guilty.services import CommitMetadataReader, GroupCatalog, RepositoryLocator, TreeReader
from guilty.services.tree_reader import resolve_inside

from conftest import commit_files, init_bare, init_worktree, requires_git, run_git


def make_repo(path, kind=RepoKind.BARE):
    return Repository(
        group="git",
        name="proj",
        path=str(path),
        kind=kind,
        clone_url="git@host:git/proj.git",
    )


class TestResolveInside:

    @pytest.mark.parametrize("path,expected", [
        ("", ""),
        ("src", "src"),
        ("src/", "src"),
        ("./src/../docs", "docs"),
        ("a//b", "a/b"),
    ])
    def test_normalizes(self, tmp_path, path, expected):
        assert resolve_inside(make_repo(tmp_path / "proj.git"), path) == expected

    @pytest.mark.parametrize("path", ["..", "../other.git", "src/../../x", "/etc/passwd", "a\0b"])
    def test_rejects_escape(self, tmp_path, path):
        with pytest.raises(PathEscapeError):
            resolve_inside(make_repo(tmp_path / "proj.git"), path)


class TestTreeReaderMocked:
    """Listing behavior against a mocked git client"""

    def setup_method(self):
        self.git = MagicMock(spec=GitClient)
        self.commits = MagicMock(spec=CommitMetadataReader)
        self.commits.last_commit.return_value = None
        self.reader = TreeReader(self.git, self.commits)

    def test_escape_runs_no_git(self, tmp_path):
        with pytest.raises(PathEscapeError):
            self.reader.list(make_repo(tmp_path / "proj.git"), "../../etc")
        self.git.commit_count.assert_not_called()
        self.git.ls_tree.assert_not_called()

    def test_empty_repository(self, tmp_path):
        self.git.commit_count.return_value = 0
        assert self.reader.list(make_repo(tmp_path / "proj.git")) == []
        self.git.ls_tree.assert_not_called()

    def test_count_failure_is_an_error(self, tmp_path):
        self.git.commit_count.return_value = None
        with pytest.raises(ContentUnavailableError):
            self.reader.list(make_repo(tmp_path / "proj.git"))
        self.git.ls_tree.assert_not_called()

    def test_count_failure_after_removal(self, tmp_path):
        locator = MagicMock(spec=RepositoryLocator)
        locator.exists.return_value = False
        reader = TreeReader(self.git, self.commits, locator)
        self.git.commit_count.return_value = None
        with pytest.raises(RepositoryNotFoundError):
            reader.list(make_repo(tmp_path / "proj.git"))

    def test_sizes_only_for_files(self, tmp_path):
        self.git.commit_count.return_value = 1
        self.git.ls_tree.return_value = [
            LsTreeRecord("100644", "blob", "aaaa", "b.txt"),
            LsTreeRecord("040000", "tree", "bbbb", "lib"),
            LsTreeRecord("160000", "commit", "cccc", "vendor"),
        ]
        self.git.object_size.return_value = 42

        entries = self.reader.list(make_repo(tmp_path / "proj.git"), "src")

        assert [(e.name, e.kind, e.size) for e in entries] == [
            ("lib", EntryKind.DIRECTORY, 0),
            ("b.txt", EntryKind.FILE, 42),
            ("vendor", EntryKind.FILE, 42),
        ]
        assert [e.path for e in entries] == ["src/lib", "src/b.txt", "src/vendor"]
        assert self.git.object_size.call_count == 2
        assert self.commits.last_commit.call_count == 3

    def test_missing_subdirectory(self, tmp_path):
        self.git.commit_count.return_value = 1
        self.git.ls_tree.return_value = None
        with pytest.raises(PathNotFoundError):
            self.reader.list(make_repo(tmp_path / "proj.git"), "nope")

    def test_root_listing_failure(self, tmp_path):
        self.git.commit_count.return_value = 1
        self.git.ls_tree.return_value = None
        with pytest.raises(ContentUnavailableError):
            self.reader.list(make_repo(tmp_path / "proj.git"))

    def test_repository_removed_mid_listing(self, tmp_path):
        locator = MagicMock(spec=RepositoryLocator)
        locator.exists.return_value = False
        reader = TreeReader(self.git, self.commits, locator)
        self.git.commit_count.return_value = 1
        self.git.ls_tree.return_value = None
        with pytest.raises(RepositoryNotFoundError):
            reader.list(make_repo(tmp_path / "proj.git"), "src")

    def test_refs_default_to_empty(self, tmp_path):
        self.git.refs.return_value = None
        assert self.reader.branches(make_repo(tmp_path)) == []
        assert self.reader.tags(make_repo(tmp_path)) == []


@requires_git
class TestTreeReaderWithGit:
    """Listings of real repositories"""

    def make_reader(self, store_config):
        git = GitClient()
        locator = RepositoryLocator(store_config, GroupCatalog(store_config))
        return TreeReader(git, CommitMetadataReader(git), locator), locator

    def test_empty_bare_repository(self, store_root, store_config):
        init_bare(store_root / "git" / "empty.git")
        reader, locator = self.make_reader(store_config)
        assert reader.list(locator.locate("git", "empty")) == []

    def test_readme_size(self, store_root, store_config):
        path = init_bare(store_root / "git" / "proj.git")
        commit_files(path, {"README.md": b"0123456789"}, epoch=1700000000)
        reader, locator = self.make_reader(store_config)

        entries = reader.list(locator.locate("git", "proj"))

        assert len(entries) == 1
        assert entries[0].name == "README.md"
        assert entries[0].kind is EntryKind.FILE
        assert entries[0].size == 10
        assert entries[0].last_modified == datetime.fromtimestamp(1700000000, tz=timezone.utc)

    def test_nested_and_sorted(self, store_root, store_config):
        path = init_bare(store_root / "git" / "proj.git")
        commit_files(path, {
            "zeta.txt": "z",
            "Alpha.txt": "a",
            "docs/guide.md": "guide",
            "src/lib/core.py": "print('x')\n",
            "src/main.py": "main\n",
            "my file.txt": "spaces",
        })
        reader, locator = self.make_reader(store_config)
        repo = locator.locate("git", "proj")

        root = reader.list(repo)
        assert [e.name for e in root] == ["docs", "src", "Alpha.txt", "my file.txt", "zeta.txt"]

        src = reader.list(repo, "src")
        assert [(e.name, e.path) for e in src] == [("lib", "src/lib"), ("main.py", "src/main.py")]

        lib = reader.list(repo, "src/lib/")
        assert lib[0].path == "src/lib/core.py"

    def test_last_modified_per_entry(self, store_root, store_config):
        path = init_bare(store_root / "git" / "proj.git")
        commit_files(path, {"old.txt": "old"}, epoch=1000000000)
        commit_files(path, {"new.txt": "new"}, epoch=1600000000)
        reader, locator = self.make_reader(store_config)

        entries = {e.name: e for e in reader.list(locator.locate("git", "proj"))}

        assert entries["old.txt"].last_modified.timestamp() == 1000000000
        assert entries["new.txt"].last_modified.timestamp() == 1600000000

    def test_missing_path(self, store_root, store_config):
        path = init_bare(store_root / "git" / "proj.git")
        commit_files(path, {"a.txt": "a"})
        reader, locator = self.make_reader(store_config)
        with pytest.raises(PathNotFoundError):
            reader.list(locator.locate("git", "proj"), "nope")

    def test_worktree_repository(self, store_root, store_config):
        path = init_worktree(store_root / "git" / "work.git")
        commit_files(path, {"src/app.py": "app\n"}, bare=False)
        reader, locator = self.make_reader(store_config)

        repo = locator.locate("git", "work")

        assert repo.kind is RepoKind.WORKTREE
        assert [e.name for e in reader.list(repo)] == ["src"]
        assert [e.name for e in reader.list(repo, "src")] == ["app.py"]

    def test_branches_and_tags(self, store_root, store_config):
        path = init_bare(store_root / "git" / "proj.git")
        commit_files(path, {"a.txt": "a"})
        run_git(f"--git-dir={path}", "tag", "v1.0")
        run_git(f"--git-dir={path}", "branch", "feature")
        reader, locator = self.make_reader(store_config)
        repo = locator.locate("git", "proj")

        assert "feature" in reader.branches(repo)
        assert reader.tags(repo) == ["v1.0"]

    def test_git_failure_is_not_an_empty_listing(self, store_root, store_config):
        path = init_bare(store_root / "git" / "proj.git")
        commit_files(path, {"a.txt": "a"})
        locator = RepositoryLocator(store_config, GroupCatalog(store_config))
        git = GitClient(binary=str(store_root / "no-such-git"))
        reader = TreeReader(git, CommitMetadataReader(git), locator)

        with pytest.raises(ContentUnavailableError):
            reader.list(locator.locate("git", "proj"))

    def test_quarantined_after_locate(self, store_root, store_config):
        path = init_bare(store_root / "git" / "proj.git")
        commit_files(path, {"a.txt": "a"})
        reader, locator = self.make_reader(store_config)
        repo = locator.locate("git", "proj")

        os.rename(path, store_root / "git" / "proj.git.deleted")

        with pytest.raises(RepositoryNotFoundError):
            reader.list(repo)
