"""Tests for last-commit lookups."""

from unittest.mock import MagicMock

from guilty.domain import Repository, RepoKind
from guilty.infra import GitClient
from guilty.services import CommitMetadataReader
from guilty.services.commit_reader import LOG_FORMAT, parse_commit_record

from conftest import AUTHOR, commit_files, init_bare, init_worktree, requires_git, run_git


def make_repo(path="/store/git/proj.git"):
    return Repository("git", "proj", str(path), RepoKind.BARE, "git@host:git/proj.git")


class TestParseCommitRecord:

    def test_subject_keeps_pipes(self):
        commit = parse_commit_record("alice\x001700000000\x00fix a|b parsing")
        assert commit.author == "alice"
        assert commit.timestamp == 1700000000
        assert commit.message == "fix a|b parsing"

    def test_bad_epoch(self):
        assert parse_commit_record("alice\x00soon\x00msg") is None

    def test_too_few_fields(self):
        assert parse_commit_record("alice") is None

    def test_author_with_pipe(self):
        commit = parse_commit_record("Ann|Lee\x001700000000\x00msg\n")
        assert commit.author == "Ann|Lee"
        assert commit.timestamp == 1700000000
        assert commit.message == "msg"

    def test_pipe_separated_record_is_rejected(self):
        assert parse_commit_record("alice|1700000000|msg") is None


class TestCommitMetadataReader:

    def test_no_record_is_none(self):
        git = MagicMock(spec=GitClient)
        git.last_commit_record.return_value = None
        assert CommitMetadataReader(git).last_commit(make_repo()) is None

    def test_passes_format_and_path(self):
        git = MagicMock(spec=GitClient)
        git.last_commit_record.return_value = "bob\x0010\x00msg"
        commit = CommitMetadataReader(git).last_commit(make_repo(), "src")
        git.last_commit_record.assert_called_once_with(make_repo(), LOG_FORMAT, "src")
        assert commit.author == "bob"

    @requires_git
    def test_real_repository(self, store_root):
        path = init_bare(store_root / "git" / "proj.git")
        commit_files(path, {"a.txt": "a"}, message="First", epoch=1000)
        commit_files(path, {"b.txt": "b"}, message="Second | with pipe", epoch=2000)
        reader = CommitMetadataReader(GitClient())

        latest = reader.last_commit(make_repo(path))
        assert latest.author == AUTHOR
        assert latest.message == "Second | with pipe"
        assert latest.timestamp == 2000

        assert reader.last_commit(make_repo(path), "a.txt").message == "First"
        assert reader.last_commit(make_repo(path), "never.txt") is None

    @requires_git
    def test_empty_repository(self, store_root):
        path = init_bare(store_root / "git" / "empty.git")
        assert CommitMetadataReader(GitClient()).last_commit(make_repo(path)) is None

    @requires_git
    def test_author_name_with_pipe(self, store_root):
        path = init_worktree(store_root / "git" / "work.git")
        commit_files(path, {"a.txt": "a"}, bare=False, epoch=1000)
        run_git("-C", str(path), "commit", "-q", "--allow-empty", "-m", "Second",
                "--author=Ann|Lee <ann@example.com>", epoch=2000)
        repo = Repository("git", "work", str(path), RepoKind.WORKTREE, "git@host:git/work.git")

        latest = CommitMetadataReader(GitClient()).last_commit(repo)

        assert latest.author == "Ann|Lee"
        assert latest.timestamp == 2000
        assert latest.message == "Second"
