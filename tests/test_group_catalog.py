"""Tests for group discovery."""

import os

import pytest

from guilty.config import StoreConfig
from guilty.exit_codes import CatalogUnavailableError, MalformedPathError
from guilty.services.group_catalog import GroupCatalog


@pytest.fixture
def catalog(store_config):
    return GroupCatalog(store_config)


class TestGroupNames:

    @pytest.mark.parametrize("name", ["git", "team-1", "under_score", "ABC"])
    def test_valid(self, catalog, name):
        assert catalog.is_valid_name(name)

    @pytest.mark.parametrize("name", [
        "", "has space", "dot.ted", "..", "a/b", "lost+found", "git-shell-commands",
    ])
    def test_invalid(self, catalog, name):
        assert not catalog.is_valid_name(name)

    def test_validate_group_raises(self, catalog):
        with pytest.raises(MalformedPathError):
            catalog.validate_group("../etc")


class TestListGroups:

    def test_sorted_with_default(self, store_root, catalog):
        (store_root / "zeta").mkdir()
        (store_root / "alpha").mkdir()
        assert catalog.list_groups() == ["alpha", "git", "zeta"]

    def test_default_group_without_directory(self, tmp_path):
        root = tmp_path / "empty-store"
        root.mkdir()
        catalog = GroupCatalog(StoreConfig(root=root))
        assert catalog.list_groups() == ["git"]

    def test_skips_files_and_denylist(self, store_root, catalog):
        (store_root / "README").write_text("not a group")
        (store_root / "lost+found").mkdir()
        (store_root / "git-shell-commands").mkdir()
        (store_root / "with space").mkdir()
        assert catalog.list_groups() == ["git"]

    def test_symlink_to_directory(self, tmp_path, store_root, catalog):
        target = tmp_path / "elsewhere"
        target.mkdir()
        os.symlink(target, store_root / "linked")
        assert "linked" in catalog.list_groups()

    def test_symlink_to_file_or_dangling(self, tmp_path, store_root, catalog):
        target = tmp_path / "file.txt"
        target.write_text("x")
        os.symlink(target, store_root / "tofile")
        os.symlink(tmp_path / "missing", store_root / "dangling")
        assert catalog.list_groups() == ["git"]

    def test_symlink_chain_not_followed(self, tmp_path, store_root, catalog):
        target = tmp_path / "real"
        target.mkdir()
        os.symlink(target, tmp_path / "hop")
        os.symlink(tmp_path / "hop", store_root / "chained")
        assert "chained" not in catalog.list_groups()

    def test_mode_zero_directory_excluded(self, store_root, catalog):
        hidden = store_root / "hidden"
        hidden.mkdir()
        os.chmod(hidden, 0)
        try:
            assert "hidden" not in catalog.list_groups()
        finally:
            os.chmod(hidden, 0o755)

    def test_quarantine_suffix_excluded(self, store_root, catalog):
        (store_root / "old.deleted").mkdir()
        assert catalog.list_groups() == ["git"]

    def test_missing_root(self, tmp_path):
        catalog = GroupCatalog(StoreConfig(root=tmp_path / "nope"))
        with pytest.raises(CatalogUnavailableError):
            catalog.list_groups()
