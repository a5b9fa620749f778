"""
Infrastructure layer for guilty.

Contains abstractions for external systems:
- GitClient: Git command execution

These provide clean interfaces that can be mocked for testing.
"""

from .git_client import GitClient, LsTreeRecord, parse_ls_tree

__all__ = [
    'GitClient',
    'LsTreeRecord',
    'parse_ls_tree',
]
