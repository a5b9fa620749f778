"""
Service layer for guilty.

Contains the engine components that sit between the domain objects and
the git client:
- split_encoded_path: Decoding of group/name/path request tails
- GroupCatalog: Group discovery
- RepositoryLocator: Repository resolution and layout classification
- TreeReader: Directory listings at HEAD
- BlobReader: File content at HEAD
- CommitMetadataReader: Last-commit lookups
- RepositoryLifecycle: Creation and quarantine

GitStore in guilty.api wires these together.
"""

from .path_codec import ParsedPath, split_encoded_path, encode_repository_path
from .group_catalog import GroupCatalog
from .locator import RepositoryLocator, classify
from .commit_reader import CommitMetadataReader
from .tree_reader import TreeReader, resolve_inside
from .blob_reader import BlobReader
from .lifecycle_service import RepositoryLifecycle

__all__ = [
    'ParsedPath',
    'split_encoded_path',
    'encode_repository_path',
    'GroupCatalog',
    'RepositoryLocator',
    'classify',
    'CommitMetadataReader',
    'TreeReader',
    'resolve_inside',
    'BlobReader',
    'RepositoryLifecycle',
]
