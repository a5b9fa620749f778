"""
Tree and blob records produced by the readers.

TreeEntry and BlobResult are built fresh on every call and never cached.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any, List

from .repository import Repository

BINARY_MESSAGE = "Binary file cannot be displayed"


class EntryKind(Enum):
    DIRECTORY = "dir"
    FILE = "file"


@dataclass(frozen=True)
class TreeEntry:
    """One file or directory at a path in the HEAD tree."""
    name: str
    path: str
    kind: EntryKind
    size: int = 0
    last_modified: Optional[datetime] = None

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    def sort_key(self):
        # directories first, then case-insensitive name
        return (0 if self.is_dir else 1, self.name.lower())

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'path': self.path,
            'type': self.kind.value,
            'size': self.size,
            'lastModified': self.last_modified.isoformat() if self.last_modified else None,
        }


def sort_entries(entries: List[TreeEntry]) -> List[TreeEntry]:
    return sorted(entries, key=TreeEntry.sort_key)


@dataclass(frozen=True)
class BlobResult:
    """File content at HEAD; content is empty when is_binary is set."""
    is_binary: bool
    content: str = ""

    @classmethod
    def binary(cls) -> 'BlobResult':
        return cls(is_binary=True, content="")

    def to_dict(self) -> Dict[str, Any]:
        result = {'isBinary': self.is_binary, 'content': self.content}
        if self.is_binary:
            result['message'] = BINARY_MESSAGE
        return result


@dataclass(frozen=True)
class RepositoryDetails:
    """A repository with its root listing and refs."""
    repository: Repository
    files: List[TreeEntry] = field(default_factory=list)
    branches: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'repository': self.repository.to_dict(),
            'files': [f.to_dict() for f in self.files],
            'branches': list(self.branches),
            'tags': list(self.tags),
        }
