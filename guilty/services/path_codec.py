"""
Splitting of encoded repository paths.

Request paths carry ``<group>/<name>/<path>`` where every part is
percent-encoded on its own, so a ``/`` inside a file name arrives as
``%2F``. Segment boundaries are therefore found in the raw string first
and each segment is decoded afterwards; decoding first would turn an
encoded ``%2F`` into a separator.
"""

import re
from dataclasses import dataclass
from urllib.parse import quote, unquote_to_bytes

from ..exit_codes import MalformedPathError

_BAD_ESCAPE = re.compile(r'%(?![0-9A-Fa-f]{2})')


@dataclass(frozen=True)
class ParsedPath:
    group: str
    name: str
    path: str = ""


def decode_segment(raw: str) -> str:
    """Percent-decode one segment, rejecting invalid escapes and non-UTF-8."""
    if _BAD_ESCAPE.search(raw):
        raise MalformedPathError(f"Invalid percent-encoding in {raw!r}")
    try:
        return unquote_to_bytes(raw).decode('utf-8')
    except UnicodeDecodeError as e:
        raise MalformedPathError(f"Path segment is not valid UTF-8: {raw!r}") from e


def split_encoded_path(raw: str, require_path: bool = False) -> ParsedPath:
    """
    Split a raw URL tail into group, repository name and in-repository path.

    Args:
        raw: Undecoded path tail, e.g. ``git/proj/src%2Fmain.py``
        require_path: Reject an empty in-repository path (file reads)

    Returns:
        ParsedPath with each part decoded independently

    Raises:
        MalformedPathError: if a required boundary is missing or a
            segment cannot be decoded
    """
    if raw.startswith('/'):
        raw = raw[1:]

    first = raw.find('/')
    if first < 0:
        raise MalformedPathError("Invalid repository path: missing repository name")

    group_raw = raw[:first]
    rest = raw[first + 1:]

    second = rest.find('/')
    if second < 0:
        name_raw, path_raw = rest, ""
    else:
        name_raw, path_raw = rest[:second], rest[second + 1:]

    group = decode_segment(group_raw)
    name = decode_segment(name_raw)
    if not group or not name:
        raise MalformedPathError("Invalid repository path: empty group or repository name")
    if '/' in group or '/' in name:
        raise MalformedPathError("Invalid repository path: group and name cannot contain '/'")

    path = decode_segment(path_raw).strip('/')
    if require_path and not path:
        raise MalformedPathError("Invalid file path: missing file name")

    return ParsedPath(group=group, name=name, path=path)


def encode_repository_path(group: str, name: str, path: str = "") -> str:
    """Inverse of split_encoded_path: encode each part on its own."""
    encoded = f"{quote(group, safe='')}/{quote(name, safe='')}"
    if path:
        encoded += '/' + quote(path, safe='')
    return encoded
