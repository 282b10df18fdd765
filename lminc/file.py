"""File helpers for packed memory images and source text."""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Union

from .codec import MAX_PACKED_SIZE, pack, unpack
from .errors import LoadError, LoadErrorKind
from .memory import Memory

__all__ = ['save', 'load', 'read_text']

log = logging.getLogger(__name__)

PathLike = Union[str, Path]


def save(path: PathLike, memory: Memory) -> int:
    """Pack ``memory`` and write it to ``path``. Returns the number of bytes written."""
    data = pack(memory)
    Path(path).write_bytes(data)
    log.info("Saved %d bytes to %s", len(data), path)
    return len(data)


def load(path: PathLike) -> Memory:
    """Read a packed memory image from ``path``.

    The size is checked before the file is read, so oversized files fail
    with FILE_TOO_LARGE without being loaded.
    """
    p = Path(path)
    size = p.stat().st_size
    if size > MAX_PACKED_SIZE:
        raise LoadError(LoadErrorKind.FILE_TOO_LARGE, size=size, limit=MAX_PACKED_SIZE)
    memory = unpack(p.read_bytes())
    log.info("Loaded %d bytes from %s", size, path)
    return memory


def read_text(path: PathLike) -> str:
    return Path(path).read_text(encoding='utf-8')
