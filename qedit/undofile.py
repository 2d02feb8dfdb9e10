"""Persistent undo history stored under ``.qe/undo/`` in a binary format.

Layout (little-endian)::

    header: b"QEU\\x01" | next_seq u32 | n_nodes u32 | cur_seq u32
    node:   seq u32 | parent_seq u32 (0xFFFFFFFF = root) | desc 64 bytes |
            cx i32 | cy i32 | numrows i32 | rows (len i32 + bytes) ...

Nodes are written in sequence order.
"""

from __future__ import annotations

import os
import struct
from pathlib import Path

from .undo import UNDO_DESC_MAX, UndoNode, UndoState, UndoTree

MAGIC = b"QEU\x01"
NO_PARENT = 0xFFFFFFFF
UNDO_DIR = Path(".qe") / "undo"
MAX_NODES = 10000
MAX_ROWS = 1_000_000
MAX_ROW_LEN = 10_000_000

_U32 = 0xFFFFFFFF
_U64 = 0xFFFFFFFFFFFFFFFF
_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


class UndofileError(Exception):
    """Raised when an undo file cannot be written, read or parsed."""


def _path_hash(filepath: str | os.PathLike[str]) -> str:
    """DJB2 hash of the absolute path (when it resolves), as 16 hex digits."""
    path = os.fspath(filepath)
    if os.path.exists(path):
        path = os.path.realpath(path)
    h = 5381
    for byte in os.fsencode(path):
        h = (h * 33 + byte) & _U64
    return f"{h:016x}"


def undo_path(filepath: str | os.PathLike[str]) -> Path:
    """Return the undo file path for ``filepath``, relative to the cwd."""
    return UNDO_DIR / f"{_path_hash(filepath)}.undo"


def encode(tree: UndoTree) -> bytes:
    """Serialise ``tree``; raise UndofileError if it has no root."""
    if tree.root is None:
        raise UndofileError("undo tree is empty")
    nodes = tree.flatten()
    cur_seq = tree.current.seq if tree.current is not None else 0
    out = bytearray(MAGIC)
    out += struct.pack("<III", tree.next_seq & _U32, len(nodes), cur_seq & _U32)
    for node in nodes:
        parent_seq = node.parent.seq if node.parent is not None else NO_PARENT
        desc = node.desc.encode(_ENCODING, _ERRORS)[: UNDO_DESC_MAX - 1]
        out += struct.pack("<II", node.seq & _U32, parent_seq)
        out += desc.ljust(UNDO_DESC_MAX, b"\0")
        out += struct.pack("<iii", node.state.cx, node.state.cy, node.state.numrows)
        for row in node.state.rows:
            raw = row.encode(_ENCODING, _ERRORS)
            out += struct.pack("<i", len(raw))
            out += raw
    return bytes(out)


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._data = memoryview(data)
        self._pos = 0

    def take(self, size: int) -> bytes:
        end = self._pos + size
        if end > len(self._data):
            raise UndofileError("undo file is truncated")
        chunk = bytes(self._data[self._pos:end])
        self._pos = end
        return chunk

    def unpack(self, fmt: str) -> tuple[int, ...]:
        return struct.unpack(fmt, self.take(struct.calcsize(fmt)))


def decode(data: bytes) -> UndoTree:
    """Rebuild an UndoTree from bytes produced by :func:`encode`."""
    reader = _Reader(data)
    if reader.take(len(MAGIC)) != MAGIC:
        raise UndofileError("bad undo file magic")
    next_seq, n_nodes, cur_seq = reader.unpack("<III")
    if n_nodes == 0 or n_nodes > MAX_NODES:
        raise UndofileError(f"invalid node count: {n_nodes}")

    records: list[tuple[UndoNode, int]] = []
    for _ in range(n_nodes):
        seq, parent_seq = reader.unpack("<II")
        raw_desc = reader.take(UNDO_DESC_MAX).split(b"\0", 1)[0]
        cx, cy, numrows = reader.unpack("<iii")
        if numrows < 0 or numrows > MAX_ROWS:
            raise UndofileError(f"invalid row count: {numrows}")
        rows = []
        for _ in range(numrows):
            (length,) = reader.unpack("<i")
            if length < 0 or length > MAX_ROW_LEN:
                raise UndofileError(f"invalid row length: {length}")
            rows.append(reader.take(length).decode(_ENCODING, _ERRORS))
        node = UndoNode(
            UndoState(rows, cx, cy),
            raw_desc.decode(_ENCODING, _ERRORS),
            seq,
        )
        records.append((node, parent_seq))

    by_seq: dict[int, UndoNode] = {}
    for node, _ in records:
        by_seq.setdefault(node.seq, node)

    root: UndoNode | None = None
    current: UndoNode | None = None
    for node, parent_seq in records:
        if parent_seq == NO_PARENT:
            root = node
        else:
            parent = by_seq.get(parent_seq)
            if parent is None:
                raise UndofileError(f"missing parent node {parent_seq}")
            parent.add_child(node)
        if node.seq == cur_seq:
            current = node
    if root is None:
        raise UndofileError("undo file has no root node")

    tree = UndoTree()
    tree.root = root
    tree.current = current if current is not None else root
    tree.next_seq = next_seq
    tree.total_nodes = n_nodes
    return tree


def save(filepath: str | os.PathLike[str], tree: UndoTree) -> Path:
    """Write ``tree`` to the undo file of ``filepath``; return its path."""
    data = encode(tree)
    path = undo_path(filepath)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except OSError as exc:
        raise UndofileError(f"cannot write {path}: {exc}") from exc
    return path


def load(filepath: str | os.PathLike[str]) -> UndoTree:
    """Read the undo tree saved for ``filepath``."""
    path = undo_path(filepath)
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise UndofileError(f"cannot read {path}: {exc}") from exc
    return decode(data)


def remove(filepath: str | os.PathLike[str]) -> None:
    """Delete the undo file for ``filepath`` if it exists."""
    try:
        undo_path(filepath).unlink()
    except FileNotFoundError:
        pass