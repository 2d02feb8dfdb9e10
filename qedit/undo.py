"""Tree-shaped undo history with chronological navigation and pruning."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

UNDO_TREE_MAX = 200
UNDO_DESC_MAX = 64
UNDO_STACK_MAX = 100


@dataclass
class UndoState:
    """Snapshot of buffer rows and cursor position."""

    rows: list[str] = field(default_factory=list)
    cx: int = 0
    cy: int = 0

    @property
    def numrows(self) -> int:
        return len(self.rows)


@dataclass(eq=False)
class UndoNode:
    """A node in the undo tree; owns its snapshot."""

    state: UndoState
    desc: str = ""
    seq: int = 0
    parent: UndoNode | None = field(default=None, repr=False)
    children: list[UndoNode] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        self.desc = (self.desc or "")[: UNDO_DESC_MAX - 1]

    def add_child(self, child: UndoNode) -> None:
        child.parent = self
        self.children.append(child)

    def walk(self) -> Iterator[UndoNode]:
        """Yield this node and its descendants in pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


class UndoTree:
    """Branching undo history; ``current`` mirrors the live buffer."""

    def __init__(self) -> None:
        self.root: UndoNode | None = None
        self.current: UndoNode | None = None
        self.next_seq = 0
        self.total_nodes = 0

    def _nodes(self) -> list[UndoNode]:
        return list(self.root.walk()) if self.root else []

    def _new_node(self, state: UndoState, desc: str | None) -> UndoNode:
        node = UndoNode(state, desc or "", self.next_seq)
        self.next_seq += 1
        return node

    def set_root(self, state: UndoState, desc: str | None) -> UndoNode:
        """Replace the whole tree with a single root node."""
        if self.root is not None:
            self.clear()
        node = self._new_node(state, desc)
        self.root = node
        self.current = node
        self.total_nodes = 1
        return node

    def push(self, state: UndoState, desc: str | None) -> UndoNode:
        """Add a child of the current node and make it current."""
        if self.root is None or self.current is None:
            return self.set_root(state, desc)
        node = self._new_node(state, desc)
        self.current.add_child(node)
        self.current = node
        self.total_nodes += 1
        if self.total_nodes > UNDO_TREE_MAX:
            self.gc()
        return node

    def undo(self) -> UndoNode | None:
        """Move to the parent; return it, or None at the root."""
        if self.current is None or self.current.parent is None:
            return None
        self.current = self.current.parent
        return self.current

    def redo(self) -> UndoNode | None:
        """Move to the most recent child; return it, or None at a leaf."""
        if self.current is None or not self.current.children:
            return None
        self.current = max(self.current.children, key=lambda n: n.seq)
        return self.current

    def earlier(self) -> UndoNode | None:
        """Move to the node with the highest seq below the current one."""
        if self.root is None or self.current is None:
            return None
        cur = self.current.seq
        candidates = [n for n in self._nodes() if n.seq < cur]
        if not candidates:
            return None
        self.current = max(candidates, key=lambda n: n.seq)
        return self.current

    def later(self) -> UndoNode | None:
        """Move to the node with the lowest seq above the current one."""
        if self.root is None or self.current is None:
            return None
        cur = self.current.seq
        candidates = [n for n in self._nodes() if n.seq > cur]
        if not candidates:
            return None
        self.current = min(candidates, key=lambda n: n.seq)
        return self.current

    def gc(self) -> None:
        """Prune the oldest leaves off the current path until within budget."""
        if self.root is None:
            return
        protected: set[int] = set()
        node = self.current
        while node is not None:
            protected.add(id(node))
            node = node.parent
        while self.total_nodes > UNDO_TREE_MAX:
            leaves = [
                n for n in self._nodes()
                if not n.children and id(n) not in protected
            ]
            if not leaves:
                break
            victim = min(leaves, key=lambda n: n.seq)
            if victim.parent is not None:
                victim.parent.children.remove(victim)
                victim.parent = None
            self.total_nodes -= 1

    def flatten(self) -> list[UndoNode]:
        """Return every node sorted by sequence number."""
        return sorted(self._nodes(), key=lambda n: n.seq)

    def clear(self) -> None:
        """Drop all nodes and reset counters."""
        self.root = None
        self.current = None
        self.next_seq = 0
        self.total_nodes = 0


class UndoStack:
    """Bounded linear undo stack; the oldest entry is dropped when full."""

    def __init__(self) -> None:
        self.entries: list[UndoState] = []

    def __len__(self) -> int:
        return len(self.entries)

    def push(self, state: UndoState) -> None:
        if len(self.entries) == UNDO_STACK_MAX:
            del self.entries[0]
        self.entries.append(state)

    def pop(self) -> UndoState:
        """Remove and return the newest entry; raise IndexError when empty."""
        if not self.entries:
            raise IndexError("undo stack is empty")
        return self.entries.pop()

    def clear(self) -> None:
        self.entries.clear()