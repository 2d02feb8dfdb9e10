"""File-tree sidebar: directory scan, expansion state, rendering, git status."""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from typing import Iterable

TREE_WIDTH = 30
TREE_MAX_ENTRIES = 4096
DIR_SCAN_MAX = 512
EXPANDED_KEEP_MAX = 128

ICON_EXPANDED = "\u25be"
ICON_COLLAPSED = "\u25b8"


@dataclass
class TreeEntry:
    """One visible file or directory in the tree."""

    path: str
    name: str
    is_dir: bool
    depth: int
    expanded: bool = False
    git_status: str = " "


def git_xy_to_status(x: str, y: str) -> str:
    """Map the two-letter porcelain code to one display character."""
    if x == "?" and y == "?":
        return "?"
    if x == "A" or y == "A":
        return "A"
    if x == "D" or y == "D":
        return "D"
    if x == "M" or y == "M" or x == "R" or x == "T":
        return "M"
    return " "


class TreeState:
    """Flattened, depth-annotated view of a directory hierarchy."""

    def __init__(self, root: str | os.PathLike[str], *, show_hidden: bool = False) -> None:
        self.root = os.fspath(root)
        self.entries: list[TreeEntry] = []
        self.show_hidden = show_hidden

    def refresh(self) -> None:
        """Rescan from disk, keeping directories that were expanded open."""
        expanded = [e.path for e in self.entries if e.is_dir and e.expanded]
        self.entries = []
        self._scan(self.root, 0, set(expanded[:EXPANDED_KEEP_MAX]))

    def _scan(self, path: str, depth: int, expanded: set[str]) -> None:
        try:
            it = os.scandir(path)
        except OSError:
            return
        found: list[tuple[str, str, bool]] = []
        with it:
            for de in it:
                if len(found) >= DIR_SCAN_MAX:
                    break
                if de.name.startswith(".") and not self.show_hidden:
                    continue
                full = f"{path}/{de.name}"
                try:
                    is_dir = de.is_dir()
                except OSError:
                    is_dir = False
                found.append((de.name, full, is_dir))
        found.sort(key=lambda item: (not item[2], item[0]))

        for name, full, is_dir in found:
            if len(self.entries) >= TREE_MAX_ENTRIES:
                break
            entry = TreeEntry(full, name, is_dir, depth, is_dir and full in expanded)
            self.entries.append(entry)
            if entry.expanded:
                self._scan(full, depth + 1, expanded)

    def toggle(self, idx: int) -> None:
        """Expand or collapse the directory at ``idx``; other indices are ignored."""
        if not 0 <= idx < len(self.entries):
            return
        entry = self.entries[idx]
        if not entry.is_dir:
            return
        entry.expanded = not entry.expanded
        self.refresh()

    def render_lines(self) -> list[str]:
        """Return the display lines: a root header then one line per entry."""
        slash = self.root.rfind("/")
        tail = self.root[slash + 1:] if slash >= 0 else ""
        root_name = tail if tail else self.root
        lines = [f"{ICON_EXPANDED} {root_name}/"]
        for entry in self.entries:
            indent = " " * (2 + entry.depth * 2)
            if entry.is_dir:
                icon = ICON_EXPANDED if entry.expanded else ICON_COLLAPSED
                lines.append(f"{indent}{icon} {entry.name}/")
            else:
                lines.append(f"{indent}{entry.name}")
        return lines

    def apply_git_status(self, porcelain_lines: Iterable[str]) -> None:
        """Set ``git_status`` from ``git status --porcelain`` output lines.

        Directories take the status of the first changed path beneath them.
        """
        for entry in self.entries:
            entry.git_status = " "
        for raw in porcelain_lines:
            line = raw.rstrip("\r\n")
            if len(line) < 4:
                continue
            status = git_xy_to_status(line[0], line[1])
            if status == " ":
                continue
            abs_path = f"{self.root}/{line[3:]}"
            for entry in self.entries:
                if entry.is_dir:
                    plen = len(entry.path)
                    if abs_path.startswith(entry.path) and (
                        len(abs_path) == plen or abs_path[plen] == "/"
                    ):
                        if entry.git_status == " ":
                            entry.git_status = status
                elif abs_path == entry.path:
                    entry.git_status = status

    def update_git_status(self) -> None:
        """Query git in the current directory and apply the result."""
        try:
            proc = subprocess.run(
                ["git", "status", "--porcelain"],
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                text=True,
                errors="surrogateescape",
                check=False,
            )
            lines = (proc.stdout or "").splitlines()
        except OSError:
            lines = []
        self.apply_git_status(lines)