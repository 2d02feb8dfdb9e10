# qedit

Building blocks for a modal terminal text editor. Each module can be used
on its own. The package has no runtime dependencies.

## Modules

### `qedit.undo`

- `UndoState(rows, cx, cy)` is a snapshot of buffer rows (a list of strings)
  and a cursor position. `numrows` is the number of rows.
- `UndoNode` holds a state, a description (cut to 63 characters), a sequence
  number, its `parent` and its `children`.
- `UndoTree` is a branching undo history:
  - `set_root(state, desc)` replaces the whole tree with one root node.
  - `push(state, desc)` adds a child of the current node and makes it current.
    Once the tree holds more than 200 nodes, `gc()` runs.
  - `undo()` moves to the parent. `redo()` moves to the child with the highest
    sequence number. Each returns the new current node, or `None` when there is
    nowhere to go.
  - `earlier()` and `later()` move through the nodes in the order they were
    created, across branches.
  - `gc()` removes the oldest leaves that are not on the path from the root to
    the current node, until the tree holds at most 200 nodes.
  - `flatten()` returns every node sorted by sequence number.
  - `clear()` drops everything.
- `UndoStack` is a linear stack that holds at most 100 states and drops the
  oldest state when full. `pop()` raises `IndexError` when the stack is empty.

### `qedit.undofile`

This module saves an undo tree to `.qe/undo/<hash>.undo`, relative to the
current directory. The hash is a DJB2 hash of the file's resolved absolute path.

- `save(filepath, tree)` writes the file and returns its path.
- `load(filepath)` reads the file back into an `UndoTree`.
- `remove(filepath)` deletes the file. It does nothing if the file does not exist.
- `undo_path(filepath)` returns the path that the functions above use.
- `encode(tree)` and `decode(data)` work on bytes directly.

Each function raises `UndofileError` in these cases:

- the tree is empty
- the file cannot be read or written
- the data has the wrong magic bytes, is truncated, is out of range, or has no root

### `qedit.theme`

- `HlType` lists the highlight kinds: `NORMAL`, `COMMENT`, `KEYWORD`, `TYPE`,
  `STRING`, `NUMBER`, `ESCAPE`, `PREPROC`, `BRACKET1`–`BRACKET4`, `SEARCH`,
  `BRACKET_MATCH` and `VISUAL`.
- `Theme` is a name plus ANSI escape sequences:
  - `hl_colors`, keyed by highlight type
  - `bg` and `fg`
  - `statusbar_active` and `statusbar_inactive`
  - `cursorline_bg`
- `default_theme()` returns the built-in `default` theme.
- `ThemeRegistry` holds up to 32 themes and loads `default` unless you pass
  `load_default=False`. Its methods:
  - `register(theme)` stores a copy of the theme and replaces any theme with the
    same name. It returns `False` when the registry is full.
  - `select(name)` raises `KeyError` for an unknown name.
  - `hl_escape`, `statusbar_escape`, `cursorline_bg`, `bg` and `fg` return the
    escape sequences of the current theme.

### `qedit.tree`

`TreeState(root, show_hidden=False)` models a file-tree sidebar:

- `refresh()` rescans the directory. Directories come first, then names in
  sorted order, and expanded directories stay expanded.
- `toggle(idx)` expands or collapses the directory at that index.
- `render_lines()` returns the display lines: a header line with `▾ name/`, then
  one line for each indented entry.
- `apply_git_status(lines)` marks entries from `git status --porcelain` output.
- `update_git_status()` runs `git status --porcelain` in the current directory
  and applies the result.

`git_xy_to_status(x, y)` maps a porcelain status code to one of these
characters: `?`, `A`, `D`, `M` or a space.

### `qedit.utils`

`shell_quote(s)` wraps a string in single quotes for a POSIX shell.

## Example

```python
from qedit.undo import UndoState, UndoTree
from qedit import undofile

tree = UndoTree()
tree.set_root(UndoState(["hello"], 0, 0), "open")
tree.push(UndoState(["hello world"], 11, 0), "edit")
tree.undo()                       # back to "open"
undofile.save("notes.txt", tree)  # written under .qe/undo/

restored = undofile.load("notes.txt")
print(restored.current.desc)      # open
```

```python
from qedit.theme import HlType, ThemeRegistry

themes = ThemeRegistry()
print(repr(themes.hl_escape(HlType.KEYWORD)))   # '\x1b[1;33m'
```

```python
from qedit.tree import TreeState

sidebar = TreeState(".")
sidebar.refresh()
print("\n".join(sidebar.render_lines()))
```

## What it does not do

This package is not a working editor. It provides no:

- command to start
- text buffer
- key handling
- screen drawing
- syntax highlighter

`HlType` only names the highlight kinds that a theme colours.

## Installation and tests

```
pip install .[test]
python -m pytest
```