"""Highlight types and colour themes expressed as ANSI escape sequences."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import IntEnum

HL_TYPE_COUNT = 16
MAX_THEMES = 32
THEME_NAME_MAX = 64

_FALLBACK_STATUS_ACTIVE = "\x1b[7m"
_FALLBACK_STATUS_INACTIVE = "\x1b[2;7m"
_FALLBACK_CURSORLINE = "\x1b[48;5;236m"


class HlType(IntEnum):
    NORMAL = 0
    COMMENT = 1
    KEYWORD = 2
    TYPE = 3
    STRING = 4
    NUMBER = 5
    ESCAPE = 6
    PREPROC = 7
    BRACKET1 = 8
    BRACKET2 = 9
    BRACKET3 = 10
    BRACKET4 = 11
    SEARCH = 12
    BRACKET_MATCH = 13
    VISUAL = 14


@dataclass
class Theme:
    """A named set of escape sequences; ``None`` means terminal default."""

    name: str
    hl_colors: dict[int, str] = field(default_factory=dict)
    bg: str | None = None
    fg: str | None = None
    statusbar_active: str | None = None
    statusbar_inactive: str | None = None
    cursorline_bg: str | None = None


def default_theme() -> Theme:
    """Return the built-in ``default`` theme."""
    return Theme(
        name="default",
        hl_colors={
            HlType.COMMENT: "\x1b[2;36m",
            HlType.KEYWORD: "\x1b[1;33m",
            HlType.TYPE: "\x1b[36m",
            HlType.STRING: "\x1b[32m",
            HlType.NUMBER: "\x1b[35m",
            HlType.ESCAPE: "\x1b[1;32m",
            HlType.PREPROC: "\x1b[1;35m",
            HlType.BRACKET1: "\x1b[33m",
            HlType.BRACKET2: "\x1b[35m",
            HlType.BRACKET3: "\x1b[36m",
            HlType.BRACKET4: "\x1b[34m",
            HlType.SEARCH: "\x1b[7m",
            HlType.BRACKET_MATCH: "\x1b[104;97m",
            HlType.VISUAL: "\x1b[44m",
        },
        statusbar_active="\x1b[7m",
        statusbar_inactive="\x1b[2;7m",
        cursorline_bg="\x1b[48;5;236m",
    )


class ThemeRegistry:
    """Registered themes and the one currently in use."""

    def __init__(self, *, load_default: bool = True) -> None:
        self._themes: dict[str, Theme] = {}
        self._current: str | None = None
        if load_default:
            self.register(default_theme())
            self.select("default")

    def __len__(self) -> int:
        return len(self._themes)

    def __contains__(self, name: object) -> bool:
        return name in self._themes

    @property
    def current(self) -> Theme | None:
        return self._themes.get(self._current) if self._current else None

    def register(self, theme: Theme) -> bool:
        """Store a copy of ``theme``, replacing one of the same name.

        Returns False when the registry is full and the theme is new.
        """
        name = theme.name[: THEME_NAME_MAX - 1]
        if name not in self._themes and len(self._themes) >= MAX_THEMES:
            return False
        colors = {
            int(k): v for k, v in theme.hl_colors.items()
            if 0 <= int(k) < HL_TYPE_COUNT and v is not None
        }
        self._themes[name] = replace(theme, name=name, hl_colors=colors)
        return True

    def select(self, name: str) -> None:
        """Make ``name`` the current theme; raise KeyError if unknown."""
        if name not in self._themes:
            raise KeyError(f"unknown theme: {name}")
        self._current = name

    def hl_escape(self, hl: int) -> str | None:
        theme = self.current
        if theme is None or not 0 <= int(hl) < HL_TYPE_COUNT:
            return None
        return theme.hl_colors.get(int(hl))

    def statusbar_escape(self, is_active: bool) -> str | None:
        theme = self.current
        if theme is None:
            return _FALLBACK_STATUS_ACTIVE if is_active else _FALLBACK_STATUS_INACTIVE
        return theme.statusbar_active if is_active else theme.statusbar_inactive

    def cursorline_bg(self) -> str | None:
        theme = self.current
        return _FALLBACK_CURSORLINE if theme is None else theme.cursorline_bg

    def bg(self) -> str | None:
        theme = self.current
        return theme.bg if theme else None

    def fg(self) -> str | None:
        theme = self.current
        return theme.fg if theme else None