"""Small shared helpers."""


def shell_quote(s: str) -> str:
    """Quote ``s`` for a POSIX shell using single quotes."""
    return "'" + s.replace("'", "'\\''") + "'"