import subprocess
from unittest import mock

import pytest

from qedit.tree import (
    ICON_COLLAPSED,
    ICON_EXPANDED,
    TreeState,
    git_xy_to_status,
)


@pytest.fixture
def project(tmp_path):
    (tmp_path / "zdir").mkdir()
    (tmp_path / "adir").mkdir()
    (tmp_path / "adir" / "inner.txt").write_text("x")
    (tmp_path / "b.txt").write_text("b")
    (tmp_path / "a.txt").write_text("a")
    (tmp_path / ".hidden").write_text("h")
    return tmp_path


def names(ts):
    return [e.name for e in ts.entries]


def test_refresh_dirs_first_then_sorted(project):
    ts = TreeState(str(project))
    ts.refresh()
    assert names(ts) == ["adir", "zdir", "a.txt", "b.txt"]
    assert [e.is_dir for e in ts.entries] == [True, True, False, False]
    assert all(e.depth == 0 for e in ts.entries)


def test_refresh_paths_join_root(project):
    ts = TreeState(str(project))
    ts.refresh()
    assert all(e.path == f"{project}/{e.name}" for e in ts.entries)


def test_hidden_files_shown_on_request(project):
    ts = TreeState(str(project), show_hidden=True)
    ts.refresh()
    assert ".hidden" in names(ts)
    assert "." not in names(ts) and ".." not in names(ts)


def test_toggle_expands_and_collapses(project):
    ts = TreeState(str(project))
    ts.refresh()
    ts.toggle(0)
    assert names(ts) == ["adir", "inner.txt", "zdir", "a.txt", "b.txt"]
    assert ts.entries[0].expanded
    assert ts.entries[1].depth == 1
    ts.toggle(0)
    assert names(ts) == ["adir", "zdir", "a.txt", "b.txt"]
    assert not ts.entries[0].expanded


def test_toggle_ignores_files_and_bad_index(project):
    ts = TreeState(str(project))
    ts.refresh()
    before = names(ts)
    ts.toggle(2)
    ts.toggle(-1)
    ts.toggle(99)
    assert names(ts) == before
    assert not any(e.expanded for e in ts.entries)


def test_refresh_keeps_expanded_state(project):
    ts = TreeState(str(project))
    ts.refresh()
    ts.toggle(0)
    (project / "adir" / "new.txt").write_text("n")
    ts.refresh()
    assert names(ts)[:3] == ["adir", "inner.txt", "new.txt"]
    assert ts.entries[0].expanded


def test_missing_root_gives_no_entries(tmp_path):
    ts = TreeState(str(tmp_path / "absent"))
    ts.refresh()
    assert ts.entries == []


def test_render_lines(project):
    ts = TreeState(str(project))
    ts.refresh()
    ts.toggle(0)
    lines = ts.render_lines()
    assert lines[0] == f"{ICON_EXPANDED} {project.name}/"
    assert lines[1] == f"  {ICON_EXPANDED} adir/"
    assert lines[2] == "    inner.txt"
    assert lines[3] == f"  {ICON_COLLAPSED} zdir/"
    assert lines[4] == "  a.txt"
    assert len(lines) == len(ts.entries) + 1


def test_render_root_with_trailing_slash_uses_whole_root():
    ts = TreeState("/srv/")
    assert ts.render_lines() == [f"{ICON_EXPANDED} /srv//"]


@pytest.mark.parametrize(
    "x, y, expected",
    [
        ("?", "?", "?"),
        ("A", " ", "A"),
        (" ", "A", "A"),
        ("D", " ", "D"),
        (" ", "M", "M"),
        ("R", " ", "M"),
        ("T", " ", "M"),
        ("!", "!", " "),
    ],
)
def test_git_xy_to_status(x, y, expected):
    assert git_xy_to_status(x, y) == expected


def test_apply_git_status(project):
    ts = TreeState(str(project))
    ts.refresh()
    ts.toggle(0)
    ts.apply_git_status([" M adir/inner.txt\n", "?? a.txt", "x"])
    status = {e.name: e.git_status for e in ts.entries}
    assert status["inner.txt"] == "M"
    assert status["adir"] == "M"
    assert status["a.txt"] == "?"
    assert status["b.txt"] == " "
    assert status["zdir"] == " "


def test_apply_git_status_dir_keeps_first_status(project):
    ts = TreeState(str(project))
    ts.refresh()
    ts.apply_git_status(["?? adir/inner.txt", " M adir/other.txt"])
    assert ts.entries[0].git_status == "?"


def test_apply_git_status_does_not_match_prefix_siblings(tmp_path):
    (tmp_path / "ab").mkdir()
    (tmp_path / "abc.txt").write_text("x")
    ts = TreeState(str(tmp_path))
    ts.refresh()
    ts.apply_git_status([" M abc.txt"])
    status = {e.name: e.git_status for e in ts.entries}
    assert status["ab"] == " "
    assert status["abc.txt"] == "M"


def test_update_git_status_uses_git_output(project):
    ts = TreeState(str(project))
    ts.refresh()
    result = subprocess.CompletedProcess(
        ["git"], 0, stdout=" D b.txt\n", stderr=None
    )
    with mock.patch("qedit.tree.subprocess.run", return_value=result) as run:
        ts.update_git_status()
    assert run.call_args[0][0] == ["git", "status", "--porcelain"]
    status = {e.name: e.git_status for e in ts.entries}
    assert status["b.txt"] == "D"
    assert status["a.txt"] == " "


def test_update_git_status_without_git_resets(project):
    ts = TreeState(str(project))
    ts.refresh()
    for e in ts.entries:
        e.git_status = "M"
    with mock.patch("qedit.tree.subprocess.run", side_effect=FileNotFoundError):
        ts.update_git_status()
    assert {e.git_status for e in ts.entries} == {" "}