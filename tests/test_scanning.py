import os

import pytest

from conftest import touch
from shortcutpak.models import GameKind, Position, ShortcutKind
from shortcutpak.naming import MARKER_FILE
from shortcutpak.scanning import (
    find_shortcut, scan_categories, scan_games, scan_shortcuts, scan_utilities, shortcut_exists,
)


def test_categories_skip_hidden_empty_untagged(layout):
    cats = scan_categories(layout.roms_dir)
    assert [c.name for c in cats] == ["Sega Genesis (MD)", "Sony PlayStation (PS)"]
    md = cats[0]
    assert (md.tag, md.display, md.disabled) == ("MD", "Sega Genesis", False)


def test_categories_show_hidden(layout):
    cats = {c.name: c for c in scan_categories(layout.roms_dir, show_hidden=True)}
    assert set(cats) == {"Sega Genesis (MD)", "Sony PlayStation (PS)", "Empty (GB)", "Nintendo (NES).disabled"}
    nes = cats["Nintendo (NES).disabled"]
    assert (nes.tag, nes.display, nes.disabled) == ("NES", "Nintendo", True)


def test_categories_exclude_shortcuts(layout):
    legacy = layout.roms_dir / "★ Sonic (MD)"
    touch(legacy / "★ Sonic (MD).m3u", b"../Sega Genesis (MD)/Sonic.md")
    alpha = layout.roms_dir / "Sonic (MD)"
    touch(alpha / "Sonic (MD).m3u", b"../Sega Genesis (MD)/Sonic.md")
    touch(alpha / MARKER_FILE, b"Sonic")
    names = [c.name for c in scan_categories(layout.roms_dir, show_hidden=True)]
    assert "★ Sonic (MD)" not in names
    assert "Sonic (MD)" not in names


def test_games_kinds_and_nesting(layout):
    games = scan_games(layout.roms_dir / "Sony PlayStation (PS)")
    by_name = {g.name: g for g in games}
    assert by_name["Final Fantasy VII"].kind is GameKind.MULTI_DISC
    assert by_name["Crash"].kind is GameKind.INDEX_FOLDER
    hack = by_name["Crash Hack.bin"]
    assert (hack.kind, hack.subdir, hack.display) == (GameKind.SINGLE_FILE, "Hacks", "Crash Hack")
    # disc files inside game folders are not separate entries
    assert "disc1.chd" not in by_name and "Crash.bin" not in by_name


def test_games_skip_map_and_media(layout):
    games = scan_games(layout.roms_dir / "Sega Genesis (MD)")
    assert [g.display for g in games] == ["Battletoads (World)", "Sonic"]

    shown = scan_games(layout.roms_dir / "Sega Genesis (MD)", show_hidden=True)
    old = next(g for g in shown if g.disabled)
    assert old.display == "Old Game"


def test_utilities(layout):
    tools = scan_utilities(layout.tools_dir)
    assert [(t.name, t.display) for t in tools] == [("Files.pak", "Files"), ("SDLReader.pak", "SDLReader")]


def test_missing_roms_dir_is_surfaced(tmp_path):
    with pytest.raises(FileNotFoundError):
        scan_categories(tmp_path / "nope")


def test_legacy_shortcut_without_marker_file(layout):
    folder = layout.roms_dir / "★ Sonic (MD)"
    touch(folder / "★ Sonic (MD).m3u", b"../Sega Genesis (MD)/Sonic.md\n")
    [sc] = scan_shortcuts(layout.roms_dir)
    assert (sc.display, sc.tag, sc.position, sc.kind) == ("Sonic", "MD", Position.BOTTOM, ShortcutKind.GAME)
    assert sc.target == os.path.normpath(str(layout.roms_dir / "Sega Genesis (MD)" / "Sonic.md"))
    assert sc.is_complete and not sc.has_artwork


def test_marker_file_supplies_display(layout):
    folder = layout.roms_dir / "0) Battletoads (World) (MD)"
    touch(folder / "0) Battletoads (World) (MD).m3u", b"../Sega Genesis (MD)/Battletoads (World).md")
    touch(folder / MARKER_FILE, b"Battletoads (World)")
    sc = find_shortcut(layout.roms_dir, folder.name)
    assert (sc.display, sc.position) == ("Battletoads (World)", Position.TOP)


def test_incomplete_shortcut_is_reported(layout):
    (layout.roms_dir / "\ufeffSonic (MD)").mkdir()
    [sc] = scan_shortcuts(layout.roms_dir)
    assert sc.target is None
    assert not sc.is_complete


def test_untagged_marker_folder_excluded(layout):
    (layout.roms_dir / "\ufeffSonic").mkdir()
    assert scan_shortcuts(layout.roms_dir) == []


def test_find_shortcut_rejects_paths(layout):
    assert find_shortcut(layout.roms_dir, "..") is None
    assert find_shortcut(layout.roms_dir, "a/b") is None
    assert find_shortcut(layout.roms_dir, "Sega Genesis (MD)") is None


def test_exists_checks_legacy_names(layout):
    assert not shortcut_exists(layout.roms_dir, "Sonic", "MD")
    (layout.roms_dir / "★ Sonic (MD)").mkdir()
    assert shortcut_exists(layout.roms_dir, "Sonic", "MD")


def test_exists_for_any_numbered_top_prefix(layout):
    folder = layout.roms_dir / "1) Sonic (MD)"
    touch(folder / MARKER_FILE, b"Sonic")
    [sc] = scan_shortcuts(layout.roms_dir)
    assert sc.position is Position.TOP
    assert shortcut_exists(layout.roms_dir, "Sonic", "MD")
    assert not shortcut_exists(layout.roms_dir, "Sonic", "PS")


def test_exists_ignores_plain_folders(layout):
    (layout.roms_dir / "Sonic (MD)").mkdir()
    assert not shortcut_exists(layout.roms_dir, "Sonic", "MD")
