from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Optional

from .artwork import generate_artwork
from .device import BRIDGE_TAG, DeviceLayout, DeviceProfile, PROFILES
from .models import Category, GameEntry, GameKind, Position, ShortcutName, UtilityPackage
from .naming import MARKER_FILE, encode, is_shortcut_dir, pointer_file_name
from .scanning import ARTWORK_DIR, INDEX_EXT, PLAYLIST_EXT, TARGET_FILE, matching_shortcut_dirs
from .settings import Preferences
from .utils import strip_disabled

logger = logging.getLogger(__name__)


class ShortcutExistsError(FileExistsError):
    """A shortcut for the same (display, tag) exists under some position."""


def game_pointer(category: Category, game: GameEntry) -> str:
    """Relative path from the shortcut folder to the game, as the launcher resolves it."""
    parts = [category.name] + ([game.subdir] if game.subdir else []) + [game.name]
    rel = "../" + "/".join(parts)
    stem = strip_disabled(game.name)
    if game.kind is GameKind.MULTI_DISC:
        return f"{rel}/{stem}{PLAYLIST_EXT}"
    if game.kind is GameKind.INDEX_FOLDER:
        return f"{rel}/{stem}{INDEX_EXT}"
    return rel


def _write_shortcut(roms_dir: Path, name: ShortcutName, pointer: str, *,
                    target: Optional[str] = None, overwrite: bool = False) -> Path:
    folder_name = encode(name)
    folder = roms_dir / folder_name
    existing = matching_shortcut_dirs(roms_dir, name.display, name.tag)
    # overwrite only repairs the exact folder being written
    if existing and not (overwrite and existing == [folder]):
        raise ShortcutExistsError(f'A shortcut for "{name.display}" ({name.tag}) already exists.')
    if folder.exists() and folder not in existing:
        raise ShortcutExistsError(f'"{folder_name}" is taken by a folder that is not a shortcut.')

    folder.mkdir(parents=True, exist_ok=True)
    if target is not None:
        (folder / TARGET_FILE).write_text(target, encoding="utf-8")
    (folder / pointer_file_name(folder_name)).write_text(pointer, encoding="utf-8")
    (folder / MARKER_FILE).write_text(name.display, encoding="utf-8")
    return folder


def _decorate(folder: Path, art_src: Path, layout: DeviceLayout,
              prefs: Optional[Preferences], profile: Optional[DeviceProfile]) -> None:
    if prefs is None or not prefs.copy_artwork:
        return
    try:
        generate_artwork(art_src, folder, prefs, profile or PROFILES["standard"], layout.wallpaper)
    except (OSError, ValueError) as e:
        logger.warning("artwork for %s failed: %s", folder.name, e)


def create_game_shortcut(layout: DeviceLayout, category: Category, game: GameEntry,
                         position: Position = Position.BOTTOM,
                         prefs: Optional[Preferences] = None,
                         profile: Optional[DeviceProfile] = None,
                         *, overwrite: bool = False) -> Path:
    """Create a ROM shortcut and return its folder.

    Raises ShortcutExistsError for a duplicate and OSError on write failure.
    Files written before a failure are left in place; calling again with
    ``overwrite=True`` rewrites them.
    """
    name = ShortcutName(game.display, category.tag, position)
    pointer = game_pointer(category, game)
    logger.info("create_game_shortcut: name=%s tag=%s game=%s pos=%s kind=%s",
                name.display, name.tag, game.name, position.value, game.kind.value)
    folder = _write_shortcut(layout.roms_dir, name, pointer, overwrite=overwrite)
    _decorate(folder, category.path / ARTWORK_DIR / f"{name.display}.png", layout, prefs, profile)
    logger.info("create_game_shortcut: created folder=%s", folder)
    return folder


def create_utility_shortcut(layout: DeviceLayout, package: UtilityPackage,
                            position: Position = Position.BOTTOM,
                            prefs: Optional[Preferences] = None,
                            profile: Optional[DeviceProfile] = None,
                            *, overwrite: bool = False) -> Path:
    """Create a tool shortcut; the bridge pak reads ``target`` to find the package."""
    name = ShortcutName(package.display, BRIDGE_TAG, position)
    logger.info("create_utility_shortcut: name=%s pak=%s pos=%s", name.display, package.path, position.value)
    folder = _write_shortcut(layout.roms_dir, name, TARGET_FILE,
                             target=str(package.path.resolve()), overwrite=overwrite)
    _decorate(folder, layout.tools_dir / ARTWORK_DIR / f"{name.display}.png", layout, prefs, profile)
    logger.info("create_utility_shortcut: created folder=%s", folder)
    return folder


def remove_shortcut(path: Path) -> None:
    if not is_shortcut_dir(path):
        raise ValueError(f"not a shortcut folder: {path}")
    logger.info("remove_shortcut: path=%s", path)
    shutil.rmtree(path)
