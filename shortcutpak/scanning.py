import logging
import os
from collections import deque
from pathlib import Path
from typing import List, Optional

from .device import BRIDGE_TAG
from .models import Category, GameEntry, GameKind, Shortcut, ShortcutKind, UtilityPackage
from .naming import MARKER_FILE, decode, extract_display_name, extract_tag, is_shortcut_dir, pointer_file_name
from .utils import is_disabled, is_dotfile, is_hidden, read_text, sort_key, strip_disabled, strip_extension

logger = logging.getLogger(__name__)

PLAYLIST_EXT = ".m3u"
INDEX_EXT = ".cue"
TARGET_FILE = "target"
ARTWORK_DIR = ".media"
ARTWORK_FILE = "bg.png"

def _visible(name: str, show_hidden: bool) -> bool:
    if is_dotfile(name) or name == "map.txt":
        return False
    return show_hidden or not is_hidden(name)

def scan_categories(roms_dir: Path, show_hidden: bool = False) -> List[Category]:
    """Console folders under the ROM root, shortcuts and untagged folders excluded."""
    categories: List[Category] = []
    for p in roms_dir.iterdir():
        if not p.is_dir() or not _visible(p.name, show_hidden) or is_shortcut_dir(p):
            continue
        clean = strip_disabled(p.name)
        tag = extract_tag(clean)
        if not tag:
            continue
        if not show_hidden and not _has_games(p):
            continue
        categories.append(Category(name=p.name, tag=tag, path=p,
                                   display=extract_display_name(clean),
                                   disabled=is_disabled(p.name)))
    categories.sort(key=lambda c: sort_key(c.display))
    logger.info("scan_categories: dir=%s categories=%d", roms_dir, len(categories))
    return categories

def _has_games(category_dir: Path) -> bool:
    try:
        return bool(scan_games(category_dir))
    except PermissionError:
        logger.warning("scan_categories: cannot read %s", category_dir)
        return False

def _folder_game(folder: Path) -> Optional[GameKind]:
    name = strip_disabled(folder.name)
    if (folder / (name + PLAYLIST_EXT)).is_file():
        return GameKind.MULTI_DISC
    if (folder / (name + INDEX_EXT)).is_file():
        return GameKind.INDEX_FOLDER
    return None

def scan_games(category_dir: Path, show_hidden: bool = False) -> List[GameEntry]:
    """Breadth-first; plain folders are collections and get descended into."""
    games: List[GameEntry] = []
    q = deque([category_dir])
    while q:
        cur = q.popleft()
        try:
            entries = list(cur.iterdir())
        except PermissionError:
            if cur == category_dir:
                raise
            logger.warning("scan_games: cannot read %s", cur)
            continue
        subdir = "" if cur == category_dir else cur.relative_to(category_dir).as_posix()
        for e in entries:
            if not _visible(e.name, show_hidden):
                continue
            disabled = is_disabled(e.name)
            if e.is_dir():
                kind = _folder_game(e)
                if kind is None:
                    q.append(e)
                    continue
                display = strip_disabled(e.name)
            else:
                kind = GameKind.SINGLE_FILE
                display = strip_extension(strip_disabled(e.name))
            games.append(GameEntry(name=e.name, path=e, display=display, kind=kind,
                                   disabled=disabled, subdir=subdir))
    games.sort(key=lambda g: (sort_key(g.subdir), sort_key(g.display)))
    logger.info("scan_games: dir=%s games=%d", category_dir, len(games))
    return games

def scan_utilities(tools_dir: Path, show_hidden: bool = False) -> List[UtilityPackage]:
    tools: List[UtilityPackage] = []
    for p in tools_dir.iterdir():
        if not p.is_dir() or not _visible(p.name, show_hidden):
            continue
        clean = strip_disabled(p.name)
        if not clean.endswith(".pak"):
            continue
        tools.append(UtilityPackage(name=p.name, path=p, display=clean[: -len(".pak")]))
    tools.sort(key=lambda t: sort_key(t.display))
    logger.info("scan_utilities: dir=%s tools=%d", tools_dir, len(tools))
    return tools

def read_shortcut(folder: Path) -> Optional[Shortcut]:
    """Shortcut for a folder, or None when it is not one or carries no tag."""
    if not folder.is_dir() or not is_shortcut_dir(folder):
        return None
    ident = decode(folder.name)
    if ident is None:
        return None

    display = read_text(folder / MARKER_FILE) or ident.display
    pointer = read_text(folder / pointer_file_name(folder.name))
    kind = ShortcutKind.UTILITY if ident.tag == BRIDGE_TAG else ShortcutKind.GAME

    if kind is ShortcutKind.UTILITY:
        target = read_text(folder / TARGET_FILE) or None
        complete = bool(pointer) and target is not None
    else:
        target = os.path.normpath(str(folder / pointer)) if pointer else None
        complete = bool(pointer)
    if not complete:
        logger.warning("read_shortcut: %s is missing its pointer files", folder)

    return Shortcut(folder=folder.name, tag=ident.tag, display=display, path=folder,
                    kind=kind, position=ident.position, target=target,
                    has_artwork=(folder / ARTWORK_DIR / ARTWORK_FILE).is_file(),
                    is_complete=complete)

def scan_shortcuts(roms_dir: Path) -> List[Shortcut]:
    shortcuts: List[Shortcut] = []
    for p in roms_dir.iterdir():
        if is_dotfile(p.name):
            continue
        sc = read_shortcut(p)
        if sc is not None:
            shortcuts.append(sc)
    shortcuts.sort(key=lambda s: sort_key(s.display))
    logger.info("scan_shortcuts: dir=%s shortcuts=%d", roms_dir, len(shortcuts))
    return shortcuts

def find_shortcut(roms_dir: Path, folder_name: str) -> Optional[Shortcut]:
    if not folder_name or "/" in folder_name or folder_name in (".", ".."):
        return None
    return read_shortcut(roms_dir / folder_name)

def matching_shortcut_dirs(roms_dir: Path, display: str, tag: str) -> List[Path]:
    """Shortcut folders for (display, tag) under any position or legacy prefix."""
    if not roms_dir.is_dir():
        return []
    found = []
    for p in roms_dir.iterdir():
        if not p.is_dir() or not is_shortcut_dir(p):
            continue
        ident = decode(p.name)
        if ident is not None and (ident.display, ident.tag) == (display, tag):
            found.append(p)
    return found

def shortcut_exists(roms_dir: Path, display: str, tag: str) -> bool:
    return bool(matching_shortcut_dirs(roms_dir, display, tag))
