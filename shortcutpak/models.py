from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

class Position(Enum):
    TOP = "top"         # "0) " prefix, sorts before A
    ALPHA = "alpha"     # no prefix
    BOTTOM = "bottom"   # invisible marker, sorts after Z

class GameKind(Enum):
    SINGLE_FILE = "file"
    MULTI_DISC = "multi-disc"
    INDEX_FOLDER = "index-folder"

class ShortcutKind(Enum):
    GAME = "game"
    UTILITY = "utility"

@dataclass(frozen=True)
class ShortcutName:
    display: str
    tag: str
    position: Position = Position.BOTTOM

@dataclass
class Category:
    name: str           # "Sega Genesis (MD)"
    tag: str            # "MD"
    path: Path
    display: str        # "Sega Genesis"
    disabled: bool = False

@dataclass
class GameEntry:
    name: str           # file name, or folder name for folder-based games
    path: Path
    display: str
    kind: GameKind = GameKind.SINGLE_FILE
    disabled: bool = False
    subdir: str = ""    # posix path below the category dir, "" at top level

@dataclass
class UtilityPackage:
    name: str           # "SDLReader.pak"
    path: Path
    display: str        # "SDLReader"

@dataclass
class Shortcut:
    folder: str
    tag: str
    display: str
    path: Path
    kind: ShortcutKind
    position: Position
    target: Optional[str]   # ROM path or package path, None when unresolved
    has_artwork: bool = False
    is_complete: bool = True

    @property
    def is_utility(self) -> bool:
        return self.kind is ShortcutKind.UTILITY
