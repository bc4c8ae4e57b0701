import base64
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

DISABLED_SUFFIX = ".disabled"

def b64url_encode(s: str) -> str:
    return base64.urlsafe_b64encode(s.encode()).decode().rstrip("=")

def b64url_decode(s: str) -> str:
    pad = "=" * (-len(s) % 4)
    return base64.urlsafe_b64decode((s + pad).encode()).decode()

def is_dotfile(name: str) -> bool:
    return name.startswith(".")

def is_disabled(name: str) -> bool:
    return name.endswith(DISABLED_SUFFIX)

def is_hidden(name: str) -> bool:
    """Names the launcher never lists: dotfiles, disabled entries and map.txt."""
    return is_dotfile(name) or is_disabled(name) or name == "map.txt"

def strip_disabled(name: str) -> str:
    if is_disabled(name):
        return name[: -len(DISABLED_SUFFIX)]
    return name

def strip_extension(name: str) -> str:
    stem, ext = os.path.splitext(name)
    if 2 <= len(ext) <= 5:
        return stem
    return name

def sort_key(s: str) -> str:
    return s.lower()

def read_text(path: Path) -> str:
    """Stripped file contents, or "" when the file is missing or unreadable."""
    try:
        return path.read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        return ""
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("read_text: %s: %s", path, e)
        return ""
