import json
import logging
from dataclasses import asdict, dataclass, fields
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)

class ArtworkMode(str, Enum):
    ALWAYS = "always"   # missing art -> plain black bg.png
    BASE = "base"       # missing art -> base layer (wallpaper or black)
    SKIP = "skip"       # missing art -> no bg.png, launcher default

@dataclass
class Preferences:
    copy_artwork: bool = False
    artwork_mode: ArtworkMode = ArtworkMode.SKIP
    show_hidden: bool = False
    use_global_wallpaper: bool = True
    force_black_background: bool = False

def preferences_from_dict(data: dict) -> Preferences:
    """Known keys with the right type win; anything else keeps its default."""
    prefs = Preferences()
    for f in fields(Preferences):
        if f.name not in data:
            continue
        value = data[f.name]
        if f.name == "artwork_mode":
            try:
                prefs.artwork_mode = ArtworkMode(value)
            except ValueError:
                logger.warning("preferences: unknown artwork_mode %r, using %s", value, prefs.artwork_mode.value)
        elif isinstance(value, bool):
            setattr(prefs, f.name, value)
        else:
            logger.warning("preferences: %s=%r is not a bool, ignored", f.name, value)
    return prefs

def preferences_to_dict(prefs: Preferences) -> dict:
    data = asdict(prefs)
    data["artwork_mode"] = prefs.artwork_mode.value
    return data

def load_settings(settings_file: Path) -> Preferences:
    try:
        if settings_file.exists():
            data = json.loads(settings_file.read_text("utf-8"))
            if isinstance(data, dict):
                return preferences_from_dict(data)
            logger.warning("load_settings: %s does not hold an object, using defaults", settings_file)
    except (OSError, ValueError) as e:
        logger.warning("load_settings: %s: %s, using defaults", settings_file, e)
    return Preferences()

def save_settings(settings_file: Path, settings: Preferences) -> None:
    settings_file.parent.mkdir(parents=True, exist_ok=True)
    settings_file.write_text(json.dumps(preferences_to_dict(settings), indent=2), encoding="utf-8")
