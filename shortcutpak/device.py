from dataclasses import dataclass
from pathlib import Path

DEFAULT_SDCARD = "/mnt/SDCARD"
DEFAULT_PLATFORM = "tg5040"
BRIDGE_TAG = "SHORTCUT"

@dataclass(frozen=True)
class DeviceProfile:
    name: str
    width: int
    height: int
    scale: int      # launcher's FIXED_SCALE for this screen

# Smart Pro and TG5050 share 1280x720; the Brick is the 1024x768 one. The
# launcher exposes no reliable way to tell them apart at runtime, so the
# caller passes the device class explicitly.
PROFILES = {
    "standard": DeviceProfile("standard", 1280, 720, 2),
    "brick": DeviceProfile("brick", 1024, 768, 3),
}

def normalize_platform(value: str) -> str:
    """Platform folder name for a PLATFORM value; TG3040 shares tg5040's tree."""
    p = (value or "").upper()
    if "TG5050" in p:
        return "tg5050"
    return DEFAULT_PLATFORM

def profile_for(device: str) -> DeviceProfile:
    return PROFILES["brick"] if (device or "").strip().lower() == "brick" else PROFILES["standard"]

@dataclass(frozen=True)
class DeviceLayout:
    root: Path
    platform: str = DEFAULT_PLATFORM

    @property
    def roms_dir(self) -> Path:
        return self.root / "Roms"

    @property
    def tools_dir(self) -> Path:
        return self.root / "Tools" / self.platform

    @property
    def wallpaper(self) -> Path:
        return self.root / "bg.png"

    @property
    def settings_file(self) -> Path:
        return self.root / ".userdata" / self.platform / "shortcuts_settings.json"
