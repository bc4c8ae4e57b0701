import os
from pathlib import Path
from flask import Flask
from .device import DEFAULT_PLATFORM, DEFAULT_SDCARD, DeviceLayout, normalize_platform, profile_for
from .routes import bp as routes_bp

# Bind only localhost unless overridden
BIND = os.environ.get("BIND", "127.0.0.1")
PORT = int(os.environ.get("PORT", "5000"))
PLATFORM = os.environ.get("PLATFORM", DEFAULT_PLATFORM)
DEVICE = os.environ.get("DEVICE", "")

def default_root() -> str:
    return os.environ.get("SDCARD_PATH") or DEFAULT_SDCARD

def ensure_root(sdcard_root: str) -> None:
    if not os.path.isdir(os.path.join(sdcard_root, "Roms")):
        raise SystemExit(f"No Roms folder under SDCARD_PATH: {sdcard_root}")

def create_app(sdcard_root: str, platform: str = PLATFORM, device: str = DEVICE) -> Flask:
    app = Flask(__name__)
    layout = DeviceLayout(Path(sdcard_root), normalize_platform(platform))
    app.config["APP_TITLE"] = "Shortcuts"
    app.config["LAYOUT"] = layout
    app.config["PROFILE"] = profile_for(device)
    app.config["SETTINGS_FILE"] = layout.settings_file

    app.register_blueprint(routes_bp)
    return app
