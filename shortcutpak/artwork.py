"""Shortcut background compositor.

Builds the fullscreen ``.media/bg.png`` the launcher shows behind a
shortcut. The art layer uses the launcher's own game-list thumbnail
geometry (box fractions, right margin, corner radius) so a generated
background lines up with what the launcher would draw natively.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Tuple

from PIL import Image

from .device import DeviceLayout, DeviceProfile
from .models import Shortcut
from .naming import pointer_file_name
from .scanning import ARTWORK_DIR, ARTWORK_FILE, scan_shortcuts
from .settings import ArtworkMode, Preferences
from .utils import read_text

logger = logging.getLogger(__name__)

# Launcher thumbnail geometry, in logical units before FIXED_SCALE.
THUMB_MAX_W = 0.45
THUMB_MAX_H = 0.60
THUMB_RADIUS = 20
BUTTON_MARGIN = 5

RESAMPLE = Image.Resampling.BILINEAR

# ──────────────────────────────────────────────────────────────────────────────
# Geometry (pure)
# ──────────────────────────────────────────────────────────────────────────────

def cover_size(src_w: int, src_h: int, canvas_w: int, canvas_h: int) -> Tuple[int, int]:
    """Uniform scale so the source covers the canvas in both dimensions."""
    scale = max(canvas_w / src_w, canvas_h / src_h)
    return max(canvas_w, int(src_w * scale)), max(canvas_h, int(src_h * scale))

def cover_offset(new_w: int, new_h: int, canvas_w: int, canvas_h: int) -> Tuple[int, int]:
    return (new_w - canvas_w) // 2, (new_h - canvas_h) // 2

def fit_within(src_w: int, src_h: int, max_w: int, max_h: int) -> Tuple[int, int]:
    """Largest size with the source's aspect ratio inside max_w x max_h."""
    if src_w <= 0 or src_h <= 0:
        return max_w, max_h
    new_w, new_h = max_w, src_h * max_w // src_w
    if new_h > max_h:
        new_h = max_h
        new_w = src_w * max_h // src_h
    return max(1, new_w), max(1, new_h)

def art_box(profile: DeviceProfile) -> Tuple[int, int]:
    return int(profile.width * THUMB_MAX_W), int(profile.height * THUMB_MAX_H)

def corner_radius(profile: DeviceProfile) -> int:
    return THUMB_RADIUS * profile.scale

def art_origin(profile: DeviceProfile, art_w: int, art_h: int) -> Tuple[int, int]:
    """Right-aligned with the launcher's margin, vertically centred."""
    margin = BUTTON_MARGIN * 3 * profile.scale
    return max(0, profile.width - art_w - margin), profile.height // 2 - art_h // 2

def outside_rounded_corner(x: int, y: int, w: int, h: int, radius: int) -> bool:
    """True when (x, y) falls outside the rounded corner arcs of a w x h image.

    dx/dy are how far the pixel sits past the edge-inset line on each axis,
    0 unless it is within ``radius`` of that edge.
    """
    dx = 0
    if x < radius:
        dx = radius - x
    elif x >= w - radius:
        dx = x - (w - radius - 1)
    dy = 0
    if y < radius:
        dy = radius - y
    elif y >= h - radius:
        dy = y - (h - radius - 1)
    return dx * dx + dy * dy > radius * radius

def rounded_corner_mask(w: int, h: int, radius: int) -> Image.Image:
    """Mode "L" mask: 0 where a corner cuts the image, 255 elsewhere."""
    mask = Image.new("L", (w, h), 255)
    if radius <= 0 or w == 0 or h == 0:
        return mask
    mask.putdata([0 if outside_rounded_corner(x, y, w, h, radius) else 255
                  for y in range(h) for x in range(w)])
    return mask

def apply_rounded_corners(img: Image.Image, radius: int) -> Image.Image:
    img = img.convert("RGBA")
    clear = Image.new("RGBA", img.size, (0, 0, 0, 0))
    return Image.composite(img, clear, rounded_corner_mask(img.width, img.height, radius))

# ──────────────────────────────────────────────────────────────────────────────
# Layers
# ──────────────────────────────────────────────────────────────────────────────

def load_image(path: Optional[Path]) -> Optional[Image.Image]:
    if path is None:
        return None
    try:
        with Image.open(path) as im:
            im.load()
            return im.convert("RGBA")
    except FileNotFoundError:
        logger.info("load_image: %s not found", path)
    except (OSError, Image.DecompressionBombError) as e:
        logger.warning("load_image: %s: %s", path, e)
    return None

def black_canvas(profile: DeviceProfile) -> Image.Image:
    return Image.new("RGBA", (profile.width, profile.height), (0, 0, 0, 255))

def compose(profile: DeviceProfile, base: Optional[Image.Image] = None,
            art: Optional[Image.Image] = None) -> Image.Image:
    canvas = black_canvas(profile)
    cw, ch = profile.width, profile.height

    if base is not None:
        new_w, new_h = cover_size(base.width, base.height, cw, ch)
        scaled = base.convert("RGBA").resize((new_w, new_h), RESAMPLE)
        ox, oy = cover_offset(new_w, new_h, cw, ch)
        canvas.paste(scaled.crop((ox, oy, ox + cw, oy + ch)), (0, 0))

    if art is not None:
        max_w, max_h = art_box(profile)
        art_w, art_h = fit_within(art.width, art.height, max_w, max_h)
        scaled = apply_rounded_corners(art.convert("RGBA").resize((art_w, art_h), RESAMPLE),
                                       corner_radius(profile))
        canvas.alpha_composite(scaled, dest=art_origin(profile, art_w, art_h))

    return canvas

def base_layer(prefs: Preferences, wallpaper: Optional[Path]) -> Optional[Image.Image]:
    if not prefs.use_global_wallpaper or prefs.force_black_background:
        return None
    return load_image(wallpaper)

def render_artwork(art_src: Optional[Path], prefs: Preferences, profile: DeviceProfile,
                   wallpaper: Optional[Path] = None) -> Optional[Image.Image]:
    """Composite for one shortcut, or None when the mode says to leave it alone."""
    art = load_image(art_src)
    if art is None:
        if prefs.artwork_mode is ArtworkMode.SKIP:
            return None
        if prefs.artwork_mode is ArtworkMode.ALWAYS:
            return black_canvas(profile)
    return compose(profile, base_layer(prefs, wallpaper), art)

def generate_artwork(art_src: Optional[Path], dest_folder: Path, prefs: Preferences,
                     profile: DeviceProfile, wallpaper: Optional[Path] = None) -> Optional[Path]:
    canvas = render_artwork(art_src, prefs, profile, wallpaper)
    if canvas is None:
        logger.info("generate_artwork: no art for %s, mode=%s, nothing written", dest_folder.name, prefs.artwork_mode.value)
        return None
    media = dest_folder / ARTWORK_DIR
    media.mkdir(parents=True, exist_ok=True)
    out = media / ARTWORK_FILE
    canvas.save(out, format="PNG")
    logger.info("generate_artwork: %s (%dx%d)", out, profile.width, profile.height)
    return out

# ──────────────────────────────────────────────────────────────────────────────
# Bulk operations
# ──────────────────────────────────────────────────────────────────────────────

def shortcut_art_source(layout: DeviceLayout, sc: Shortcut) -> Optional[Path]:
    """Source PNG for a shortcut, found through its owning category or package root."""
    if sc.is_utility:
        return layout.tools_dir / ARTWORK_DIR / f"{sc.display}.png"
    rel = read_text(sc.path / pointer_file_name(sc.folder))
    # "../<Category (TAG)>/<rom>"
    parts = rel.split("/", 2)
    if len(parts) < 2 or parts[0] != ".." or not parts[1]:
        return None
    return layout.roms_dir / parts[1] / ARTWORK_DIR / f"{sc.display}.png"

def regenerate_all(layout: DeviceLayout, prefs: Preferences, profile: DeviceProfile) -> int:
    shortcuts = scan_shortcuts(layout.roms_dir)
    for sc in shortcuts:
        try:
            generate_artwork(shortcut_art_source(layout, sc), sc.path, prefs, profile, layout.wallpaper)
        except OSError as e:
            logger.warning("regenerate_all: %s: %s", sc.folder, e)
    logger.info("regenerate_all: processed %d shortcuts", len(shortcuts))
    return len(shortcuts)

def remove_artwork(folder: Path) -> None:
    media = folder / ARTWORK_DIR
    try:
        (media / ARTWORK_FILE).unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("remove_artwork: %s: %s", media / ARTWORK_FILE, e)
    try:
        media.rmdir()
    except OSError:
        pass    # missing or still holds other files

def remove_all(layout: DeviceLayout) -> int:
    shortcuts = scan_shortcuts(layout.roms_dir)
    for sc in shortcuts:
        remove_artwork(sc.path)
    logger.info("remove_all: processed %d shortcuts", len(shortcuts))
    return len(shortcuts)
