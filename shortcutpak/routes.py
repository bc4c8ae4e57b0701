from __future__ import annotations
import binascii
import io
import logging
from pathlib import Path
from flask import Blueprint, current_app, jsonify, request, send_file, send_from_directory, abort

from .artwork import regenerate_all, remove_all, render_artwork, shortcut_art_source
from .models import Category, GameEntry, Position, Shortcut, UtilityPackage
from .scanning import ARTWORK_DIR, ARTWORK_FILE, find_shortcut, scan_categories, scan_games, scan_shortcuts, scan_utilities
from .settings import load_settings, preferences_from_dict, preferences_to_dict, save_settings
from .utils import b64url_decode, b64url_encode
from .writer import ShortcutExistsError, create_game_shortcut, create_utility_shortcut, remove_shortcut

logger = logging.getLogger(__name__)

bp = Blueprint("shortcuts", __name__)

def _cfg():
    c = current_app.config
    return c["LAYOUT"], c["PROFILE"], Path(c["SETTINGS_FILE"])

def _name_for_id(item_id: str) -> str:
    try:
        return b64url_decode(item_id)
    except (binascii.Error, UnicodeDecodeError, ValueError):
        abort(404)

def _game_rel(game: GameEntry) -> str:
    return f"{game.subdir}/{game.name}" if game.subdir else game.name

# ── serializers ──────────────────────────────────────────────

def _category_json(c: Category) -> dict:
    return {"id": b64url_encode(c.name), "name": c.name, "tag": c.tag,
            "display": c.display, "disabled": c.disabled}

def _game_json(g: GameEntry) -> dict:
    return {"id": b64url_encode(_game_rel(g)), "name": g.name, "display": g.display,
            "kind": g.kind.value, "subdir": g.subdir, "disabled": g.disabled}

def _utility_json(t: UtilityPackage) -> dict:
    return {"id": b64url_encode(t.name), "name": t.name, "display": t.display, "path": str(t.path)}

def _shortcut_json(s: Shortcut) -> dict:
    return {"id": b64url_encode(s.folder), "folder": s.folder, "tag": s.tag, "display": s.display,
            "kind": s.kind.value, "position": s.position.value, "target": s.target,
            "has_artwork": s.has_artwork, "complete": s.is_complete}

# ── lookups ──────────────────────────────────────────────────

def _category_or_404(category_id: str) -> Category:
    layout, *_ = _cfg()
    name = _name_for_id(category_id)
    for c in scan_categories(layout.roms_dir, show_hidden=True):
        if c.name == name:
            return c
    abort(404)

def _game_or_404(category: Category, game_id: str) -> GameEntry:
    rel = _name_for_id(game_id)
    for g in scan_games(category.path, show_hidden=True):
        if _game_rel(g) == rel:
            return g
    abort(404)

def _utility_or_404(utility_id: str) -> UtilityPackage:
    layout, *_ = _cfg()
    name = _name_for_id(utility_id)
    for t in scan_utilities(layout.tools_dir, show_hidden=True):
        if t.name == name:
            return t
    abort(404)

def _shortcut_or_404(shortcut_id: str) -> Shortcut:
    layout, *_ = _cfg()
    sc = find_shortcut(layout.roms_dir, _name_for_id(shortcut_id))
    if sc is None:
        abort(404)
    return sc

def _body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}

# ── errors ───────────────────────────────────────────────────

@bp.errorhandler(ShortcutExistsError)
def _exists(e):
    return jsonify({"ok": False, "error": str(e)}), 409

@bp.errorhandler(ValueError)
def _bad_request(e):
    return jsonify({"ok": False, "error": str(e)}), 400

@bp.errorhandler(OSError)
def _fs_error(e):
    logger.error("filesystem error: %s", e)
    return jsonify({"ok": False, "error": str(e)}), 500

# ── inventory ────────────────────────────────────────────────

@bp.get("/categories")
def categories():
    layout, _, settings_file = _cfg()
    prefs = load_settings(settings_file)
    return jsonify([_category_json(c) for c in scan_categories(layout.roms_dir, prefs.show_hidden)])

@bp.get("/categories/<category_id>/games")
def games(category_id):
    _, _, settings_file = _cfg()
    prefs = load_settings(settings_file)
    category = _category_or_404(category_id)
    return jsonify([_game_json(g) for g in scan_games(category.path, prefs.show_hidden)])

@bp.get("/utilities")
def utilities():
    layout, _, settings_file = _cfg()
    prefs = load_settings(settings_file)
    return jsonify([_utility_json(t) for t in scan_utilities(layout.tools_dir, prefs.show_hidden)])

@bp.get("/shortcuts")
def shortcuts():
    layout, *_ = _cfg()
    return jsonify([_shortcut_json(s) for s in scan_shortcuts(layout.roms_dir)])

# ── create / delete ──────────────────────────────────────────

@bp.post("/shortcuts/game")
def add_game_shortcut():
    layout, profile, settings_file = _cfg()
    body = _body()
    category = _category_or_404(str(body.get("category_id", "")))
    game = _game_or_404(category, str(body.get("game_id", "")))
    position = Position(body.get("position", Position.BOTTOM.value))
    folder = create_game_shortcut(layout, category, game, position, load_settings(settings_file), profile,
                                  overwrite=body.get("overwrite") is True)
    return jsonify({"ok": True, "shortcut": _shortcut_json(find_shortcut(layout.roms_dir, folder.name))}), 201

@bp.post("/shortcuts/utility")
def add_utility_shortcut():
    layout, profile, settings_file = _cfg()
    body = _body()
    package = _utility_or_404(str(body.get("utility_id", "")))
    position = Position(body.get("position", Position.BOTTOM.value))
    folder = create_utility_shortcut(layout, package, position, load_settings(settings_file), profile,
                                     overwrite=body.get("overwrite") is True)
    return jsonify({"ok": True, "shortcut": _shortcut_json(find_shortcut(layout.roms_dir, folder.name))}), 201

@bp.delete("/shortcuts/<shortcut_id>")
def delete_shortcut(shortcut_id):
    sc = _shortcut_or_404(shortcut_id)
    remove_shortcut(sc.path)
    return jsonify({"ok": True})

# ── artwork ──────────────────────────────────────────────────

@bp.get("/shortcuts/<shortcut_id>/artwork")
def shortcut_artwork(shortcut_id):
    sc = _shortcut_or_404(shortcut_id)
    if not sc.has_artwork:
        abort(404)
    return send_from_directory(sc.path / ARTWORK_DIR, ARTWORK_FILE)

@bp.get("/shortcuts/<shortcut_id>/preview")
def shortcut_preview(shortcut_id):
    layout, profile, settings_file = _cfg()
    sc = _shortcut_or_404(shortcut_id)
    canvas = render_artwork(shortcut_art_source(layout, sc), load_settings(settings_file), profile, layout.wallpaper)
    if canvas is None:
        abort(404)
    buf = io.BytesIO()
    canvas.save(buf, format="PNG")
    buf.seek(0)
    return send_file(buf, mimetype="image/png")

@bp.post("/artwork/regenerate")
def artwork_regenerate():
    layout, profile, settings_file = _cfg()
    count = regenerate_all(layout, load_settings(settings_file), profile)
    return jsonify({"ok": True, "processed": count})

@bp.post("/artwork/remove")
def artwork_remove():
    layout, *_ = _cfg()
    return jsonify({"ok": True, "processed": remove_all(layout)})

# ── settings ─────────────────────────────────────────────────

@bp.get("/settings")
def settings():
    _, _, settings_file = _cfg()
    return jsonify(preferences_to_dict(load_settings(settings_file)))

@bp.post("/settings")
def settings_post():
    _, _, settings_file = _cfg()
    current = preferences_to_dict(load_settings(settings_file))
    current.update(_body())
    prefs = preferences_from_dict(current)
    save_settings(settings_file, prefs)
    return jsonify(preferences_to_dict(prefs))
