#!/usr/bin/env python3
import logging
import os
import sys
from shortcutpak import create_app, default_root, ensure_root, BIND, PORT

def _resolve_sdcard_root() -> str:
    if len(sys.argv) >= 2:
        return os.path.abspath(sys.argv[1])
    return os.path.abspath(default_root())

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    sdcard_root = _resolve_sdcard_root()
    ensure_root(sdcard_root)
    app = create_app(sdcard_root)
    # one request at a time; nothing on disk is locked
    app.run(host=BIND, port=PORT, debug=False, threaded=False)
