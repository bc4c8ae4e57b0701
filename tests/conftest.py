from __future__ import annotations
import io
from pathlib import Path

import pytest
from PIL import Image

from shortcutpak.device import DeviceLayout


def touch(p: Path, data: bytes = b"") -> Path:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_bytes(data or b"stub")
    return p


def png(w=600, h=800, color=(12, 34, 56, 255)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGBA", (w, h), color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def layout(tmp_path) -> DeviceLayout:
    """A small SD card:

    Roms/
      Sega Genesis (MD)/          Battletoads (World).md (+ art), Sonic.md, map.txt
      Sony PlayStation (PS)/      multi-disc, cue folder, Hacks/ collection
      Empty (GB)/                 no games
      Nintendo (NES).disabled/    Mario.nes
      Untagged/                   no tag
    Tools/tg5040/
      SDLReader.pak/, Files.pak/ (+ art for SDLReader), notes.txt
    """
    roms = tmp_path / "Roms"
    md = roms / "Sega Genesis (MD)"
    touch(md / "Battletoads (World).md")
    touch(md / "Sonic.md")
    touch(md / "map.txt", b"Sonic.md\tSonic the Hedgehog")
    touch(md / ".media" / "Battletoads (World).png", png(400, 560, (200, 30, 30, 255)))
    touch(md / "Old Game.md.disabled")

    ps = roms / "Sony PlayStation (PS)"
    touch(ps / "Final Fantasy VII" / "Final Fantasy VII.m3u", b"disc1.chd\ndisc2.chd")
    touch(ps / "Final Fantasy VII" / "disc1.chd")
    touch(ps / "Crash" / "Crash.cue")
    touch(ps / "Crash" / "Crash.bin")
    touch(ps / "Hacks" / "Crash Hack.bin")

    (roms / "Empty (GB)").mkdir(parents=True)
    touch(roms / "Nintendo (NES).disabled" / "Mario.nes")
    touch(roms / "Untagged" / "foo.bin")

    tools = tmp_path / "Tools" / "tg5040"
    touch(tools / "SDLReader.pak" / "launch.sh", b"#!/bin/sh\n")
    touch(tools / "Files.pak" / "launch.sh", b"#!/bin/sh\n")
    touch(tools / ".media" / "SDLReader.png", png(300, 300, (30, 200, 30, 255)))
    touch(tools / "notes.txt")
    return DeviceLayout(tmp_path)
