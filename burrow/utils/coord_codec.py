"""Compact text encodings for terrain payloads.

Coordinate lists:
  - Coordinates are sorted, then delta-encoded pairwise and prefixed ``D:``.
  - Grammar: ``D:x0,y0|dx1,dy1|dx2,dy2|...``; an empty list encodes as ``""``.

Glyph rows:
  - Run-length encoded as ``<count><glyph>`` pairs, e.g. ``"3#2.1#"``.
  - Glyphs are never digits, so counts are unambiguous.
"""

from __future__ import annotations

from typing import Iterable, List, Tuple

Coord = Tuple[int, int]


def encode_coords(coords: Iterable[Coord]) -> str:
    """Delta-encode a coordinate collection (order is not preserved)."""
    pts = sorted(coords)
    if not pts:
        return ""
    pieces = []
    prev_x, prev_y = None, None
    for x, y in pts:
        if prev_x is None:
            pieces.append(f"{x},{y}")
        else:
            pieces.append(f"{x-prev_x},{y-prev_y}")
        prev_x, prev_y = x, y
    return "D:" + "|".join(pieces)


def decode_coords(data: str) -> List[Coord]:
    """Inverse of :func:`encode_coords`.

    Raises:
        ValueError: if ``data`` is not a ``D:`` payload or a token is malformed.
    """
    if not data:
        return []
    if not data.startswith("D:"):
        raise ValueError("coordinate payload must start with 'D:'")
    coords: List[Coord] = []
    prev_x, prev_y = None, None
    for token in data[2:].split("|"):
        x_s, y_s = token.split(",")
        dx, dy = int(x_s), int(y_s)
        if prev_x is None:
            x, y = dx, dy
        else:
            x, y = prev_x + dx, prev_y + dy
        coords.append((x, y))
        prev_x, prev_y = x, y
    return coords


def rle_encode(row: str) -> str:
    if not row:
        return ""
    out = []
    run_ch = row[0]
    run = 0
    for ch in row:
        if ch == run_ch:
            run += 1
        else:
            out.append(f"{run}{run_ch}")
            run_ch, run = ch, 1
    out.append(f"{run}{run_ch}")
    return "".join(out)


def rle_decode(data: str) -> str:
    out = []
    digits = ""
    for ch in data:
        if ch.isdigit():
            digits += ch
            continue
        if not digits:
            raise ValueError(f"glyph {ch!r} without a run length")
        out.append(ch * int(digits))
        digits = ""
    if digits:
        raise ValueError("trailing run length without glyph")
    return "".join(out)


__all__ = ["encode_coords", "decode_coords", "rle_encode", "rle_decode"]
