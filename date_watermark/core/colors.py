# -*- coding: utf-8 -*-
"""颜色字符串解析。

支持预定义颜色名（不区分大小写），以及 "r,g,b" / "rgb(r,g,b)"。
无法解析时一律返回黑色，不报错。
"""
from __future__ import annotations
from typing import Dict, Tuple

RGB = Tuple[int, int, int]

BLACK: RGB = (0, 0, 0)

PALETTE: Dict[str, RGB] = {
    "black": BLACK,
    "white": (255, 255, 255),
    "red": (255, 0, 0),
    "green": (0, 255, 0),
    "blue": (0, 0, 255),
    "yellow": (255, 255, 0),
    "cyan": (0, 255, 255),
    "magenta": (255, 0, 255),
    "gray": (128, 128, 128),
    "darkgray": (64, 64, 64),
    "lightgray": (192, 192, 192),
}


def parse_color(text: str) -> RGB:
    s = (text or "").strip().lower()
    if s in PALETTE:
        return PALETTE[s]

    if s.startswith("rgb(") and s.endswith(")"):
        s = s[4:-1]
    parts = s.split(",")
    if len(parts) != 3:
        return BLACK
    try:
        rgb = tuple(int(p.strip()) for p in parts)
    except ValueError:
        return BLACK
    if any(c < 0 or c > 255 for c in rgb):
        return BLACK
    return rgb  # type: ignore[return-value]
