# -*- coding: utf-8 -*-
"""九宫格水印定位。"""
from __future__ import annotations
from typing import Union

from .models import PlacementPoint, WatermarkPosition

MARGIN = 20


def _half(n: int) -> int:
    # 向零取整，文字比图片宽时与整数除法结果一致
    return n // 2 if n >= 0 else -((-n) // 2)


def place(
    image_width: int,
    image_height: int,
    text_width: int,
    text_height: int,
    anchor: Union[WatermarkPosition, int],
) -> PlacementPoint:
    """计算文字绘制点（左上角为原点，y 为文字基线）。

    不做越界裁剪：文字宽于图片时 x 可以为负数。
    """
    W, H, tw, th = int(image_width), int(image_height), int(text_width), int(text_height)
    left = MARGIN
    center_x = _half(W - tw)
    right = W - tw - MARGIN
    top = th + MARGIN
    middle = _half(H + th)
    bottom = H - MARGIN
    mapping = {
        WatermarkPosition.TOP_LEFT: (left, top),
        WatermarkPosition.TOP_CENTER: (center_x, top),
        WatermarkPosition.TOP_RIGHT: (right, top),
        WatermarkPosition.MIDDLE_LEFT: (left, middle),
        WatermarkPosition.CENTER: (center_x, middle),
        WatermarkPosition.MIDDLE_RIGHT: (right, middle),
        WatermarkPosition.BOTTOM_LEFT: (left, bottom),
        WatermarkPosition.BOTTOM_CENTER: (center_x, bottom),
        WatermarkPosition.BOTTOM_RIGHT: (right, bottom),
    }
    return PlacementPoint(*mapping[WatermarkPosition.from_code(anchor)])
