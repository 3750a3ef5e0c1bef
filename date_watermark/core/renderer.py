# -*- coding: utf-8 -*-
"""将日期文本（带阴影）绘制到图片上。"""
from __future__ import annotations
import logging
from typing import Dict, Optional, Tuple

from PIL import Image, ImageChops, ImageDraw, ImageFont

from .models import PlacementPoint, WatermarkConfig
from .placement import place

logger = logging.getLogger(__name__)

SHADOW_OFFSET = 2
SHADOW_ALPHA = 100

_INDEXED_MODES = {"P", "1"}

# 粗体且包含中文字形的字体优先，"年月日" 才不会显示成方框
FONT_CANDIDATES = (
    "msyhbd.ttc",
    "simhei.ttf",
    "NotoSansCJK-Bold.ttc",
    "NotoSansCJKsc-Bold.otf",
    "/usr/share/fonts/opentype/noto/NotoSansCJK-Bold.ttc",
    "/usr/share/fonts/truetype/wqy/wqy-zenhei.ttc",
    "/System/Library/Fonts/PingFang.ttc",
    "DejaVuSans-Bold.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
)

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont

_font_cache: Dict[int, Font] = {}


def load_font(size: int) -> Font:
    size = max(1, int(size))
    if size in _font_cache:
        return _font_cache[size]
    font: Optional[Font] = None
    for candidate in FONT_CANDIDATES:
        try:
            font = ImageFont.truetype(candidate, size)
            logger.debug("使用字体 %s (%dpx)", candidate, size)
            break
        except OSError:
            continue
    if font is None:
        logger.debug("未找到候选字体，使用 Pillow 默认字体")
        font = ImageFont.load_default(size=size)
    _font_cache[size] = font
    return font


def measure_text(font: Font, text: str) -> Tuple[int, int, int]:
    """返回 (宽度, 行高, 上行高度)。"""
    width = int(round(font.getlength(text)))
    if hasattr(font, "getmetrics"):
        ascent, descent = font.getmetrics()
    else:
        _, _, _, bottom = font.getbbox(text)
        ascent, descent = bottom, 0
    # 行高不含行间距（leading），Pillow 不提供该度量
    return width, ascent + descent, ascent


def _text_mask(size: Tuple[int, int], xy: Tuple[int, int], text: str, font: Font, value: int) -> Image.Image:
    mask = Image.new("L", size, 0)
    d = ImageDraw.Draw(mask)
    d.fontmode = "L"  # 抗锯齿
    d.text(xy, text, font=font, fill=value)
    return mask


def _luma(rgb: Tuple[int, int, int]) -> int:
    return Image.new("RGB", (1, 1), rgb).convert("L").getpixel((0, 0))


def _native_color(rgb: Tuple[int, int, int], mode: str):
    """把 RGB 颜色换算为 mode 下的像素值。"""
    if mode.startswith("I;16"):
        return _luma(rgb) * 257
    if mode == "I":
        return _luma(rgb)
    if mode == "F":
        return float(_luma(rgb))
    return Image.new("RGB", (1, 1), rgb).convert(mode).getpixel((0, 0))


def _render_indexed(out: Image.Image, shadow_mask: Image.Image, text_mask: Image.Image,
                    rgb: Tuple[int, int, int]) -> Image.Image:
    # 调色板/二值图不能按掩码混合索引值：先在 RGB 上绘制，再映射回原调色板，只替换文字区域
    working = out.convert("RGB")
    working.paste((0, 0, 0), mask=shadow_mask)
    working.paste(rgb, mask=text_mask)
    if out.mode == "P":
        patch = working.quantize(palette=out, dither=Image.Dither.NONE)
    else:
        patch = working.convert("1", dither=Image.Dither.NONE)
    covered = ImageChops.lighter(shadow_mask, text_mask).point(lambda v: 255 if v else 0)
    out.paste(patch, mask=covered)
    return out


def render(
    image: Image.Image,
    text: str,
    config: WatermarkConfig,
    point: PlacementPoint,
    *,
    font: Optional[Font] = None,
) -> Image.Image:
    """在 image 上绘制水印，返回尺寸与模式都相同的新图，原图不变。

    point 的 y 为文字基线；先画偏移 (+2, +2) 的半透明黑色阴影，再画文字本身。
    只有文字和阴影覆盖的像素会改变，其余像素与原图逐字节相同。
    """
    if font is None:
        font = load_font(config.font_size)
    _, _, ascent = measure_text(font, text)
    out = image.copy()
    if not text:
        return out

    x, top = point.x, point.y - ascent
    shadow_mask = _text_mask(
        out.size, (x + SHADOW_OFFSET, top + SHADOW_OFFSET), text, font, SHADOW_ALPHA
    )
    text_mask = _text_mask(out.size, (x, top), text, font, 255)

    if out.mode in _INDEXED_MODES:
        return _render_indexed(out, shadow_mask, text_mask, config.font_color)
    if out.mode == "F":
        # 浮点像素无法按字节混合，只做硬边绘制
        shadow_mask = shadow_mask.point(lambda v: 255 if v >= SHADOW_ALPHA // 2 else 0)
        text_mask = text_mask.point(lambda v: 255 if v >= 128 else 0)
    out.paste(_native_color((0, 0, 0), out.mode), mask=shadow_mask)
    out.paste(_native_color(config.font_color, out.mode), mask=text_mask)
    return out


def watermark_image(image: Image.Image, text: str, config: WatermarkConfig) -> Image.Image:
    """测量文字、计算位置并绘制。"""
    font = load_font(config.font_size)
    tw, th, _ = measure_text(font, text)
    point = place(image.width, image.height, tw, th, config.position)
    return render(image, text, config, point, font=font)
