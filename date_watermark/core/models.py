# -*- coding: utf-8 -*-
"""水印流程中使用的数据结构。

- ImageAsset：图片路径 + 延迟解码的像素 + 延迟读取的元数据
- CaptureDate：拍摄日期（年/月/日）
- WatermarkPosition：九宫格位置
- WatermarkConfig：一次批处理共享的只读水印配置
- PlacementPoint：文字基线坐标
"""
from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime
from enum import IntEnum
from pathlib import Path
from typing import Any, Dict, NamedTuple, Optional, Tuple, Union

from PIL import Image

DEFAULT_FONT_SIZE = 24
DEFAULT_COLOR: Tuple[int, int, int] = (0, 0, 0)

MetadataBundle = Dict[str, Dict[Any, Any]]


class WatermarkPosition(IntEnum):
    TOP_LEFT = 1
    TOP_CENTER = 2
    TOP_RIGHT = 3
    MIDDLE_LEFT = 4
    CENTER = 5
    MIDDLE_RIGHT = 6
    BOTTOM_LEFT = 7
    BOTTOM_CENTER = 8
    BOTTOM_RIGHT = 9

    @property
    def description(self) -> str:
        return _POSITION_LABELS[self]

    @classmethod
    def from_code(cls, code: Any) -> "WatermarkPosition":
        """按编号取位置，无法识别时返回居中。"""
        try:
            return cls(code)
        except ValueError:
            return cls.CENTER


_POSITION_LABELS = {
    WatermarkPosition.TOP_LEFT: "左上",
    WatermarkPosition.TOP_CENTER: "中上",
    WatermarkPosition.TOP_RIGHT: "右上",
    WatermarkPosition.MIDDLE_LEFT: "左中",
    WatermarkPosition.CENTER: "居中",
    WatermarkPosition.MIDDLE_RIGHT: "右中",
    WatermarkPosition.BOTTOM_LEFT: "左下",
    WatermarkPosition.BOTTOM_CENTER: "中下",
    WatermarkPosition.BOTTOM_RIGHT: "右下",
}


@dataclass(frozen=True)
class WatermarkConfig:
    font_size: int = DEFAULT_FONT_SIZE
    font_color: Tuple[int, int, int] = DEFAULT_COLOR
    position: WatermarkPosition = WatermarkPosition.CENTER


class PlacementPoint(NamedTuple):
    """文字绘制点，y 为基线。"""
    x: int
    y: int


@dataclass(frozen=True)
class CaptureDate:
    year: int
    month: int
    day: int

    @classmethod
    def from_datetime(cls, value: Union[date, datetime]) -> "CaptureDate":
        return cls(value.year, value.month, value.day)

    def __str__(self) -> str:
        return f"{self.year:04d}年{self.month:02d}月{self.day:02d}日"


class ImageAsset:
    """单个待处理图片。

    像素与元数据都在首次访问时读取；处理完成后调用 release() 释放。
    """

    def __init__(self, path: Union[str, Path], metadata: Optional[MetadataBundle] = None):
        self.path = Path(path)
        self._image: Optional[Image.Image] = None
        self._metadata = metadata

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def image(self) -> Image.Image:
        if self._image is None:
            with Image.open(self.path) as img:
                img.load()
                self._image = img
        return self._image

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def mode(self) -> str:
        return self.image.mode

    @property
    def metadata(self) -> MetadataBundle:
        if self._metadata is None:
            # 延迟导入，避免 models 与 metadata 互相依赖
            from .metadata import read_metadata
            self._metadata = read_metadata(self.path)
        return self._metadata

    def release(self) -> None:
        if self._image is not None:
            self._image.close()
        self._image = None
        self._metadata = None

    def __repr__(self) -> str:
        return f"ImageAsset({str(self.path)!r})"
