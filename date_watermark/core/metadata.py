# -*- coding: utf-8 -*-
"""读取图片元数据并解析拍摄日期。

日期按以下顺序获取，取第一个成功的结果：
1. EXIF DateTimeOriginal
2. EXIF DateTime
3. 元数据中记录的文件修改时间
4. 直接读取文件系统修改时间

元数据读取或解析出错时视为没有任何元数据字段，直接走第 4 步。
"""
from __future__ import annotations
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Tuple, Union

import piexif
from PIL import Image

from .models import CaptureDate, ImageAsset, MetadataBundle

logger = logging.getLogger(__name__)

FILE_DIRECTORY = "File"
FILE_MODIFIED_DATE = "FileModifiedDate"

_EXIF_DATE_FORMATS = (
    "%Y:%m:%d %H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
    "%Y/%m/%d %H:%M:%S",
    "%Y:%m:%d",
    "%Y-%m-%d",
    "%Y/%m/%d",
)


def read_metadata(path: Union[str, Path]) -> MetadataBundle:
    """读取 EXIF 目录和文件目录，不解码像素。"""
    path = Path(path)
    with Image.open(path) as img:
        raw_exif = img.info.get("exif")
        fmt = img.format
    if raw_exif:
        bundle = piexif.load(raw_exif)
    elif fmt == "TIFF":
        # TIFF 的 EXIF 直接位于文件的 IFD 中
        bundle = piexif.load(str(path))
    else:
        bundle = {}
    bundle.pop("thumbnail", None)

    st = path.stat()
    bundle[FILE_DIRECTORY] = {
        "FileName": path.name,
        "FileSize": st.st_size,
        FILE_MODIFIED_DATE: datetime.fromtimestamp(st.st_mtime),
    }
    return bundle


def parse_exif_datetime(value) -> Optional[datetime]:
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="ignore")
    if not isinstance(value, str):
        return None
    s = value.strip().strip("\x00").strip()
    if not s:
        return None
    for fmt in _EXIF_DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt)
        except ValueError:
            continue
    # 例如 "2023:05:06 12:34:56+08:00"，只取日期部分
    head = s[:10]
    for fmt in ("%Y:%m:%d", "%Y-%m-%d", "%Y/%m/%d"):
        try:
            return datetime.strptime(head, fmt)
        except ValueError:
            continue
    return None


def _date_time_original(asset: ImageAsset) -> Optional[datetime]:
    value = asset.metadata.get("Exif", {}).get(piexif.ExifIFD.DateTimeOriginal)
    return parse_exif_datetime(value)


def _date_time(asset: ImageAsset) -> Optional[datetime]:
    value = asset.metadata.get("0th", {}).get(piexif.ImageIFD.DateTime)
    return parse_exif_datetime(value)


def _file_modified_date(asset: ImageAsset) -> Optional[datetime]:
    value = asset.metadata.get(FILE_DIRECTORY, {}).get(FILE_MODIFIED_DATE)
    return value if isinstance(value, datetime) else None


METADATA_DATE_SOURCES: Tuple[Callable[[ImageAsset], Optional[datetime]], ...] = (
    _date_time_original,
    _date_time,
    _file_modified_date,
)


def _filesystem_date(path: Path) -> datetime:
    try:
        return datetime.fromtimestamp(os.path.getmtime(path))
    except OSError as e:
        logger.debug("无法读取 %s 的修改时间，使用当前时间: %s", path, e)
        return datetime.now()


def resolve_capture_date(asset: ImageAsset) -> CaptureDate:
    """返回图片的拍摄日期，不会抛出异常。"""
    try:
        for source in METADATA_DATE_SOURCES:
            found = source(asset)
            if found is not None:
                logger.debug("%s: 日期来自 %s", asset.name, source.__name__)
                return CaptureDate.from_datetime(found)
    except Exception as e:
        logger.debug("%s: 元数据读取失败 (%s)，使用文件修改时间", asset.name, e)
    return CaptureDate.from_datetime(_filesystem_date(asset.path))


def format_date(value: Union[CaptureDate, datetime]) -> str:
    if isinstance(value, datetime):
        value = CaptureDate.from_datetime(value)
    return str(value)
