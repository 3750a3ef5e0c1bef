import os
from datetime import datetime

import piexif
import pytest
from PIL import Image


def _exif_bytes(date_time_original=None, date_time=None):
    exif = {"0th": {}, "Exif": {}, "GPS": {}, "1st": {}, "thumbnail": None}
    if date_time_original is not None:
        exif["Exif"][piexif.ExifIFD.DateTimeOriginal] = date_time_original
    if date_time is not None:
        exif["0th"][piexif.ImageIFD.DateTime] = date_time
    return piexif.dump(exif)


@pytest.fixture
def make_image():
    """生成测试图片，可写入 EXIF 日期并设置文件修改时间。"""

    def _make(path, size=(120, 80), mode="RGB", color=(40, 80, 120),
              date_time_original=None, date_time=None, mtime=None, fmt=None):
        path.parent.mkdir(parents=True, exist_ok=True)
        if mode == "L" and isinstance(color, tuple):
            color = color[0]
        img = Image.new(mode, size, color)
        kwargs = {}
        if date_time_original is not None or date_time is not None:
            kwargs["exif"] = _exif_bytes(date_time_original, date_time)
        img.save(path, format=fmt, **kwargs)
        if mtime is not None:
            ts = mtime.timestamp() if isinstance(mtime, datetime) else mtime
            os.utime(path, (ts, ts))
        return path

    return _make


@pytest.fixture
def photo_dir(tmp_path, make_image):
    """3 张有效图片 + 1 个损坏文件。"""
    root = tmp_path / "photos"
    make_image(root / "a.jpg", date_time_original=b"2023:05:06 12:34:56")
    make_image(root / "b.png", size=(90, 60))
    make_image(root / "sub" / "c.tif", size=(64, 48))
    (root / "bad.jpg").write_bytes(b"not an image at all")
    (root / "notes.txt").write_text("ignored")
    return root
