# -*- coding: utf-8 -*-
"""图片 EXIF 时间水印工具。"""

__version__ = "1.0.0"
