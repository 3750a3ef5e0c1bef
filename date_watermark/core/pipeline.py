# -*- coding: utf-8 -*-
"""批量添加日期水印。

- 输入：单个图片文件，或目录（递归收集，按支持格式过滤）
- 输出目录：与输入同级的 "<名称>_watermark"
- 命名规则：<原名>_wm<原扩展名>，覆盖上次运行留下的同名文件；
  同一批次内不同子目录的同名文件只写第一个，其余记为失败
- 输出格式：png → PNG，tif/tiff → TIFF，其余 → JPEG
- 单个文件失败只计数，不中断整个批次
"""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Protocol, Union

from PIL import Image

from .metadata import resolve_capture_date
from .models import ImageAsset, WatermarkConfig
from .renderer import watermark_image

logger = logging.getLogger(__name__)

SUPPORTED_EXT = (".jpg", ".jpeg", ".png", ".tiff", ".tif")

_JPEG_MODES = {"1", "L", "RGB", "CMYK"}


class BatchReporter(Protocol):
    def file_started(self, path: Path, date_text: str) -> None: ...

    def file_done(self, path: Path, output: Path) -> None: ...

    def file_failed(self, path: Path, error: Exception) -> None: ...


@dataclass
class BatchResult:
    success_count: int
    fail_count: int
    output_dir: Optional[Path]

    @property
    def total(self) -> int:
        return self.success_count + self.fail_count


def is_supported(path: Union[str, Path]) -> bool:
    return str(path).lower().endswith(SUPPORTED_EXT)


def collect_images(path: Union[str, Path]) -> List[Path]:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"路径不存在: {path}")
    if path.is_dir():
        results: List[Path] = []
        for root, dirs, files in os.walk(path):
            dirs.sort()
            for fn in sorted(files):
                fp = Path(root) / fn
                if fp.is_file() and is_supported(fn):
                    results.append(fp)
        return results
    return [path] if is_supported(path.name) else []


def output_dir_for(input_path: Union[str, Path]) -> Path:
    input_path = Path(input_path).resolve()
    return input_path.parent / f"{input_path.name}_watermark"


def output_name(filename: str) -> str:
    dot = filename.rfind(".")
    if dot > 0:
        return f"{filename[:dot]}_wm{filename[dot:]}"
    return f"{filename}_wm"


def output_format(filename: str) -> str:
    lower = filename.lower()
    if lower.endswith(".png"):
        return "PNG"
    if lower.endswith((".tiff", ".tif")):
        return "TIFF"
    return "JPEG"


def _save(img: Image.Image, target: Path, fmt: str) -> None:
    if fmt == "JPEG" and img.mode not in _JPEG_MODES:
        img = img.convert("RGB")
    img.save(target, format=fmt)


def process_file(path: Path, output_dir: Path, config: WatermarkConfig,
                 reporter: Optional[BatchReporter] = None) -> Path:
    """处理单个文件，返回输出路径；失败时抛出异常。"""
    asset = ImageAsset(path)
    try:
        date_text = str(resolve_capture_date(asset))
        if reporter is not None:
            reporter.file_started(path, date_text)
        out = watermark_image(asset.image, date_text, config)
        target = output_dir / output_name(path.name)
        _save(out, target, output_format(path.name))
        return target
    finally:
        asset.release()


def run_batch(
    input_path: Union[str, Path],
    config: WatermarkConfig,
    files: Optional[Iterable[Path]] = None,
    reporter: Optional[BatchReporter] = None,
) -> BatchResult:
    """处理所有图片。

    files 为空时从 input_path 收集。输出目录创建失败会直接抛出 OSError。
    同一批次中输出文件名重复的图片不会覆盖先写出的文件，而是计为失败。
    """
    paths = list(files) if files is not None else collect_images(input_path)
    if not paths:
        logger.info("没有需要处理的图片: %s", input_path)
        return BatchResult(0, 0, None)

    output_dir = output_dir_for(input_path)
    output_dir.mkdir(parents=True, exist_ok=True)

    ok, fail = 0, 0
    # 本批次已写出的目标文件 → 来源，输出目录是平铺的，不同子目录中的同名文件会冲突
    written: Dict[str, Path] = {}
    for p in paths:
        p = Path(p)
        key = os.path.normcase(str(output_dir / output_name(p.name)))
        clash = written.get(key)
        if clash is not None:
            logger.warning("%s 与 %s 的输出文件名相同，已跳过", p, clash)
            fail += 1
            if reporter is not None:
                reporter.file_failed(p, FileExistsError(f"输出文件名与 {clash} 冲突"))
            continue
        try:
            target = process_file(p, output_dir, config, reporter)
        except Exception as e:
            logger.info("处理失败 %s: %s", p, e)
            logger.debug("详细信息", exc_info=True)
            fail += 1
            if reporter is not None:
                reporter.file_failed(p, e)
            continue
        ok += 1
        written[key] = p
        if reporter is not None:
            reporter.file_done(p, target)
    return BatchResult(ok, fail, output_dir)
