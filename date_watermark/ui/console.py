# -*- coding: utf-8 -*-
"""交互式命令行会话。

依次询问：图片路径 → 字体大小 → 字体颜色 → 水印位置，然后执行批处理并输出统计。
"""
from __future__ import annotations
import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

from ..core.colors import parse_color
from ..core.metadata import resolve_capture_date
from ..core.models import DEFAULT_FONT_SIZE, ImageAsset, WatermarkConfig, WatermarkPosition
from ..core.pipeline import collect_images, run_batch

logger = logging.getLogger(__name__)


def _read_line(prompt: str) -> str:
    try:
        return input(prompt).strip()
    except EOFError:
        return ""


def prompt_input_path() -> str:
    return _read_line("请输入图片文件路径: ")


def prompt_font_size() -> int:
    raw = _read_line(f"1. 字体大小 (默认{DEFAULT_FONT_SIZE}): ")
    if not raw:
        return DEFAULT_FONT_SIZE
    try:
        size = int(raw)
    except ValueError:
        size = 0
    if size <= 0:
        print(f"输入无效，使用默认值{DEFAULT_FONT_SIZE}")
        return DEFAULT_FONT_SIZE
    return size


def prompt_font_color() -> Tuple[int, int, int]:
    raw = _read_line("2. 字体颜色 (默认black): ")
    return parse_color(raw or "black")


def prompt_position() -> WatermarkPosition:
    print("3. 水印位置 (1-9):")
    print("   1) 左上  2) 中上  3) 右上")
    print("   4) 左中  5) 居中  6) 右中")
    print("   7) 左下  8) 中下  9) 右下")
    raw = _read_line("选择: ")
    code = WatermarkPosition.CENTER.value
    if raw:
        try:
            code = int(raw)
        except ValueError:
            print("输入无效，使用默认位置：居中")
    return WatermarkPosition.from_code(code)


def prompt_watermark_config() -> WatermarkConfig:
    print("请设置水印参数:")
    return WatermarkConfig(
        font_size=prompt_font_size(),
        font_color=prompt_font_color(),
        position=prompt_position(),
    )


class ConsoleReporter:
    """逐行打印每个文件的处理结果。"""

    def __init__(self):
        self._started: Optional[Path] = None

    def file_started(self, path: Path, date_text: str) -> None:
        self._started = path
        print(f"{path.name} - {date_text} - ", end="", flush=True)

    def file_done(self, path: Path, output: Path) -> None:
        print("完成")
        self._started = None

    def file_failed(self, path: Path, error: Exception) -> None:
        if self._started != path:
            print(f"{path.name} - ", end="")
        print(f"失败: {error}")
        self._started = None


def run_session() -> int:
    """执行一次完整的交互流程，返回进程退出码。"""
    print("=== 图片EXIF时间水印工具 ===")
    print()

    raw_path = prompt_input_path()
    input_path = Path(raw_path)
    if not raw_path or not input_path.exists():
        print("错误：路径不存在！")
        return 1

    files = collect_images(input_path)
    if not files:
        print("未找到支持的图片文件！")
        return 0
    print(f"找到 {len(files)} 个图片文件")

    sample = ImageAsset(files[0])
    print(f"已经完成读取年月日：{resolve_capture_date(sample)}")
    sample.release()
    print()

    config = prompt_watermark_config()
    logger.debug("水印配置: %s", config)

    print()
    print("正在处理...")
    result = run_batch(input_path, config, files=files, reporter=ConsoleReporter())

    print()
    print(f"全部完成! 水印图片已保存到 {result.output_dir}")
    print(f"成功: {result.success_count} 张，失败: {result.fail_count} 张")
    return 0


def launch() -> int:
    try:
        return run_session()
    except KeyboardInterrupt:
        print()
        return 130
    except Exception as e:
        logger.debug("程序执行出错", exc_info=True)
        print(f"程序执行出错：{e}", file=sys.stderr)
        return 1
