import builtins

import pytest

from date_watermark.core.models import WatermarkPosition
from date_watermark.ui import console


@pytest.fixture
def answers(monkeypatch):
    """把预设回答依次喂给 input()，用完后模拟 EOF。"""

    def _feed(*lines):
        it = iter(lines)

        def fake_input(prompt=""):
            print(prompt, end="")
            try:
                return next(it)
            except StopIteration:
                raise EOFError

        monkeypatch.setattr(builtins, "input", fake_input)

    return _feed


def test_full_session(photo_dir, answers, capsys):
    answers(str(photo_dir), "32", "red", "9")
    assert console.run_session() == 0
    out = capsys.readouterr().out
    assert "找到 4 个图片文件" in out
    assert "已经完成读取年月日：2023年05月06日" in out
    assert "a.jpg - 2023年05月06日 - 完成" in out
    assert "bad.jpg - " in out and "失败: " in out
    assert "成功: 3 张，失败: 1 张" in out
    assert len(list((photo_dir.parent / "photos_watermark").iterdir())) == 3


def test_missing_path(tmp_path, answers, capsys):
    answers(str(tmp_path / "missing"))
    assert console.run_session() == 1
    assert "错误：路径不存在！" in capsys.readouterr().out


def test_empty_path_is_missing(answers, capsys):
    answers("")
    assert console.run_session() == 1


def test_no_images(tmp_path, answers, capsys):
    (tmp_path / "readme.txt").write_text("x")
    answers(str(tmp_path))
    assert console.run_session() == 0
    assert "未找到支持的图片文件！" in capsys.readouterr().out


def test_config_defaults_on_eof(answers):
    answers()
    config = console.prompt_watermark_config()
    assert config.font_size == 24
    assert config.font_color == (0, 0, 0)
    assert config.position is WatermarkPosition.CENTER


def test_config_invalid_inputs_warn(answers, capsys):
    answers("big", "not-a-color", "x")
    config = console.prompt_watermark_config()
    out = capsys.readouterr().out
    assert config.font_size == 24
    assert config.font_color == (0, 0, 0)
    assert config.position is WatermarkPosition.CENTER
    assert "输入无效，使用默认值24" in out
    assert "输入无效，使用默认位置：居中" in out


def test_config_parsed(answers):
    answers("48", "rgb(1,2,3)", "1")
    config = console.prompt_watermark_config()
    assert (config.font_size, config.font_color, config.position) == (48, (1, 2, 3), WatermarkPosition.TOP_LEFT)


def test_out_of_range_position(answers):
    answers("10")
    assert console.prompt_position() is WatermarkPosition.CENTER


def test_non_positive_font_size(answers, capsys):
    answers("-5")
    assert console.prompt_font_size() == 24
    assert "输入无效" in capsys.readouterr().out


def test_launch_reports_fatal_error(photo_dir, answers, monkeypatch, capsys):
    def boom(*args, **kwargs):
        raise PermissionError("denied")

    monkeypatch.setattr(console, "run_batch", boom)
    answers(str(photo_dir), "", "", "")
    assert console.launch() == 1
    assert "程序执行出错：denied" in capsys.readouterr().err
