# -*- coding: utf-8 -*-
"""程序入口模块。"""
import logging
import sys

from date_watermark.ui.console import launch


def main() -> int:
    logging.basicConfig(
        level=logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return launch()


if __name__ == "__main__":
    sys.exit(main())
