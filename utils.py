import logging
import sys
import os
import webbrowser


def setup_logging(level: str = "WARNING"):
    """
    配置全局日志
    日志写到 stderr，stdout 只输出报告内容。
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def open_report_in_browser(filename: str):
    """在浏览器中打开报告"""
    logger = logging.getLogger(__name__)
    url = "file://" + os.path.abspath(filename)
    if webbrowser.open(url):
        logger.info(f"🌐 已在浏览器中打开报告: {filename}")
    else:
        logger.warning(f"无法自动打开报告，请手动打开: {filename}")
