import logging
import os

from .base import DataSource
from context import RunContext
from errors import LogUnavailable

logger = logging.getLogger(__name__)


class LogFileDataSource(DataSource):
    """
    已保存日志文件数据源。
    读取预先导出的 git log 文本，适用于离线分析。
    """

    def __init__(self, context: RunContext):
        self.context = context
        self.log_path = os.path.abspath(context.log_file)

    def validate(self) -> None:
        if not os.path.isfile(self.log_path):
            raise LogUnavailable(f"Unable to get commits! 日志文件不存在: {self.log_path}")

    def get_raw_log(self) -> str:
        try:
            with open(self.log_path, "r", encoding="utf-8", errors="replace") as f:
                content = f.read()
        except OSError as e:
            raise LogUnavailable(f"Unable to get commits! 读取日志文件失败: {e}") from e
        logger.info(f"✅ [DataSource] 已读取日志文件: {self.log_path}")
        return content
