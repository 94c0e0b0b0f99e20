import logging
import os

from .base import DataSource
from context import RunContext
from errors import LogUnavailable
import git_utils

logger = logging.getLogger(__name__)


class LocalGitDataSource(DataSource):
    """
    本地 Git 数据源实现。
    通过调用 git 命令行工具读取本地仓库的提交历史。
    """

    def __init__(self, context: RunContext):
        self.context = context

    def validate(self) -> None:
        repo_path = self.context.repo_path
        if not os.path.isdir(repo_path):
            raise LogUnavailable(f"Unable to get commits! 路径不存在: {repo_path}")
        if not git_utils.is_git_repository(repo_path):
            raise LogUnavailable(f"Unable to get commits! 指定路径不是 Git 仓库: {repo_path}")
        logger.info(f"✅ [DataSource] 已确认 Git 仓库: {repo_path}")

    def get_raw_log(self) -> str:
        log_output = git_utils.get_git_log(self.context)
        if log_output is None:
            raise LogUnavailable(f"Unable to get commits! git log 执行失败: {self.context.repo_path}")
        return log_output
