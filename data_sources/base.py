from abc import ABC, abstractmethod
from typing import List

from models import Commit
import git_utils


class DataSource(ABC):
    """
    数据源抽象基类
    定义了获取原始提交日志的标准接口，屏蔽了底层是本地 Git 仓库还是已保存日志文件的差异。
    """

    @abstractmethod
    def validate(self) -> None:
        """
        验证数据源是否可用。
        不可用时抛出 LogUnavailable。
        """
        pass

    @abstractmethod
    def get_raw_log(self) -> str:
        """
        获取原始日志文本 (git log --no-merges --format=... --stat 的输出)。
        获取失败时抛出 LogUnavailable。
        """
        pass

    def get_commits(self) -> List[Commit]:
        """获取并解析提交列表 (日志顺序，最新在前)"""
        return git_utils.parse_git_log(self.get_raw_log())
