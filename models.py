from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional


@dataclass
class Commit:
    """Git提交数据模型 (单个非合并提交)"""

    hash: str
    author: str
    message: str
    timestamp: datetime
    changes: int

    @property
    def short_hash(self) -> str:
        return self.hash[:8]

    @property
    def iso_timestamp(self) -> str:
        """UTC ISO-8601，精确到毫秒，例如 2024-01-02T03:04:05.000Z"""
        utc = self.timestamp.astimezone(timezone.utc)
        return utc.strftime("%Y-%m-%dT%H:%M:%S") + f".{utc.microsecond // 1000:03d}Z"


@dataclass
class AuthorStats:
    """作者汇总数据模型"""

    commit_count: int = 0
    total_changes: int = 0


@dataclass
class AuthorExtremes:
    """作者的最大/最小提交 (仅 verbose 模式)"""

    largest: Commit
    smallest: Commit


@dataclass
class CommitTimeDifference:
    """两个相邻提交 (按日志顺序) 之间的时间差，单位毫秒，可为负数"""

    difference: int
    first_commit: Commit
    second_commit: Commit


@dataclass
class MessageStats:
    """提交信息质量指标"""

    threshold: int
    total: int
    meaningful: int
    unique: int
    meaningful_percent: int
    unique_percent: int


@dataclass
class TimeStats:
    """提交时间间隔统计 (毫秒)"""

    min_difference: CommitTimeDifference
    max_difference: CommitTimeDifference
    mean: float
    median: float
    differences: List[int] = field(default_factory=list)


@dataclass
class CommitStatistics:
    """一次扫描的完整统计结果"""

    total_commits: int
    total_changes: int
    authors: Dict[str, AuthorStats]
    change_percents: Dict[str, int]
    messages: MessageStats
    times: TimeStats
    extremes: Dict[str, AuthorExtremes] = field(default_factory=dict)

    @property
    def author_count(self) -> int:
        return len(self.authors)

    def extremes_for(self, author: str) -> Optional[AuthorExtremes]:
        return self.extremes.get(author)
