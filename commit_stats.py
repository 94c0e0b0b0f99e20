"""
提交统计引擎
输入为解析后的提交序列 (日志顺序，最新在前)，输出 CommitStatistics。
本模块不做任何 I/O，所有累加状态都是函数内的局部变量。
"""
import logging
import math
from typing import Dict, List, Sequence

from errors import InsufficientHistory
from models import (
    AuthorExtremes,
    AuthorStats,
    Commit,
    CommitStatistics,
    CommitTimeDifference,
    MessageStats,
    TimeStats,
)

logger = logging.getLogger(__name__)

MIN_COMMITS = 2


def round_half_up(value: float) -> int:
    """四舍五入 (.5 向上取整)，内置 round() 是银行家舍入，不适用于百分比"""
    return math.floor(value + 0.5)


def percent_of(part: int, whole: int) -> int:
    if whole == 0:
        return 0
    return round_half_up(part / whole * 100)


def ensure_sufficient_history(commits: Sequence[Commit]) -> None:
    if len(commits) < MIN_COMMITS:
        raise InsufficientHistory(len(commits))


def rollup_authors(commits: Sequence[Commit]) -> Dict[str, AuthorStats]:
    """按作者汇总提交数与变更行数 (保持作者首次出现的顺序)"""
    authors: Dict[str, AuthorStats] = {}
    for commit in commits:
        stats = authors.setdefault(commit.author, AuthorStats())
        stats.commit_count += 1
        stats.total_changes += commit.changes
    return authors


def change_percents(authors: Dict[str, AuthorStats], total_changes: int) -> Dict[str, int]:
    """各作者占总变更行数的百分比；总变更为 0 时全部记为 0"""
    return {
        author: percent_of(stats.total_changes, total_changes)
        for author, stats in authors.items()
    }


def author_extremes(commits: Sequence[Commit]) -> Dict[str, AuthorExtremes]:
    """
    每个作者变更最大和最小的提交。
    变更数相同时取日志中先出现的提交。
    """
    extremes: Dict[str, AuthorExtremes] = {}
    for commit in commits:
        current = extremes.get(commit.author)
        if current is None:
            extremes[commit.author] = AuthorExtremes(largest=commit, smallest=commit)
            continue
        if commit.changes > current.largest.changes:
            current.largest = commit
        if commit.changes < current.smallest.changes:
            current.smallest = commit
    return extremes


def message_stats(commits: Sequence[Commit], threshold: int) -> MessageStats:
    """提交信息质量: 长度严格大于 threshold 的数量，以及不重复信息的数量"""
    total = len(commits)
    meaningful = sum(1 for commit in commits if len(commit.message) > threshold)
    unique = len({commit.message for commit in commits})
    return MessageStats(
        threshold=threshold,
        total=total,
        meaningful=meaningful,
        unique=unique,
        meaningful_percent=percent_of(meaningful, total),
        unique_percent=percent_of(unique, total),
    )


def time_differences(commits: Sequence[Commit]) -> List[CommitTimeDifference]:
    """
    相邻提交 (日志顺序 i 与 i+1) 的时间差，单位毫秒。
    保留符号: 时钟偏差或 rebase 过的历史可能得到负值。
    """
    pairs: List[CommitTimeDifference] = []
    for first, second in zip(commits, commits[1:]):
        delta = first.timestamp - second.timestamp
        difference = (
            delta.days * 86_400_000 + delta.seconds * 1000 + delta.microseconds // 1000
        )
        pairs.append(
            CommitTimeDifference(
                difference=difference, first_commit=first, second_commit=second
            )
        )
    return pairs


def median(values: Sequence[float]) -> float:
    """
    升序排序后取中位数。
    midpoint = ceil(n / 2)；奇数取 [midpoint - 1]，偶数取 [midpoint] 与 [midpoint - 1] 的平均值。
    """
    if not values:
        raise ValueError("median() 需要至少一个值")
    ordered = sorted(values)
    midpoint = math.ceil(len(ordered) / 2)
    if len(ordered) % 2 == 0:
        return (ordered[midpoint] + ordered[midpoint - 1]) / 2
    return ordered[midpoint - 1]


def time_stats(commits: Sequence[Commit]) -> TimeStats:
    ensure_sufficient_history(commits)
    pairs = time_differences(commits)

    max_pair = pairs[0]
    min_pair = pairs[0]
    for pair in pairs[1:]:
        # 严格比较: 相同差值时保留先出现的一对
        if pair.difference > max_pair.difference:
            max_pair = pair
        if pair.difference < min_pair.difference:
            min_pair = pair

    differences = [pair.difference for pair in pairs]
    return TimeStats(
        min_difference=min_pair,
        max_difference=max_pair,
        mean=sum(differences) / len(differences),
        median=median(differences),
        differences=differences,
    )


def compute_statistics(
    commits: Sequence[Commit], threshold: int, verbose: bool = False
) -> CommitStatistics:
    """计算完整的统计结果。提交少于 2 个时抛出 InsufficientHistory。"""
    ensure_sufficient_history(commits)

    authors = rollup_authors(commits)
    total_changes = sum(commit.changes for commit in commits)
    logger.info(
        f"统计 {len(commits)} 个提交，{len(authors)} 位作者，共 {total_changes} 行变更"
    )

    return CommitStatistics(
        total_commits=len(commits),
        total_changes=total_changes,
        authors=authors,
        change_percents=change_percents(authors, total_changes),
        messages=message_stats(commits, threshold),
        times=time_stats(commits),
        extremes=author_extremes(commits) if verbose else {},
    )
