import subprocess
import re
import logging
from datetime import datetime, timezone
from typing import Optional, List, Tuple

from context import RunContext
from config import GlobalConfig
from errors import InvalidCommitData
from models import Commit

logger = logging.getLogger(__name__)

# diffstat 汇总行: " 3 files changed, 12 insertions(+), 4 deletions(-)"
INSERTIONS_PATTERN = re.compile(r"(\d+) insertion")
DELETIONS_PATTERN = re.compile(r"(\d+) deletion")

# git %ci 输出格式: "2024-01-02 03:04:05 +0100"
COMMIT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S %z"

HEADER_LINES = 4


def run_git_command(
    cmd: str, repo_path: str, context: str = "执行Git命令", timeout: int = 120
) -> Optional[str]:
    """
    统一的Git命令执行函数
    - 在 repo_path 下执行 (cwd)
    - 失败、超时或找不到 git 时返回 None，由调用方决定如何处理
    """
    try:
        logger.info(f"在 {repo_path} 中执行命令: {cmd}")
        result = subprocess.run(
            cmd,
            shell=True,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
            cwd=repo_path,
        )
        if result.returncode != 0:
            logger.error(f"{context}失败: {result.stderr.strip()}")
            return None
        logger.info(f"{context}成功，输出 {len(result.stdout.splitlines())} 行")
        return result.stdout
    except subprocess.TimeoutExpired:
        logger.error(f"{context}超时 ({timeout}s)")
        return None
    except OSError as e:
        logger.error(f"{context}出错: {e}")
        return None


def is_git_repository(repo_path: str) -> bool:
    """检查指定路径是否为Git仓库"""
    try:
        result = subprocess.run(
            GlobalConfig.GIT_REPO_CHECK,
            shell=True,
            capture_output=True,
            text=True,
            cwd=repo_path,
        )
        return result.returncode == 0
    except OSError:
        return False


def get_git_log(context: RunContext) -> Optional[str]:
    """获取 (不含合并提交的) Git 提交历史原始文本"""
    global_config = context.global_config
    return run_git_command(
        global_config.GIT_LOG_FORMAT,
        context.repo_path,
        "获取Git提交历史",
        timeout=global_config.GIT_TIMEOUT,
    )


def parse_author(email: str) -> str:
    """邮箱 '@' 之前的部分；没有 '@' 时返回整个字符串"""
    return email.split("@", 1)[0]


def parse_diffstat_changes(line: str) -> Tuple[int, int]:
    """
    从 diffstat 汇总行中提取 (insertions, deletions)。
    任一子句缺失时对应值为 0。
    """
    insertions_match = INSERTIONS_PATTERN.search(line)
    deletions_match = DELETIONS_PATTERN.search(line)
    insertions = int(insertions_match.group(1)) if insertions_match else 0
    deletions = int(deletions_match.group(1)) if deletions_match else 0
    return insertions, deletions


def parse_commit_date(text: str) -> datetime:
    """解析 git 的提交时间 (%ci，也兼容严格 ISO-8601 的 %cI)"""
    value = text.strip()
    try:
        return datetime.strptime(value, COMMIT_DATE_FORMAT)
    except ValueError:
        pass
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise InvalidCommitData(f"无法解析提交时间: {text!r}") from None
    if parsed.tzinfo is None:
        # 没有时区信息时按 UTC 处理
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_commit_block(block: str) -> Commit:
    """
    解析单个提交块:
    hash / author email / subject / commit date，之后全部是 diffstat 相关行，
    只有最后一行参与增删行数统计。
    """
    lines = block.split("\n")
    if len(lines) < HEADER_LINES:
        raise InvalidCommitData(f"提交块格式异常 (少于 {HEADER_LINES} 行): {block!r}")

    commit_hash, email, message, date_text = lines[:HEADER_LINES]
    stat_lines = lines[HEADER_LINES:]
    summary_line = stat_lines[-1] if stat_lines else ""
    insertions, deletions = parse_diffstat_changes(summary_line)

    return Commit(
        hash=commit_hash.strip(),
        author=parse_author(email.strip()),
        message=message,
        timestamp=parse_commit_date(date_text),
        changes=insertions + deletions,
    )


def split_log_blocks(log_output: str, delimiter: str = GlobalConfig.LOG_DELIMITER) -> List[str]:
    """按哨兵分隔符切分原始日志，丢弃第一个 (分隔符之前的) 空片段"""
    normalized = log_output.replace("\r\n", "\n")
    blocks = [block.strip() for block in normalized.split(delimiter)]
    return [block for block in blocks[1:] if block]


def parse_git_log(log_output: str) -> List[Commit]:
    """解析Git日志输出，保持日志原有顺序 (最新的提交在前)"""
    commits: List[Commit] = []
    if not log_output or not log_output.strip():
        logger.warning("Git日志输出为空")
        return commits
    blocks = split_log_blocks(log_output)
    logger.info(f"解析 {len(blocks)} 个提交块")
    for block in blocks:
        commits.append(parse_commit_block(block))
    logger.info(f"成功解析 {len(commits)} 个提交")
    return commits
