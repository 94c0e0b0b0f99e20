"""
报告生成器
- 控制台文本报告
- Jinja2 模板渲染的 HTML 报告
- CSV 导出 (绕过统计，直接序列化提交列表)
"""
import logging
import math
import os
from datetime import datetime
from typing import List

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, select_autoescape

from config import GlobalConfig
from context import RunContext
from errors import OutputWriteFailure, ReportTemplateMissing
from models import Commit, CommitStatistics, CommitTimeDifference

logger = logging.getLogger(__name__)

# 固定单位长度 (一年按 365 天计算)
MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE
MS_PER_DAY = 24 * MS_PER_HOUR
MS_PER_YEAR = 365 * MS_PER_DAY

TIME_UNITS = [
    ("year", MS_PER_YEAR),
    ("day", MS_PER_DAY),
    ("hour", MS_PER_HOUR),
    ("minute", MS_PER_MINUTE),
    ("second", MS_PER_SECOND),
]

DISPLAY_TIME_FORMAT = "%Y-%m-%d %H:%M:%S %z"
CSV_DEFAULT_FILENAME = "commits.csv"


def pluralize(word: str, count: float) -> str:
    return word if count == 1 else f"{word}s"


def format_time_span(milliseconds: float) -> str:
    """
    将毫秒数格式化为 "1 year, 2 days, 3 hours" 这样的文本。
    值为 0 的单位省略；全部为 0 时返回 "under a second"。
    """
    if milliseconds < 0:
        return f"-{format_time_span(-milliseconds)}"

    remaining = milliseconds
    parts = []
    for unit, size in TIME_UNITS:
        amount = math.floor(remaining / size)
        remaining -= amount * size
        if amount:
            parts.append(f"{amount} {pluralize(unit, amount)}")
    return ", ".join(parts) or "under a second"


def format_commit_time(commit: Commit) -> str:
    return commit.timestamp.strftime(DISPLAY_TIME_FORMAT)


def _author_lines(stats: CommitStatistics, verbose: bool) -> str:
    author_info = ""
    for author, author_stats in stats.authors.items():
        count = author_stats.commit_count
        if not verbose:
            percent = stats.change_percents[author]
            author_info += (
                f"\t{author} made {count} {pluralize('commit', count)} "
                f"and {percent}% of changes\n"
            )
            continue

        changes = author_stats.total_changes
        extremes = stats.extremes_for(author)
        author_info += (
            f"\n\t{author}\n\t\t{count} {pluralize('commit', count)} "
            f"and {changes} {pluralize('change', changes)}\n"
        )
        if extremes:
            largest, smallest = extremes.largest, extremes.smallest
            author_info += (
                f"\t\tLargest commit: {largest.short_hash} has {largest.changes} "
                f"{pluralize('change', largest.changes)}\n"
                f"\t\tSmallest commit: {smallest.short_hash} has {smallest.changes} "
                f"{pluralize('change', smallest.changes)}\n"
            )
    return author_info


def _pair_detail(pair: CommitTimeDifference, label: str) -> str:
    first, second = pair.first_commit, pair.second_commit
    return (
        f"{first.short_hash} and {second.short_hash} were the two {label} commits "
        f"and were {format_time_span(pair.difference)} apart.\n"
        f"\t{first.short_hash} ({format_commit_time(first)}): {first.message}\n"
        f"\t{second.short_hash} ({format_commit_time(second)}): {second.message}\n"
    )


def generate_text_report(
    stats: CommitStatistics,
    threshold: int,
    verbose: bool = False,
    concise: bool = False,
) -> str:
    """生成控制台文本报告"""
    total = stats.total_commits
    messages = stats.messages
    times = stats.times

    output = (
        f"{total} {pluralize('commit', total)} scanned.\n"
        f"{stats.author_count} {pluralize('author', stats.author_count)} "
        "have commits in this repo.\n"
    )

    if not concise:
        output += _author_lines(stats, verbose)
        if verbose:
            output += "\n"

    meaningful_ratio = f" ({messages.meaningful}/{total})" if verbose else ""
    unique_ratio = f" ({messages.unique}/{total})" if verbose else ""
    output += (
        f"{messages.meaningful_percent}% of commits{meaningful_ratio} had messages over "
        f"{threshold} {pluralize('character', threshold)} long.\n"
        f"{messages.unique_percent}% of commits{unique_ratio} had unique messages.\n"
    )

    if not concise:
        if verbose:
            output += (
                "\n"
                + _pair_detail(times.min_difference, "closest")
                + "\n"
                + _pair_detail(times.max_difference, "farthest")
                + "\n"
            )
        else:
            output += (
                "The two closest commits were "
                f"{format_time_span(times.min_difference.difference)} apart.\n"
                "The two farthest commits were "
                f"{format_time_span(times.max_difference.difference)} apart.\n"
            )
        output += (
            f"The average time between commits is {format_time_span(times.mean)}.\n"
            f"The median time between commits is {format_time_span(times.median)}."
        )

    return output.strip()


def _get_css_styles(global_config: GlobalConfig) -> str:
    """读取 CSS 文件内容"""
    css_path = os.path.join(global_config.SCRIPT_BASE_PATH, "templates", "styles.css")
    try:
        with open(css_path, "r", encoding="utf-8") as f:
            return f.read()
    except OSError as e:
        logger.error(f"❌ 加载 CSS 模板失败 ({css_path}): {e}")
        return "/* CSS 模板文件未找到 */"


def generate_html_report(
    commits: List[Commit], stats: CommitStatistics, context: RunContext
) -> str:
    """使用 Jinja2 模板引擎生成 HTML 报告。"""
    global_config = context.global_config
    templates_dir = os.path.join(global_config.SCRIPT_BASE_PATH, "templates")
    env = Environment(
        loader=FileSystemLoader(templates_dir),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )
    env.filters["time_span"] = format_time_span
    env.filters["commit_time"] = format_commit_time
    env.filters["pluralize"] = pluralize

    repo_name = os.path.basename(os.path.abspath(context.repo_path))
    template_context = {
        "title": f"Commit Scan - {repo_name}",
        "repo_path": context.repo_path,
        "generation_time": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        "css_content": _get_css_styles(global_config),
        "commits": commits,
        "stats": stats,
        "threshold": context.threshold,
        "verbose": context.verbose,
    }

    template_name = "report.html.j2"
    try:
        template = env.get_template(template_name)
    except TemplateNotFound:
        raise ReportTemplateMissing(template_name, templates_dir) from None
    logger.info(f"🎨 正在渲染 Jinja2 模板: {template_name}")
    return template.render(**template_context)


def save_html_report(html_content: str, context: RunContext) -> str:
    """保存HTML报告到项目数据目录"""
    filename = f"{context.global_config.OUTPUT_FILENAME_PREFIX}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.html"
    full_path = os.path.join(context.project_data_path, filename)

    try:
        os.makedirs(context.project_data_path, exist_ok=True)
        with open(full_path, "w", encoding="utf-8") as f:
            f.write(html_content)
    except OSError as e:
        raise OutputWriteFailure(full_path, str(e)) from e
    logger.info(f"✅ HTML报告已保存: {full_path}")
    return full_path


def normalize_csv_path(out_path: str) -> str:
    """目录路径补上默认文件名，缺少 .csv 后缀时补上后缀"""
    if out_path.endswith(os.sep) or out_path.endswith("/"):
        out_path += CSV_DEFAULT_FILENAME
    if not out_path.endswith(".csv"):
        out_path += ".csv"
    return out_path


def generate_csv(commits: List[Commit]) -> str:
    """
    hash,timestamp,author,changes,message
    字段不做引号转义: 含逗号的提交信息会破坏该行的列结构。
    """
    rows = [",".join(GlobalConfig.CSV_FIELDS)]
    for commit in commits:
        rows.append(
            ",".join(
                [
                    commit.hash,
                    commit.iso_timestamp,
                    commit.author,
                    str(commit.changes),
                    commit.message,
                ]
            )
        )
    return "\n".join(rows)


def save_csv_report(commits: List[Commit], out_path: str) -> str:
    """写入 CSV 文件，返回实际写入的路径"""
    csv_path = normalize_csv_path(out_path)
    try:
        with open(csv_path, "w", encoding="utf-8", newline="") as f:
            f.write(generate_csv(commits))
    except OSError as e:
        raise OutputWriteFailure(csv_path, str(e)) from e
    logger.info(f"✅ CSV 已保存: {csv_path} ({len(commits)} 个提交)")
    return csv_path
