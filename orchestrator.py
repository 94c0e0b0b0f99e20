"""
业务逻辑编排器
原始日志 -> 解析 -> (CSV 导出 | 统计 -> 文本/HTML 报告)
"""
import logging
from typing import Optional

from context import RunContext
from errors import ConflictingOptions
from models import CommitStatistics
import commit_stats
import report_builder
import utils

from data_sources.factory import get_data_source

logger = logging.getLogger(__name__)


class ReportOrchestrator:
    """
    负责执行扫描与报告生成的核心业务逻辑。
    所有致命错误以 CommitScanError 子类抛出，由 CLI 层处理。
    """

    def __init__(self, context: RunContext):
        self.context = context
        self.global_config = context.global_config
        self.data_source = get_data_source(context)
        logger.info("✅ ReportOrchestrator 已初始化")

    def run(self) -> Optional[CommitStatistics]:
        """
        执行核心业务流程。
        CSV 模式下只导出提交列表并返回 None，否则返回统计结果。
        """
        if self.context.verbose and self.context.concise:
            raise ConflictingOptions("I can't be concise and verbose at the same time!")

        # --- 1. 获取并解析 Git 数据 ---
        self.data_source.validate()
        commits = self.data_source.get_commits()

        # --- 2. CSV 导出 (不需要统计，允许 0 个提交) ---
        if self.context.csv:
            csv_path = report_builder.save_csv_report(commits, self.context.csv_out)
            print(f"Commit history saved to '{csv_path}'.")
            return None

        # --- 3. 统计 ---
        stats = commit_stats.compute_statistics(
            commits, self.context.threshold, verbose=self.context.verbose
        )

        # --- 4. 控制台输出 ---
        text_report = report_builder.generate_text_report(
            stats,
            self.context.threshold,
            verbose=self.context.verbose,
            concise=self.context.concise,
        )
        print(text_report)

        # --- 5. HTML 报告 ---
        if self.context.html:
            html_content = report_builder.generate_html_report(
                commits, stats, self.context
            )
            html_path = report_builder.save_html_report(html_content, self.context)
            if not self.context.no_browser:
                utils.open_report_in_browser(html_path)

        return stats
