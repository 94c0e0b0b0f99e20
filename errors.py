"""
CommitScan 异常体系。
所有致命错误都继承自 CommitScanError，由 cli.run_cli 统一捕获并以非零状态退出。
"""


class CommitScanError(Exception):
    """CommitScan 所有可预期错误的基类"""


class LogUnavailable(CommitScanError):
    """无法获取 Git 日志 (路径不存在、不是仓库、git 执行失败、日志文件不可读)"""


class InsufficientHistory(CommitScanError):
    """提交数量少于 2 个，无法计算时间间隔统计"""

    def __init__(self, commit_count: int):
        self.commit_count = commit_count
        super().__init__(
            f"This repo only has {commit_count} commit{'' if commit_count == 1 else 's'}. "
            "I need at least two commits to provide a meaningful analysis."
        )


class ConflictingOptions(CommitScanError):
    """互斥的显示模式被同时指定"""


class OutputWriteFailure(CommitScanError):
    """输出文件 (CSV / HTML) 无法写入"""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        message = f"Could not save file to '{path}'!"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class InvalidCommitData(CommitScanError):
    """日志中存在结构无法解析的提交块 (例如无效日期)"""


class InvalidConfiguration(CommitScanError):
    """配置层 (config.json / 环境变量) 给出的取值无效"""


class ReportTemplateMissing(CommitScanError):
    """HTML 报告模板无法加载"""

    def __init__(self, template_name: str, templates_dir: str):
        self.template_name = template_name
        self.templates_dir = templates_dir
        super().__init__(
            f"HTML report template '{template_name}' was not found in '{templates_dir}'."
        )
