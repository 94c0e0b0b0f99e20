"""
运行时配置的数据模型
"""
from dataclasses import dataclass
from typing import Optional
from config import GlobalConfig


@dataclass
class RunContext:
    """
    封装一次运行所需的所有配置和状态。
    这是从 CLI 传递到 Orchestrator 的唯一对象。
    """

    # --- 核心路径 ---
    repo_path: str
    project_data_path: str

    # --- 统计与显示参数 ---
    threshold: int
    verbose: bool
    concise: bool

    # --- 输出参数 ---
    csv: bool
    csv_out: str
    html: bool
    no_browser: bool

    # --- 全局配置 ---
    global_config: GlobalConfig

    # --- 数据源 ---
    # 指定后从保存的日志文本读取，而不是执行 git
    log_file: Optional[str] = None
