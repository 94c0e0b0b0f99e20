"""
命令行界面 (Interface) 层
负责参数定义、选项校验、配置合并 (CLI > 项目 config.json > GlobalConfig)，
最后组装 RunContext 并移交给 Orchestrator。
"""
import argparse
import logging
import sys
import os
from typing import Any, Dict, List, Optional

import config_manager
from config import GlobalConfig, parse_positive_int
from context import RunContext
from errors import CommitScanError, ConflictingOptions, InvalidConfiguration
from orchestrator import ReportOrchestrator

logger = logging.getLogger(__name__)


def positive_int(value: str) -> int:
    """argparse 类型: 正整数"""
    try:
        return parse_positive_int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"无效的阈值: {e}") from None


def setup_parser() -> argparse.ArgumentParser:
    """
    负责所有 argparse 的定义。
    """
    parser = argparse.ArgumentParser(
        prog="CommitScan",
        description="Git 提交历史扫描器: 提交数量、作者贡献、提交信息质量与提交时间间隔统计。",
        usage="%(prog)s [options] [path]",
        formatter_class=argparse.RawTextHelpFormatter,
    )

    parser.add_argument(
        "path",
        nargs="?",
        default=None,
        help="要扫描的 Git 仓库路径 (默认: 当前目录)。\n(与 -p 互斥)",
    )
    parser.add_argument(
        "-p",
        "--project",
        type=str,
        help="使用已配置的项目别名运行扫描。\n(与 path 互斥)",
    )

    # --- 显示模式 (互斥，在 run_cli 中校验) ---
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="显示更详细的扫描结果",
    )
    parser.add_argument(
        "-c",
        "--concise",
        action="store_true",
        default=False,
        help="只显示精简的扫描结果",
    )
    parser.add_argument(
        "-t",
        "--threshold",
        type=positive_int,
        default=None,
        help="提交信息长度阈值 (字符数)。\n(默认: 项目 config.json 或 COMMITSCAN_THRESHOLD，最终为 10)",
    )

    # --- 输出 ---
    parser.add_argument(
        "--csv",
        action="store_true",
        help="将提交历史保存为 .csv 文件 (跳过统计)",
    )
    parser.add_argument(
        "--out",
        type=str,
        default=None,
        help="指定 .csv 文件的输出位置。\n(默认: ./commits.csv)",
    )
    parser.add_argument(
        "--html",
        action="store_true",
        help="额外生成 HTML 报告 (保存在 data/<项目>/ 下)",
    )
    parser.add_argument(
        "--no-browser", action="store_true", help="不自动在浏览器中打开 HTML 报告"
    )

    # --- 数据源 ---
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="从已保存的 git log 文本读取，而不是执行 git。\n"
        "   (需由 git log --no-merges --format=\".%%n.%%H%%n%%ae%%n%%s%%n%%ci\" --stat 生成)",
    )

    parser.add_argument(
        "--configure",
        action="store_true",
        help="运行交互式配置向导 (对 path 指定的仓库)",
    )

    return parser


def check_display_modes(args: argparse.Namespace):
    if args.verbose and args.concise:
        raise ConflictingOptions("I can't be concise and verbose at the same time!")


def resolve_repo_path(args: argparse.Namespace, data_root_path: str) -> str:
    """根据 -p 别名或 path 参数确定仓库的绝对路径"""
    if args.project and args.path:
        raise ConflictingOptions("不能同时使用 -p (别名) 和 path (路径)。请只选其一。")

    if args.project:
        repo_path = config_manager.get_path_from_alias(data_root_path, args.project)
        if not repo_path:
            raise CommitScanError(
                f"别名 '{args.project}' 未在 {config_manager.PROJECTS_JSON_FILE} 中找到。"
                "请先使用 --configure 来配置它。"
            )
        logger.info(f"ℹ️ 使用别名 '{args.project}' (路径: {repo_path})")
        return repo_path

    repo_path = os.path.abspath(os.path.normpath(args.path or "."))
    logger.info(f"ℹ️ 使用直接路径 {repo_path}")
    return repo_path


def resolve_threshold(
    args: argparse.Namespace,
    global_config: GlobalConfig,
    project_config: Dict[str, Any],
) -> int:
    """取第一个给出的阈值 (CLI > config.json > COMMITSCAN_THRESHOLD/默认值) 并校验"""
    layers = [
        ("-t/--threshold", args.threshold),
        (f"{config_manager.CONFIG_JSON_FILE} default_threshold", project_config.get("default_threshold")),
        ("COMMITSCAN_THRESHOLD", global_config.DEFAULT_THRESHOLD),
    ]
    for source, value in layers:
        if value is None:
            continue
        try:
            return parse_positive_int(value)
        except ValueError as e:
            raise InvalidConfiguration(f"{source} 给出的阈值无效: {e}") from None
    return GlobalConfig.DEFAULT_THRESHOLD


def build_context(
    args: argparse.Namespace,
    global_config: GlobalConfig,
    repo_path: str,
    project_data_path: str,
    project_config: Dict[str, Any],
) -> RunContext:
    """合并 CLI 参数、项目配置与全局默认值"""
    threshold = resolve_threshold(args, global_config, project_config)

    verbose, concise = args.verbose, args.concise
    if not verbose and not concise:
        default_mode = project_config.get("default_mode", "normal")
        if default_mode not in config_manager.DISPLAY_MODES:
            raise InvalidConfiguration(
                f"{config_manager.CONFIG_JSON_FILE} 中的 default_mode={default_mode!r} 无效，"
                f"可选值: {', '.join(config_manager.DISPLAY_MODES)}"
            )
        verbose = default_mode == "verbose"
        concise = default_mode == "concise"

    csv_out = (
        args.out or project_config.get("default_csv_out") or global_config.DEFAULT_CSV_PATH
    )

    return RunContext(
        repo_path=repo_path,
        project_data_path=project_data_path,
        threshold=threshold,
        verbose=verbose,
        concise=concise,
        csv=args.csv,
        csv_out=csv_out,
        html=args.html,
        no_browser=args.no_browser,
        global_config=global_config,
        log_file=args.log_file,
    )


def run_cli(argv: Optional[List[str]] = None):
    """
    主入口点。
    """
    parser = setup_parser()
    args = parser.parse_args(argv)

    global_config = GlobalConfig()
    data_root_path = os.path.join(
        global_config.SCRIPT_BASE_PATH, global_config.DATA_ROOT_DIR_NAME
    )

    try:
        # 配置冲突必须在读取任何数据之前发现
        check_display_modes(args)

        if args.configure:
            repo_path = os.path.abspath(args.path or ".")
            logger.info(f"⚙️ 启动交互式配置向导: {repo_path}")
            config_manager.run_interactive_config_wizard(data_root_path, repo_path)
            sys.exit(0)

        repo_path = resolve_repo_path(args, data_root_path)
        project_data_path = config_manager.get_project_data_path(
            data_root_path, repo_path
        )
        project_config = config_manager.load_project_config(project_data_path)

        run_context = build_context(
            args, global_config, repo_path, project_data_path, project_config
        )

        logger.info("=" * 50)
        logger.info("🚀 CommitScan 启动...")
        logger.info(f"   [目标仓库]: {run_context.repo_path}")
        logger.info(f"   [阈值]: {run_context.threshold}")
        logger.info(
            f"   [模式]: {'verbose' if run_context.verbose else 'concise' if run_context.concise else 'normal'}"
        )
        logger.info("=" * 50)

        orchestrator = ReportOrchestrator(run_context)
        orchestrator.run()
    except CommitScanError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)

    logger.info("✅ 扫描完成。")
