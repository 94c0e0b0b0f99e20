"""
配置管理器
- 全局项目别名: data/projects.json  ({"别名": "仓库绝对路径"})
- 项目级默认扫描参数: data/<Project>/config.json
- 交互式向导 (--configure)
"""

import os
import json
import logging
from typing import Any, Dict, Optional

from config import parse_positive_int

logger = logging.getLogger(__name__)

PROJECTS_JSON_FILE = "projects.json"
CONFIG_JSON_FILE = "config.json"

DISPLAY_MODES = ("normal", "verbose", "concise")

# 项目 config.json 中的键与缺省值
PROJECT_DEFAULTS: Dict[str, Any] = {
    "default_threshold": 10,
    "default_mode": "normal",
    "default_csv_out": "./commits.csv",
}


def _read_json(path: str, description: str) -> Dict[str, Any]:
    """读取 JSON 文件；文件不存在或内容损坏时返回空字典"""
    if not os.path.exists(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"❌ 加载{description} {path} 失败: {e}")
        return {}
    if not isinstance(data, dict):
        logger.error(f"❌ {description} {path} 不是 JSON 对象，已忽略")
        return {}
    return data


def _write_json(path: str, data: Dict[str, Any], description: str):
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=4, ensure_ascii=False)
    except OSError as e:
        logger.error(f"❌ 保存{description} {path} 失败: {e}")


def load_project_aliases(data_root_path: str) -> Dict[str, str]:
    return _read_json(os.path.join(data_root_path, PROJECTS_JSON_FILE), "别名文件")


def save_project_aliases(data_root_path: str, aliases: Dict[str, str]):
    _write_json(os.path.join(data_root_path, PROJECTS_JSON_FILE), aliases, "别名文件")


def get_path_from_alias(data_root_path: str, alias: str) -> Optional[str]:
    return load_project_aliases(data_root_path).get(alias)


def load_project_config(project_data_path: str) -> Dict[str, Any]:
    return _read_json(os.path.join(project_data_path, CONFIG_JSON_FILE), "项目配置")


def save_project_config(project_data_path: str, config_data: Dict[str, Any]):
    _write_json(os.path.join(project_data_path, CONFIG_JSON_FILE), config_data, "项目配置")


def get_project_data_path(data_root_path: str, repo_path: str) -> str:
    """仓库对应的数据目录: data/<仓库目录名>"""
    project_name = os.path.basename(os.path.abspath(repo_path)) or "current_dir_project"
    return os.path.join(data_root_path, project_name)


def _ask(prompt: str, default: Any) -> str:
    """带默认值的输入，直接回车时返回默认值"""
    answer = input(f"{prompt} [{default}]: ").strip()
    return answer or str(default)


def _ask_threshold(default: int) -> int:
    while True:
        answer = _ask("  提交信息长度阈值 (字符数)", default)
        try:
            return parse_positive_int(answer)
        except ValueError as e:
            print(f"  请输入一个正整数 ({e})。")


def _ask_mode(default: str) -> str:
    mode = _ask(f"  默认显示模式 ({' / '.join(DISPLAY_MODES)})", default).lower()
    if mode not in DISPLAY_MODES:
        logger.warning(f"⚠️ 未知的显示模式 '{mode}'，使用 normal")
        return "normal"
    return mode


def run_interactive_config_wizard(data_root_path: str, repo_path: str):
    """
    交互式配置向导:
    1. 为仓库设置别名 (之后可用 -p <别名> 运行)
    2. 设置项目默认的阈值、显示模式和 CSV 输出路径
    """
    repo_path_abs = os.path.abspath(repo_path)
    if not os.path.isdir(repo_path_abs):
        logger.error(f"❌ 路径 {repo_path_abs} 不是一个有效的目录。")
        return

    project_data_path = get_project_data_path(data_root_path, repo_path_abs)
    logger.info(f"⚙️ 配置仓库 {repo_path_abs} (数据目录: {project_data_path})")

    aliases = load_project_aliases(data_root_path)
    existing_alias = next(
        (name for name, path in aliases.items() if path == repo_path_abs),
        os.path.basename(project_data_path),
    )
    current = {**PROJECT_DEFAULTS, **load_project_config(project_data_path)}

    print("\n--- 1/2 项目别名 ---")
    alias = _ask("  别名 (用于 -p ...)", existing_alias)
    aliases[alias] = repo_path_abs
    save_project_aliases(data_root_path, aliases)

    print("\n--- 2/2 默认扫描参数 (直接回车保留当前值) ---")
    config_data = {
        "default_threshold": _ask_threshold(current["default_threshold"]),
        "default_mode": _ask_mode(current["default_mode"]),
        "default_csv_out": _ask("  默认 CSV 输出路径", current["default_csv_out"]),
    }
    save_project_config(project_data_path, config_data)

    logger.info(f"✅ 别名 '{alias}' 与项目配置已保存")
    print(f"\n完成。之后可以使用 'python CommitScan.py -p {alias}' 运行扫描。")
