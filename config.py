"""
全局配置
- 常量 (Git 命令格式、分隔符、CSV 字段)
- 通过 .env / 环境变量覆盖的运行参数
"""
import logging
import os
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# --- 脚本基础路径 ---
SCRIPT_BASE_PATH = os.path.abspath(os.path.dirname(__file__))
env_path = os.path.join(SCRIPT_BASE_PATH, ".env")
if os.path.exists(env_path):
    load_dotenv(env_path)
    logger.debug(f"已从脚本目录加载 .env: {env_path}")
else:
    load_dotenv()
    logger.debug("未在脚本目录找到 .env，尝试从 CWD 加载。")


def parse_positive_int(value) -> int:
    """
    正整数参数 (消息长度阈值等) 的统一校验。
    接受 int 或其字符串形式；布尔值、非整数与 <= 0 的值抛出 ValueError。
    """
    if isinstance(value, bool):
        raise ValueError(f"'{value}' 不是整数")
    if isinstance(value, int):
        number = value
    else:
        try:
            number = int(str(value).strip())
        except ValueError:
            raise ValueError(f"'{value}' 不是整数") from None
    if number <= 0:
        raise ValueError(f"必须是正整数: {value}")
    return number


def _env_positive_int(name: str, default: int) -> int:
    raw = os.getenv(name, "")
    if not raw.strip():
        return default
    try:
        return parse_positive_int(raw)
    except ValueError as e:
        logger.warning(f"⚠️ 环境变量 {name}={raw!r} 无效 ({e})，使用默认值 {default}")
        return default


class GlobalConfig:
    """
    CommitScan 的全局应用配置。
    """

    # --- 路径配置 ---
    SCRIPT_BASE_PATH: str = SCRIPT_BASE_PATH
    DATA_ROOT_DIR_NAME: str = "data"

    # --- Git 命令格式 ---
    # 字段顺序 (hash / email / subject / commit date) 是解析器依赖的硬约定
    GIT_LOG_FORMAT = 'git log --no-merges --format=".%n.%H%n%ae%n%s%n%ci" --stat'
    GIT_REPO_CHECK = "git rev-parse --is-inside-work-tree"
    GIT_TIMEOUT: int = _env_positive_int("COMMITSCAN_GIT_TIMEOUT", 120)

    # 每个提交块之前的哨兵分隔符 (对应格式串开头的 ".%n.")
    LOG_DELIMITER: str = ".\n."

    # --- 统计参数 ---
    DEFAULT_THRESHOLD: int = _env_positive_int("COMMITSCAN_THRESHOLD", 10)

    # --- 输出 ---
    DEFAULT_CSV_PATH: str = "./commits.csv"
    CSV_FIELDS: list[str] = ["hash", "timestamp", "author", "changes", "message"]
    OUTPUT_FILENAME_PREFIX = "CommitScan"

    # --- 日志 ---
    LOG_LEVEL: str = os.getenv("COMMITSCAN_LOG_LEVEL", "WARNING").upper()
