"""
系统常量与配置

默认值可以通过环境变量覆盖，命令行参数优先级最高。
"""

import os

from modules.toy_compiler.rule.rules import COMMENT_POLICY_LINE, COMMENT_POLICIES

# 注释策略：line（到行尾）或 delimited（//...//）
COMMENT_POLICY = os.environ.get("TOYC_COMMENT_POLICY", COMMENT_POLICY_LINE)
if COMMENT_POLICY not in COMMENT_POLICIES:
    COMMENT_POLICY = COMMENT_POLICY_LINE

# 日志级别
LOG_LEVEL = os.environ.get("TOYC_LOG_LEVEL", "INFO").upper()

# 单次分析允许的最大源码长度（按字符计）
MAX_SOURCE_CHARS = int(os.environ.get("TOYC_MAX_SOURCE_CHARS", 1024 * 1024))

# AST 文本渲染的缩进单位
TREE_INDENT = "  "

# 记号 CSV 导出表头
CSV_HEADER = ("Kind", "Value", "Offset", "Row", "Column")

# REST 服务
DEFAULT_HOST = "localhost"
DEFAULT_PORT = 8080
