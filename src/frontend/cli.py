"""
命令行界面：记号表、语法树与诊断的文本显示，以及交互式分析环境
"""

from typing import Any, Dict, List, Optional, TextIO
import sys

from modules.toy_compiler.lexical.my_token import TokenType
from modules.toy_compiler.pipeline import STATUS_SUCCESS, STATUS_LEXICAL_ERROR
from modules.toy_compiler.rule.rules import COMMENT_POLICIES
from ..api.compiler_api import CompilerAPI


def print_table(columns: List[str], data: List[List[Any]], out: Optional[TextIO] = None):
    """打印表格"""
    out = out or sys.stdout
    if not data:
        print("(no tokens)", file=out)
        return

    # 计算每列最大宽度
    col_widths = []
    for i, col in enumerate(columns):
        max_width = len(str(col))
        for row in data:
            max_width = max(max_width, len(str(row[i])))
        col_widths.append(max_width)

    total_width = sum(col_widths) + len(col_widths) * 3 + 1
    print("-" * total_width, file=out)
    header = " | ".join(str(columns[i]).ljust(col_widths[i]) for i in range(len(columns)))
    print(f"| {header} |", file=out)
    print("-" * total_width, file=out)
    for row in data:
        row_str = " | ".join(str(row[i]).ljust(col_widths[i]) for i in range(len(columns)))
        print(f"| {row_str} |", file=out)
    print("-" * total_width, file=out)


def print_tokens(tokens: List[Dict[str, Any]], unknown_only: bool = False, out: Optional[TextIO] = None):
    rows = [
        [t["kind"], t["lexeme"], t["offset"], t["line"], t["column"]]
        for t in tokens
        if not unknown_only or t["kind"] == TokenType.UNKNOWN
    ]
    print_table(["Kind", "Value", "Offset", "Row", "Column"], rows, out)


def print_analysis(result: Dict[str, Any], show_tokens: bool = True, out: Optional[TextIO] = None):
    """显示 analyze() 的结果"""
    out = out or sys.stdout
    status = result["status"]
    if status == STATUS_LEXICAL_ERROR:
        # 词法错误只显示 UNKNOWN 记号
        print_tokens(result["tokens"], unknown_only=True, out=out)
        print(f"LEXICAL ERROR: {len(result['errors'])} unknown token(s)", file=out)
        print(result["message"], file=out)
        return

    if show_tokens:
        print_tokens(result["tokens"], out=out)
    if status == STATUS_SUCCESS:
        print("OK: source passed lexical and syntax analysis", file=out)
        print(result["tree"], file=out)
    else:
        print(f"SYNTAX ERROR: {result['message']}", file=out)


class ToyShell:
    """交互式分析环境：逐行输入源码，空行结束一段程序"""

    prompt = "toyc> "
    continuation = "....> "

    def __init__(self, comment_policy: Optional[str] = None):
        self.api = CompilerAPI(comment_policy)

    def start(self):
        """启动命令行交互"""
        print("=== Toy language front end ===")
        print("Type a program and finish it with an empty line; 'help' for commands.\n")
        while True:
            try:
                line = input(self.prompt).strip()
                if not line:
                    continue
                if line.lower() == "exit":
                    print("bye")
                    break
                if line.lower() == "help":
                    self._show_help()
                    continue
                if line.lower().startswith("policy"):
                    self._set_policy(line)
                    continue

                source = self._read_program(line)
                print_analysis(self.api.analyze(source))
            except (KeyboardInterrupt, EOFError):
                print("\nbye")
                break

    def _read_program(self, first_line: str) -> str:
        lines = [first_line]
        while True:
            line = input(self.continuation)
            if line.strip() == "":
                break
            lines.append(line)
        return "\n".join(lines)

    def _set_policy(self, line: str):
        parts = line.split()
        if len(parts) != 2 or parts[1] not in COMMENT_POLICIES:
            print(f"usage: policy {'|'.join(COMMENT_POLICIES)} (current: {self.api.comment_policy})")
            return
        self.api = CompilerAPI(parts[1])
        print(f"comment policy set to {parts[1]}")

    def _show_help(self):
        """显示帮助信息"""
        help_text = f"""
Commands:
  <program lines> + empty line   analyze the program
  policy {'|'.join(COMMENT_POLICIES)}         select the comment form
  help                           show this help
  exit                           quit
        """
        print(help_text)


def main():
    """主函数"""
    ToyShell().start()


if __name__ == "__main__":
    main()
