"""
导出器 - 将记号表导出为 CSV/JSON，将 AST 导出为缩进文本
"""

import csv
import io
import json
import os
from typing import List, Dict, Iterable

from modules.toy_compiler.lexical.my_token import Token, TokenType
from modules.toy_compiler.syntax.ast_node import ASTNode
from ...utils.constants import CSV_HEADER, TREE_INDENT
from ...utils.exceptions import ExportError
from ...utils.logging import get_logger

logger = get_logger("exporter")


class TokenExporter:
    """记号与语法树导出器"""

    def __init__(self, unknown_only: bool = False):
        """
        Args:
            unknown_only: 只导出 UNKNOWN 记号（词法错误视图）
        """
        self.unknown_only = unknown_only

    def select(self, tokens: Iterable[Token]) -> List[Token]:
        if self.unknown_only:
            return [t for t in tokens if t.kind == TokenType.UNKNOWN]
        return list(tokens)

    def tokens_to_csv(self, tokens: Iterable[Token]) -> str:
        """表头 Kind,Value,Offset,Row,Column；值中的双引号按 CSV 规则转义"""
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        for t in self.select(tokens):
            writer.writerow([t.kind, t.lexeme, t.offset, t.line, t.column])
        return buffer.getvalue()

    def tokens_to_json(self, tokens: Iterable[Token]) -> str:
        return json.dumps([t.to_dict() for t in self.select(tokens)], ensure_ascii=False, indent=2)

    @staticmethod
    def render_tree(ast: ASTNode, indent: str = TREE_INDENT) -> str:
        return ast.render(indent=indent)

    def export_tokens_to_csv(self, tokens: Iterable[Token], output_path: str) -> int:
        """
        将记号表写入 CSV 文件

        Returns:
            int: 写入的记号数
        """
        selected = self.select(tokens)
        self._write(output_path, self.tokens_to_csv(selected))
        logger.info("exported %d token(s) to %s", len(selected), output_path)
        return len(selected)

    def export_tokens_to_json(self, tokens: Iterable[Token], output_path: str) -> int:
        selected = self.select(tokens)
        self._write(output_path, self.tokens_to_json(selected))
        logger.info("exported %d token(s) to %s", len(selected), output_path)
        return len(selected)

    def export_tree(self, ast: ASTNode, output_path: str) -> None:
        self._write(output_path, self.render_tree(ast) + "\n")
        logger.info("exported AST to %s", output_path)

    @staticmethod
    def _write(output_path: str, content: str) -> None:
        try:
            directory = os.path.dirname(output_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(output_path, 'w', newline='', encoding='utf-8') as f:
                f.write(content)
        except OSError as e:
            raise ExportError(f"Cannot write {output_path}: {e}") from e

    def get_export_formats(self) -> Dict[str, str]:
        """支持的导出格式"""
        return {
            "csv": "comma-separated token table",
            "json": "JSON token list",
            "tree": "indented AST text",
        }
