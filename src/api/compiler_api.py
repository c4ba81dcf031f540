"""
编译器前端 API：封装词法分析与语法分析，返回标准化结果字典
"""

import time
from typing import Any, Dict, Optional

from modules.toy_compiler.lexical.lexer import Lexer
from modules.toy_compiler.pipeline import (
    analyze_source, parse_source, ParseResult,
    STATUS_SUCCESS, STATUS_LEXICAL_ERROR, STATUS_SYNTAX_ERROR, STATUS_INTERNAL_ERROR,
)
from modules.toy_compiler.lexical.my_token import TokenType
from modules.toy_compiler.diagnostics.error_diagnostic import INTERNAL_ERROR
from ..core.exporter.token_exporter import TokenExporter
from ..utils.constants import COMMENT_POLICY, MAX_SOURCE_CHARS
from ..utils.exceptions import (
    LexicalError, ToySyntaxError, InternalCompilerError, SourceTooLargeError,
)
from ..utils.logging import get_logger

logger = get_logger("api")


class CompilerAPI:
    """对外 API，每次调用独立，不保存任何分析状态"""

    def __init__(self, comment_policy: Optional[str] = None, max_source_chars: int = MAX_SOURCE_CHARS):
        self.comment_policy = comment_policy or COMMENT_POLICY
        self.max_source_chars = max_source_chars
        self.exporter = TokenExporter()

    def _check_source(self, source: str) -> None:
        if not isinstance(source, str):
            raise TypeError("source must be a string")
        if len(source) > self.max_source_chars:
            raise SourceTooLargeError(
                f"Source has {len(source)} characters, limit is {self.max_source_chars}")

    def scan(self, source: str):
        """返回 Token 对象序列（以 END 结尾）"""
        self._check_source(source)
        return Lexer(source, self.comment_policy).tokenize()

    def tokenize(self, source: str) -> Dict[str, Any]:
        """
        词法分析

        Returns:
            { status, tokens, unknown_count, elapsed }
        """
        start = time.perf_counter()
        tokens = self.scan(source)
        unknown_count = sum(1 for t in tokens if t.kind == TokenType.UNKNOWN)
        logger.info("tokenize: %d token(s), %d unknown", len(tokens), unknown_count)
        return {
            "status": STATUS_SUCCESS if unknown_count == 0 else STATUS_LEXICAL_ERROR,
            "tokens": [t.to_dict() for t in tokens],
            "unknown_count": unknown_count,
            "elapsed": time.perf_counter() - start,
        }

    def parse_result(self, source: str) -> ParseResult:
        """只做语法分析，返回 ParseResult（AST 或一条诊断）"""
        self._check_source(source)
        return parse_source(source, self.comment_policy)

    def parse(self, source: str) -> Dict[str, Any]:
        """
        只做语法分析（不检查 UNKNOWN 记号，遇到时按语法错误报告）

        Returns:
            { status, ast, tree, errors, message, elapsed }
        """
        start = time.perf_counter()
        result = self.parse_result(source)
        if result.ok:
            return {
                "status": STATUS_SUCCESS,
                "ast": result.ast.to_dict(),
                "tree": self.exporter.render_tree(result.ast),
                "errors": [],
                "message": "",
                "elapsed": time.perf_counter() - start,
            }
        logger.info("parse failed: %s", result.message)
        return {
            "status": STATUS_INTERNAL_ERROR if result.diagnostic.error_type == INTERNAL_ERROR else STATUS_SYNTAX_ERROR,
            "ast": None,
            "tree": "",
            "errors": [result.diagnostic.to_dict()],
            "message": result.message,
            "elapsed": time.perf_counter() - start,
        }

    def analyze(self, source: str) -> Dict[str, Any]:
        """
        完整分析：有词法错误时列出全部 UNKNOWN 记号并停止；
        否则做语法分析，失败时只报告第一处错误。

        Returns:
            { status, tokens, ast, tree, errors, message, elapsed }
        """
        self._check_source(source)
        start = time.perf_counter()
        result = analyze_source(source, self.comment_policy)
        response = {
            "status": result.status,
            "tokens": [t.to_dict() for t in result.tokens],
            "ast": result.ast.to_dict() if result.ast else None,
            "tree": self.exporter.render_tree(result.ast) if result.ast else "",
            "errors": [d.to_dict() for d in result.diagnostics],
            "message": "\n".join(result.messages),
            "elapsed": time.perf_counter() - start,
        }
        logger.info("analyze: status=%s, %d token(s)", result.status, len(result.tokens))
        return response

    def analyze_or_raise(self, source: str):
        """成功时返回 AST，否则抛出 LexicalError / ToySyntaxError"""
        self._check_source(source)
        result = analyze_source(source, self.comment_policy)
        if result.ok:
            return result.ast
        if result.status == STATUS_LEXICAL_ERROR:
            raise LexicalError(
                f"Lexical analysis failed: {len(result.diagnostics)} unknown token(s)",
                result.diagnostics)
        if result.status == STATUS_INTERNAL_ERROR:
            raise InternalCompilerError(result.messages[0])
        raise ToySyntaxError(result.messages[0], result.diagnostics[0])

    def export_csv(self, source: str, unknown_only: bool = False) -> str:
        return TokenExporter(unknown_only=unknown_only).tokens_to_csv(self.scan(source))
