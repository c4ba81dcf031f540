"""
前端流水线：词法分析 -> 语法分析

对外暴露结果对象而不是异常：
- parse_source 返回 ParseResult（AST 或一条诊断）
- analyze_source 按 "有 UNKNOWN 记号则不做语法分析" 的规则返回 AnalysisResult
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from modules.toy_compiler.rule.rules import COMMENT_POLICY_LINE
from modules.toy_compiler.lexical.lexer import Lexer, unknown_tokens
from modules.toy_compiler.lexical.my_token import Token
from modules.toy_compiler.syntax.ast_node import ASTNode
from modules.toy_compiler.syntax.parser import Parser, ParseError, InternalParserError
from modules.toy_compiler.diagnostics.error_diagnostic import (
    SmartErrorDiagnostic, ErrorFormatter, DiagnosticResult, INTERNAL_ERROR,
)

logger = logging.getLogger("toyc.pipeline")

STATUS_SUCCESS = "success"
STATUS_LEXICAL_ERROR = "lexical_error"
STATUS_SYNTAX_ERROR = "syntax_error"
STATUS_INTERNAL_ERROR = "internal_error"


@dataclass
class ParseResult:
    ast: Optional[ASTNode] = None
    diagnostic: Optional[DiagnosticResult] = None

    @property
    def ok(self) -> bool:
        return self.ast is not None

    @property
    def message(self) -> str:
        return ErrorFormatter.format_diagnostic(self.diagnostic) if self.diagnostic else ""


@dataclass
class AnalysisResult:
    status: str
    tokens: List[Token]
    ast: Optional[ASTNode] = None
    diagnostics: List[DiagnosticResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == STATUS_SUCCESS

    @property
    def messages(self) -> List[str]:
        return [ErrorFormatter.format_diagnostic(d) for d in self.diagnostics]


def parse_tokens(tokens) -> ParseResult:
    """解析记号序列；第一处错误即终止，不返回部分 AST"""
    try:
        return ParseResult(ast=Parser(tokens).parse())
    except ParseError as e:
        logger.debug("syntax error: %s", e)
        return ParseResult(diagnostic=e.diagnostic)
    except (InternalParserError, RecursionError) as e:
        logger.error("internal parser error: %s", e)
        last = tokens[-1] if tokens else None
        return ParseResult(diagnostic=SmartErrorDiagnostic().diagnose_internal_error(str(e), last))


def parse_source(source: str, comment_policy: str = COMMENT_POLICY_LINE) -> ParseResult:
    return parse_tokens(Lexer(source, comment_policy).tokenize())


def analyze_source(source: str, comment_policy: str = COMMENT_POLICY_LINE) -> AnalysisResult:
    tokens = Lexer(source, comment_policy).tokenize()

    # 1. 词法错误：全部列出，不做语法分析
    unknown = unknown_tokens(tokens)
    if unknown:
        diagnostic_engine = SmartErrorDiagnostic()
        logger.debug("%d unknown token(s), skipping syntax analysis", len(unknown))
        return AnalysisResult(
            status=STATUS_LEXICAL_ERROR,
            tokens=tokens,
            diagnostics=[diagnostic_engine.diagnose_lexical_error(t) for t in unknown],
        )

    # 2. 语法分析：只报告第一处错误
    result = parse_tokens(tokens)
    if result.ok:
        return AnalysisResult(status=STATUS_SUCCESS, tokens=tokens, ast=result.ast)
    status = STATUS_INTERNAL_ERROR if result.diagnostic.error_type == INTERNAL_ERROR else STATUS_SYNTAX_ERROR
    return AnalysisResult(status=status, tokens=tokens, diagnostics=[result.diagnostic])
