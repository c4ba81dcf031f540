"""
错误诊断与纠错提示

功能：
1. 将 UNKNOWN 记号与语法错误统一转换为诊断结果
2. 拼写相近的关键字提示（difflib 模糊匹配）
3. 常见错误（缺少分号、未闭合字符串、非法数字）的修复建议
4. 统一的单行错误格式

诊断器与格式化器都是无状态的，不做任何错误恢复。
"""

import difflib
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from modules.toy_compiler.lexical.lexer import classify_unknown, LEXICAL_UNKNOWN, UNTERMINATED_STRING
from modules.toy_compiler.lexical.my_token import Token, TokenType
from modules.toy_compiler.rule.rules import KEYWORDS, DIGITS, COMMENT_MARKER


class ErrorSeverity(Enum):
    """错误严重程度"""
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """错误类别"""
    LEXICAL = "lexical"
    SYNTAX = "syntax"
    INTERNAL = "internal"


# 错误种类（词法类别由 classify_unknown 给出）
SYNTAX_ERROR = "SyntaxError"
INTERNAL_ERROR = "InternalError"


@dataclass
class ErrorSuggestion:
    """错误建议"""
    suggestion: str
    confidence: float  # 0-1
    fix_type: str
    example: Optional[str] = None


@dataclass
class DiagnosticResult:
    """诊断结果"""
    error_type: str
    message: str
    line: int
    column: int
    lexeme: str
    kind: str
    severity: ErrorSeverity
    category: ErrorCategory
    suggestions: List[ErrorSuggestion] = field(default_factory=list)
    context: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_type": self.error_type,
            "message": self.message,
            "line": self.line,
            "column": self.column,
            "lexeme": self.lexeme,
            "kind": self.kind,
            "severity": self.severity.value,
            "category": self.category.value,
            "suggestions": [s.suggestion for s in self.suggestions],
            "formatted": ErrorFormatter.format_diagnostic(self),
        }


class SmartErrorDiagnostic:
    """错误诊断器"""

    def __init__(self):
        self.keywords = sorted(KEYWORDS)

    def diagnose_lexical_error(self, token: Token) -> DiagnosticResult:
        """诊断一个 UNKNOWN 记号"""
        lexeme = token.lexeme
        error_type = classify_unknown(token)
        suggestions = []

        if error_type == UNTERMINATED_STRING:
            message = "Unterminated string literal"
            suggestions.append(ErrorSuggestion(
                suggestion="字符串缺少结尾的双引号",
                confidence=0.9,
                fix_type="string_termination",
                example='正确格式: "text"'
            ))
        elif lexeme.startswith(COMMENT_MARKER):
            message = "Unterminated comment"
            suggestions.append(ErrorSuggestion(
                suggestion="注释需要在同一行内以 // 结束",
                confidence=0.8,
                fix_type="comment_termination",
                example="// comment //"
            ))
        elif lexeme[:1] in DIGITS:
            message = "Malformed number literal"
            suggestions.append(ErrorSuggestion(
                suggestion="数字格式为 整数部分[.小数部分][e[+-]指数]",
                confidence=0.9,
                fix_type="number_format",
                example="正确格式: 123, 3.14, 2e10, 1.5e-3"
            ))
            if any(op in lexeme[1:] for op in "+-") and "e" not in lexeme.lower():
                suggestions.append(ErrorSuggestion(
                    suggestion="数字后紧跟的 + 或 - 会被视为数字的一部分，请在运算符两侧加空格",
                    confidence=0.7,
                    fix_type="operator_spacing",
                    example="1 + 2"
                ))
        else:
            message = "Unknown character"
            suggestions.append(ErrorSuggestion(
                suggestion=f"'{lexeme}' 不是合法的符号",
                confidence=0.9,
                fix_type="invalid_symbol",
                example="标识符只能由字母和数字组成，且以字母开头"
            ))

        return DiagnosticResult(
            error_type=error_type,
            message=message,
            line=token.line,
            column=token.column,
            lexeme=lexeme,
            kind=token.kind,
            severity=ErrorSeverity.ERROR,
            category=ErrorCategory.LEXICAL,
            suggestions=suggestions,
            context={"offset": token.offset},
        )

    def diagnose_syntax_error(self, message: str, token: Token, expected: str = "") -> DiagnosticResult:
        """诊断语法错误"""
        suggestions = []

        if token.kind == TokenType.END:
            suggestions.append(ErrorSuggestion(
                suggestion="程序不完整，可能缺少 '}'、')' 或 ';'",
                confidence=0.9,
                fix_type="incomplete_program",
            ))
        elif token.kind == TokenType.IDENTIFIER:
            suggestions.extend(self._suggest_keyword_fixes(token.lexeme))

        if expected == ";":
            suggestions.append(ErrorSuggestion(
                suggestion="语句结尾缺少分号 (;)",
                confidence=0.95,
                fix_type="missing_semicolon",
                example="在语句末尾添加 ;"
            ))

        return DiagnosticResult(
            error_type=SYNTAX_ERROR,
            message=message,
            line=token.line,
            column=token.column,
            lexeme=token.lexeme,
            kind=token.kind,
            severity=ErrorSeverity.ERROR,
            category=ErrorCategory.SYNTAX,
            suggestions=suggestions,
            context={"offset": token.offset, "expected": expected},
        )

    def diagnose_internal_error(self, message: str, token: Optional[Token] = None) -> DiagnosticResult:
        return DiagnosticResult(
            error_type=INTERNAL_ERROR,
            message=message,
            line=token.line if token else 0,
            column=token.column if token else 0,
            lexeme=token.lexeme if token else "",
            kind=token.kind if token else TokenType.END,
            severity=ErrorSeverity.CRITICAL,
            category=ErrorCategory.INTERNAL,
        )

    def _suggest_keyword_fixes(self, word: str) -> List[ErrorSuggestion]:
        """拼写接近关键字的标识符"""
        return [
            ErrorSuggestion(
                suggestion=f"您是否想输入 '{match}'?",
                confidence=0.7,
                fix_type="fuzzy_match",
                example=f"建议: {match}"
            )
            for match in difflib.get_close_matches(word, self.keywords, n=2, cutoff=0.75)
        ]


class ErrorFormatter:
    """错误格式化器"""

    @staticmethod
    def format_diagnostic(diagnostic: DiagnosticResult) -> str:
        """[Row <line>, Col <column>]: <message> (found '<lexeme>', kind <kind>)"""
        return (f"[Row {diagnostic.line}, Col {diagnostic.column}]: {diagnostic.message} "
                f"(found '{diagnostic.lexeme}', kind {diagnostic.kind})")

    @staticmethod
    def format_with_suggestions(diagnostic: DiagnosticResult) -> str:
        result = ErrorFormatter.format_diagnostic(diagnostic)
        for s in diagnostic.suggestions:
            result += f"\n  hint: {s.suggestion}"
            if s.example:
                result += f" ({s.example})"
        return result

    @staticmethod
    def format_suggestion_summary(diagnostics: List[DiagnosticResult]) -> str:
        """格式化建议摘要"""
        if not diagnostics:
            return "No errors found"

        by_category = {}
        for diag in diagnostics:
            category = diag.category.value
            by_category[category] = by_category.get(category, 0) + 1

        summary = f"{len(diagnostics)} problem(s) found:\n"
        for category, count in by_category.items():
            summary += f"  - {category}: {count}\n"
        return summary
