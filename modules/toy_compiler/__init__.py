"""
玩具语言编译器前端：词法分析、语法分析、错误诊断
"""

from .lexical.lexer import Lexer, tokenize
from .lexical.my_token import Token, TokenType
from .syntax.ast_node import ASTNode, NodeType
from .syntax.parser import Parser, ParseError, InternalParserError
from .pipeline import parse_source, analyze_source, ParseResult, AnalysisResult

__all__ = [
    'Lexer', 'tokenize', 'Token', 'TokenType',
    'ASTNode', 'NodeType', 'Parser', 'ParseError', 'InternalParserError',
    'parse_source', 'analyze_source', 'ParseResult', 'AnalysisResult',
]
