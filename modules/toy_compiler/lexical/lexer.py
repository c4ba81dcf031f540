# lexer.py
import logging

from modules.toy_compiler.rule.rules import (
    KEYWORDS, REGEX, TWO_CHAR_OPERATORS, ONE_CHAR_OPERATORS, DELIMITERS,
    LETTERS, DIGITS, NUMBER_CHARS, WORD_CHARS, COMMENT_MARKER,
    COMMENT_POLICY_LINE, COMMENT_POLICY_DELIMITED, COMMENT_POLICIES,
)
from modules.toy_compiler.lexical.my_token import Token, TokenType

logger = logging.getLogger("toyc.lexer")

# UNKNOWN 记号的细分类别，仅供诊断使用
LEXICAL_UNKNOWN = "LexicalUnknown"
UNTERMINATED_STRING = "UnterminatedString"


class Lexer:
    """
    字符级扫描器。

    每次 tokenize() 都从头扫描，返回以唯一 END 记号结尾的记号序列。
    词法问题不抛异常，以 UNKNOWN 记号的形式交给调用方处理。
    """

    def __init__(self, source, comment_policy=COMMENT_POLICY_LINE):
        if comment_policy not in COMMENT_POLICIES:
            raise ValueError(f"Unknown comment policy '{comment_policy}'")
        self.text = source
        self.comment_policy = comment_policy
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens = []

    def peek(self, offset=0):
        if self.pos + offset < len(self.text):
            return self.text[self.pos + offset]
        return None

    def advance(self):
        char = self.peek()
        self.pos += 1
        if char == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return char

    def add_token(self, kind, start_pos, line, column):
        self.tokens.append(Token(kind, self.text[start_pos:self.pos], start_pos, line, column))

    def skip_whitespace(self):
        while self.peek() is not None and self.peek().isspace():
            self.advance()

    def read_while(self, charset):
        while self.peek() is not None and self.peek() in charset:
            self.advance()

    def lex_string(self, start_pos, line, column):
        self.advance()  # 开头的 "
        closed = False
        while self.peek() is not None:
            if self.advance() == '"':
                closed = True
                break
        lexeme = self.text[start_pos:self.pos]
        if closed and REGEX["STRING"].match(lexeme):
            self.add_token(TokenType.STRING, start_pos, line, column)
        else:
            self.add_token(TokenType.UNKNOWN, start_pos, line, column)

    def lex_comment(self, start_pos, line, column):
        self.advance()
        self.advance()  # //
        if self.comment_policy == COMMENT_POLICY_LINE:
            while self.peek() is not None and self.peek() != '\n':
                self.advance()
            self.add_token(TokenType.COMMENT, start_pos, line, column)
            return

        # delimited：必须在同一行内以 // 结束
        closed = False
        while self.peek() is not None and self.peek() != '\n':
            if self.peek() == '/' and self.peek(1) == '/':
                self.advance()
                self.advance()
                closed = True
                break
            self.advance()
        lexeme = self.text[start_pos:self.pos]
        if closed and REGEX["COMMENT"].match(lexeme):
            self.add_token(TokenType.COMMENT, start_pos, line, column)
        else:
            self.add_token(TokenType.UNKNOWN, start_pos, line, column)

    def lex_number(self, start_pos, line, column):
        self.read_while(NUMBER_CHARS)
        lexeme = self.text[start_pos:self.pos]
        kind = TokenType.NUMBER if REGEX["NUMBER"].match(lexeme) else TokenType.UNKNOWN
        self.add_token(kind, start_pos, line, column)

    def lex_identifier_or_keyword(self, start_pos, line, column):
        self.read_while(WORD_CHARS)
        lexeme = self.text[start_pos:self.pos]
        kind = TokenType.KEYWORD if lexeme in KEYWORDS else TokenType.IDENTIFIER
        self.add_token(kind, start_pos, line, column)

    def lex_operator_or_delimiter(self, start_pos, line, column):
        two_chars = self.text[self.pos:self.pos + 2]
        if two_chars in TWO_CHAR_OPERATORS:
            self.advance()
            self.advance()
            self.add_token(TokenType.OPERATOR, start_pos, line, column)
            return

        char = self.advance()
        if char in ONE_CHAR_OPERATORS:
            self.add_token(TokenType.OPERATOR, start_pos, line, column)
        elif char in DELIMITERS:
            self.add_token(TokenType.DELIMITER, start_pos, line, column)
        else:
            self.add_token(TokenType.UNKNOWN, start_pos, line, column)

    def tokenize(self):
        self.pos, self.line, self.column = 0, 1, 1
        self.tokens = []
        while self.peek() is not None:
            self.skip_whitespace()
            if self.peek() is None:
                break
            start = (self.pos, self.line, self.column)
            char = self.peek()
            if char == '"':
                self.lex_string(*start)
            elif self.text.startswith(COMMENT_MARKER, self.pos):
                self.lex_comment(*start)
            elif char in DIGITS:
                self.lex_number(*start)
            elif char in LETTERS:
                self.lex_identifier_or_keyword(*start)
            else:
                self.lex_operator_or_delimiter(*start)

        self.tokens.append(Token(TokenType.END, "", self.pos, self.line, self.column))
        logger.debug("tokenized %d characters into %d tokens", len(self.text), len(self.tokens))
        return self.tokens


def tokenize(source, comment_policy=COMMENT_POLICY_LINE):
    return Lexer(source, comment_policy).tokenize()


def unknown_tokens(tokens):
    """返回所有 UNKNOWN 记号（词法错误）"""
    return [t for t in tokens if t.kind == TokenType.UNKNOWN]


def classify_unknown(token):
    """UNKNOWN 记号的错误类别：未闭合字符串或普通未知词素"""
    if token.lexeme.startswith('"'):
        return UNTERMINATED_STRING
    return LEXICAL_UNKNOWN
