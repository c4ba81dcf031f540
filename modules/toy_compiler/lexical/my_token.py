# my_token.py
from dataclasses import dataclass


class TokenType:
    """种别码"""
    OPERATOR = "OPERATOR"
    DELIMITER = "DELIMITER"
    KEYWORD = "KEYWORD"
    IDENTIFIER = "IDENTIFIER"
    NUMBER = "NUMBER"
    STRING = "STRING"
    COMMENT = "COMMENT"
    UNKNOWN = "UNKNOWN"
    END = "END"


@dataclass(frozen=True)
class Token:
    kind: str       # 种别码，取值见 TokenType
    lexeme: str     # 词素值（原文）
    offset: int     # 首字符在源码中的下标
    line: int       # 行号
    column: int     # 列号

    def is_(self, kind, lexeme=None):
        """判断种别码（以及可选的词素）是否匹配"""
        return self.kind == kind and (lexeme is None or self.lexeme == lexeme)

    def to_dict(self):
        return {
            "kind": self.kind,
            "lexeme": self.lexeme,
            "offset": self.offset,
            "line": self.line,
            "column": self.column,
        }

    def __repr__(self):
        return f"[{self.kind}, {self.lexeme}, {self.line}, {self.column}]"
