# rules.py
# 文法静态表：词法与语法两个阶段共用，只读
import re

KEYWORDS = frozenset({
    "class", "public", "private", "static",
    "void", "int", "bool",
    "if", "else", "while", "return",
    "true", "false",
})

# 运算符（按类别）
OPERATORS = {
    "ASSIGNMENT": ("=",),
    "LOGICAL": ("||", "&&", "!"),
    "RELATIONAL_2C": ("==", "!=", "<=", ">="),
    "RELATIONAL_1C": (">", "<"),
    "ARITHMETIC": ("+", "-", "*", "/", "%"),
}

TWO_CHAR_OPERATORS = frozenset({"||", "&&", "==", "!=", "<=", ">="})
ONE_CHAR_OPERATORS = frozenset({"=", "+", "-", "*", "/", "%", "<", ">", "!"})

DELIMITERS = frozenset({"(", ")", "{", "}", "[", "]", ";", ",", ".", ":"})

# 字面量校验
REGEX = {
    "NUMBER": re.compile(r"^[0-9]+(\.[0-9]+)?([eE][+-]?[0-9]+)?$"),
    "STRING": re.compile(r'^"([^"]*)"$'),
    "COMMENT": re.compile(r"^//.*?//$"),
}

# 扫描时使用的字符集
LETTERS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")
DIGITS = frozenset("0123456789")
NUMBER_CHARS = DIGITS | frozenset("eE.+-")
WORD_CHARS = LETTERS | DIGITS

COMMENT_MARKER = "//"

# 注释策略：line 为到行尾；delimited 为 //...// 成对出现
COMMENT_POLICY_LINE = "line"
COMMENT_POLICY_DELIMITED = "delimited"
COMMENT_POLICIES = (COMMENT_POLICY_LINE, COMMENT_POLICY_DELIMITED)

# 语法相关
PRIMITIVE_TYPES = frozenset({"int", "bool"})
RETURN_ONLY_TYPES = frozenset({"void"})
MEMBER_MODIFIERS = frozenset({"public", "private", "static"})
BOOLEAN_LITERALS = frozenset({"true", "false"})

# 二元运算符优先级（低 -> 高），全部左结合
BINARY_PRECEDENCE = (
    ("||",),
    ("&&",),
    ("==", "!="),
    ("<", ">", "<=", ">="),
    ("+", "-"),
    ("*", "/", "%"),
)
UNARY_OPERATORS = frozenset({"!", "-"})

# 语句与表达式的最大嵌套层数；一层括号表达式约占十几个调用帧
MAX_NESTING_DEPTH = 40
