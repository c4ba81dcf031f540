import logging
from contextlib import contextmanager

from modules.toy_compiler.lexical.my_token import TokenType
from modules.toy_compiler.rule.rules import (
    PRIMITIVE_TYPES, RETURN_ONLY_TYPES, MEMBER_MODIFIERS, BOOLEAN_LITERALS,
    BINARY_PRECEDENCE, UNARY_OPERATORS, MAX_NESTING_DEPTH,
)
from modules.toy_compiler.syntax.ast_node import ASTNode, NodeType, ASSIGNABLE_TYPES
from modules.toy_compiler.diagnostics.error_diagnostic import SmartErrorDiagnostic, ErrorFormatter

logger = logging.getLogger("toyc.parser")

(OR_OPS, AND_OPS, EQUALITY_OPS, RELATIONAL_OPS, ADDITIVE_OPS, MULTIPLICATIVE_OPS) = BINARY_PRECEDENCE


class ParseError(Exception):
    """语法错误：第一处不满足文法的位置，解析立即终止"""

    def __init__(self, message, token, expected=""):
        self.message = message
        self.token = token
        self.expected = expected
        self.diagnostic = SmartErrorDiagnostic().diagnose_syntax_error(message, token, expected)
        super().__init__(ErrorFormatter.format_diagnostic(self.diagnostic))


class InternalParserError(Exception):
    """解析器内部错误，正确实现下不应出现"""


class Parser:
    """
    递归下降解析器，每条文法规则对应一个方法。

    绝大多数规则只看一个记号做预测；以标识符开头的语句需要回溯：
    先试探 "类型 标识符"，不成立则回到快照位置按表达式语句解析。
    """

    def __init__(self, tokens):
        # 注释不参与文法
        self.tokens = [t for t in tokens if t.kind != TokenType.COMMENT]
        if not self.tokens or self.tokens[-1].kind != TokenType.END:
            raise InternalParserError("Token sequence must end with an END token")
        self.pos = 0
        self.depth = 0

    # ---------------------
    # 基本工具
    # ---------------------
    @property
    def current_token(self):
        return self.tokens[self.pos]

    def look_ahead(self, offset=1):
        index = min(self.pos + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def advance(self):
        token = self.current_token
        if token.kind == TokenType.END:
            raise InternalParserError(
                f"Cursor moved past END at line {token.line}, column {token.column}")
        self.pos += 1
        return token

    def mark(self):
        return self.pos

    def reset(self, position):
        self.pos = position

    def check(self, kind, lexeme=None):
        return self.current_token.is_(kind, lexeme)

    def check_delimiter(self, lexeme):
        return self.check(TokenType.DELIMITER, lexeme)

    def check_operator(self, *lexemes):
        token = self.current_token
        return token.kind == TokenType.OPERATOR and token.lexeme in lexemes

    def check_keyword(self, *lexemes):
        token = self.current_token
        return token.kind == TokenType.KEYWORD and token.lexeme in lexemes

    def error(self, message, expected="", token=None):
        return ParseError(message, token or self.current_token, expected)

    def expect(self, kind, lexeme=None, message=None):
        if self.check(kind, lexeme):
            return self.advance()
        if message is None:
            message = f"Expected '{lexeme}'" if lexeme else f"Expected {kind.lower()}"
        raise self.error(message, expected=lexeme or kind)

    def expect_delimiter(self, lexeme):
        return self.expect(TokenType.DELIMITER, lexeme)

    @contextmanager
    def nested(self):
        """进入一层语句或表达式；超过 MAX_NESTING_DEPTH 时在当前记号处报错"""
        if self.depth >= MAX_NESTING_DEPTH:
            raise self.error(f"Nesting too deep (limit {MAX_NESTING_DEPTH})")
        self.depth += 1
        try:
            yield
        finally:
            self.depth -= 1

    # ---------------------
    # 入口
    # ---------------------
    def parse(self):
        """Program -> ClassDecl* END"""
        classes = []
        while not self.check(TokenType.END):
            classes.append(self.class_decl())
        logger.debug("parsed %d class declaration(s)", len(classes))
        return ASTNode(NodeType.PROGRAM, None, classes)

    # ---------------------
    # 声明
    # ---------------------
    def class_decl(self):
        self.expect(TokenType.KEYWORD, "class", "Expected 'class'")
        name = self.expect(TokenType.IDENTIFIER, message="Expected class name").lexeme
        self.expect_delimiter("{")

        members = []
        while not self.check_delimiter("}"):
            if self.check(TokenType.END):
                raise self.error("Expected '}'", expected="}")
            members.append(self.member())
        self.expect_delimiter("}")
        return ASTNode(NodeType.CLASS_DECL, name, members)

    def member(self):
        """
        Member -> Modifier* Type ArrSuffix* ID ( '(' Params ')' Block | ArrSuffix* ('=' Expr)? ';' )

        类型和名字之后的记号决定成员种类：'(' 为方法，否则为字段。
        """
        modifiers = []
        while self.check_keyword(*MEMBER_MODIFIERS):
            modifiers.append(ASTNode(NodeType.MODIFIER, self.advance().lexeme))

        type_token = self.current_token
        base = self.type_name(allow_void=True)
        dims = self.array_suffixes()
        name = self.expect(TokenType.IDENTIFIER, message="Expected member name").lexeme

        if self.check_delimiter("("):
            return self.method_decl(name, self.type_node(base, dims), modifiers)

        if base in RETURN_ONLY_TYPES:
            raise self.error(f"Field type cannot be '{base}'", token=type_token)
        dims += self.array_suffixes()
        children = [self.type_node(base, dims)] + modifiers
        if self.check_operator("="):
            self.advance()
            children.append(self.expression())
        self.expect_delimiter(";")
        return ASTNode(NodeType.FIELD_DECL, name, children)

    def method_decl(self, name, return_type, modifiers):
        self.expect_delimiter("(")
        params = self.params()
        self.expect_delimiter(")")
        body = self.block()
        return ASTNode(NodeType.METHOD_DECL, name, [return_type] + modifiers + params + [body])

    def params(self):
        if self.check_delimiter(")"):
            return []
        params = [self.param()]
        while self.check_delimiter(","):
            self.advance()
            params.append(self.param())
        return params

    def param(self):
        """Param -> Type ArrSuffix* ID ArrSuffix*"""
        base = self.type_name(allow_void=False, what="Parameter")
        dims = self.array_suffixes()
        name = self.expect(TokenType.IDENTIFIER, message="Expected parameter name").lexeme
        dims += self.array_suffixes()
        return ASTNode(NodeType.PARAM, name, [self.type_node(base, dims)])

    def type_name(self, allow_void, what="Variable"):
        token = self.current_token
        if token.kind == TokenType.KEYWORD:
            if token.lexeme in PRIMITIVE_TYPES:
                return self.advance().lexeme
            if token.lexeme in RETURN_ONLY_TYPES:
                if allow_void:
                    return self.advance().lexeme
                raise self.error(f"{what} type cannot be '{token.lexeme}'")
        if allow_void:
            raise self.error("Expected type 'int', 'bool' or 'void'", expected="type")
        raise self.error("Expected type 'int' or 'bool'", expected="type")

    def array_suffixes(self):
        """ArrSuffix -> '[' ']'，返回维数"""
        dims = 0
        while self.check_delimiter("["):
            self.advance()
            self.expect_delimiter("]")
            dims += 1
        return dims

    @staticmethod
    def type_node(base, dims):
        return ASTNode(NodeType.TYPE, base + "[]" * dims)

    # ---------------------
    # 语句
    # ---------------------
    def block(self):
        self.expect_delimiter("{")
        statements = []
        while not self.check_delimiter("}"):
            if self.check(TokenType.END):
                raise self.error("Expected '}'", expected="}")
            statements.append(self.statement())
        self.expect_delimiter("}")
        return ASTNode(NodeType.BLOCK, None, statements)

    def statement(self):
        with self.nested():
            return self.statement_body()

    def statement_body(self):
        if self.check_delimiter("{"):
            return self.block()
        if self.check_keyword("if"):
            return self.if_statement()
        if self.check_keyword("while"):
            return self.while_statement()
        if self.check_keyword("return"):
            return self.return_statement()
        if self.check_delimiter(";"):
            self.advance()
            return ASTNode(NodeType.EMPTY_STMT)
        if self.check_keyword(*PRIMITIVE_TYPES, *RETURN_ONLY_TYPES):
            base = self.type_name(allow_void=False, what="Local variable")
            return self.local_var_decl(base, self.array_suffixes())
        if self.check(TokenType.IDENTIFIER):
            declaration = self.try_class_typed_declaration()
            if declaration is not None:
                return declaration
        return self.expression_statement()

    def try_class_typed_declaration(self):
        """
        以标识符开头的语句：'Foo x;' 是局部变量声明，'x = 5;' 是表达式语句。

        试探阶段只移动游标、不建节点；类型名及其后的 '[' ']' 之后
        紧跟标识符才确认为声明，否则恢复到快照位置。
        """
        start = self.mark()
        type_token = self.advance()
        dims = 0
        while self.check_delimiter("[") and self.look_ahead().is_(TokenType.DELIMITER, "]"):
            self.advance()
            self.advance()
            dims += 1
        if self.check(TokenType.IDENTIFIER):
            logger.debug("line %d: '%s' starts a local declaration", type_token.line, type_token.lexeme)
            return self.local_var_decl(type_token.lexeme, dims)
        self.reset(start)
        logger.debug("line %d: backtracked, '%s' starts an expression", type_token.line, type_token.lexeme)
        return None

    def local_var_decl(self, base, dims):
        """LocalDecl -> Type ArrSuffix* ID ArrSuffix* ('=' Expr)? ';'"""
        name = self.expect(TokenType.IDENTIFIER, message="Expected variable name").lexeme
        dims += self.array_suffixes()
        children = [self.type_node(base, dims)]
        if self.check_operator("="):
            self.advance()
            children.append(self.expression())
        self.expect_delimiter(";")
        return ASTNode(NodeType.VAR_DECL_LOCAL, name, children)

    def expression_statement(self):
        node = self.expression()
        self.expect_delimiter(";")
        return node

    def if_statement(self):
        self.expect(TokenType.KEYWORD, "if")
        self.expect_delimiter("(")
        condition = self.expression()
        self.expect_delimiter(")")
        children = [condition, self.statement()]
        # else 与最近的未匹配 if 结合
        if self.check_keyword("else"):
            self.advance()
            children.append(self.statement())
        return ASTNode(NodeType.IF, None, children)

    def while_statement(self):
        self.expect(TokenType.KEYWORD, "while")
        self.expect_delimiter("(")
        condition = self.expression()
        self.expect_delimiter(")")
        return ASTNode(NodeType.WHILE, None, [condition, self.statement()])

    def return_statement(self):
        self.expect(TokenType.KEYWORD, "return")
        children = []
        if not self.check_delimiter(";"):
            children.append(self.expression())
        self.expect_delimiter(";")
        return ASTNode(NodeType.RETURN, None, children)

    # ---------------------
    # 表达式（优先级由低到高）
    # ---------------------
    def expression(self):
        """Expr -> LogicOr ('=' Expr)?，赋值右结合"""
        with self.nested():
            target = self.logic_or()
            if self.check_operator("="):
                if target.node_type not in ASSIGNABLE_TYPES:
                    raise self.error("Invalid assignment target")
                self.advance()
                return ASTNode(NodeType.ASSIGN, None, [target, self.expression()])
            return target

    def binary(self, operators, operand):
        left = operand()
        while self.check_operator(*operators):
            op = self.advance().lexeme
            left = ASTNode(NodeType.BINARY, op, [left, operand()])
        return left

    def logic_or(self):
        return self.binary(OR_OPS, self.logic_and)

    def logic_and(self):
        return self.binary(AND_OPS, self.equality)

    def equality(self):
        return self.binary(EQUALITY_OPS, self.relational)

    def relational(self):
        return self.binary(RELATIONAL_OPS, self.additive)

    def additive(self):
        return self.binary(ADDITIVE_OPS, self.multiplicative)

    def multiplicative(self):
        return self.binary(MULTIPLICATIVE_OPS, self.unary)

    def unary(self):
        if self.check_operator(*UNARY_OPERATORS):
            with self.nested():
                op = self.advance().lexeme
                return ASTNode(NodeType.UNARY, op, [self.unary()])
        return self.postfix()

    def postfix(self):
        """调用、下标、成员访问，从左向右链接"""
        node = self.primary()
        while True:
            if self.check_delimiter("("):
                self.advance()
                args = self.arguments()
                self.expect_delimiter(")")
                node = ASTNode(NodeType.CALL, None, [node] + args)
            elif self.check_delimiter("["):
                self.advance()
                index = self.expression()
                self.expect_delimiter("]")
                node = ASTNode(NodeType.ARRAY_ACCESS, None, [node, index])
            elif self.check_delimiter("."):
                self.advance()
                member = self.expect(TokenType.IDENTIFIER, message="Expected member name after '.'").lexeme
                node = ASTNode(NodeType.MEMBER_ACCESS, member, [node])
            else:
                return node

    def arguments(self):
        if self.check_delimiter(")"):
            return []
        args = [self.expression()]
        while self.check_delimiter(","):
            self.advance()
            args.append(self.expression())
        return args

    def primary(self):
        token = self.current_token
        if token.kind == TokenType.NUMBER:
            return ASTNode(NodeType.NUMBER, self.advance().lexeme)
        if token.kind == TokenType.STRING:
            return ASTNode(NodeType.STRING, self.advance().lexeme)
        if token.kind == TokenType.KEYWORD and token.lexeme in BOOLEAN_LITERALS:
            return ASTNode(NodeType.BOOLEAN, self.advance().lexeme)
        if token.kind == TokenType.IDENTIFIER:
            return ASTNode(NodeType.IDENTIFIER, self.advance().lexeme)
        if self.check_delimiter("("):
            self.advance()
            node = self.expression()
            self.expect_delimiter(")")
            return node
        raise self.error("Expected primary expression", expected="expression")


def parse_tokens(tokens):
    return Parser(tokens).parse()
