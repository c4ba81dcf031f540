# ast_node.py
from dataclasses import dataclass
from enum import Enum
from typing import Any, Tuple


class NodeType(Enum):
    """AST 节点种类（封闭集合，新增文法规则时在此登记）"""
    PROGRAM = "Program"
    CLASS_DECL = "ClassDecl"
    FIELD_DECL = "FieldDecl"
    METHOD_DECL = "MethodDecl"
    MODIFIER = "Modifier"
    PARAM = "Param"
    BLOCK = "Block"
    IF = "If"
    WHILE = "While"
    RETURN = "Return"
    VAR_DECL_LOCAL = "VarDeclLocal"
    ASSIGN = "Assign"
    BINARY = "Binary"
    UNARY = "Unary"
    CALL = "Call"
    MEMBER_ACCESS = "MemberAccess"
    ARRAY_ACCESS = "ArrayAccess"
    IDENTIFIER = "Identifier"
    NUMBER = "Number"
    STRING = "String"
    BOOLEAN = "Boolean"
    TYPE = "Type"
    EMPTY_STMT = "EmptyStmt"


# 可以出现在赋值号左侧的节点
ASSIGNABLE_TYPES = frozenset({NodeType.IDENTIFIER, NodeType.ARRAY_ACCESS, NodeType.MEMBER_ACCESS})


@dataclass(frozen=True, repr=False)
class ASTNode:
    """抽象语法树节点，构造后不可修改"""
    node_type: NodeType
    value: Any = None
    children: Tuple["ASTNode", ...] = ()

    def __post_init__(self):
        if not isinstance(self.node_type, NodeType):
            raise TypeError(f"node_type must be a NodeType, got {self.node_type!r}")
        object.__setattr__(self, "children", tuple(self.children) if self.children else ())

    @property
    def type_name(self):
        return self.node_type.value

    def children_of(self, node_type):
        return [c for c in self.children if c.node_type == node_type]

    def render(self, level=0, indent="  "):
        line = f"{indent * level}{self.type_name}"
        if self.value is not None:
            line += f": {self.value}"
        lines = [line]
        for child in self.children:
            lines.append(child.render(level + 1, indent))
        return "\n".join(lines)

    def __repr__(self):
        if self.value is None:
            return f"{self.type_name}{list(self.children)!r}" if self.children else self.type_name
        if self.children:
            return f"{self.type_name}({self.value}, {list(self.children)!r})"
        return f"{self.type_name}({self.value})"

    def __str__(self):
        return self.render()

    def to_dict(self):
        result = {"type": self.type_name}
        if self.value is not None:
            result["value"] = self.value
        result["children"] = [child.to_dict() for child in self.children]
        return result
