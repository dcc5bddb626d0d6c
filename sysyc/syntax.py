"""Abstract syntax tree of the source language."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import ClassVar, Sequence, Union

from sysyc.errors import CompileError
from sysyc.imm import ImmType, ImmValue
from sysyc.tokens import Token
from sysyc.type_system import Type, make_basic_type, make_void_type

_INDENT = "    "


class NodeType(Enum):
    IMM = auto()
    BINARY = auto()
    UNARY = auto()
    CALL = auto()
    SYM = auto()
    ASSIGN = auto()
    DEF_VAR = auto()
    BASIC_TYPE = auto()
    POINTER_TYPE = auto()
    ARRAY_TYPE = auto()
    DEF_FUNC = auto()
    BLOCK = auto()
    RETURN = auto()
    BREAK = auto()
    CONTINUE = auto()
    IF = auto()
    WHILE = auto()
    FOR = auto()
    CAST = auto()
    REF = auto()
    DEREF = auto()
    ITEM = auto()
    ARRAY_VAL = auto()


class BinaryType(Enum):
    ADD = auto()
    SUB = auto()
    MUL = auto()
    DIV = auto()
    REM = auto()
    AND = auto()
    OR = auto()
    EQ = auto()
    NE = auto()
    GT = auto()
    GE = auto()
    LT = auto()
    LE = auto()

    @property
    def symbol(self) -> str:
        return _BINARY_SYMBOLS[self]


_BINARY_SYMBOLS = {
    BinaryType.ADD: "+",
    BinaryType.SUB: "-",
    BinaryType.MUL: "*",
    BinaryType.DIV: "/",
    BinaryType.REM: "%",
    BinaryType.AND: "&&",
    BinaryType.OR: "||",
    BinaryType.EQ: "==",
    BinaryType.NE: "!=",
    BinaryType.GT: ">",
    BinaryType.GE: ">=",
    BinaryType.LT: "<",
    BinaryType.LE: "<=",
}


class UnaryType(Enum):
    POS = auto()
    NEG = auto()
    NOT = auto()

    @property
    def symbol(self) -> str:
        return {UnaryType.POS: "", UnaryType.NEG: "-", UnaryType.NOT: "!"}[self]


class DeclType(Enum):
    """Type keywords that may start a declaration."""

    INT = auto()
    FLOAT = auto()
    VOID = auto()


@dataclass(eq=False)
class Node:
    """Base of every syntax tree node."""

    node_type: ClassVar[NodeType | None] = None
    token: Token | None = field(default=None, kw_only=True)

    def render(self, tabs: int = 0) -> str:
        """Source-like text of the node, indented for ``tabs`` levels."""
        return ""

    def throw_error(self, id: int, obj: str, message: str) -> None:
        """Raise a compile error concerning this node."""
        raise CompileError(id, obj, message)


@dataclass(eq=False)
class TypedNodeSym:
    """A name together with the node that spells its type."""

    name: str
    node: Node

    def render(self) -> str:
        return f"{self.node.render()} {self.name}"


@dataclass(eq=False)
class ImmNode(Node):
    node_type: ClassVar[NodeType] = NodeType.IMM
    imm: ImmValue

    def render(self, tabs: int = 0) -> str:
        return str(self.imm)


@dataclass(eq=False)
class SymNode(Node):
    node_type: ClassVar[NodeType] = NodeType.SYM
    sym: str

    def render(self, tabs: int = 0) -> str:
        return self.sym


@dataclass(eq=False)
class BinaryNode(Node):
    node_type: ClassVar[NodeType] = NodeType.BINARY
    op: BinaryType
    lhs: Node
    rhs: Node

    def render(self, tabs: int = 0) -> str:
        return f"({self.lhs.render(tabs)} {self.op.symbol} {self.rhs.render(tabs)})"


@dataclass(eq=False)
class UnaryNode(Node):
    node_type: ClassVar[NodeType] = NodeType.UNARY
    op: UnaryType
    operand: Node

    def render(self, tabs: int = 0) -> str:
        return f"({self.op.symbol}{self.operand.render(tabs)})"


@dataclass(eq=False)
class CallNode(Node):
    node_type: ClassVar[NodeType] = NodeType.CALL
    name: str
    args: list[Node] = field(default_factory=list)

    def render(self, tabs: int = 0) -> str:
        inner = ", ".join(arg.render(tabs) for arg in self.args)
        return f"{self.name}({inner})"


@dataclass(eq=False)
class AssignNode(Node):
    node_type: ClassVar[NodeType] = NodeType.ASSIGN
    lv: Node
    val: Node

    def render(self, tabs: int = 0) -> str:
        return f"{self.lv.render(tabs)} = {self.val.render(tabs)}"


@dataclass(eq=False)
class BasicTypeNode(Node):
    node_type: ClassVar[NodeType] = NodeType.BASIC_TYPE
    ty: Type

    def render(self, tabs: int = 0) -> str:
        return self.ty.type_name()


@dataclass(eq=False)
class PointerTypeNode(Node):
    node_type: ClassVar[NodeType] = NodeType.POINTER_TYPE
    inner: Node

    def render(self, tabs: int = 0) -> str:
        return "(*)"


@dataclass(eq=False)
class ArrayTypeNode(Node):
    node_type: ClassVar[NodeType] = NodeType.ARRAY_TYPE
    inner: Node
    index: Node | None = None

    def render(self, tabs: int = 0) -> str:
        return f"[{self.inner.render()}]"


@dataclass(eq=False)
class VarDefNode(Node):
    node_type: ClassVar[NodeType] = NodeType.DEF_VAR
    var: TypedNodeSym
    val: Node | None = None
    is_const: bool = False

    def render(self, tabs: int = 0) -> str:
        text = ("const " if self.is_const else "") + self.var.render()
        if self.val is not None:
            text += f" = {self.val.render(tabs)}"
        return text


@dataclass(eq=False)
class FuncDefNode(Node):
    node_type: ClassVar[NodeType] = NodeType.DEF_FUNC
    var: TypedNodeSym
    args: list[TypedNodeSym]
    body: Node

    def render(self, tabs: int = 0) -> str:
        params = ", ".join(f"{arg.node.render(tabs)} {arg.name}" for arg in self.args)
        return (
            f"{self.var.node.render(tabs)} {self.var.name}({params}) "
            f"{self.body.render(tabs)}"
        )


@dataclass(eq=False)
class BlockNode(Node):
    node_type: ClassVar[NodeType] = NodeType.BLOCK
    body: list[Node] = field(default_factory=list)

    def render(self, tabs: int = 0) -> str:
        inner = tabs + 1
        parts = ["{\n"]
        for stmt in self.body:
            end = "" if stmt.node_type is NodeType.BLOCK else ";"
            parts.append(f"{_INDENT * inner}{stmt.render(inner)}{end}\n")
        parts.append(f"{_INDENT * tabs}}}")
        return "".join(parts)


@dataclass(eq=False)
class IfNode(Node):
    node_type: ClassVar[NodeType] = NodeType.IF
    cond: Node
    body: Node
    elsed: Node | None = None

    def render(self, tabs: int = 0) -> str:
        text = f"if ({self.cond.render(tabs)}) {self.body.render(tabs)}"
        if self.elsed is not None:
            text += f" else {self.elsed.render(tabs)}"
        return text


@dataclass(eq=False)
class WhileNode(Node):
    node_type: ClassVar[NodeType] = NodeType.WHILE
    cond: Node
    body: Node

    def render(self, tabs: int = 0) -> str:
        return f"while ({self.cond.render(tabs)}) {self.body.render(tabs)}"


@dataclass(eq=False)
class ForNode(Node):
    node_type: ClassVar[NodeType] = NodeType.FOR
    init: Node
    cond: Node
    exec: Node
    body: Node

    def render(self, tabs: int = 0) -> str:
        return (
            f"for ({self.init.render(tabs)}; {self.cond.render(tabs)}; "
            f"{self.exec.render(tabs)}) {self.body.render(tabs)}"
        )


@dataclass(eq=False)
class BreakNode(Node):
    node_type: ClassVar[NodeType] = NodeType.BREAK

    def render(self, tabs: int = 0) -> str:
        return "break"


@dataclass(eq=False)
class ContinueNode(Node):
    node_type: ClassVar[NodeType] = NodeType.CONTINUE

    def render(self, tabs: int = 0) -> str:
        return "continue"


@dataclass(eq=False)
class ReturnNode(Node):
    node_type: ClassVar[NodeType] = NodeType.RETURN
    ret: Node | None = None

    def render(self, tabs: int = 0) -> str:
        if self.ret is None:
            return "return"
        return f"return {self.ret.render(tabs)}"


@dataclass(eq=False)
class ArrayDefNode(Node):
    node_type: ClassVar[NodeType] = NodeType.ARRAY_VAL
    nums: list[Node] = field(default_factory=list)

    def render(self, tabs: int = 0) -> str:
        return "{" + ", ".join(num.render(tabs) for num in self.nums) + "}"


@dataclass(eq=False)
class CastNode(Node):
    node_type: ClassVar[NodeType] = NodeType.CAST
    ty: Node
    val: Node

    def render(self, tabs: int = 0) -> str:
        return f"({self.ty.render(tabs)}){self.val.render(tabs)}"


@dataclass(eq=False)
class RefNode(Node):
    node_type: ClassVar[NodeType] = NodeType.REF
    target: Node

    def render(self, tabs: int = 0) -> str:
        return "&"


@dataclass(eq=False)
class DerefNode(Node):
    node_type: ClassVar[NodeType] = NodeType.DEREF
    val: Node

    def render(self, tabs: int = 0) -> str:
        return "*"


@dataclass(eq=False)
class ItemNode(Node):
    node_type: ClassVar[NodeType] = NodeType.ITEM
    target: Node
    index: list[Node] = field(default_factory=list)

    def render(self, tabs: int = 0) -> str:
        base = self.target.render(tabs)
        if self.target.node_type is not NodeType.SYM:
            base = f"({base})"
        return base + "".join(f"[{i.render(tabs)}]" for i in self.index)


def decl_type_to_type(decl_type: DeclType) -> Type:
    """The type a declaration keyword stands for."""
    if decl_type is DeclType.INT:
        return make_basic_type(ImmType.I32)
    if decl_type is DeclType.FLOAT:
        return make_basic_type(ImmType.F32)
    return make_void_type()


def typed_sym(name: str, ty: Union[DeclType, Type, Node]) -> TypedNodeSym:
    """Pair ``name`` with a type given as a keyword, a type or a type node."""
    if isinstance(ty, Node):
        return TypedNodeSym(name, ty)
    if isinstance(ty, DeclType):
        ty = decl_type_to_type(ty)
    return TypedNodeSym(name, BasicTypeNode(ty))


@dataclass(eq=False)
class VarDeclarator:
    """One declarator of a variable definition: name, array sizes and initialiser."""

    name: str
    indexes: Sequence[Node] = field(default_factory=list)
    init_val: Node | None = None

    def create(self, is_const: bool, decl_type: DeclType) -> VarDefNode:
        """Build the definition node with the declared element type."""
        inner: Node = BasicTypeNode(decl_type_to_type(decl_type))
        for index in reversed(self.indexes):
            inner = ArrayTypeNode(inner, index)
        return VarDefNode(TypedNodeSym(self.name, inner), self.init_val, is_const)