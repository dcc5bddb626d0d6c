"""Basic and compound types of the language and its IR."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto

from sysyc.imm import ImmType

ARCH_BYTES = 8


class TypeKind(Enum):
    VOID = auto()
    IR = auto()
    BASIC = auto()
    COMPOUND = auto()


class VoidIrType(Enum):
    STORE = auto()
    BR = auto()
    BR_COND = auto()
    RET = auto()
    LABEL = auto()
    UNREACHABLE = auto()


class CompoundKind(Enum):
    POINTER = auto()
    STRUCT = auto()
    ARRAY = auto()


@dataclass(frozen=True)
class Type:
    """The void type and the base of all other types."""

    @property
    def kind(self) -> TypeKind:
        return TypeKind.VOID

    def type_name(self) -> str:
        return "void"

    def length(self) -> int:
        return 0


@dataclass(frozen=True)
class TypedSym:
    """An identifier paired with its type."""

    sym: str
    ty: Type


@dataclass(frozen=True)
class IrType(Type):
    """Type of an IR instruction that yields no value."""

    ir_ty: VoidIrType

    @property
    def kind(self) -> TypeKind:
        return TypeKind.IR

    def type_name(self) -> str:
        return "ir"


@dataclass(frozen=True)
class BasicType(Type):
    ty: ImmType

    @property
    def kind(self) -> TypeKind:
        return TypeKind.BASIC

    def type_name(self) -> str:
        return self.ty.ir_name()

    def length(self) -> int:
        return self.ty.byte_size()


@dataclass(frozen=True)
class FunctionType(Type):
    """A function type; it reports itself as its return type."""

    ret_type: Type
    arg_types: tuple[Type, ...] = ()

    @property
    def kind(self) -> TypeKind:
        return self.ret_type.kind

    def type_name(self) -> str:
        return self.ret_type.type_name()

    def length(self) -> int:
        return self.ret_type.length()


@dataclass(frozen=True)
class CompoundType(Type, ABC):
    @property
    def kind(self) -> TypeKind:
        return TypeKind.COMPOUND

    @property
    @abstractmethod
    def compound_kind(self) -> CompoundKind: ...


@dataclass(frozen=True)
class StructType(CompoundType):
    elems: tuple[TypedSym, ...] = ()

    @property
    def compound_kind(self) -> CompoundKind:
        return CompoundKind.STRUCT

    def length(self) -> int:
        return sum(elem.ty.length() for elem in self.elems)


@dataclass(frozen=True)
class PointerType(CompoundType):
    pointed_type: Type

    @property
    def compound_kind(self) -> CompoundKind:
        return CompoundKind.POINTER

    def type_name(self) -> str:
        return self.pointed_type.type_name() + "*"

    def length(self) -> int:
        return ARCH_BYTES


@dataclass(frozen=True)
class ArrayType(CompoundType):
    elem_type: Type
    elem_count: int

    @property
    def compound_kind(self) -> CompoundKind:
        return CompoundKind.ARRAY

    def type_name(self) -> str:
        return f"[{self.elem_count} x {self.elem_type.type_name()}]"

    def length(self) -> int:
        return self.elem_type.length() * self.elem_count


def make_void_type() -> Type:
    return Type()


def make_ir_type(ir_ty: VoidIrType) -> IrType:
    return IrType(ir_ty)


def make_basic_type(ty: ImmType) -> BasicType:
    return BasicType(ImmType(ty))


def make_function_type(ret_type: Type, arg_types) -> FunctionType:
    return FunctionType(ret_type, tuple(arg_types))


def make_array_type(ty: Type, count: int) -> ArrayType:
    return ArrayType(ty, count)


def make_pointer_type(ty: Type) -> PointerType:
    return PointerType(ty)


def is_pointer(ty: Type) -> bool:
    return isinstance(ty, PointerType)


def is_array(ty: Type) -> bool:
    return isinstance(ty, ArrayType)


def is_struct(ty: Type) -> bool:
    return isinstance(ty, StructType)


def is_basic_type(ty: Type) -> bool:
    return isinstance(ty, BasicType)


def is_ir_type(ty: Type, ir_ty: VoidIrType | None = None) -> bool:
    """Whether ``ty`` is an IR type, optionally of the given kind."""
    if not isinstance(ty, IrType):
        return False
    return ir_ty is None or ty.ir_ty is ir_ty


def is_float(ty: Type) -> bool:
    return isinstance(ty, BasicType) and ty.ty.is_float()


def is_integer(ty: Type) -> bool:
    return isinstance(ty, BasicType) and ty.ty.is_integer()


def is_signed_type(ty: Type) -> bool:
    return isinstance(ty, BasicType) and ty.ty.is_signed()


def elem_type(ty: Type) -> Type:
    """The element type of an array type."""
    if not isinstance(ty, ArrayType):
        raise TypeError(f"{ty.type_name()} is not an array type")
    return ty.elem_type


def pointed_type(ty: Type) -> Type:
    """The type a pointer type points to."""
    if not isinstance(ty, PointerType):
        raise TypeError(f"{ty.type_name()} is not a pointer type")
    return ty.pointed_type