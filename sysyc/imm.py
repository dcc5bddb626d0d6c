"""Basic immediate types and typed immediate values."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from enum import IntEnum


class ImmType(IntEnum):
    """Kinds of basic (scalar) values."""

    I1 = 0
    U1 = 1
    I8 = 2
    U8 = 3
    I16 = 4
    U16 = 5
    I32 = 6
    U32 = 7
    F32 = 8
    I64 = 9
    U64 = 10
    F64 = 11

    @classmethod
    def from_symbol(cls, symbol: str) -> "ImmType":
        """Look up a type by its lower-case spelling, such as ``"i32"``."""
        try:
            return _SYMBOL_TABLE[symbol]
        except KeyError:
            raise ValueError(f"unknown basic type {symbol!r}") from None

    def ir_name(self) -> str:
        """The name the type takes in the intermediate representation."""
        return _IR_NAMES[self]

    def is_signed(self) -> bool:
        return self in _SIGNED

    def is_float(self) -> bool:
        return self in (ImmType.F32, ImmType.F64)

    def is_integer(self) -> bool:
        return not self.is_float()

    def byte_size(self) -> int:
        return _BYTE_SIZES[self]


_SYMBOLS = ("i1", "u1", "i8", "i8", "i16", "u16", "i32", "u32", "f32", "i64", "u64", "f64")
_IR_NAMES = ("i1", "i1", "i8", "i8", "i16", "i16", "i32", "i32", "float", "i64", "i64", "double")

_SYMBOL_TABLE: dict[str, ImmType] = {}
for _ty, _sym in zip(ImmType, _SYMBOLS):
    _SYMBOL_TABLE.setdefault(_sym, _ty)

_SIGNED = frozenset({ImmType.I1, ImmType.I8, ImmType.I16, ImmType.I32, ImmType.I64})

_BYTE_SIZES = {
    ImmType.I1: 1,
    ImmType.U1: 1,
    ImmType.I8: 1,
    ImmType.U8: 1,
    ImmType.I16: 2,
    ImmType.U16: 2,
    ImmType.I32: 4,
    ImmType.U32: 4,
    ImmType.F32: 4,
    ImmType.I64: 8,
    ImmType.U64: 8,
    ImmType.F64: 8,
}


def _round_f32(value: float) -> float:
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


@dataclass(frozen=True)
class ImmValue:
    """A scalar constant together with its basic type."""

    value: int | float = 0
    ty: ImmType = ImmType.I32

    def __post_init__(self) -> None:
        ty = ImmType(self.ty)
        if ty.is_float():
            value: int | float = float(self.value)
            if ty is ImmType.F32:
                value = _round_f32(value)
        else:
            value = int(self.value)
        object.__setattr__(self, "ty", ty)
        object.__setattr__(self, "value", value)

    @classmethod
    def zero(cls, ty: ImmType) -> "ImmValue":
        """The zero value of ``ty``."""
        ty = ImmType(ty)
        return cls(0.0 if ty.is_float() else 0, ty)

    def __bool__(self) -> bool:
        return self.value != 0

    def __str__(self) -> str:
        if self.ty.is_float():
            bits = struct.unpack("<Q", struct.pack("<d", float(self.value)))[0]
            return f"0x{bits:016X}"
        return str(self.value)

    def __hash__(self) -> int:
        return hash(self.value)