"""Initialised data of global variables, as assembler directives."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Union

from sysyc.imm import ImmType, ImmValue
from sysyc.type_system import ArrayType, elem_type, is_basic_type


class GlobalPartType(Enum):
    ZERO = auto()
    WORD = auto()


@dataclass(frozen=True)
class GlobalPart:
    """One directive: a 32-bit word or a run of zero bytes."""

    ty: GlobalPartType
    val: int

    def render(self) -> str:
        directive = ".zero" if self.ty is GlobalPartType.ZERO else ".word"
        return f"    {directive} {self.val}"


@dataclass(eq=False)
class ArrayValue:
    """A constant array; its values are scalars or nested arrays."""

    ty: ArrayType
    values: list[Union[ImmValue, "ArrayValue"]] = field(default_factory=list)


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value >= 1 << 31 else value


def _raw_bits(value: ImmValue) -> int:
    if value.ty is ImmType.F32:
        return struct.unpack("<I", struct.pack("<f", value.value))[0]
    if value.ty is ImmType.F64:
        return struct.unpack("<q", struct.pack("<d", value.value))[0]
    return int(value.value)


def _c_mod(a: int, m: int) -> int:
    r = abs(a) % m
    return -r if a < 0 else r


def _emit(parts: list[GlobalPart], array: ArrayValue) -> None:
    inner = elem_type(array.ty)
    elem_len = inner.length()
    elem_cnt = len(array.values)
    array_len = array.ty.length()
    if is_basic_type(inner):
        if elem_len > 4 or elem_len == 0:
            raise ValueError(f"cannot lay out elements of type {inner.type_name()}")
        per_word = 4 // elem_len
        shift = 32 // per_word
        load_cnt = 0
        word = 0
        for item in array.values:
            word = _to_int32((word << shift) + _c_mod(_raw_bits(item), 1 << shift))
            load_cnt += 1
            if load_cnt == per_word:
                parts.append(GlobalPart(GlobalPartType.WORD, word))
                load_cnt = 0
                word = 0
        if load_cnt:
            parts.append(GlobalPart(GlobalPartType.WORD, word))
        padded = -(-elem_cnt // per_word) * per_word
        loaded = elem_len * padded
    else:
        for item in array.values:
            if not isinstance(item, ArrayValue):
                raise TypeError("nested array expected")
            _emit(parts, item)
        loaded = elem_len * elem_cnt
    if loaded < array_len:
        parts.append(GlobalPart(GlobalPartType.ZERO, array_len - loaded))


def generate_array(array: ArrayValue) -> list[GlobalPart]:
    """Directives laying out ``array``, zero-filling what its values leave out."""
    parts: list[GlobalPart] = []
    _emit(parts, array)
    return parts


@dataclass
class Global:
    """A global symbol in the data section."""

    name: str
    component: list[GlobalPart] = field(default_factory=list)

    @classmethod
    def word(cls, name: str, value: int) -> "Global":
        return cls(name, [GlobalPart(GlobalPartType.WORD, value)])

    @classmethod
    def from_array(cls, name: str, array: ArrayValue) -> "Global":
        return cls(name, generate_array(array))

    def render(self) -> str:
        head = f".globl {self.name}\n.align 5\n{self.name}:\n"
        return head + "".join(part.render() + "\n" for part in self.component)