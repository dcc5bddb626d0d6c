"""Values, users and instructions of the intermediate representation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from typing import ClassVar, Iterable

from sysyc.imm import ImmValue
from sysyc.type_system import (
    FunctionType,
    Type,
    TypedSym,
    make_basic_type,
    make_function_type,
)


class ValType(Enum):
    CONST = auto()
    GLOBAL = auto()
    INSTR = auto()
    BLOCK = auto()
    FUNC = auto()


class InstrType(Enum):
    SYM = auto()
    LABEL = auto()
    BR = auto()
    BR_COND = auto()
    FUNC = auto()
    CALL = auto()
    RET = auto()
    CAST = auto()
    CMP = auto()
    STORE = auto()
    LOAD = auto()
    ALLOCA = auto()
    UNARY = auto()
    BINARY = auto()
    ITEM = auto()
    MINI_GEP = auto()
    PHI = auto()
    UNREACHABLE = auto()


_TERMINATORS = frozenset(
    {InstrType.RET, InstrType.BR, InstrType.BR_COND, InstrType.UNREACHABLE}
)


@dataclass(eq=False)
class Use:
    """An edge from a user to one of the values it uses."""

    user: "User"
    usee: "Val"


class Val(ABC):
    """A typed value that other IR objects may use."""

    def __init__(self, ty: Type, name: str = "") -> None:
        self.ty = ty
        self.name = name
        self._users: list[Use] = []

    @property
    @abstractmethod
    def val_type(self) -> ValType: ...

    @property
    def has_name(self) -> bool:
        return bool(self.name)

    @property
    def users(self) -> tuple[Use, ...]:
        return tuple(self._users)

    def replace_self(self, other: "Val") -> None:
        """Make every use of this value refer to ``other`` instead."""
        if other is self:
            return
        for use in self._users:
            use.usee = other
            other._users.append(use)
        self._users.clear()

    def add_use(self, user: "User") -> Use:
        """Record a bare use of this value by ``user``."""
        use = Use(user, self)
        self._users.append(use)
        return use

    def remove_use(self, use: Use) -> bool:
        """Forget a use; report whether it was recorded."""
        try:
            self._users.remove(use)
        except ValueError:
            return False
        return True

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"


class User(Val):
    """A value that has operands."""

    def __init__(self, ty: Type, name: str = "") -> None:
        super().__init__(ty, name)
        self._operands: list[Use] = []

    @property
    def operands(self) -> tuple[Use, ...]:
        return tuple(self._operands)

    def add_operand(self, val: Val) -> None:
        self._operands.append(val.add_use(self))

    def change_operand(self, index: int, val: Val) -> None:
        old = self._operands[index]
        old.usee.remove_use(old)
        self._operands[index] = val.add_use(self)

    def release_operand(self, index: int) -> None:
        use = self._operands.pop(index)
        use.usee.remove_use(use)

    def release_all_operands(self) -> None:
        for use in self._operands:
            use.usee.remove_use(use)
        self._operands.clear()

    def operand(self, index: int) -> Use:
        return self._operands[index]


class CloneContext:
    """Maps original values to their copies while cloning code."""

    def __init__(self) -> None:
        self._map: dict[Val, Val] = {}

    def lookup(self, val: Val) -> Val:
        return self._map.get(val, val)

    def map(self, original: Val, copy: Val) -> None:
        self._map[original] = copy


class Instr(User):
    """An IR instruction."""

    instr_type: ClassVar[InstrType] = InstrType.SYM

    def __init__(self, ty: Type, name: str = "") -> None:
        super().__init__(ty, name)
        self.block = None

    @property
    def val_type(self) -> ValType:
        return ValType.INSTR

    def is_terminator(self) -> bool:
        return self.instr_type in _TERMINATORS

    def clone(self, ctx: CloneContext) -> "Instr":
        """Copy this instruction and record the copy in ``ctx``."""
        copy = self._clone_internal()
        ctx.map(self, copy)
        return copy

    def fix_clone(self, ctx: CloneContext) -> None:
        """Redirect operands to the copies recorded in ``ctx``."""
        targets = [ctx.lookup(use.usee) for use in self._operands]
        self.release_all_operands()
        for target in targets:
            self.add_operand(target)

    def _clone_internal(self) -> "Instr":
        return Instr(self.ty)


class Const(Val):
    """A constant value, named by its textual form."""

    def __init__(self, value: ImmValue) -> None:
        super().__init__(make_basic_type(value.ty), str(value))
        self.value = value

    @property
    def val_type(self) -> ValType:
        return ValType.CONST


class ConstPool:
    """Interns constants so that equal values share one object."""

    def __init__(self) -> None:
        self.pool: dict[ImmValue, Val] = {}

    def add(self, value: ImmValue) -> Val:
        existing = self.pool.get(value)
        if existing is not None:
            return existing
        const = Const(value)
        self.pool[value] = const
        return const

    def clear(self) -> None:
        self.pool.clear()

    def merge(self, other: "ConstPool") -> None:
        """Take over the constants of ``other``; duplicates are redirected here."""
        for value, val in list(other.pool.items()):
            if value not in self.pool:
                self.pool[value] = val
                del other.pool[value]
        for value, val in other.pool.items():
            val.replace_self(self.pool[value])


class Func(User):
    """A function known by its signature."""

    def __init__(
        self, var: TypedSym, arg_types: Iterable[Type], variant_length: bool = False
    ) -> None:
        super().__init__(make_function_type(var.ty, arg_types), var.sym)
        self.variant_length = variant_length

    @property
    def val_type(self) -> ValType:
        return ValType.FUNC

    @property
    def function_type(self) -> FunctionType:
        return self.ty  # type: ignore[return-value]

    def print_func_declaration(self) -> str:
        args = ", ".join(arg.type_name() for arg in self.function_type.arg_types)
        if self.variant_length:
            args += ", ..."
        return f"declare {self.ty.type_name()} @{self.name}({args})"