"""A whole assembly module: data section followed by code."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from sysyc.asm import AsmFunc
from sysyc.data_section import Global

_FILL_ZERO_ROUTINE = (
    "\n.text\n"
    ".globl  __builtin_fill_zero\n"
    "__builtin_fill_zero:\n"
    "    slli    a2,a1,2\n"
    "    li      a1,0\n"
    "    tail    memset\n"
)


@dataclass
class AsmModule:
    """Globals and functions; ``cached_filler`` completes output that mentions cached helpers."""

    globs: list[Global] = field(default_factory=list)
    funcs: list[AsmFunc] = field(default_factory=list)
    cached_filler: Callable[[str], str] | None = None

    def print_module(self) -> str:
        text = ".data\n" + "".join(glob.render() for glob in self.globs)
        text += "\n.text\n.global main\n\n"
        text += "".join(func.generate_asm() for func in self.funcs)
        if "call __builtin_fill_zero" in text:
            text += _FILL_ZERO_ROUTINE
        if self.cached_filler is not None and "_cached" in text:
            text = self.cached_filler(text)
        return text