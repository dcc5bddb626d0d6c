"""Assembly-level blocks and functions, with liveness analysis and peephole passes."""

from __future__ import annotations

import itertools
from collections import deque
from dataclasses import dataclass, field
from typing import Iterable

JUMP_OPS = frozenset({"j"})
BRANCH_OPS = frozenset(
    {
        "beq", "bne", "blt", "bge", "bltu", "bgeu", "bgt", "ble", "bgtu", "bleu",
        "beqz", "bnez", "blez", "bgez", "bltz", "bgtz",
    }
)


@dataclass(eq=False)
class MachineInstr:
    """One target instruction: mnemonic, defined and used registers, extra operands."""

    op: str
    defs: tuple = ()
    uses: tuple = ()
    args: tuple = ()
    label: str | None = None
    number: int | None = None

    def __post_init__(self) -> None:
        self.defs = tuple(self.defs)
        self.uses = tuple(self.uses)
        self.args = tuple(str(a) for a in self.args)

    @property
    def is_jump(self) -> bool:
        return self.op in JUMP_OPS

    @property
    def is_branch(self) -> bool:
        return self.op in BRANCH_OPS

    @property
    def target(self) -> str | None:
        """The label of the block this instruction transfers control to, if any."""
        if self.is_jump or self.is_branch:
            return self.label
        return None

    def stringify(self) -> str:
        operands = [str(r) for r in (*self.defs, *self.uses)] + list(self.args)
        if self.label:
            operands.append(self.label)
        if not operands:
            return self.op
        return f"{self.op} {', '.join(operands)}"


@dataclass(eq=False)
class AsmBlock:
    """A labelled run of machine instructions."""

    name: str
    body: list[MachineInstr] = field(default_factory=list)
    out_blocks: list["AsmBlock"] = field(default_factory=list, repr=False)
    in_blocks: list["AsmBlock"] = field(default_factory=list, repr=False)
    defs: set = field(default_factory=set, repr=False)
    uses: set = field(default_factory=set, repr=False)

    def render(self) -> str:
        return f"{self.name}:\n" + "".join(f"    {i.stringify()}\n" for i in self.body)


@dataclass(eq=False)
class LiveRange:
    """A stretch of instructions within one block over which a register is live."""

    from_num: int
    to_num: int
    instr_cnt: int
    block: AsmBlock


class AsmFunc:
    """A function as a list of assembly blocks; the first block is the entry."""

    def __init__(self, name: str, blocks: Iterable[AsmBlock] = ()) -> None:
        self.name = name
        self.blocks: list[AsmBlock] = list(blocks)
        self.live_ranges: dict[object, list[LiveRange]] = {}
        self.numbered: dict[int, MachineInstr] = {}

    def generate_asm(self) -> str:
        return f"{self.name}:\n" + "".join(block.render() for block in self.blocks)

    def build_block_graph(self) -> None:
        """Link blocks along the jumps and branches that name them."""
        by_name = {block.name: block for block in self.blocks}
        for block in self.blocks:
            block.out_blocks.clear()
            block.in_blocks.clear()
        for block in self.blocks:
            for instr in block.body:
                target = by_name.get(instr.target) if instr.target else None
                if target is not None:
                    block.out_blocks.append(target)
                    target.in_blocks.append(block)

    def build_block_def_use(self) -> None:
        """Collect each block's defined registers and those used before definition."""
        for block in self.blocks:
            block.defs = set()
            block.uses = set()
            for instr in block.body:
                block.uses.update(r for r in instr.uses if r not in block.defs)
                block.defs.update(instr.defs)

    def number_instructions(self) -> None:
        """Number instructions in depth-first order of the blocks reached from the entry."""
        self.numbered = {}
        for block in self.blocks:
            for instr in block.body:
                instr.number = None
        if not self.blocks:
            return
        counter = itertools.count()
        visited: set[AsmBlock] = set()
        stack = [iter([self.blocks[0]])]
        while stack:
            for block in stack[-1]:
                if block in visited:
                    continue
                visited.add(block)
                for instr in block.body:
                    instr.number = next(counter)
                    self.numbered[instr.number] = instr
                stack.append(iter(block.out_blocks))
                break
            else:
                stack.pop()

    def liveness_analysis(self) -> None:
        """Compute per-register live ranges, sorted by their first instruction."""
        live_in: dict[AsmBlock, set] = {b: set() for b in self.blocks}
        live_out: dict[AsmBlock, set] = {b: set() for b in self.blocks}
        pending = deque(self.blocks)
        while pending:
            block = pending.popleft()
            out = set().union(*(live_in[s] for s in block.out_blocks))
            live_out[block] = out
            new_in = (out - block.defs) | block.uses
            if new_in != live_in[block]:
                live_in[block] = new_in
                pending.extend(block.in_blocks)

        self.live_ranges = {}
        for block in self.blocks:
            if not block.body or block.body[0].number is None:
                continue
            front = block.body[0].number
            back = block.body[-1].number
            buffer = {reg: LiveRange(front, back, 0, block) for reg in live_out[block]}
            for instr in reversed(block.body):
                cur = instr.number
                for reg in instr.defs:
                    hot = buffer.pop(reg, None)
                    if hot is None:
                        self.live_ranges.setdefault(reg, []).append(
                            LiveRange(cur, cur, 1, block)
                        )
                    else:
                        hot.from_num = cur
                        hot.instr_cnt += 1
                        self.live_ranges.setdefault(reg, []).append(hot)
                for reg in instr.uses:
                    if reg in buffer:
                        buffer[reg].instr_cnt += 1
                    else:
                        buffer[reg] = LiveRange(front, cur, 1, block)
            for reg, live in buffer.items():
                self.live_ranges.setdefault(reg, []).append(live)
        for ranges in self.live_ranges.values():
            ranges.sort(key=lambda r: r.from_num)

    def peephole(self) -> bool:
        """Run the peephole passes; report whether anything changed."""
        changed = peephole_mv_self(self.blocks)
        changed = peephole_remove_j(self.blocks) or changed
        return changed


def peephole_mv_self(blocks: Iterable[AsmBlock]) -> bool:
    """Drop register moves whose source and destination coincide."""
    changed = False
    for block in blocks:
        kept = [
            instr
            for instr in block.body
            if not (
                instr.op in ("mv", "fmv.s")
                and len(instr.defs) == 1
                and len(instr.uses) == 1
                and instr.defs[0] == instr.uses[0]
            )
        ]
        if len(kept) != len(block.body):
            block.body[:] = kept
            changed = True
    return changed


def peephole_remove_j(blocks: list[AsmBlock]) -> bool:
    """Drop a trailing jump to the block that immediately follows."""
    changed = False
    for this_block, next_block in zip(blocks, blocks[1:]):
        if this_block.body:
            last = this_block.body[-1]
            if last.is_jump and last.label == next_block.name:
                this_block.body.pop()
                changed = True
    return changed