"""Natural loops found from the back edges of a dominator tree."""

from __future__ import annotations

from sysyc.dominance import CfgBlock, DomTree, build_dom_set


class NaturalLoop:
    """A loop: its header and every block on a path back to it."""

    def __init__(
        self,
        header: CfgBlock,
        latch: CfgBlock,
        dom_set: dict[CfgBlock, set[CfgBlock]],
    ) -> None:
        self.header = header
        self.loop_blocks: set[CfgBlock] = set()
        self.complete_loop(latch, dom_set)

    def complete_loop(
        self, latch: CfgBlock, dom_set: dict[CfgBlock, set[CfgBlock]]
    ) -> None:
        """Add the blocks that reach ``latch`` inside the header's region."""
        stack = [latch]
        while stack:
            block = stack.pop()
            if block in self.loop_blocks:
                continue
            self.loop_blocks.add(block)
            for pred in block.in_blocks:
                if pred is not self.header and self.header in dom_set[pred]:
                    stack.append(pred)
        self.loop_blocks.add(self.header)

    def describe(self) -> str:
        names = "".join(
            f"{b.name} " for b in sorted(self.loop_blocks, key=lambda b: b.name)
        )
        return f"loop header: {self.header.name}\nloop blks: {names}\n"


class LoopInfo:
    """All natural loops of a program, keyed by header."""

    def __init__(self, tree: DomTree) -> None:
        if tree.unreachable_blocks:
            raise ValueError("loop analysis needs a program without unreachable blocks")
        dom_set = build_dom_set(tree)
        self.loops: dict[CfgBlock, NaturalLoop] = {}
        for block in tree.order:
            doms = dom_set[block]
            for succ in block.out_blocks:
                if succ not in doms:
                    continue
                if succ in self.loops:
                    self.loops[succ].complete_loop(block, dom_set)
                else:
                    self.loops[succ] = NaturalLoop(succ, block, dom_set)

    def describe(self) -> str:
        text = f"{len(self.loops)}: Total NaturalLoop cnts\n"
        return text + "".join(loop.describe() for loop in self.loops.values())