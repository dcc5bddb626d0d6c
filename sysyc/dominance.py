"""Dominator tree of a control-flow graph."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable


@dataclass(eq=False)
class CfgBlock:
    """A basic block as the dominance analysis sees it: a name and its edges."""

    name: str
    out_blocks: list["CfgBlock"] = field(default_factory=list)
    in_blocks: list["CfgBlock"] = field(default_factory=list)


@dataclass(eq=False)
class DomNode:
    """A node of the dominator tree."""

    block: CfgBlock
    idom: "DomNode | None" = None
    children: list["DomNode"] = field(default_factory=list)


def _mark(entry, level, order_map, preorder=None) -> None:
    """Depth-first walk from ``entry`` stamping ``level`` on every reached block."""
    if order_map[entry] == level:
        return

    def visit(block):
        order_map[block] = level
        if preorder is not None:
            preorder.append(block)

    visit(entry)
    stack = [iter(entry.out_blocks)]
    while stack:
        for succ in stack[-1]:
            if order_map[succ] != level:
                visit(succ)
                stack.append(iter(succ.out_blocks))
                break
        else:
            stack.pop()


class DomTree:
    """Dominator tree of ``blocks``; the first block is the entry."""

    def __init__(self, blocks: Iterable[CfgBlock]) -> None:
        blocks = list(blocks)
        if not blocks:
            raise ValueError("cannot build a dominator tree without blocks")
        self.dom_map: dict[CfgBlock, DomNode] = {b: DomNode(b) for b in blocks}
        if len(self.dom_map) != len(blocks):
            raise ValueError("a block is listed twice")

        entry = blocks[0]
        order_map = dict.fromkeys(blocks, 0)
        preorder: list[CfgBlock] = []
        _mark(entry, 1, order_map, preorder)

        level = 1
        for node in preorder:
            level += 1
            order_map[node] = level
            _mark(entry, level, order_map)
            dominator = self.dom_map[node]
            for block, dom_node in self.dom_map.items():
                stamp = order_map[block]
                if stamp != level and stamp >= 1:
                    dom_node.idom = dominator

        for dom_node in self.dom_map.values():
            if dom_node.idom is not None:
                dom_node.idom.children.append(dom_node)

        self.unreachable_blocks: set[CfgBlock] = set(blocks)
        self.dom_order: list[CfgBlock] = []
        stack = [self.dom_map[entry]]
        while stack:
            cur = stack.pop()
            cur.children.sort(key=lambda d: d.block.name)
            self.dom_order.append(cur.block)
            self.unreachable_blocks.discard(cur.block)
            stack.extend(reversed(cur.children))

        self.dom_set: dict[CfgBlock, set[CfgBlock]] = build_dom_set(self)

    @property
    def order(self) -> list[CfgBlock]:
        """Reachable blocks in dominator-tree preorder."""
        return self.dom_order

    def is_dom(self, a: CfgBlock, b: CfgBlock) -> bool:
        """Whether ``a`` is dominated by ``b``."""
        return b in self.dom_set[a]

    def lca(self, a: CfgBlock, b: CfgBlock) -> CfgBlock:
        """The nearest block dominating both ``a`` and ``b``."""
        if self.is_dom(a, b):
            return b
        if self.is_dom(b, a):
            return a
        if len(self.dom_set[a]) > len(self.dom_set[b]):
            a, b = b, a
        while len(self.dom_set[b]) > len(self.dom_set[a]):
            b = self.dom_map[b].idom.block
        node_a, node_b = self.dom_map[a], self.dom_map[b]
        while node_a is not node_b:
            node_a, node_b = node_a.idom, node_b.idom
        return node_a.block

    def dominance_frontier(self) -> dict[CfgBlock, set[CfgBlock]]:
        """Map each reachable block to the blocks in its dominance frontier."""
        frontier: dict[CfgBlock, set[CfgBlock]] = {}
        for block, dom_node in self.dom_map.items():
            if block not in self.dom_set:
                continue
            stop = dom_node.idom.block if dom_node.idom is not None else None
            for pred in block.in_blocks:
                if pred not in self.dom_set:
                    continue
                runner: CfgBlock | None = pred
                while runner is not None and runner is not stop:
                    frontier.setdefault(runner, set()).add(block)
                    idom = self.dom_map[runner].idom
                    runner = idom.block if idom is not None else None
        return frontier

    def describe(self) -> str:
        """Human-readable listing of every node, its idom and its children."""
        parts = []
        for dom_node in self.dom_map.values():
            parts.append(f"Dominance Tree: Block {dom_node.block.name}\n")
            if dom_node.idom is not None:
                parts.append(f"\tIdom: {dom_node.idom.block.name}\n")
            parts.append("\tOut Block: ")
            parts.extend(f"\t{child.block.name} ;" for child in dom_node.children)
            parts.append("\n\n\n")
        return "".join(parts)


def build_dom_set(tree: DomTree) -> dict[CfgBlock, set[CfgBlock]]:
    """Map each reachable block to the set of blocks that dominate it."""
    result: dict[CfgBlock, set[CfgBlock]] = {}
    stack: list[tuple[CfgBlock, frozenset[CfgBlock]]] = [(tree.order[0], frozenset())]
    while stack:
        block, above = stack.pop()
        doms = above | {block}
        result[block] = set(doms)
        for child in tree.dom_map[block].children:
            stack.append((child.block, doms))
    return result