from sysyc.asm import (
    AsmBlock,
    AsmFunc,
    MachineInstr,
    peephole_mv_self,
    peephole_remove_j,
)


def test_stringify_joins_operands():
    instr = MachineInstr("mv", defs=("a0",), uses=("a1",))
    assert instr.stringify() == "mv a0, a1"
    assert MachineInstr("ret").stringify() == "ret"
    assert MachineInstr("j", label="L1").stringify() == "j L1"


def test_block_render_format():
    instr = MachineInstr("li", defs=("a0",), args=("1",))
    block = AsmBlock("entry", [instr])
    assert block.render() == f"entry:\n    {instr.stringify()}\n"


def test_generate_asm_concatenates_blocks():
    b1 = AsmBlock("a", [MachineInstr("ret")])
    b2 = AsmBlock("b", [MachineInstr("ret")])
    func = AsmFunc("main", [b1, b2])
    assert func.generate_asm() == "main:\n" + b1.render() + b2.render()


def _graph():
    b0 = AsmBlock(
        "b0",
        [
            MachineInstr("li", defs=("a0",), args=("1",)),
            MachineInstr("bnez", uses=("a0",), label="b2"),
        ],
    )
    b1 = AsmBlock("b1", [MachineInstr("j", label="b2")])
    b2 = AsmBlock("b2", [MachineInstr("ret")])
    return b0, b1, b2


def test_build_block_graph_follows_jumps_and_branches():
    b0, b1, b2 = _graph()
    AsmFunc("f", [b0, b1, b2]).build_block_graph()
    assert b0.out_blocks == [b2]
    assert b1.out_blocks == [b2]
    assert b2.in_blocks == [b0, b1]
    assert b2.out_blocks == []


def test_def_use_ignores_uses_after_definition():
    block = AsmBlock(
        "b",
        [
            MachineInstr("add", defs=("t0",), uses=("a0", "a1")),
            MachineInstr("mv", defs=("a2",), uses=("t0",)),
        ],
    )
    AsmFunc("f", [block]).build_block_def_use()
    assert block.uses == {"a0", "a1"}
    assert block.defs == {"t0", "a2"}


def test_numbering_is_depth_first_and_skips_unreachable():
    entry = AsmBlock("entry", [MachineInstr("j", label="c")])
    dead = AsmBlock("dead", [MachineInstr("ret")])
    c = AsmBlock("c", [MachineInstr("nop"), MachineInstr("ret")])
    func = AsmFunc("f", [entry, dead, c])
    func.build_block_graph()
    func.number_instructions()
    numbers = [i.number for i in entry.body + c.body]
    assert numbers == sorted(numbers)
    assert len(set(numbers)) == len(numbers)
    assert dead.body[0].number is None
    assert set(func.numbered) == set(numbers)


def test_liveness_ranges_across_blocks():
    li = MachineInstr("li", defs=("a0",), args=("1",))
    j = MachineInstr("j", label="b1")
    mv = MachineInstr("mv", defs=("a1",), uses=("a0",))
    ret = MachineInstr("ret", uses=("a1",))
    b0 = AsmBlock("b0", [li, j])
    b1 = AsmBlock("b1", [mv, ret])
    func = AsmFunc("f", [b0, b1])
    func.build_block_graph()
    func.build_block_def_use()
    func.number_instructions()
    func.liveness_analysis()

    a0 = func.live_ranges["a0"]
    assert [r.block for r in a0] == [b0, b1]
    assert (a0[0].from_num, a0[0].to_num) == (li.number, j.number)
    assert (a0[1].from_num, a0[1].to_num) == (mv.number, mv.number)

    (a1,) = func.live_ranges["a1"]
    assert (a1.from_num, a1.to_num) == (mv.number, ret.number)
    assert a1.instr_cnt == 2


def test_dead_definition_gets_point_range():
    li = MachineInstr("li", defs=("a2",), args=("7",))
    block = AsmBlock("b", [li, MachineInstr("ret")])
    func = AsmFunc("f", [block])
    func.build_block_graph()
    func.build_block_def_use()
    func.number_instructions()
    func.liveness_analysis()
    (live,) = func.live_ranges["a2"]
    assert live.from_num == live.to_num == li.number
    assert live.instr_cnt == 1


def test_peephole_mv_self_removes_only_self_moves():
    keep = MachineInstr("mv", defs=("a0",), uses=("a1",))
    block = AsmBlock(
        "b",
        [
            MachineInstr("mv", defs=("a0",), uses=("a0",)),
            keep,
            MachineInstr("fmv.s", defs=("fa0",), uses=("fa0",)),
        ],
    )
    assert peephole_mv_self([block]) is True
    assert block.body == [keep]
    assert peephole_mv_self([block]) is False


def test_peephole_remove_j_to_next_block():
    far = MachineInstr("j", label="c")
    a = AsmBlock("a", [MachineInstr("j", label="b")])
    b = AsmBlock("b", [far])
    c = AsmBlock("c", [MachineInstr("ret")])
    assert peephole_remove_j([a, b, c]) is False or a.body == []
    assert a.body == []
    assert b.body == []
    assert peephole_remove_j([a, b, c]) is False


def test_peephole_keeps_jump_elsewhere():
    jump = MachineInstr("j", label="c")
    a = AsmBlock("a", [jump])
    b = AsmBlock("b", [MachineInstr("ret")])
    c = AsmBlock("c", [MachineInstr("ret")])
    func = AsmFunc("f", [a, b, c])
    assert func.peephole() is False
    assert a.body == [jump]