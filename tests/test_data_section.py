import pytest

from sysyc.data_section import (
    ArrayValue,
    Global,
    GlobalPart,
    GlobalPartType,
    generate_array,
)
from sysyc.imm import ImmType, ImmValue
from sysyc.type_system import make_array_type, make_basic_type

I32 = make_basic_type(ImmType.I32)


def _covered_bytes(parts, word_bytes=4):
    return sum(p.val if p.ty is GlobalPartType.ZERO else word_bytes for p in parts)


def test_part_render():
    assert GlobalPart(GlobalPartType.WORD, 7).render() == "    .word 7"
    assert GlobalPart(GlobalPartType.ZERO, 9).render() == "    .zero 9"


def test_global_word_render():
    assert Global.word("x", 3).render() == ".globl x\n.align 5\nx:\n    .word 3\n"


def test_full_int_array_is_words_only():
    ty = make_array_type(I32, 3)
    parts = generate_array(ArrayValue(ty, [ImmValue(1), ImmValue(2), ImmValue(-1)]))
    assert parts == [
        GlobalPart(GlobalPartType.WORD, 1),
        GlobalPart(GlobalPartType.WORD, 2),
        GlobalPart(GlobalPartType.WORD, -1),
    ]


def test_partial_array_is_zero_filled():
    ty = make_array_type(I32, 4)
    parts = generate_array(ArrayValue(ty, [ImmValue(5)]))
    assert parts[0] == GlobalPart(GlobalPartType.WORD, 5)
    assert parts[-1].ty is GlobalPartType.ZERO
    assert _covered_bytes(parts) == ty.length()


def test_float_element_uses_bit_pattern():
    ty = make_array_type(make_basic_type(ImmType.F32), 1)
    parts = generate_array(ArrayValue(ty, [ImmValue(1.0, ImmType.F32)]))
    assert parts == [GlobalPart(GlobalPartType.WORD, 1065353216)]


def test_bytes_pack_into_words():
    i8 = make_basic_type(ImmType.I8)
    ty = make_array_type(i8, 4)
    values = [ImmValue(v, ImmType.I8) for v in (1, 2, 3, 4)]
    assert generate_array(ArrayValue(ty, values)) == [
        GlobalPart(GlobalPartType.WORD, 0x01020304)
    ]


def test_nested_array_covers_whole_length():
    inner = make_array_type(I32, 2)
    outer = make_array_type(inner, 3)
    array = ArrayValue(outer, [ArrayValue(inner, [ImmValue(1), ImmValue(2)])])
    parts = generate_array(array)
    assert parts[:2] == [
        GlobalPart(GlobalPartType.WORD, 1),
        GlobalPart(GlobalPartType.WORD, 2),
    ]
    assert _covered_bytes(parts) == outer.length()


def test_from_array_uses_generated_parts():
    ty = make_array_type(I32, 2)
    array = ArrayValue(ty, [ImmValue(4)])
    glob = Global.from_array("arr", array)
    assert glob.component == generate_array(array)
    assert glob.render().startswith(".globl arr\n.align 5\narr:\n")


def test_wide_elements_are_rejected():
    ty = make_array_type(make_basic_type(ImmType.I64), 1)
    with pytest.raises(ValueError):
        generate_array(ArrayValue(ty, [ImmValue(1, ImmType.I64)]))