import pytest

from sysyc.imm import ImmType, ImmValue
from sysyc.ir import (
    CloneContext,
    Const,
    ConstPool,
    Func,
    Instr,
    InstrType,
    ValType,
)
from sysyc.type_system import TypedSym, make_basic_type, make_pointer_type, make_void_type

I32 = make_basic_type(ImmType.I32)
F32 = make_basic_type(ImmType.F32)


class _Branch(Instr):
    instr_type = InstrType.BR


class _Add(Instr):
    instr_type = InstrType.BINARY

    def _clone_internal(self):
        copy = _Add(self.ty)
        for use in self.operands:
            copy.add_operand(use.usee)
        return copy


def test_const_named_by_value():
    c = Const(ImmValue(5))
    assert c.name == str(ImmValue(5))
    assert c.val_type is ValType.CONST
    assert c.ty == I32


def test_add_operand_records_use():
    c = Const(ImmValue(1))
    instr = Instr(I32)
    instr.add_operand(c)
    assert instr.operand(0).usee is c
    assert [u.user for u in c.users] == [instr]


def test_change_operand_moves_use():
    a, b = Const(ImmValue(1)), Const(ImmValue(2))
    instr = Instr(I32)
    instr.add_operand(a)
    instr.change_operand(0, b)
    assert a.users == ()
    assert instr.operand(0).usee is b
    assert b.users[0].user is instr


def test_release_operand():
    a, b = Const(ImmValue(1)), Const(ImmValue(2))
    instr = Instr(I32)
    instr.add_operand(a)
    instr.add_operand(b)
    instr.release_operand(0)
    assert [u.usee for u in instr.operands] == [b]
    assert a.users == ()
    instr.release_all_operands()
    assert instr.operands == ()
    assert b.users == ()


def test_operand_out_of_range():
    with pytest.raises(IndexError):
        Instr(I32).operand(0)


def test_remove_use_reports_presence():
    c = Const(ImmValue(3))
    instr = Instr(I32)
    use = c.add_use(instr)
    assert c.remove_use(use) is True
    assert c.remove_use(use) is False


def test_replace_self_redirects_users():
    old, new = Instr(I32), Instr(I32)
    u1, u2 = Instr(I32), Instr(I32)
    u1.add_operand(old)
    u2.add_operand(old)
    old.replace_self(new)
    assert old.users == ()
    assert u1.operand(0).usee is new
    assert u2.operand(0).usee is new
    assert {u.user for u in new.users} == {u1, u2}


def test_replace_self_with_itself_is_harmless():
    v = Instr(I32)
    user = Instr(I32)
    user.add_operand(v)
    v.replace_self(v)
    assert user.operand(0).usee is v
    assert len(v.users) == 1


def test_terminators():
    assert _Branch(make_void_type()).is_terminator()
    assert not Instr(I32).is_terminator()
    assert Instr(I32).val_type is ValType.INSTR


def test_clone_and_fix_clone():
    x, y = Instr(I32), Instr(I32)
    add = _Add(I32)
    add.add_operand(x)
    add.add_operand(y)
    ctx = CloneContext()
    x_copy = x.clone(ctx)
    add_copy = add.clone(ctx)
    assert ctx.lookup(add) is add_copy
    assert ctx.lookup(y) is y
    add_copy.fix_clone(ctx)
    assert [u.usee for u in add_copy.operands] == [x_copy, y]
    assert [u.usee for u in add.operands] == [x, y]
    assert x_copy.users[0].user is add_copy


def test_const_pool_interns():
    pool = ConstPool()
    a = pool.add(ImmValue(7))
    assert pool.add(ImmValue(7)) is a
    assert pool.add(ImmValue(7, ImmType.I64)) is not a
    pool.clear()
    assert pool.pool == {}


def test_const_pool_merge():
    mine, theirs = ConstPool(), ConstPool()
    one = mine.add(ImmValue(1))
    their_one = theirs.add(ImmValue(1))
    two = theirs.add(ImmValue(2))
    user = Instr(I32)
    user.add_operand(their_one)
    mine.merge(theirs)
    assert mine.pool[ImmValue(2)] is two
    assert mine.pool[ImmValue(1)] is one
    assert user.operand(0).usee is one
    assert list(theirs.pool) == [ImmValue(1)]


def test_func_declaration():
    f = Func(TypedSym("f", I32), [I32, F32])
    assert f.print_func_declaration() == "declare i32 @f(i32, float)"
    assert f.val_type is ValType.FUNC
    assert f.function_type.ret_type == I32


def test_variadic_func_declaration():
    f = Func(TypedSym("putf", make_void_type()), [make_pointer_type(I32)], True)
    assert f.print_func_declaration() == "declare void @putf(i32*, ...)"