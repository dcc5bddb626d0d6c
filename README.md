# sysyc

`sysyc` is a library of compiler pieces for SysY, a small C-like teaching
language with `int` and `float` scalars, multi-dimensional arrays, functions
and structured control flow. It uses only the standard library and supports
Python 3.10 and later.

## Modules

- **`sysyc.errors`** – `CompileError`, carrying a numeric `id`, the `object`
  it concerns and a `message`; it prints as `[object] error id: message`.
- **`sysyc.imm`** – `ImmType` (signed, unsigned and floating-point scalar
  kinds with `from_symbol`, `ir_name`, `is_signed`, `is_float`, `is_integer`,
  `byte_size`) and `ImmValue`, an immutable typed scalar. `F32` values are
  rounded to single precision; floating values print as the 64-bit pattern of
  the double in hexadecimal.
- **`sysyc.type_system`** – the void type `Type`, `IrType`, `BasicType`,
  `FunctionType`, `StructType`, `PointerType` and `ArrayType`, with
  `type_name()` and `length()` in bytes, the `make_*_type` constructors, the
  `is_*` predicates, and `elem_type` / `pointed_type`, which raise `TypeError`
  on the wrong kind of type.
- **`sysyc.tokens`** – `TokenKind`, the token numbers of the grammar, and the
  `Token` record.
- **`sysyc.syntax`** – syntax tree nodes (`ImmNode`, `SymNode`, `BinaryNode`,
  `UnaryNode`, `CallNode`, `AssignNode`, `VarDefNode`, `FuncDefNode`,
  `BlockNode`, `IfNode`, `WhileNode`, `ForNode`, `ReturnNode`, …) whose
  `render()` gives source-like text; `DeclType`, `decl_type_to_type`,
  `typed_sym`, and `VarDeclarator`, which builds a `VarDefNode` with nested
  array type nodes.
- **`sysyc.ir`** – the value/user/use graph: `Val`, `User`, `Use`, `Instr`
  (terminator test, `clone` and `fix_clone` through a `CloneContext`),
  `Const`, `ConstPool` (interning, `merge` redirecting duplicates with
  `replace_self`) and `Func` with `print_func_declaration()`.
- **`sysyc.dominance`** – `CfgBlock`, `DomTree` (dominator tree of a block
  list whose first block is the entry: `order`, `is_dom`, `lca`,
  `dominance_frontier`, `describe`, `unreachable_blocks`) and `build_dom_set`.
- **`sysyc.loops`** – `NaturalLoop` and `LoopInfo`, natural loops found from
  back edges; `LoopInfo` raises `ValueError` if any block is unreachable.
- **`sysyc.asm`** – `MachineInstr`, `AsmBlock`, `LiveRange` and `AsmFunc`:
  control-flow links from jump and branch labels, per-block def/use sets,
  depth-first instruction numbering, liveness analysis into live ranges per
  register, and the peephole passes `peephole_mv_self` and
  `peephole_remove_j`.
- **`sysyc.data_section`** – `Global`, `GlobalPart` and `ArrayValue`:
  `.word` / `.zero` layout for global scalars and arrays, packing sub-word
  elements into 32-bit words and zero-filling the rest (`generate_array`).
- **`sysyc.asm_module`** – `AsmModule.print_module()`, joining the data and
  text sections and appending a `__builtin_fill_zero` routine when the code
  calls it. An optional `cached_filler` callable rewrites output that mentions
  `_cached`.
- **`sysyc.runtime`** – `Runtime`, the SysY runtime functions (`getint`,
  `getch`, `getfloat`, `getarray`, `getfarray`, `putint`, `putch`,
  `putarray`, `putfloat`, `putfarray`, `putf`, `starttime`, `stoptime`,
  `report`) over any text streams, plus `format_hex_float` (C `%a` style) and
  `parse_hex_float`.

## Examples

Types:

```python
from sysyc.imm import ImmType
from sysyc.type_system import make_basic_type, make_array_type, is_array

i32 = ImmType.from_symbol("i32")
assert i32.byte_size() == 4
assert i32.is_signed() and i32.is_integer()

row = make_array_type(make_basic_type(i32), 4)
matrix = make_array_type(row, 3)
assert is_array(matrix)
assert matrix.length() == 48
```

Syntax trees:

```python
from sysyc.imm import ImmValue
from sysyc.syntax import (
    BinaryNode, BinaryType, DeclType, ImmNode, SymNode, VarDeclarator,
)

expr = BinaryNode(BinaryType.ADD, SymNode("a"), ImmNode(ImmValue(1)))
assert expr.render() == "(a + 1)"

decl = VarDeclarator("arr", [ImmNode(ImmValue(4))]).create(True, DeclType.INT)
assert decl.render() == "const [i32] arr"
```

Dominance and loops:

```python
from sysyc.dominance import CfgBlock, DomTree
from sysyc.loops import LoopInfo

entry, left, right, join = (CfgBlock(n) for n in ("entry", "left", "right", "join"))

def edge(src, dst):
    src.out_blocks.append(dst)
    dst.in_blocks.append(src)

for src, dst in [(entry, left), (entry, right), (left, join), (right, join)]:
    edge(src, dst)

tree = DomTree([entry, left, right, join])
assert tree.lca(left, right) is entry
assert tree.is_dom(join, entry)
assert tree.dominance_frontier()[left] == {join}

edge(join, entry)  # back edge
loops = LoopInfo(DomTree([entry, left, right, join]))
assert loops.loops[entry].loop_blocks == {entry, left, right, join}
```

Assembly output:

```python
from sysyc.asm import AsmBlock, AsmFunc, MachineInstr
from sysyc.data_section import Global

func = AsmFunc("f", [
    AsmBlock("entry", [
        MachineInstr("mv", defs=("a0",), uses=("a0",)),
        MachineInstr("j", label="next"),
    ]),
    AsmBlock("next", [MachineInstr("ret")]),
])
assert func.peephole()
assert func.generate_asm() == "f:\nentry:\nnext:\n    ret\n"

assert Global.word("x", 5).render() == ".globl x\n.align 5\nx:\n    .word 5\n"
```

The runtime over in-memory streams:

```python
import io
from sysyc.runtime import Runtime, format_hex_float

out = io.StringIO()
rt = Runtime(io.StringIO("3 1 2 3"), out, io.StringIO())

values = [0] * 3
n = rt.getarray(values)
rt.putarray(n, values)
assert out.getvalue() == "3: 1 2 3\n"

assert format_hex_float(1.0) == "0x1p+0"
```

## What the package does not do

These are separate pieces, not a working compiler. The package has no scanner
or parser for SysY source text, nothing that turns a syntax tree into IR, no
IR instructions beyond the generic `Instr`, no optimisation passes, no
instruction selection or register allocation, and no command-line program.
The dominance and loop analyses work on `CfgBlock` graphs that the caller
builds, and `MachineInstr` is a plain record of mnemonic, registers and label
rather than a model of a particular instruction set.

## Running the tests

The test suite uses pytest (the `test` extra) and lives in `tests/`.