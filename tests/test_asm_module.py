from sysyc.asm import AsmBlock, AsmFunc, MachineInstr
from sysyc.asm_module import AsmModule
from sysyc.data_section import Global


def test_empty_module_layout():
    assert AsmModule().print_module() == ".data\n\n.text\n.global main\n\n"


def test_globals_precede_functions():
    glob = Global.word("g", 1)
    func = AsmFunc("main", [AsmBlock("main_entry", [MachineInstr("ret")])])
    text = AsmModule([glob], [func]).print_module()
    assert text == (
        ".data\n" + glob.render() + "\n.text\n.global main\n\n" + func.generate_asm()
    )


def test_fill_zero_routine_appended_when_called():
    call = MachineInstr("call", label="__builtin_fill_zero")
    func = AsmFunc("main", [AsmBlock("e", [call, MachineInstr("ret")])])
    text = AsmModule(funcs=[func]).print_module()
    assert ".globl  __builtin_fill_zero\n__builtin_fill_zero:\n" in text
    assert text.endswith("    tail    memset\n")


def test_fill_zero_routine_absent_otherwise():
    func = AsmFunc("main", [AsmBlock("e", [MachineInstr("ret")])])
    assert "__builtin_fill_zero" not in AsmModule(funcs=[func]).print_module()


def test_cached_filler_applied_only_when_needed():
    seen = []

    def filler(text):
        seen.append(text)
        return text + "extra\n"

    cached = AsmFunc("f_cached", [AsmBlock("e", [MachineInstr("ret")])])
    text = AsmModule(funcs=[cached], cached_filler=filler).print_module()
    assert text.endswith("extra\n")
    assert len(seen) == 1

    plain = AsmFunc("main", [AsmBlock("e", [MachineInstr("ret")])])
    AsmModule(funcs=[plain], cached_filler=filler).print_module()
    assert len(seen) == 1