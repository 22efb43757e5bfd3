import io

import pytest

from minicc.iloc import ArmInst, ILoc
from minicc.platform import REG_NAMES, SP_REG_NO, TMP_REG_NO


def rendered(iloc):
    return [inst.render() for inst in iloc]


def _imm(text):
    return int(text.lstrip("#").split(",")[0])


def test_render_three_operands():
    assert ArmInst("add", "x0", "x1", "x2").render() == "add x0,x1,x2"


def test_render_condition_suffix():
    assert ArmInst("b", "target", cond="eq").render() == "beq target"


def test_render_label():
    assert ArmInst(".L1", ":").render() == ".L1:"


def test_render_dead_and_empty_are_blank():
    inst = ArmInst("add", "x0", "x1", "x2")
    inst.set_dead()
    assert inst.dead
    assert inst.render() == ""
    assert ArmInst("").render() == ""


def test_render_addition():
    assert ArmInst("madd", "x1", "x2", "x3", addition="x4").render() == "madd x1,x2,x3,x4"


def test_replace():
    inst = ArmInst("add", "x0", "x1", "x2")
    inst.replace("sub", "x3", "x4")
    assert inst.render() == "sub x3,x4"
    assert inst.arg2 == ""


def test_to_str():
    iloc = ILoc()
    assert iloc.to_str(7) == "#7"
    assert iloc.to_str(7, False) == "7"


def test_inst_forms():
    iloc = ILoc()
    iloc.inst("ret")
    iloc.inst("b", "lbl")
    iloc.inst("cmp", "x0", "#0")
    iloc.inst("add", "x0", "x1", "x2")
    assert rendered(iloc) == ["ret", "b lbl", "cmp x0,#0", "add x0,x1,x2"]


def test_inst_too_many_operands():
    with pytest.raises(TypeError):
        ILoc().inst("add", "x0", "x1", "x2", "x3")


def test_label_comment_call_nop_jump():
    iloc = ILoc()
    iloc.label(".L3")
    iloc.comment("note")
    iloc.call_fun("putint")
    iloc.nop()
    iloc.jump(".L3")
    assert rendered(iloc) == [".L3:", "@ note", "bl putint", "nop", "b .L3"]


def test_load_imm_small():
    iloc = ILoc()
    iloc.load_imm(0, 100)
    assert rendered(iloc) == ["mov x0,#100"]


@pytest.mark.parametrize("constant", [0x12345, -1, 0x10000, -4096])
def test_load_imm_two_halves_reassemble(constant):
    iloc = ILoc()
    iloc.load_imm(1, constant)
    mov, movk = iloc.code
    assert mov.opcode == "mov" and movk.opcode == "movk"
    assert mov.result == movk.result == "x1"
    assert movk.arg1.endswith(", lsl #16")
    low, high = _imm(mov.arg1), _imm(movk.arg1)
    assert (high << 16 | low) == constant & 0xFFFFFFFF


def test_load_symbol():
    iloc = ILoc()
    iloc.load_symbol(2, "g")
    assert rendered(iloc) == ["adrp x2,g", "add x2,x2,#:lo12:g"]


def test_load_base_small_offsets():
    iloc = ILoc()
    iloc.load_base(8, 29, 0)
    iloc.load_base(8, 29, 16)
    assert rendered(iloc) == ["ldr x8,[x29]", "ldr x8,[x29, #16]"]


def test_load_base_large_offset_uses_scratch():
    iloc = ILoc()
    iloc.load_base(8, 29, 5000)
    lines = rendered(iloc)
    assert lines[0] == f"mov {REG_NAMES[TMP_REG_NO]},#5000"
    assert lines[-1] == f"ldr x8,[x29, {REG_NAMES[TMP_REG_NO]}]"


def test_store_base():
    iloc = ILoc()
    iloc.store_base(8, SP_REG_NO, 0, 9)
    iloc.store_base(8, SP_REG_NO, 24, 9)
    iloc.store_base(8, SP_REG_NO, 5000, 9)
    assert rendered(iloc) == [
        "str x8,[sp]",
        "str x8,[sp, #24]",
        "mov x9,#5000",
        "str x8,[sp, x9]",
    ]


def test_mov_reg():
    iloc = ILoc()
    iloc.mov_reg(0, SP_REG_NO)
    assert rendered(iloc) == ["mov x0,sp"]


def test_lea_stack():
    iloc = ILoc()
    iloc.lea_stack(8, 29, 0)
    iloc.lea_stack(8, 29, 32)
    iloc.lea_stack(8, 29, 5000)
    assert rendered(iloc) == [
        "mov x8,x29",
        "add x8,x29,#32",
        "mov x8,#5000",
        "add x8,x29,x8",
    ]


def test_alloc_stack_empty_frame_emits_nothing():
    iloc = ILoc()
    iloc.alloc_stack(0, 3, TMP_REG_NO)
    assert len(iloc) == 0


@pytest.mark.parametrize(
    "max_dep,arg_count,minimum",
    [(24, 0, 24), (16, 0, 16), (0, 10, 16), (8, 11, 32)],
)
def test_alloc_stack_is_aligned_and_large_enough(max_dep, arg_count, minimum):
    iloc = ILoc()
    iloc.alloc_stack(max_dep, arg_count, TMP_REG_NO)
    (inst,) = iloc.code
    assert (inst.opcode, inst.result, inst.arg1) == ("sub", "sp", "sp")
    size = _imm(inst.arg2)
    assert size % 16 == 0
    assert minimum <= size < minimum + 16 + (16 if arg_count > 8 else 0)


def test_alloc_stack_exact_when_aligned():
    iloc = ILoc()
    iloc.alloc_stack(64, 8, TMP_REG_NO)
    assert rendered(iloc) == ["sub sp,sp,#64"]


def test_alloc_stack_large_uses_register():
    iloc = ILoc()
    iloc.alloc_stack(8000, 0, TMP_REG_NO)
    lines = rendered(iloc)
    assert lines[0] == f"mov {REG_NAMES[TMP_REG_NO]},#8000"
    assert lines[-1] == f"sub sp,sp,{REG_NAMES[TMP_REG_NO]}"


def test_delete_unused_labels():
    iloc = ILoc()
    iloc.label(".L1")
    iloc.label(".L2")
    iloc.jump(".L1")
    iloc.inst("bne", ".L1")
    iloc.delete_unused_labels()
    labels = {inst.opcode: inst.dead for inst in iloc if inst.is_label}
    assert labels == {".L1": False, ".L2": True}


def test_delete_unused_labels_ignores_dead_branches():
    iloc = ILoc()
    iloc.label(".L1")
    iloc.jump(".L1")
    iloc.code[1].set_dead()
    iloc.delete_unused_labels()
    assert iloc.code[0].dead


def test_output_layout():
    iloc = ILoc()
    iloc.label("main")
    iloc.inst("mov", "x0", "#0")
    iloc.inst("")
    iloc.inst("ret")
    out = io.StringIO()
    iloc.output(out)
    assert out.getvalue() == "main:\n\tmov x0,#0\n\tret\n"


def test_output_empty_lines_when_requested():
    iloc = ILoc()
    iloc.inst("mov", "x0", "#0")
    iloc.nop()
    iloc.code[1].set_dead()
    out = io.StringIO()
    iloc.output(out, True)
    assert out.getvalue() == "\tmov x0,#0\n\n"