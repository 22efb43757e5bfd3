"""ARM64 assembly instruction sequences and the helpers that emit them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, TextIO

from minicc.platform import REG_NAMES, TMP_REG_NO, is_disp

_LABEL_MARK = ":"
_MAX_OPERANDS = 3
_MAX_IMMEDIATE_STACK = 4095


@dataclass
class ArmInst:
    """One assembly instruction: opcode, condition suffix and up to four operands."""

    opcode: str
    result: str = ""
    arg1: str = ""
    arg2: str = ""
    cond: str = ""
    addition: str = ""
    dead: bool = False

    @property
    def is_label(self) -> bool:
        """Tell whether this instruction defines a label."""
        return self.result == _LABEL_MARK

    def replace(
        self,
        opcode: str,
        result: str = "",
        arg1: str = "",
        arg2: str = "",
        cond: str = "",
        addition: str = "",
    ) -> None:
        """Overwrite the instruction's opcode and operands."""
        self.opcode = opcode
        self.result = result
        self.arg1 = arg1
        self.arg2 = arg2
        self.cond = cond
        self.addition = addition

    def set_dead(self) -> None:
        """Mark the instruction so that it renders as nothing."""
        self.dead = True

    def render(self) -> str:
        """Return the instruction as assembly text, or an empty string if dead or empty."""
        if self.dead or not self.opcode:
            return ""
        text = self.opcode + self.cond
        if self.result:
            text += self.result if self.result == _LABEL_MARK else " " + self.result
        for operand in (self.arg1, self.arg2, self.addition):
            if operand:
                text += "," + operand
        return text


class ILoc:
    """An ordered sequence of ARM64 instructions built through emitting helpers."""

    def __init__(self) -> None:
        self._code: list[ArmInst] = []

    @property
    def code(self) -> list[ArmInst]:
        """The instructions emitted so far, in order."""
        return self._code

    def __iter__(self) -> Iterator[ArmInst]:
        return iter(self._code)

    def __len__(self) -> int:
        return len(self._code)

    def _emit(self, opcode: str, result: str = "", arg1: str = "", arg2: str = "") -> None:
        self._code.append(ArmInst(opcode, result, arg1, arg2))

    @staticmethod
    def to_str(num: int, flag: bool = True) -> str:
        """Format ``num``, prefixed with ``#`` as an immediate when ``flag`` is set."""
        return ("#" if flag else "") + str(num)

    def label(self, name: str) -> None:
        """Emit a label definition."""
        self._emit(name, _LABEL_MARK)

    def inst(self, op: str, *args: str) -> None:
        """Emit ``op`` with up to three operands."""
        if len(args) > _MAX_OPERANDS:
            raise TypeError(f"an instruction takes at most {_MAX_OPERANDS} operands, got {len(args)}")
        self._emit(op, *args)

    def comment(self, text: str) -> None:
        """Emit an assembly comment line."""
        self._emit("@", text)

    def load_imm(self, reg_no: int, constant: int) -> None:
        """Load a 32-bit constant into a register with mov, adding movk for the high half."""
        reg = REG_NAMES[reg_no]
        if 0 <= constant <= 0xFFFF:
            self._emit("mov", reg, f"#{constant}")
        else:
            self._emit("mov", reg, f"#{constant & 0xFFFF}")
            self._emit("movk", reg, f"#{(constant >> 16) & 0xFFFF}, lsl #16")

    def load_symbol(self, reg_no: int, name: str) -> None:
        """Load the address of a global symbol with adrp/add."""
        reg = REG_NAMES[reg_no]
        self._emit("adrp", reg, name)
        self._emit("add", reg, reg, f"#:lo12:{name}")

    def load_base(self, reg_no: int, base_reg_no: int, offset: int) -> None:
        """Load from ``[base, #offset]``, going through the scratch register for large offsets."""
        reg = REG_NAMES[reg_no]
        base = REG_NAMES[base_reg_no]
        if is_disp(offset):
            if offset == 0:
                self._emit("ldr", reg, f"[{base}]")
            else:
                self._emit("ldr", reg, f"[{base}, #{offset}]")
        else:
            self.load_imm(TMP_REG_NO, offset)
            self._emit("ldr", reg, f"[{base}, {REG_NAMES[TMP_REG_NO]}]")

    def store_base(self, src_reg_no: int, base_reg_no: int, disp: int, tmp_reg_no: int) -> None:
        """Store to ``[base, #disp]``, using ``tmp_reg_no`` for large displacements."""
        src = REG_NAMES[src_reg_no]
        base = REG_NAMES[base_reg_no]
        if is_disp(disp):
            if disp == 0:
                self._emit("str", src, f"[{base}]")
            else:
                self._emit("str", src, f"[{base}, #{disp}]")
        else:
            self.load_imm(tmp_reg_no, disp)
            self._emit("str", src, f"[{base}, {REG_NAMES[tmp_reg_no]}]")

    def mov_reg(self, dst_reg_no: int, src_reg_no: int) -> None:
        """Copy one register into another."""
        self._emit("mov", REG_NAMES[dst_reg_no], REG_NAMES[src_reg_no])

    def lea_stack(self, reg_no: int, base_reg_no: int, offset: int) -> None:
        """Compute the address ``base + offset`` into a register."""
        reg = REG_NAMES[reg_no]
        base = REG_NAMES[base_reg_no]
        if offset == 0:
            self.mov_reg(reg_no, base_reg_no)
        elif is_disp(offset):
            self._emit("add", reg, base, f"#{offset}")
        else:
            self.load_imm(reg_no, offset)
            self._emit("add", reg, base, reg)

    def alloc_stack(self, max_dep: int, max_call_arg_count: int, tmp_reg_no: int) -> None:
        """Lower sp by the frame size plus room for call arguments beyond the eighth."""
        extra_args = max(max_call_arg_count - 8, 0)
        arg_space = (extra_args * 8 + 15) & ~15 if extra_args > 0 else 0
        stack_size = max_dep + arg_space
        if stack_size % 16:
            stack_size = (stack_size + 15) & ~15
        if stack_size == 0:
            return
        if stack_size <= _MAX_IMMEDIATE_STACK:
            self._emit("sub", "sp", "sp", f"#{stack_size}")
        else:
            self.load_imm(tmp_reg_no, stack_size)
            self._emit("sub", "sp", "sp", REG_NAMES[tmp_reg_no])

    def call_fun(self, name: str) -> None:
        """Emit a call to ``name``."""
        self._emit("bl", name)

    def nop(self) -> None:
        """Emit a no-op."""
        self._emit("nop")

    def jump(self, label: str) -> None:
        """Emit an unconditional branch to ``label``."""
        self._emit("b", label)

    def delete_unused_labels(self) -> None:
        """Mark dead every live label that no live branch targets."""
        labels = [
            inst
            for inst in self._code
            if not inst.dead and inst.opcode.startswith(".") and inst.is_label
        ]
        targets = {
            inst.result
            for inst in self._code
            if not inst.dead and inst.opcode.startswith("b")
        }
        for label in labels:
            if label.opcode not in targets:
                label.set_dead()

    def output(self, file: TextIO, output_empty: bool = False) -> None:
        """Write the sequence to ``file``, labels flush left and instructions tab-indented."""
        for inst in self._code:
            text = inst.render()
            if inst.is_label:
                file.write(f"{text}\n")
            elif text:
                file.write(f"\t{text}\n")
            elif output_empty:
                file.write("\n")