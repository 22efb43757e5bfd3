"""Register names, reserved register numbers and operand checks for the ARM64 target."""

from __future__ import annotations

import re

# Registers used by the fixed-register translation paths.
SIMPLE_SRC1_REG_NO = 5
SIMPLE_SRC2_REG_NO = 6
SIMPLE_DST_REG_NO = 6

# Scratch registers.
TMP_REG_NO = 16
TMP_REG_NO2 = 17
TMP_REG_NO3 = 18
TMP_REG_NO4 = 19

# Frame pointer, link register and stack pointer.
FP_REG_NO = 29
LX_REG_NO = 30
SP_REG_NO = 31

MAX_REG_NUM = 32
"""Number of addressable registers: x0-x30 plus sp."""

MAX_USABLE_REG_NUM = 31
"""Number of general-purpose registers: x0-x30."""

REG_NAMES: tuple[str, ...] = tuple(f"x{n}" for n in range(MAX_USABLE_REG_NUM)) + ("sp",)
"""Register names indexed by register number."""

_MASK32 = 0xFFFFFFFF
_STOI_PREFIX = re.compile(r"[ \t\n\v\f\r]*([+-]?\d+)")
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


def _rotate_left_two(num: int) -> int:
    """Rotate a 32-bit value left by two bits."""
    return ((num << 2) | (num >> 30)) & _MASK32


def _is_rotated_byte(num: int) -> bool:
    value = num & _MASK32
    for _ in range(16):
        if value <= 0xFF:
            return True
        value = _rotate_left_two(value)
    return False


def const_expr(num: int) -> bool:
    """Tell whether ``num`` or its negation is an 8-bit value rotated by an even amount."""
    return _is_rotated_byte(num) or _is_rotated_byte(-num)


def is_disp(num: int) -> bool:
    """Tell whether ``num`` fits as a load/store displacement (within +/-4095)."""
    return -4095 <= num <= 4095


def is_reg(name: str) -> bool:
    """Tell whether ``name`` names a register: ``sp`` or ``x0`` to ``x30``."""
    if name == "sp":
        return True
    if len(name) > 1 and name[0] == "x":
        match = _STOI_PREFIX.match(name[1:])
        if match is None:
            return False
        number = int(match.group(1))
        if not _INT32_MIN <= number <= _INT32_MAX:
            return False
        return 0 <= number <= 30
    return False