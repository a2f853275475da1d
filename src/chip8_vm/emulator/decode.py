"""
CHIP-8 Instruction Decoder
==========================

Turns a fetched 16-bit word into an Instruction: an operation tag (Op)
plus the operand fields every instruction format draws from.

Instruction word layout:

    15   12 11    8 7     4 3     0
    +------+-------+-------+-------+
    | top  |   x   |   y   |   n   |
    +------+-------+-------+-------+
                   |<---- kk ----->|
           |<-------- nnn -------->|

The top nibble selects one of 16 groups. Groups 0, 8, E and F hold
several operations and are sub-decoded on the low byte or low nibble;
groups 5 and 9 require a zero low nibble. Anything that does not match a
defined operation decodes to Op.UNKNOWN rather than raising, so the
execute step decides what to do with it.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from dataclasses import dataclass
from enum import Enum


class Op(Enum):
    """
    One tag per CHIP-8 operation.

    Values are the conventional assembler mnemonics.
    """
    CLS = "CLS"              # 00E0
    RET = "RET"              # 00EE
    JP = "JP"                # 1nnn
    CALL = "CALL"            # 2nnn
    SE_BYTE = "SE Vx, kk"    # 3xkk
    SNE_BYTE = "SNE Vx, kk"  # 4xkk
    SE_REG = "SE Vx, Vy"     # 5xy0
    LD_BYTE = "LD Vx, kk"    # 6xkk
    ADD_BYTE = "ADD Vx, kk"  # 7xkk
    LD_REG = "LD Vx, Vy"     # 8xy0
    OR = "OR"                # 8xy1
    AND = "AND"              # 8xy2
    XOR = "XOR"              # 8xy3
    ADD_REG = "ADD Vx, Vy"   # 8xy4
    SUB = "SUB"              # 8xy5
    SHR = "SHR"              # 8xy6
    SUBN = "SUBN"            # 8xy7
    SHL = "SHL"              # 8xyE
    SNE_REG = "SNE Vx, Vy"   # 9xy0
    LD_I = "LD I, nnn"       # Annn
    JP_V0 = "JP V0, nnn"     # Bnnn
    RND = "RND"              # Cxkk
    DRW = "DRW"              # Dxyn
    SKP = "SKP"              # Ex9E
    SKNP = "SKNP"            # ExA1
    LD_VX_DT = "LD Vx, DT"   # Fx07
    LD_VX_K = "LD Vx, K"     # Fx0A
    LD_DT_VX = "LD DT, Vx"   # Fx15
    LD_ST_VX = "LD ST, Vx"   # Fx18
    ADD_I_VX = "ADD I, Vx"   # Fx1E
    LD_F_VX = "LD F, Vx"     # Fx29
    LD_B_VX = "LD B, Vx"     # Fx33
    LD_MEM_VX = "LD [I], Vx"  # Fx55
    LD_VX_MEM = "LD Vx, [I]"  # Fx65
    UNKNOWN = "???"


# Groups whose operation is fully determined by the top nibble
_SINGLE_OP_GROUPS = {
    0x1: Op.JP,
    0x2: Op.CALL,
    0x3: Op.SE_BYTE,
    0x4: Op.SNE_BYTE,
    0x6: Op.LD_BYTE,
    0x7: Op.ADD_BYTE,
    0xA: Op.LD_I,
    0xB: Op.JP_V0,
    0xC: Op.RND,
    0xD: Op.DRW,
}

# Group 0: full word
_SYSTEM_OPS = {
    0x00E0: Op.CLS,
    0x00EE: Op.RET,
}

# Group 8: low nibble
_ALU_OPS = {
    0x0: Op.LD_REG,
    0x1: Op.OR,
    0x2: Op.AND,
    0x3: Op.XOR,
    0x4: Op.ADD_REG,
    0x5: Op.SUB,
    0x6: Op.SHR,
    0x7: Op.SUBN,
    0xE: Op.SHL,
}

# Group E: low byte
_KEY_OPS = {
    0x9E: Op.SKP,
    0xA1: Op.SKNP,
}

# Group F: low byte
_MISC_OPS = {
    0x07: Op.LD_VX_DT,
    0x0A: Op.LD_VX_K,
    0x15: Op.LD_DT_VX,
    0x18: Op.LD_ST_VX,
    0x1E: Op.ADD_I_VX,
    0x29: Op.LD_F_VX,
    0x33: Op.LD_B_VX,
    0x55: Op.LD_MEM_VX,
    0x65: Op.LD_VX_MEM,
}


@dataclass(frozen=True)
class Instruction:
    """
    Decoded CHIP-8 instruction.

    Attributes:
        word: The raw 16-bit instruction word
        op: Operation tag
        x: Register index from bits 8-11
        y: Register index from bits 4-7
        n: Low nibble (sprite height for DRW)
        kk: Low byte (immediate value)
        nnn: Low 12 bits (address)
    """
    word: int
    op: Op
    x: int
    y: int
    n: int
    kk: int
    nnn: int

    def __str__(self) -> str:
        return f"{self.word:04X} {self.op.value}"


def decode_op(word: int) -> Op:
    """Select the operation for an instruction word."""
    group = (word >> 12) & 0xF

    if group in _SINGLE_OP_GROUPS:
        return _SINGLE_OP_GROUPS[group]

    match group:
        case 0x0:
            return _SYSTEM_OPS.get(word, Op.UNKNOWN)
        case 0x5:
            return Op.SE_REG if word & 0xF == 0 else Op.UNKNOWN
        case 0x8:
            return _ALU_OPS.get(word & 0xF, Op.UNKNOWN)
        case 0x9:
            return Op.SNE_REG if word & 0xF == 0 else Op.UNKNOWN
        case 0xE:
            return _KEY_OPS.get(word & 0xFF, Op.UNKNOWN)
        case 0xF:
            return _MISC_OPS.get(word & 0xFF, Op.UNKNOWN)
    return Op.UNKNOWN


def decode(word: int) -> Instruction:
    """
    Decode a 16-bit instruction word.

    Args:
        word: Instruction word (masked to 16 bits)

    Returns:
        Instruction with operation tag and all operand fields

    Example:
        >>> decode(0xD125)
        Instruction(word=53541, op=<Op.DRW: 'DRW'>, x=1, y=2, n=5, kk=37, nnn=293)
    """
    word &= 0xFFFF
    return Instruction(
        word=word,
        op=decode_op(word),
        x=(word >> 8) & 0xF,
        y=(word >> 4) & 0xF,
        n=word & 0xF,
        kk=word & 0xFF,
        nnn=word & 0xFFF,
    )
