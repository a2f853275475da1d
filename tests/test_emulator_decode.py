"""
Instruction Decoder Unit Tests
==============================

Tests that every defined word pattern maps to the right operation, that
operand fields are extracted, and that undefined words decode to UNKNOWN.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import pytest

from chip8_vm.emulator import Op, decode
from chip8_vm.emulator.decode import decode_op


# =============================================================================
# Operation Selection Tests
# =============================================================================

class TestDecodeOp:
    """Test operation tag selection."""

    @pytest.mark.parametrize("word,op", [
        (0x00E0, Op.CLS),
        (0x00EE, Op.RET),
        (0x1234, Op.JP),
        (0x2345, Op.CALL),
        (0x3A12, Op.SE_BYTE),
        (0x4A12, Op.SNE_BYTE),
        (0x5AB0, Op.SE_REG),
        (0x6A12, Op.LD_BYTE),
        (0x7A12, Op.ADD_BYTE),
        (0x8AB0, Op.LD_REG),
        (0x8AB1, Op.OR),
        (0x8AB2, Op.AND),
        (0x8AB3, Op.XOR),
        (0x8AB4, Op.ADD_REG),
        (0x8AB5, Op.SUB),
        (0x8AB6, Op.SHR),
        (0x8AB7, Op.SUBN),
        (0x8ABE, Op.SHL),
        (0x9AB0, Op.SNE_REG),
        (0xA123, Op.LD_I),
        (0xB123, Op.JP_V0),
        (0xCA12, Op.RND),
        (0xDAB5, Op.DRW),
        (0xEA9E, Op.SKP),
        (0xEAA1, Op.SKNP),
        (0xFA07, Op.LD_VX_DT),
        (0xFA0A, Op.LD_VX_K),
        (0xFA15, Op.LD_DT_VX),
        (0xFA18, Op.LD_ST_VX),
        (0xFA1E, Op.ADD_I_VX),
        (0xFA29, Op.LD_F_VX),
        (0xFA33, Op.LD_B_VX),
        (0xFA55, Op.LD_MEM_VX),
        (0xFA65, Op.LD_VX_MEM),
    ])
    def test_defined_words(self, word, op):
        assert decode_op(word) is op

    @pytest.mark.parametrize("word", [
        0x0000, 0x0123, 0x00E1, 0x5AB1, 0x8AB8, 0x8ABF,
        0x9AB1, 0xEA9F, 0xFA00, 0xFAFF,
    ])
    def test_undefined_words(self, word):
        assert decode_op(word) is Op.UNKNOWN

    def test_every_op_reachable(self):
        """Each operation tag is produced by some word."""
        seen = {decode_op(word) for word in range(0x10000)}
        assert seen == set(Op)


# =============================================================================
# Operand Field Tests
# =============================================================================

class TestOperandFields:
    """Test field extraction."""

    def test_fields(self):
        ins = decode(0xD125)
        assert ins.op is Op.DRW
        assert (ins.x, ins.y, ins.n) == (1, 2, 5)
        assert ins.kk == 0x25
        assert ins.nnn == 0x125

    def test_word_masked(self):
        assert decode(0x1D125).word == 0xD125

    def test_str(self):
        assert str(decode(0x00E0)) == "00E0 CLS"

    def test_instruction_is_frozen(self):
        ins = decode(0x1234)
        with pytest.raises(AttributeError):
            ins.nnn = 0
