"""
CHIP-8 Decode/Execute Engine
============================

The CHIP-8 machine is a tiny interpreted VM with:
- 16 8-bit general registers V0-VF (VF doubles as the carry/borrow/
  collision flag)
- 16-bit index register I and 16-bit program counter PC
- 16-level call stack, delay and sound timers
- 4KB memory, 64x32 monochrome display, 16-key hex keypad

Each call to cycle() does exactly one unit of work:

1. If the VM is stalled on Fx0A (wait for key), poll the keypad instead
   of fetching. A key press completes the wait.
2. Otherwise fetch the big-endian word at PC, decode it and execute it.
   The operation itself advances PC (+2, +4 for a taken skip, or an
   explicit jump target); the fetch never does.
3. Tick the delay and sound timers once.

The timer tick in step 3 also happens on stalled cycles, so
delay-timer-driven animation keeps running while a program waits for
input.

Unknown instruction words are handled according to UnknownOpcodePolicy.
Out-of-range memory or stack accesses raise MachineFault subclasses
before any state is written.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from chip8_vm.errors import LoadError, UnknownOpcodeError
from .decode import Instruction, Op, decode
from .display import DISPLAY_HEIGHT, DISPLAY_WIDTH, Display
from .font import glyph_address
from .keypad import Keypad
from .memory import MAX_PROGRAM_SIZE, PROGRAM_START, Memory
from .stack import CallStack
from .timers import Timers


logger = logging.getLogger(__name__)


NUM_REGISTERS = 16
FLAG_REGISTER = 0xF

# Every instruction is two bytes wide
INSTRUCTION_SIZE = 2


class UnknownOpcodePolicy(Enum):
    """
    What cycle() does with an instruction word that decodes to Op.UNKNOWN.

    SKIP:  report it and advance PC past it (default)
    STALL: report it and leave PC on it
    RAISE: raise UnknownOpcodeError, PC left on the word
    """
    SKIP = "skip"
    STALL = "stall"
    RAISE = "raise"


@dataclass
class CPUState:
    """
    Register file and control state.

    All values stored as Python ints but represent:
    - v: sixteen 8-bit unsigned registers (0-255)
    - i, pc: 16-bit unsigned (0-65535)
    - waiting_register: register Fx0A is waiting to fill, or None
    """
    v: List[int] = field(default_factory=lambda: [0] * NUM_REGISTERS)
    i: int = 0
    pc: int = PROGRAM_START
    waiting_register: Optional[int] = None


class Chip8:
    """
    CHIP-8 VM: memory, registers, stack, timers, display and keypad
    driven by a fetch/decode/execute engine.

    Instrumentation hook:
    - on_unknown_opcode(instruction, address) is called for every
      unknown instruction word under the SKIP and STALL policies

    Example:
        >>> vm = Chip8(seed=1)
        >>> vm.load(bytes([0x60, 0x2A, 0x70, 0x01]))  # LD V0, 2A; ADD V0, 1
        >>> for _ in range(2):
        ...     _ = vm.cycle()
        >>> print(f"V0=${vm.v[0]:02X} PC=${vm.pc:03X}")
        V0=$2B PC=$204
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        unknown_opcode_policy: UnknownOpcodePolicy = UnknownOpcodePolicy.SKIP,
        display_width: int = DISPLAY_WIDTH,
        display_height: int = DISPLAY_HEIGHT,
    ):
        """
        Create a VM in the reset state.

        Args:
            seed: Seed for the RND instruction's generator. None seeds
                  from OS entropy on every reset.
            unknown_opcode_policy: Handling for undefined instruction words
            display_width: Display columns (64 on the COSMAC VIP)
            display_height: Display rows (32 on the COSMAC VIP)
        """
        self.seed = seed
        self.unknown_opcode_policy = unknown_opcode_policy

        self.memory = Memory()
        self.stack = CallStack()
        self.timers = Timers()
        self.display = Display(display_width, display_height)
        self.keypad = Keypad()
        self.state = CPUState()
        self._rng = random.Random(seed)

        # Instrumentation hook
        self.on_unknown_opcode: Optional[Callable[[Instruction, int], None]] = None

        self.reset()

    # ========================================
    # Register Properties
    # ========================================

    @property
    def v(self) -> List[int]:
        """General registers V0-VF (mutable list)."""
        return self.state.v

    @property
    def i(self) -> int:
        """Index register (16-bit)."""
        return self.state.i

    @i.setter
    def i(self, value: int) -> None:
        self.state.i = value & 0xFFFF

    @property
    def pc(self) -> int:
        """Program counter (16-bit)."""
        return self.state.pc

    @pc.setter
    def pc(self, value: int) -> None:
        self.state.pc = value & 0xFFFF

    @property
    def sp(self) -> int:
        """Stack pointer (number of live call frames)."""
        return self.stack.sp

    @property
    def delay_timer(self) -> int:
        return self.timers.delay

    @property
    def sound_timer(self) -> int:
        return self.timers.sound

    @property
    def waiting_for_key(self) -> bool:
        """True while an Fx0A instruction is stalled waiting for input."""
        return self.state.waiting_register is not None

    def _set_flag(self, value: int) -> None:
        self.state.v[FLAG_REGISTER] = value & 0xFF

    # ========================================
    # Reset and Loading
    # ========================================

    def reset(self) -> None:
        """
        Reset the VM to power-on state.

        Clears memory (then reloads the font), display, stack, keypad,
        registers and timers; PC=$200, I=0, SP=0. Reseeds the random
        generator.
        """
        self.memory.reset()
        self.display.clear()
        self.stack.reset()
        self.keypad.release_all()
        self.timers.reset()
        self.state = CPUState()
        self._rng.seed(self.seed)
        logger.debug("VM reset")

    def load(self, data: bytes) -> None:
        """
        Reset the VM and load a program image at $200.

        Args:
            data: Raw program bytes (no header)

        Raises:
            LoadError: If the image does not fit in memory. The VM is left
                       in the reset state with no program bytes written.
        """
        self.reset()
        if len(data) > MAX_PROGRAM_SIZE:
            logger.error(f"Rejected {len(data)}-byte program (limit {MAX_PROGRAM_SIZE})")
            raise LoadError(
                f"program is {len(data)} bytes; at most {MAX_PROGRAM_SIZE} "
                f"bytes fit at ${PROGRAM_START:03X}",
                size=len(data),
                limit=MAX_PROGRAM_SIZE,
            )
        self.memory.write_block(PROGRAM_START, data)
        logger.debug(f"Loaded {len(data)} bytes at ${PROGRAM_START:03X}")

    # ========================================
    # Main Execution Loop
    # ========================================

    def cycle(self) -> Optional[Instruction]:
        """
        Run one VM cycle.

        Returns:
            The instruction executed, or None if the cycle was spent
            waiting for a key (Fx0A stall)

        Raises:
            MemoryAccessError: Fetch or operand access outside memory
            StackOverflowError / StackUnderflowError: Bad CALL/RET nesting
            UnknownOpcodeError: Undefined word under the RAISE policy
        """
        if self.state.waiting_register is not None:
            self._poll_keypad()
            self.timers.tick()
            return None

        address = self.pc
        instruction = decode(self.memory.read_word(address))
        self._execute(instruction, address)
        self.timers.tick()
        return instruction

    def _poll_keypad(self) -> None:
        """Complete a pending Fx0A wait if any key is down."""
        key = self.keypad.first_pressed()
        if key is None:
            return
        self.state.v[self.state.waiting_register] = key
        self.state.waiting_register = None
        self.pc += INSTRUCTION_SIZE

    def _skip_if(self, condition: bool) -> None:
        self.pc += 2 * INSTRUCTION_SIZE if condition else INSTRUCTION_SIZE

    def _unknown(self, instruction: Instruction, address: int) -> None:
        """Apply the configured unknown-opcode policy."""
        if self.unknown_opcode_policy is UnknownOpcodePolicy.RAISE:
            raise UnknownOpcodeError(instruction.word, address)

        logger.warning(f"Unknown opcode {instruction.word:04X} at ${address:03X}")
        if self.on_unknown_opcode:
            self.on_unknown_opcode(instruction, address)

        if self.unknown_opcode_policy is UnknownOpcodePolicy.SKIP:
            self.pc += INSTRUCTION_SIZE

    def _execute(self, ins: Instruction, address: int) -> None:
        """
        Execute a single decoded instruction.

        Args:
            ins: Decoded instruction
            address: Address it was fetched from (== PC on entry)
        """
        v = self.state.v
        x = ins.x
        y = ins.y

        match ins.op:
            # ============================================
            # Flow control (0, 1, 2, B)
            # ============================================
            case Op.CLS:
                self.display.clear()
                self.pc += INSTRUCTION_SIZE
            case Op.RET:
                self.pc = self.stack.pop() + INSTRUCTION_SIZE
            case Op.JP:
                self.pc = ins.nnn
            case Op.CALL:
                self.stack.push(self.pc)
                self.pc = ins.nnn
            case Op.JP_V0:
                self.pc = ins.nnn + v[0]

            # ============================================
            # Conditional skips (3, 4, 5, 9)
            # ============================================
            case Op.SE_BYTE:
                self._skip_if(v[x] == ins.kk)
            case Op.SNE_BYTE:
                self._skip_if(v[x] != ins.kk)
            case Op.SE_REG:
                self._skip_if(v[x] == v[y])
            case Op.SNE_REG:
                self._skip_if(v[x] != v[y])

            # ============================================
            # Immediate loads (6, 7)
            # ============================================
            case Op.LD_BYTE:
                v[x] = ins.kk
                self.pc += INSTRUCTION_SIZE
            case Op.ADD_BYTE:
                v[x] = (v[x] + ins.kk) & 0xFF
                self.pc += INSTRUCTION_SIZE

            # ============================================
            # Register ALU (8xy?)
            # Flag is computed from the operands first and written
            # last, so with x == F the flag wins.
            # ============================================
            case Op.LD_REG:
                v[x] = v[y]
                self.pc += INSTRUCTION_SIZE
            case Op.OR:
                v[x] |= v[y]
                self.pc += INSTRUCTION_SIZE
            case Op.AND:
                v[x] &= v[y]
                self.pc += INSTRUCTION_SIZE
            case Op.XOR:
                v[x] ^= v[y]
                self.pc += INSTRUCTION_SIZE
            case Op.ADD_REG:
                total = v[x] + v[y]
                v[x] = total & 0xFF
                self._set_flag(1 if total > 0xFF else 0)
                self.pc += INSTRUCTION_SIZE
            case Op.SUB:
                no_borrow = v[x] >= v[y]
                v[x] = (v[x] - v[y]) & 0xFF
                self._set_flag(1 if no_borrow else 0)
                self.pc += INSTRUCTION_SIZE
            case Op.SHR:
                lsb = v[x] & 0x01
                v[x] = v[x] >> 1
                self._set_flag(lsb)
                self.pc += INSTRUCTION_SIZE
            case Op.SUBN:
                no_borrow = v[y] >= v[x]
                v[x] = (v[y] - v[x]) & 0xFF
                self._set_flag(1 if no_borrow else 0)
                self.pc += INSTRUCTION_SIZE
            case Op.SHL:
                msb = (v[x] >> 7) & 0x01
                v[x] = (v[x] << 1) & 0xFF
                self._set_flag(msb)
                self.pc += INSTRUCTION_SIZE

            # ============================================
            # Index, random, draw (A, C, D)
            # ============================================
            case Op.LD_I:
                self.i = ins.nnn
                self.pc += INSTRUCTION_SIZE
            case Op.RND:
                v[x] = self._rng.getrandbits(8) & ins.kk
                self.pc += INSTRUCTION_SIZE
            case Op.DRW:
                sprite = self.memory.read_block(self.i, ins.n)
                collision = self.display.draw_sprite(v[x], v[y], sprite)
                self._set_flag(1 if collision else 0)
                self.pc += INSTRUCTION_SIZE

            # ============================================
            # Keypad (E)
            # ============================================
            case Op.SKP:
                self._skip_if(self.keypad.is_pressed(v[x] & 0x0F))
            case Op.SKNP:
                self._skip_if(not self.keypad.is_pressed(v[x] & 0x0F))

            # ============================================
            # Timers, key wait, index and memory (F)
            # ============================================
            case Op.LD_VX_DT:
                v[x] = self.timers.delay
                self.pc += INSTRUCTION_SIZE
            case Op.LD_VX_K:
                key = self.keypad.first_pressed()
                if key is None:
                    self.state.waiting_register = x
                else:
                    v[x] = key
                    self.pc += INSTRUCTION_SIZE
            case Op.LD_DT_VX:
                self.timers.delay = v[x]
                self.pc += INSTRUCTION_SIZE
            case Op.LD_ST_VX:
                self.timers.sound = v[x]
                self.pc += INSTRUCTION_SIZE
            case Op.ADD_I_VX:
                total = self.i + v[x]
                self.i = total
                self._set_flag(1 if total > 0xFFF else 0)
                self.pc += INSTRUCTION_SIZE
            case Op.LD_F_VX:
                self.i = glyph_address(v[x])
                self.pc += INSTRUCTION_SIZE
            case Op.LD_B_VX:
                value = v[x]
                self.memory.write_block(
                    self.i, (value // 100, (value // 10) % 10, value % 10)
                )
                self.pc += INSTRUCTION_SIZE
            case Op.LD_MEM_VX:
                self.memory.write_block(self.i, v[:x + 1])
                self.i += x + 1
                self.pc += INSTRUCTION_SIZE
            case Op.LD_VX_MEM:
                values = self.memory.read_block(self.i, x + 1)
                v[:x + 1] = list(values)
                self.i += x + 1
                self.pc += INSTRUCTION_SIZE

            case Op.UNKNOWN:
                self._unknown(ins, address)

    # ========================================
    # Inspection
    # ========================================

    def registers(self) -> dict:
        """
        Get register values as a dictionary.

        Returns:
            Dictionary with keys v0-vf, i, pc, sp, dt, st
        """
        result = {f"v{n:x}": value for n, value in enumerate(self.state.v)}
        result.update({
            "i": self.i,
            "pc": self.pc,
            "sp": self.sp,
            "dt": self.timers.delay,
            "st": self.timers.sound,
        })
        return result

    def __repr__(self) -> str:
        return f"Chip8(pc=${self.pc:03X}, i=${self.i:03X}, sp={self.sp})"
