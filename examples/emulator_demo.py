#!/usr/bin/env python3
"""
CHIP-8 Emulator Demo
====================

This script demonstrates how to use the chip8-vm emulator to:
1. Create an emulator with a fixed seed
2. Load a program (a ROM file or hand-assembled bytes)
3. Run it and inspect registers
4. Feed keypad input
5. Take screenshots

Usage:
    source .venv/bin/activate
    python examples/emulator_demo.py [rom.ch8]

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import sys
from pathlib import Path

from chip8_vm.emulator import Emulator, EmulatorConfig


# Waits for a key, then draws its hex glyph at (10, 10) and waits again
KEY_ECHO = bytes([
    0x6A, 0x0A,  # LD VA, 10
    0xF0, 0x0A,  # LD V0, K
    0x00, 0xE0,  # CLS
    0xF0, 0x29,  # LD F, V0
    0xDA, 0xA5,  # DRW VA, VA, 5
    0x12, 0x02,  # JP $202
])


def main():
    output_dir = Path("trash")
    output_dir.mkdir(exist_ok=True)

    # ==========================================================================
    # 1. Create an emulator instance
    # ==========================================================================
    print("Creating CHIP-8 emulator...")
    emu = Emulator(EmulatorConfig(seed=1))

    # ==========================================================================
    # 2. Load a program
    # ==========================================================================
    if len(sys.argv) > 1:
        rom = Path(sys.argv[1])
        print(f"Loading {rom.name}...")
        emu.load_rom(rom)
    else:
        print("Loading built-in key echo program...")
        emu.load_bytes(KEY_ECHO)

    # ==========================================================================
    # 3. Run until the program asks for a key
    # ==========================================================================
    if emu.run_until(lambda e: e.vm.waiting_for_key, max_cycles=10_000):
        print(f"  Waiting for key after {emu.total_cycles} cycles")
    else:
        print(f"  Still running after {emu.total_cycles} cycles")
    print(f"  Registers: {emu.registers}")

    # ==========================================================================
    # 4. Press a key
    # ==========================================================================
    # Host keys 1234/QWER/ASDF/ZXCV map to the hex keypad 123C/456D/789E/A0BF
    emu.tap_key("F", hold_cycles=2)
    emu.run(10)

    print("\nDisplay:")
    for line in emu.display_lines[8:18]:
        print(f"  {line}")

    # ==========================================================================
    # 5. Take a screenshot
    # ==========================================================================
    screenshot = output_dir / "chip8_demo.png"
    screenshot.write_bytes(emu.render_display(scale=10))
    print(f"\nSaved {screenshot}")

    if emu.unknown_opcodes:
        print(f"Unknown opcodes seen: {emu.unknown_opcodes}")

    print(f"\n{emu!r}")


if __name__ == "__main__":
    main()
