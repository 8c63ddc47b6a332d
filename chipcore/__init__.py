"""CHIP-8 interpreter core."""

from chipcore.state import EmulatorState, Quirks, create_state
from chipcore.emulator import (
    execute, fetch, step, tick, run_instructions, run_frame,
    clear_fault, load_rom, load_rom_file
)
from chipcore.decode import DecodedInstruction, decode, disassemble
from chipcore.errors import (
    Chip8Error, RomTooLargeError, MachineFault, DecodeError,
    StackOverflowError, StackUnderflowError, get_fault, raise_if_faulted
)
from chipcore.peripherals import (
    set_keypad, press_key, release_key, framebuffer, sound_active, is_waiting_for_key
)
from chipcore.constants import *

__all__ = [
    "EmulatorState",
    "Quirks",
    "create_state",
    "fetch",
    "execute",
    "step",
    "tick",
    "run_instructions",
    "run_frame",
    "clear_fault",
    "load_rom",
    "load_rom_file",
    "DecodedInstruction",
    "decode",
    "disassemble",
    "Chip8Error",
    "RomTooLargeError",
    "MachineFault",
    "DecodeError",
    "StackOverflowError",
    "StackUnderflowError",
    "get_fault",
    "raise_if_faulted",
    "set_keypad",
    "press_key",
    "release_key",
    "framebuffer",
    "sound_active",
    "is_waiting_for_key",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
]
