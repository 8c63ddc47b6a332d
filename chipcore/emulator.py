"""Main CHIP-8 emulator execution engine."""

from functools import partial

import jax
import jax.lax
import jax.numpy as jnp
from chipcore.state import EmulatorState
from chipcore.decode import decode
from chipcore.constants import (
    PROGRAM_START, MAX_ROM_SIZE, ADDRESS_MASK, FAULT_NONE
)
from chipcore.errors import RomTooLargeError
from chipcore.logging import get_logger, scan_with_progress
from chipcore.instructions.system import execute_system_instruction
from chipcore.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_jump_with_offset_vx, execute_key_instruction
)
from chipcore.instructions.alu import execute_alu_operation
from chipcore.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chipcore.instructions.display import execute_display
from chipcore.instructions.misc import execute_misc_instruction

logger = get_logger()


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    Expects the program counter to already point past the instruction, as
    left by ``fetch``.
    """
    decoded_instruction = decode(instruction)

    return jax.lax.switch(
        decoded_instruction.family,
        [
            execute_system_instruction,
            execute_jump,
            execute_call,
            execute_skip_if_equal_immediate,
            execute_skip_if_not_equal_immediate,
            execute_skip_if_equal_register,
            execute_set,
            execute_add,
            execute_alu_operation,
            execute_skip_if_not_equal_register,
            execute_set_index,
            execute_jump_with_offset_vx if state.quirks.jump_uses_vx else execute_jump_with_offset,
            execute_random,
            execute_display,
            execute_key_instruction,
            execute_misc_instruction,
        ],
        state, decoded_instruction
    )


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory."""
    high = state.memory[state.pc & ADDRESS_MASK]
    low = state.memory[(state.pc + 1) & ADDRESS_MASK]
    return state.replace(pc=state.pc + 2), _pack_u16(high, low)


def _fetch_and_execute(state: EmulatorState) -> EmulatorState:
    state, instruction = fetch(state)
    return execute(state, instruction)


@jax.jit
def step(state: EmulatorState) -> EmulatorState:
    """Execute one instruction. A faulted machine is left unchanged."""
    return jax.lax.cond(
        state.fault == FAULT_NONE,
        _fetch_and_execute,
        lambda state: state,
        state
    )


@jax.jit
def tick(state: EmulatorState) -> EmulatorState:
    """Decrement both 60 Hz timers by one, stopping at zero."""
    return state.replace(
        delay_timer=jnp.where(state.delay_timer > 0, state.delay_timer - 1, state.delay_timer),
        sound_timer=jnp.where(state.sound_timer > 0, state.sound_timer - 1, state.sound_timer),
    )


def run_instruction(state, _):
    state = step(state)
    return state, None


@partial(jax.jit, static_argnums=(1, 2))
def _run_n_instructions(state, n, show_progress):
    body = run_instruction
    if show_progress:
        body = scan_with_progress(n)(body)
    state, _ = jax.lax.scan(body, state, jnp.arange(n))
    return state


def run_instructions(state: EmulatorState, n: int, show_progress: bool = False) -> EmulatorState:
    """Execute n instructions in one compiled scan.

    Args:
        state: Machine to run
        n: Number of steps; steps after a fault leave the state unchanged
        show_progress: Display a tqdm progress bar while the scan runs

    Returns:
        State after n steps
    """
    if n < 0:
        raise ValueError(f"Instruction count must be non-negative, got {n}")
    if n == 0:
        return state
    return _run_n_instructions(state, n, show_progress)


def run_frame(state: EmulatorState, instructions_per_frame: int) -> EmulatorState:
    """Run one 60 Hz frame: a batch of instructions followed by one timer tick."""
    return tick(run_instructions(state, instructions_per_frame))


def clear_fault(state: EmulatorState) -> EmulatorState:
    """Forget a recorded fault so stepping resumes at the faulting address."""
    return state.replace(
        fault=jnp.zeros_like(state.fault),
        fault_address=jnp.zeros_like(state.fault_address),
        fault_opcode=jnp.zeros_like(state.fault_opcode),
    )


def load_rom(state: EmulatorState, rom_data: bytes) -> EmulatorState:
    """Copy ROM data into CHIP-8 memory starting at 0x200.

    Raises:
        RomTooLargeError: If the image does not fit; state is not modified
    """
    rom_data = bytes(rom_data)
    if len(rom_data) > MAX_ROM_SIZE:
        error = RomTooLargeError(len(rom_data), MAX_ROM_SIZE)
        logger.error(str(error))
        raise error
    if not rom_data:
        return state
    rom_array = jnp.array(list(rom_data), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(rom_data)].set(rom_array)
    logger.info(f"Loaded {len(rom_data)} byte ROM at 0x{PROGRAM_START:03X}")
    return state.replace(memory=new_memory)


def load_rom_file(state: EmulatorState, filename: str) -> EmulatorState:
    """Load a ROM file into CHIP-8 memory starting at 0x200."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    return load_rom(state, rom_data)
