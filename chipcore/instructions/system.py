"""CHIP-8 system instructions (0x0xxx) and fault recording."""

import jax
import jax.lax
import jax.numpy as jnp
from chipcore.state import EmulatorState
from chipcore.decode import DecodedInstruction
from chipcore.constants import FAULT_DECODE, FAULT_STACK_UNDERFLOW
from chipcore.stack import pop, is_empty


def record_fault(state: EmulatorState, instruction: DecodedInstruction, code: int) -> EmulatorState:
    """Halt on the current instruction and record why.

    The program counter is rewound onto the faulting instruction, which was
    fetched from ``pc - 2``.
    """
    address = state.pc - 2
    return state.replace(
        pc=address,
        fault=jnp.array(code, dtype=jnp.uint8),
        fault_address=address,
        fault_opcode=jnp.astype(instruction.raw, jnp.uint16),
    )


def undefined_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Any opcode pattern outside the instruction set."""
    return record_fault(state, instruction, FAULT_DECODE)


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return state.replace(display=jnp.zeros_like(state.display))


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine."""
    def _return(state, instruction):
        stack, address = pop(state.stack)
        return state.replace(stack=stack, pc=address)

    return jax.lax.cond(
        is_empty(state.stack),
        lambda state, instruction: record_fault(state, instruction, FAULT_STACK_UNDERFLOW),
        _return,
        state, instruction
    )


def execute_system_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch system instructions."""
    return jax.lax.cond(
        0x00E0 == instruction.raw,
        execute_clear_screen,
        lambda state, instruction: jax.lax.cond(
            0x00EE == instruction.raw,
            execute_return,
            undefined_instruction,
            state, instruction
        ),
        state, instruction
    )
