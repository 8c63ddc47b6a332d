"""Tests for system instructions (0xxx) and subroutines."""

import jax.numpy as jnp
import pytest
from chipcore import (
    execute, step, FAULT_DECODE, FAULT_STACK_OVERFLOW, FAULT_STACK_UNDERFLOW, STACK_SIZE
)
from conftest import program_state


def test_execute_clear_screen(fresh_state):
    """Test 00E0 - Clear display."""
    state = fresh_state.replace(display=fresh_state.display.at[0, 0].set(True).at[31, 63].set(True))

    state = execute(state, 0x00E0)

    assert jnp.sum(state.display) == 0


def test_execute_call_and_return(fresh_state):
    """Test 2NNN (call) and 00EE (return) together."""
    state = fresh_state
    initial_pc = state.pc

    state = execute(state, 0x2300)  # Call 0x300
    assert state.pc == 0x300
    assert state.stack.pointer == 1
    assert state.stack.data[state.stack.pointer - 1] == initial_pc

    state = execute(state, 0x00EE)  # Return
    assert state.pc == initial_pc
    assert state.stack.pointer == 0


def test_call_then_return_resumes_after_call():
    """Stepping CALL then RET continues right after the CALL."""
    # 0x200: CALL 0x206, 0x202: LD V0 0x01, 0x204: JP 0x204, 0x206: RET
    state = program_state([0x2206, 0x6001, 0x1204, 0x00EE])

    state = step(state)
    assert state.pc == 0x206
    state = step(state)
    assert state.pc == 0x202

    state = step(state)
    assert state.V[0] == 1


def test_nested_calls_unwind_in_order(fresh_state):
    """Returns pop in LIFO order."""
    state = fresh_state.replace(pc=jnp.astype(0x202, jnp.uint16))
    state = execute(state, 0x2300)
    state = state.replace(pc=jnp.astype(0x302, jnp.uint16))
    state = execute(state, 0x2400)

    state = execute(state, 0x00EE)
    assert state.pc == 0x302
    state = execute(state, 0x00EE)
    assert state.pc == 0x202


def test_return_with_empty_stack_faults():
    """00EE with nothing on the stack halts with an underflow fault."""
    state = step(program_state([0x00EE]))

    assert state.fault == FAULT_STACK_UNDERFLOW
    assert state.fault_address == 0x200
    assert state.fault_opcode == 0x00EE
    assert state.pc == 0x200
    assert state.stack.pointer == 0


def test_sixteen_nested_calls_fit():
    """Sixteen frames are allowed."""
    state = program_state([0x2200])  # Recursive call to itself
    for _ in range(STACK_SIZE):
        state = step(state)

    assert state.fault == 0
    assert state.stack.pointer == STACK_SIZE


def test_seventeenth_call_overflows():
    """The seventeenth nested call faults without touching the stack."""
    state = program_state([0x2200])
    for _ in range(STACK_SIZE):
        state = step(state)
    stack_before = state.stack.data

    state = step(state)

    assert state.fault == FAULT_STACK_OVERFLOW
    assert state.fault_address == 0x200
    assert state.stack.pointer == STACK_SIZE
    assert jnp.array_equal(state.stack.data, stack_before)


@pytest.mark.parametrize("instruction", [0x0000, 0x0123, 0x00E1, 0x00FF])
def test_machine_code_routines_are_undefined(fresh_state, instruction):
    """0NNN other than 00E0/00EE faults."""
    state = execute(fresh_state, instruction)

    assert state.fault == FAULT_DECODE
    assert state.fault_opcode == instruction
