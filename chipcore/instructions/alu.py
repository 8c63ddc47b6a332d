"""CHIP-8 ALU operations (8xxx).

Every operation maps (VX, VY) to (result, flag). The flag is computed from the
operand values before the result is stored and is written to VF last, so it
wins when VF is also the destination.
"""

import jax
import jax.lax
import jax.numpy as jnp
from chipcore.state import EmulatorState
from chipcore.decode import DecodedInstruction
from chipcore.constants import FLAG_REGISTER
from chipcore.instructions.system import undefined_instruction


def alu_set(vx: int, vy: int) -> tuple[int, int]:
    """8XY0 - Set: VX = VY."""
    return vy, jnp.zeros_like(vx)


def alu_or(vx: int, vy: int) -> tuple[int, int]:
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, jnp.zeros_like(vx)


def alu_and(vx: int, vy: int) -> tuple[int, int]:
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, jnp.zeros_like(vx)


def alu_xor(vx: int, vy: int) -> tuple[int, int]:
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, jnp.zeros_like(vx)


def alu_add(vx: int, vy: int) -> tuple[int, int]:
    """8XY4 - Add: VX += VY, set carry flag."""
    result = jnp.astype(vx, jnp.int32) + jnp.astype(vy, jnp.int32)
    carry = jnp.astype(result > 255, jnp.uint8)
    return jnp.astype(result & 0xFF, jnp.uint8), carry


def alu_sub_xy(vx: int, vy: int) -> tuple[int, int]:
    """8XY5 - Subtract: VX -= VY, VF = 1 when VX > VY."""
    no_borrow = jnp.astype(vx > vy, jnp.uint8)
    result = (jnp.astype(vx, jnp.int32) - jnp.astype(vy, jnp.int32)) & 0xFF
    return jnp.astype(result, jnp.uint8), no_borrow


def alu_shift_right(vx: int, vy: int) -> tuple[int, int]:
    """8XY6 - Shift right: VX >>= 1."""
    shifted_bit = vx & 1
    result = vx >> 1
    return result, shifted_bit


def alu_sub_yx(vx: int, vy: int) -> tuple[int, int]:
    """8XY7 - Subtract: VX = VY - VX, VF = 1 when VY > VX."""
    no_borrow = jnp.astype(vy > vx, jnp.uint8)
    result = (jnp.astype(vy, jnp.int32) - jnp.astype(vx, jnp.int32)) & 0xFF
    return jnp.astype(result, jnp.uint8), no_borrow


def alu_shift_left(vx: int, vy: int) -> tuple[int, int]:
    """8XYE - Shift left: VX <<= 1."""
    shifted_bit = (vx >> 7) & 1
    result = jnp.astype((jnp.astype(vx, jnp.int32) << 1) & 0xFF, jnp.uint8)
    return result, jnp.astype(shifted_bit, jnp.uint8)


# Branch index per low nibble; 9 marks an undefined operation.
ALU_BRANCHES = jnp.array([0, 1, 2, 3, 4, 5, 6, 7, 9, 9, 9, 9, 9, 9, 8, 9], dtype=jnp.int32)
# Whether the branch writes VF, indexed by branch.
ALU_SETS_FLAG = (False, False, False, False, True, True, True, True, True)


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYN - ALU operations dispatcher."""
    quirks = state.quirks

    def _alu_shift_left(vx, vy):
        return alu_shift_left(vy if quirks.shift_uses_vy else vx, vy)

    def _alu_shift_right(vx, vy):
        return alu_shift_right(vy if quirks.shift_uses_vy else vx, vy)

    operations = [alu_set, alu_or, alu_and, alu_xor, alu_add,
                  alu_sub_xy, _alu_shift_right, alu_sub_yx, _alu_shift_left]

    sets_flag = list(ALU_SETS_FLAG)
    if quirks.logic_resets_flag:
        sets_flag[1:4] = [True, True, True]
    sets_flag = jnp.array(sets_flag, dtype=jnp.bool_)

    def _execute(state, instruction):
        branch = ALU_BRANCHES[instruction.n]
        result, flag = jax.lax.switch(
            branch, operations, state.V[instruction.x], state.V[instruction.y]
        )
        new_V = state.V.at[instruction.x].set(result)
        new_V = jnp.where(sets_flag[branch], new_V.at[FLAG_REGISTER].set(flag), new_V)
        return state.replace(V=new_V)

    return jax.lax.cond(
        ALU_BRANCHES[instruction.n] < len(operations),
        _execute,
        undefined_instruction,
        state, instruction
    )
