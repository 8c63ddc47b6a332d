"""CHIP-8 display operations."""

import jax.numpy as jnp
from chipcore.state import EmulatorState
from chipcore.decode import DecodedInstruction
from chipcore.constants import SCREEN_WIDTH, SCREEN_HEIGHT, ADDRESS_MASK, FLAG_REGISTER

# Pre-computed coordinate grids for display operations, row-major like the display
yy, xx = jnp.meshgrid(jnp.arange(SCREEN_HEIGHT), jnp.arange(SCREEN_WIDTH), indexing='ij')


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N, wrapping at the edges."""
    sprite_x = jnp.astype(state.V[instruction.x], jnp.int32) % SCREEN_WIDTH
    sprite_y = jnp.astype(state.V[instruction.y], jnp.int32) % SCREEN_HEIGHT

    # Offsets of every screen cell inside the sprite, measured around the torus
    row_offset = (yy - sprite_y) % SCREEN_HEIGHT
    col_offset = (xx - sprite_x) % SCREEN_WIDTH
    in_sprite = (col_offset < 8) & (row_offset < instruction.n)

    sprite_bytes = jnp.astype(state.memory[(jnp.astype(state.I, jnp.int32) + row_offset) & ADDRESS_MASK], jnp.int32)
    sprite = (((sprite_bytes >> (7 - jnp.minimum(col_offset, 7))) & 1) == 1) & in_sprite

    collision = jnp.any(state.display & sprite)
    return state.replace(
        display=state.display ^ sprite,
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8))
    )
