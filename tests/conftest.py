"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest
import jax.numpy as jnp
from chipcore import create_state, load_rom, Quirks


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def cosmac_state():
    """Provide a fresh state with the original COSMAC VIP quirks."""
    return create_state(quirks=Quirks(
        shift_uses_vy=True,
        load_store_increments_index=True,
        logic_resets_flag=True,
    ))


@pytest.fixture
def schip_state():
    """Provide a fresh state with the SUPER-CHIP jump quirk."""
    return create_state(quirks=Quirks(jump_uses_vx=True))


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def program_state(words, state=None):
    """Helper to load a list of 16-bit instructions at PROGRAM_START."""
    rom = b"".join(word.to_bytes(2, "big") for word in words)
    return load_rom(state if state is not None else create_state(), rom)
