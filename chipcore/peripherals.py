"""Host-side access to the CHIP-8 keypad, display and sound timer."""

from typing import Sequence

import jax.numpy as jnp
import numpy as np

from chipcore.state import EmulatorState
from chipcore.constants import NUM_KEYS


def _check_key(key: int) -> int:
    if not 0 <= key < NUM_KEYS:
        raise ValueError(f"Key index must be in [0, {NUM_KEYS - 1}], got {key}")
    return key


def set_keypad(state: EmulatorState, keys: Sequence[bool]) -> EmulatorState:
    """Replace the whole keypad with 16 pressed/released flags."""
    keypad = jnp.asarray(keys, dtype=jnp.bool_)
    if keypad.shape != (NUM_KEYS,):
        raise ValueError(f"Keypad must have shape ({NUM_KEYS},), got {keypad.shape}")
    return state.replace(keypad=keypad)


def press_key(state: EmulatorState, key: int) -> EmulatorState:
    return state.replace(keypad=state.keypad.at[_check_key(key)].set(True))


def release_key(state: EmulatorState, key: int) -> EmulatorState:
    return state.replace(keypad=state.keypad.at[_check_key(key)].set(False))


def framebuffer(state: EmulatorState) -> np.ndarray:
    """Read-only host copy of the display, shape (32, 64), indexed [y, x]."""
    pixels = np.array(state.display, dtype=np.bool_)
    pixels.setflags(write=False)
    return pixels


def sound_active(state: EmulatorState) -> bool:
    """Whether a tone should currently be playing."""
    return bool(state.sound_timer > 0)


def is_waiting_for_key(state: EmulatorState) -> bool:
    """Whether the machine is parked on an FX0A waiting for input."""
    return bool(state.waiting_for_key)
