"""Tests for host-side keypad, display and sound access."""

import jax.numpy as jnp
import numpy as np
import pytest
from chipcore import (
    execute, set_keypad, press_key, release_key, framebuffer, sound_active
)


class TestKeypad:
    """Test keypad writes."""

    def test_set_keypad(self, fresh_state):
        keys = [False] * 16
        keys[3] = keys[0xF] = True

        state = set_keypad(fresh_state, keys)

        assert [bool(k) for k in state.keypad] == keys

    def test_set_keypad_wrong_shape(self, fresh_state):
        with pytest.raises(ValueError):
            set_keypad(fresh_state, [True] * 15)

    def test_press_and_release(self, fresh_state):
        state = press_key(fresh_state, 0xA)
        assert state.keypad[0xA]

        state = release_key(state, 0xA)
        assert not jnp.any(state.keypad)

    @pytest.mark.parametrize("key", [-1, 16, 255])
    def test_key_out_of_range(self, fresh_state, key):
        with pytest.raises(ValueError):
            press_key(fresh_state, key)

    def test_pressed_key_seen_by_skip(self, fresh_state):
        state = press_key(fresh_state, 2)
        state = execute(state, 0x6302)  # V3 = 2
        initial_pc = state.pc

        state = execute(state, 0xE39E)

        assert state.pc == initial_pc + 2


class TestDisplayAccess:
    """Test framebuffer reads."""

    def test_framebuffer_copy(self, fresh_state):
        state = fresh_state.replace(display=fresh_state.display.at[4, 9].set(True))

        pixels = framebuffer(state)

        assert isinstance(pixels, np.ndarray)
        assert pixels.shape == (32, 64)
        assert pixels.dtype == np.bool_
        assert pixels[4, 9]
        assert pixels.sum() == 1

    def test_framebuffer_read_only(self, fresh_state):
        pixels = framebuffer(fresh_state)

        with pytest.raises(ValueError):
            pixels[0, 0] = True


class TestSound:
    """Test sound timer access."""

    def test_sound_active(self, fresh_state):
        assert not sound_active(fresh_state)

        state = execute(fresh_state, 0x6004)
        state = execute(state, 0xF018)

        assert sound_active(state)
