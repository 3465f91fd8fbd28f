"""Test configuration and fixtures for CHIP-8 machine tests."""

import pytest
import jax
import jax.numpy as jnp
from chip8vm import create_state, Quirks


@pytest.fixture
def fresh_state():
    """Provide a fresh machine state for each test."""
    return create_state()


@pytest.fixture
def shift_quirk_state():
    """Provide a fresh state with the shift quirk enabled."""
    return create_state(quirks=Quirks(shift=True))


@pytest.fixture
def load_store_quirk_state():
    """Provide a fresh state with the load/store quirk enabled."""
    return create_state(quirks=Quirks(load_store=True))


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def set_registers(state, **registers):
    """Helper to set registers by name, e.g. set_registers(state, V1=0x10, VF=1)."""
    V = state.V
    for name, value in registers.items():
        V = V.at[int(name[1:], 16)].set(value)
    return state.replace(V=V)


def pixel(state, x, y):
    """Read one pixel from the packed framebuffer."""
    byte = int(state.framebuffer[(y * 64 + x) // 8])
    return (byte >> (7 - x % 8)) & 1


def seeded_state(seed):
    return create_state(jax.random.PRNGKey(seed))


def as_bytes(values):
    return jnp.array(list(values), dtype=jnp.uint8)
